"""Retrieval / aggregation service for bulk export.

Fans out over every DataSpace visible in a tenant's pod and flattens their
Assets into one listing. A DataSpace whose assets cannot be listed adds an
entry to ``errors`` instead of failing the whole retrieval.
"""

import json
import logging
from datetime import datetime

from pydantic import Field

from podcatalog.errors import CatalogError
from podcatalog.models.common import CatalogBase, EntityKind, UTCTimestamp, utc_now
from podcatalog.repositories.catalog import CatalogStore

logger = logging.getLogger(__name__)


class RetrievedAsset(CatalogBase):
    """One flattened asset row of a retrieval."""

    id: str
    title: str
    description: str = ""
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    creator: str = ""
    data_space_id: str
    data_space_name: str
    uploaded_at: UTCTimestamp
    document_uri: str
    metadata_count: int = 0


class RetrievalResult(CatalogBase):
    """Outcome of ``retrieve_all``. Partial failures are data, never raised."""

    success: bool = False
    total_assets: int = 0
    assets: list[RetrievedAsset] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class RetrievalService:
    """Read-only composition of Catalog Store listings."""

    def __init__(self, catalog: CatalogStore, default_limit: int = 0) -> None:
        self._catalog = catalog
        self._default_limit = default_limit

    async def retrieve_all(self, tenant_id: str | None = None, limit: int | None = None) -> RetrievalResult:
        """Assets of every active DataSpace in the tenant's pod, newest first.

        Args:
            tenant_id: Pod to read; defaults to the caller's own.
            limit: Keep at most this many assets (``None`` or ``0`` keeps all).
        """
        result = RetrievalResult()
        limit = self._default_limit if limit is None else limit

        try:
            data_spaces = await self._catalog.list_data_spaces(tenant_id)
        except CatalogError as exc:
            result.errors.append(f"Asset retrieval failed: {exc}")
            logger.warning("Asset retrieval failed: %s", exc)
            return result

        logger.info("Retrieving assets from %d data spaces", len(data_spaces))
        for data_space in data_spaces:
            try:
                assets = await self._catalog.list_assets(data_space.id, tenant_id)
            except CatalogError as exc:
                msg = f"Failed to retrieve assets from {data_space.title}: {exc}"
                result.errors.append(msg)
                logger.warning(msg)
                continue
            tenant = tenant_id or self._catalog.caller()
            for asset in assets:
                result.assets.append(RetrievedAsset(
                    id=asset.id,
                    title=asset.title,
                    description=asset.description,
                    category=asset.category,
                    tags=asset.tags,
                    creator=asset.creator,
                    data_space_id=data_space.id,
                    data_space_name=data_space.title,
                    uploaded_at=asset.created_at,
                    document_uri=self._catalog.resolver.document_for(
                        tenant, EntityKind.ASSET, asset.id, data_space.id,
                    ),
                    metadata_count=len(asset.metadata) + len(asset.asset_metadata),
                ))

        result.assets.sort(key=lambda a: a.uploaded_at, reverse=True)
        if limit and limit > 0:
            result.assets = result.assets[:limit]
        result.total_assets = len(result.assets)
        result.success = True
        return result


def generate_manifest(assets: list[RetrievedAsset], retrieved_at: datetime | None = None) -> str:
    """JSON manifest describing a retrieval, for bulk export."""
    manifest = {
        "retrievedAt": (retrieved_at or utc_now()).isoformat(),
        "totalAssets": len(assets),
        "assets": [
            {
                "id": a.id,
                "title": a.title,
                "description": a.description,
                "category": a.category,
                "tags": a.tags,
                "dataSpace": a.data_space_name,
                "dataSpaceId": a.data_space_id,
                "uploadedAt": a.uploaded_at.isoformat(),
                "documentUri": a.document_uri,
            }
            for a in assets
        ],
    }
    return json.dumps(manifest, indent=2)
