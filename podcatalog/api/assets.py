"""FastAPI Asset endpoints, scoped under their DataSpace.

POST   /v1/dataspaces/{ds_id}/assets                              - create
GET    /v1/dataspaces/{ds_id}/assets                              - list active
GET    /v1/dataspaces/{ds_id}/assets/{asset_id}                   - get
GET    /v1/dataspaces/{ds_id}/assets/{asset_id}/permissions       - effective role
PATCH  /v1/dataspaces/{ds_id}/assets/{asset_id}                   - update
DELETE /v1/dataspaces/{ds_id}/assets/{asset_id}                   - soft delete
POST   /v1/dataspaces/{ds_id}/assets/{asset_id}/members           - share with a DataSpace member
PUT    /v1/dataspaces/{ds_id}/assets/{asset_id}/members/role      - change role
DELETE /v1/dataspaces/{ds_id}/assets/{asset_id}/members           - unshare (?web_id=)
POST   /v1/dataspaces/{ds_id}/assets/{asset_id}/metadata          - add metadata entry
DELETE /v1/dataspaces/{ds_id}/assets/{asset_id}/metadata/{id}     - remove metadata entry
POST   /v1/dataspaces/{ds_id}/assets/{asset_id}/asset-metadata    - add structured record
DELETE /v1/dataspaces/{ds_id}/assets/{asset_id}/asset-metadata/{id}
"""

from fastapi import APIRouter, Depends, Query

from podcatalog.api.dependencies import get_catalog
from podcatalog.api.schemas import (
    AddMemberRequest,
    AddMetadataRequest,
    PermissionsResponse,
    UpdateRoleRequest,
)
from podcatalog.models.catalog import (
    AddAssetMetadataInput,
    Asset,
    AssetMetadata,
    CreateAssetInput,
    EntityChanges,
    Member,
    MetadataEntry,
)
from podcatalog.repositories.catalog import CatalogStore, EntityRef

router = APIRouter(prefix="/v1/dataspaces/{ds_id}/assets", tags=["assets"])


@router.post("", status_code=201, response_model=Asset)
async def create_asset(
    ds_id: str,
    body: CreateAssetInput,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Asset:
    return await catalog.create_asset(ds_id, body, tenant_id)


@router.get("", response_model=list[Asset])
async def list_assets(
    ds_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> list[Asset]:
    return await catalog.list_assets(ds_id, tenant_id)


@router.get("/{asset_id}", response_model=Asset)
async def get_asset(
    ds_id: str,
    asset_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Asset:
    return await catalog.get(EntityRef.asset(ds_id, asset_id, tenant_id))  # type: ignore[return-value]


@router.get("/{asset_id}/permissions", response_model=PermissionsResponse)
async def get_asset_permissions(
    ds_id: str,
    asset_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> PermissionsResponse:
    entity = await catalog.get(EntityRef.asset(ds_id, asset_id, tenant_id))
    return PermissionsResponse.from_permissions(catalog.projector.permissions(entity, catalog.caller()))


@router.patch("/{asset_id}", response_model=Asset)
async def update_asset(
    ds_id: str,
    asset_id: str,
    body: EntityChanges,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Asset:
    return await catalog.update(EntityRef.asset(ds_id, asset_id, tenant_id), body)  # type: ignore[return-value]


@router.delete("/{asset_id}", response_model=Asset)
async def delete_asset(
    ds_id: str,
    asset_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Asset:
    return await catalog.soft_delete(EntityRef.asset(ds_id, asset_id, tenant_id))  # type: ignore[return-value]


# ----- Members -----


@router.post("/{asset_id}/members", status_code=201, response_model=Member)
async def add_asset_member(
    ds_id: str,
    asset_id: str,
    body: AddMemberRequest,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Member:
    return await catalog.add_member(EntityRef.asset(ds_id, asset_id, tenant_id), body.web_id, body.role)


@router.put("/{asset_id}/members/role", response_model=Member)
async def update_asset_member_role(
    ds_id: str,
    asset_id: str,
    body: UpdateRoleRequest,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Member:
    return await catalog.update_member_role(
        EntityRef.asset(ds_id, asset_id, tenant_id), body.web_id, body.role,
    )


@router.delete("/{asset_id}/members", response_model=Asset)
async def remove_asset_member(
    ds_id: str,
    asset_id: str,
    web_id: str = Query(..., min_length=1),
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Asset:
    return await catalog.remove_member(EntityRef.asset(ds_id, asset_id, tenant_id), web_id)  # type: ignore[return-value]


# ----- Metadata -----


@router.post("/{asset_id}/metadata", status_code=201, response_model=MetadataEntry)
async def add_asset_metadata_entry(
    ds_id: str,
    asset_id: str,
    body: AddMetadataRequest,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> MetadataEntry:
    return await catalog.add_metadata(EntityRef.asset(ds_id, asset_id, tenant_id), body.key, body.value)


@router.delete("/{asset_id}/metadata/{metadata_id}", response_model=Asset)
async def remove_asset_metadata_entry(
    ds_id: str,
    asset_id: str,
    metadata_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Asset:
    return await catalog.remove_metadata(EntityRef.asset(ds_id, asset_id, tenant_id), metadata_id)  # type: ignore[return-value]


@router.post("/{asset_id}/asset-metadata", status_code=201, response_model=AssetMetadata)
async def add_asset_metadata(
    ds_id: str,
    asset_id: str,
    body: AddAssetMetadataInput,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> AssetMetadata:
    return await catalog.add_asset_metadata(EntityRef.asset(ds_id, asset_id, tenant_id), body)


@router.delete("/{asset_id}/asset-metadata/{record_id}", response_model=Asset)
async def remove_asset_metadata(
    ds_id: str,
    asset_id: str,
    record_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Asset:
    return await catalog.remove_asset_metadata(EntityRef.asset(ds_id, asset_id, tenant_id), record_id)
