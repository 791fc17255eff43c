"""FastAPI bulk retrieval endpoints.

GET /v1/retrieval           - flattened assets across every DataSpace of a pod
GET /v1/retrieval/manifest  - the same retrieval as a JSON export manifest
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from podcatalog.api.dependencies import get_retrieval_service
from podcatalog.services.retrieval import RetrievalResult, RetrievalService, generate_manifest

router = APIRouter(prefix="/v1/retrieval", tags=["retrieval"])


@router.get("", response_model=RetrievalResult)
async def retrieve_assets(
    tenant_id: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=0),
    service: RetrievalService = Depends(get_retrieval_service),
) -> RetrievalResult:
    return await service.retrieve_all(tenant_id, limit)


@router.get("/manifest")
async def retrieval_manifest(
    tenant_id: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=0),
    service: RetrievalService = Depends(get_retrieval_service),
) -> Response:
    result = await service.retrieve_all(tenant_id, limit)
    return Response(
        content=generate_manifest(result.assets),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="manifest.json"'},
    )
