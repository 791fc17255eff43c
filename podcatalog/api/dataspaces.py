"""FastAPI DataSpace endpoints.

POST   /v1/dataspaces                          - create (caller becomes admin)
GET    /v1/dataspaces                          - list active DataSpaces of a pod
GET    /v1/dataspaces/{ds_id}                  - get (inactive included)
GET    /v1/dataspaces/{ds_id}/permissions      - caller's effective role and actions
PATCH  /v1/dataspaces/{ds_id}                  - partial header update
DELETE /v1/dataspaces/{ds_id}                  - soft delete
POST   /v1/dataspaces/{ds_id}/members          - add member / change role
PUT    /v1/dataspaces/{ds_id}/members/role     - change role of an existing member
DELETE /v1/dataspaces/{ds_id}/members          - remove member (?web_id=)
POST   /v1/dataspaces/{ds_id}/metadata         - add metadata entry
DELETE /v1/dataspaces/{ds_id}/metadata/{id}    - remove metadata entry

``tenant_id`` (query) addresses a DataSpace in another member's pod.
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
    CreateDataSpaceInput,
    DataSpace,
    EntityChanges,
    Member,
    MetadataEntry,
)
from podcatalog.repositories.catalog import CatalogStore, EntityRef

router = APIRouter(prefix="/v1/dataspaces", tags=["dataspaces"])


@router.post("", status_code=201, response_model=DataSpace)
async def create_data_space(
    body: CreateDataSpaceInput,
    catalog: CatalogStore = Depends(get_catalog),
) -> DataSpace:
    return await catalog.create_data_space(body)


@router.get("", response_model=list[DataSpace])
async def list_data_spaces(
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> list[DataSpace]:
    return await catalog.list_data_spaces(tenant_id)


@router.get("/{ds_id}", response_model=DataSpace)
async def get_data_space(
    ds_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> DataSpace:
    return await catalog.get(EntityRef.data_space(ds_id, tenant_id))  # type: ignore[return-value]


@router.get("/{ds_id}/permissions", response_model=PermissionsResponse)
async def get_data_space_permissions(
    ds_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> PermissionsResponse:
    """Advisory UI gating flags; the store's own access rules decide for real."""
    entity = await catalog.get(EntityRef.data_space(ds_id, tenant_id))
    return PermissionsResponse.from_permissions(catalog.projector.permissions(entity, catalog.caller()))


@router.patch("/{ds_id}", response_model=DataSpace)
async def update_data_space(
    ds_id: str,
    body: EntityChanges,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> DataSpace:
    return await catalog.update(EntityRef.data_space(ds_id, tenant_id), body)  # type: ignore[return-value]


@router.delete("/{ds_id}", response_model=DataSpace)
async def delete_data_space(
    ds_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> DataSpace:
    return await catalog.soft_delete(EntityRef.data_space(ds_id, tenant_id))  # type: ignore[return-value]


# ----- Members -----


@router.post("/{ds_id}/members", status_code=201, response_model=Member)
async def add_data_space_member(
    ds_id: str,
    body: AddMemberRequest,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Member:
    return await catalog.add_member(EntityRef.data_space(ds_id, tenant_id), body.web_id, body.role)


@router.put("/{ds_id}/members/role", response_model=Member)
async def update_data_space_member_role(
    ds_id: str,
    body: UpdateRoleRequest,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> Member:
    return await catalog.update_member_role(EntityRef.data_space(ds_id, tenant_id), body.web_id, body.role)


@router.delete("/{ds_id}/members", response_model=DataSpace)
async def remove_data_space_member(
    ds_id: str,
    web_id: str = Query(..., min_length=1),
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> DataSpace:
    return await catalog.remove_member(EntityRef.data_space(ds_id, tenant_id), web_id)  # type: ignore[return-value]


# ----- Metadata -----


@router.post("/{ds_id}/metadata", status_code=201, response_model=MetadataEntry)
async def add_data_space_metadata(
    ds_id: str,
    body: AddMetadataRequest,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> MetadataEntry:
    return await catalog.add_metadata(EntityRef.data_space(ds_id, tenant_id), body.key, body.value)


@router.delete("/{ds_id}/metadata/{metadata_id}", response_model=DataSpace)
async def remove_data_space_metadata(
    ds_id: str,
    metadata_id: str,
    tenant_id: str | None = Query(default=None),
    catalog: CatalogStore = Depends(get_catalog),
) -> DataSpace:
    return await catalog.remove_metadata(EntityRef.data_space(ds_id, tenant_id), metadata_id)  # type: ignore[return-value]
