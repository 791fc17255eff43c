"""FastAPI attachment index endpoints.

POST   /v1/dataspaces/{ds_id}/attachments                 - register an uploaded file
GET    /v1/dataspaces/{ds_id}/attachments                 - list / search (?q=&category=)
GET    /v1/dataspaces/{ds_id}/attachments/{attachment_id} - get one entry
DELETE /v1/dataspaces/{ds_id}/attachments/{attachment_id} - delete file and entry
"""

from fastapi import APIRouter, Depends, Query

from podcatalog.api.dependencies import get_attachment_index
from podcatalog.models.attachment import Attachment, RegisterAttachmentInput
from podcatalog.repositories.attachments import AttachmentIndex

router = APIRouter(prefix="/v1/dataspaces/{ds_id}/attachments", tags=["attachments"])


@router.post("", status_code=201, response_model=Attachment)
async def register_attachment(
    ds_id: str,
    body: RegisterAttachmentInput,
    tenant_id: str | None = Query(default=None),
    index: AttachmentIndex = Depends(get_attachment_index),
) -> Attachment:
    return await index.register(ds_id, body, tenant_id)


@router.get("", response_model=list[Attachment])
async def list_attachments(
    ds_id: str,
    q: str | None = Query(default=None),
    category: str | None = Query(default=None),
    tenant_id: str | None = Query(default=None),
    index: AttachmentIndex = Depends(get_attachment_index),
) -> list[Attachment]:
    if q or category:
        return await index.search(ds_id, q or "", category=category, tenant_id=tenant_id)
    return await index.list(ds_id, tenant_id)


@router.get("/{attachment_id}", response_model=Attachment)
async def get_attachment(
    ds_id: str,
    attachment_id: str,
    tenant_id: str | None = Query(default=None),
    index: AttachmentIndex = Depends(get_attachment_index),
) -> Attachment:
    return await index.get(ds_id, attachment_id, tenant_id)


@router.delete("/{attachment_id}", response_model=Attachment)
async def delete_attachment(
    ds_id: str,
    attachment_id: str,
    tenant_id: str | None = Query(default=None),
    index: AttachmentIndex = Depends(get_attachment_index),
) -> Attachment:
    return await index.delete(ds_id, attachment_id, tenant_id)
