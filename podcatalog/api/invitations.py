"""FastAPI DataSpace invitation endpoints.

POST   /v1/dataspaces/{ds_id}/invitations  - invite a WebID (admins only)
GET    /v1/invitations                     - caller's invitations (?status=)
GET    /v1/invitations/{invitation_id}     - one invitation
POST   /v1/invitations/{invitation_id}/accept
POST   /v1/invitations/{invitation_id}/reject
DELETE /v1/invitations/{invitation_id}     - dismiss
"""

from fastapi import APIRouter, Depends, Query

from podcatalog.api.dependencies import get_invitation_service
from podcatalog.api.schemas import AddMemberRequest
from podcatalog.models.invitation import Invitation, InvitationStatus
from podcatalog.repositories.invitations import InvitationService

router = APIRouter(prefix="/v1", tags=["invitations"])


@router.post("/dataspaces/{ds_id}/invitations", status_code=201, response_model=Invitation)
async def send_invitation(
    ds_id: str,
    body: AddMemberRequest,
    tenant_id: str | None = Query(default=None),
    service: InvitationService = Depends(get_invitation_service),
) -> Invitation:
    return await service.send(ds_id, body.web_id, body.role, tenant_id)


@router.get("/invitations", response_model=list[Invitation])
async def list_invitations(
    status: InvitationStatus | None = Query(default=None),
    service: InvitationService = Depends(get_invitation_service),
) -> list[Invitation]:
    return await service.list(status)


@router.get("/invitations/{invitation_id}", response_model=Invitation)
async def get_invitation(
    invitation_id: str,
    service: InvitationService = Depends(get_invitation_service),
) -> Invitation:
    return await service.get(invitation_id)


@router.post("/invitations/{invitation_id}/accept", response_model=Invitation)
async def accept_invitation(
    invitation_id: str,
    service: InvitationService = Depends(get_invitation_service),
) -> Invitation:
    return await service.respond(invitation_id, accept=True)


@router.post("/invitations/{invitation_id}/reject", response_model=Invitation)
async def reject_invitation(
    invitation_id: str,
    service: InvitationService = Depends(get_invitation_service),
) -> Invitation:
    return await service.respond(invitation_id, accept=False)


@router.delete("/invitations/{invitation_id}", response_model=Invitation)
async def remove_invitation(
    invitation_id: str,
    service: InvitationService = Depends(get_invitation_service),
) -> Invitation:
    return await service.remove(invitation_id)
