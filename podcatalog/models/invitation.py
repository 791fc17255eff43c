"""DataSpace invitation: an offer of membership waiting in the invitee's pod."""

from enum import StrEnum

from pydantic import Field

from podcatalog.models.common import CatalogBase, Role, UTCTimestamp, WebId, new_fragment_id, utc_now


class InvitationStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Invitation(CatalogBase):
    """Invitation from an admin of a DataSpace to ``to_user``.

    ``data_space_tenant`` is the pod holding the DataSpace document, which is
    not necessarily the inviter's own.
    """

    id: str = Field(default_factory=lambda: new_fragment_id("invitation"))
    from_user: WebId
    to_user: WebId
    data_space_id: str = Field(..., min_length=1)
    data_space_title: str = ""
    data_space_tenant: WebId
    role: Role = Role.READ
    status: InvitationStatus = InvitationStatus.PENDING
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    responded_at: UTCTimestamp | None = None
