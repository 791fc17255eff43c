"""DataSpace invitations delivered to the invitee's pod.

An admin invites a WebID into a DataSpace; the invitation lands in the
invitee's notifications document as ``pending``. Accepting adds the invitee
as a member on the strength of the inviter's admin role, which is checked
again at that point. Rejecting only records the answer.
"""

from __future__ import annotations

import logging

from podcatalog.codec.invitations import decode_invitations, encode_invitation, invitation_iri
from podcatalog.errors import NotFoundError
from podcatalog.governance.access_control import Action
from podcatalog.models.audit import AuditEvent
from podcatalog.models.common import AuditAction, Role, utc_now
from podcatalog.models.document import Document
from podcatalog.models.invitation import Invitation, InvitationStatus
from podcatalog.observability.events import AuditPublisher
from podcatalog.repositories.catalog import CatalogStore, EntityRef
from podcatalog.storage.base import DocumentStore

logger = logging.getLogger(__name__)


class InvitationService:
    """Send, list, answer and remove DataSpace invitations."""

    def __init__(
        self,
        store: DocumentStore,
        catalog: CatalogStore,
        audit: AuditPublisher | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._audit = audit

    async def send(
        self,
        data_space_id: str,
        to_user: str,
        role: Role = Role.READ,
        tenant_id: str | None = None,
    ) -> Invitation:
        """Invite ``to_user`` into a DataSpace. The caller must be one of its admins."""
        caller = self._catalog.caller()
        data_space = await self._catalog.get(EntityRef.data_space(data_space_id, tenant_id))
        self._catalog.projector.require(data_space, caller, Action.MANAGE)

        invitation = Invitation(
            from_user=caller,
            to_user=to_user,
            data_space_id=data_space.id,
            data_space_title=data_space.title,
            data_space_tenant=tenant_id or caller,
            role=role,
        )
        uri = self._catalog.resolver.notifications_for(to_user)
        doc = await self._load(uri)
        doc.set_thing(encode_invitation(invitation, uri))
        await self._store.put(uri, doc)

        logger.info("Invited %s to DataSpace %s as %s", to_user, data_space.id, role)
        self._publish(caller, AuditAction.CREATE, invitation_iri(uri, invitation.id), uri)
        return invitation

    async def list(self, status: InvitationStatus | None = None) -> list[Invitation]:
        """The caller's invitations, newest first. A missing document yields ``[]``."""
        doc = await self._load(self._own_uri())
        invitations = [i for i in decode_invitations(doc) if status is None or i.status == status]
        return sorted(invitations, key=lambda i: i.created_at, reverse=True)

    async def get(self, invitation_id: str) -> Invitation:
        for invitation in await self.list():
            if invitation.id == invitation_id:
                return invitation
        msg = f"Invitation {invitation_id} not found."
        raise NotFoundError(msg)

    async def respond(self, invitation_id: str, accept: bool) -> Invitation:
        """Accept or reject a pending invitation addressed to the caller.

        Raises:
            NotFoundError: If the caller holds no such invitation.
            ValueError: If it was already answered.
            PermissionDeniedError: On accept, if the inviter is no longer an admin.
        """
        caller = self._catalog.caller()
        uri = self._own_uri()
        doc = await self._load(uri)
        invitation = next((i for i in decode_invitations(doc) if i.id == invitation_id), None)
        if invitation is None:
            msg = f"Invitation {invitation_id} not found."
            raise NotFoundError(msg, uri=uri)
        if invitation.status != InvitationStatus.PENDING:
            msg = f"Invitation {invitation_id} is already {invitation.status}."
            raise ValueError(msg)

        if accept:
            await self._catalog.add_member(
                EntityRef.data_space(invitation.data_space_id, invitation.data_space_tenant),
                caller,
                invitation.role,
                granted_by=invitation.from_user,
            )
        invitation.status = InvitationStatus.ACCEPTED if accept else InvitationStatus.REJECTED
        invitation.responded_at = utc_now()
        doc.set_thing(encode_invitation(invitation, uri))
        await self._store.put(uri, doc)

        logger.info("Invitation %s %s by %s", invitation_id, invitation.status, caller)
        self._publish(caller, AuditAction.UPDATE, invitation_iri(uri, invitation_id), uri)
        return invitation

    async def remove(self, invitation_id: str) -> Invitation:
        """Drop an invitation from the caller's notifications, whatever its status."""
        caller = self._catalog.caller()
        uri = self._own_uri()
        doc = await self._load(uri)
        invitation = next((i for i in decode_invitations(doc) if i.id == invitation_id), None)
        if invitation is None:
            msg = f"Invitation {invitation_id} not found."
            raise NotFoundError(msg, uri=uri)

        doc.remove_thing(invitation_iri(uri, invitation_id))
        await self._store.put(uri, doc)
        self._publish(caller, AuditAction.DELETE, invitation_iri(uri, invitation_id), uri)
        return invitation

    # ----- Helpers -----

    def _own_uri(self) -> str:
        return self._catalog.resolver.notifications_for(self._catalog.caller())

    async def _load(self, uri: str) -> Document:
        try:
            return await self._store.get(uri)
        except NotFoundError:
            return Document(uri=uri)

    def _publish(self, actor: str, action: AuditAction, obj: str, target: str) -> None:
        if self._audit is None:
            return
        try:
            self._audit.publish(AuditEvent(actor=actor, action=action, object=obj, target=target))
        except Exception:
            logger.warning("Could not publish %s audit event for %s", action, obj, exc_info=True)
