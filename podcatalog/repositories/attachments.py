"""Attachment index for files uploaded into a DataSpace.

The upload plumbing writes file bytes under the DataSpace's ``data/``
container; this index (one document per DataSpace) records what was uploaded
so listing, search and retrieval never have to inspect binaries.
"""

from __future__ import annotations

import logging

from podcatalog.codec.attachments import decode_index, encode_attachment
from podcatalog.errors import CatalogError, NotFoundError
from podcatalog.governance.access_control import Action
from podcatalog.models.attachment import Attachment, RegisterAttachmentInput
from podcatalog.models.audit import AuditEvent
from podcatalog.models.common import AuditAction
from podcatalog.models.document import Document
from podcatalog.observability.events import AuditPublisher
from podcatalog.repositories.catalog import CatalogStore, EntityRef
from podcatalog.storage.base import DocumentStore

logger = logging.getLogger(__name__)


class AttachmentIndex:
    """Register, list, search and delete attachment index entries."""

    def __init__(
        self,
        store: DocumentStore,
        catalog: CatalogStore,
        audit: AuditPublisher | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._audit = audit

    async def register(
        self,
        data_space_id: str,
        data: RegisterAttachmentInput,
        tenant_id: str | None = None,
    ) -> Attachment:
        """Record an uploaded file. The caller needs write access to the DataSpace.

        Raises:
            ValueError: If ``file_uri`` is not inside the DataSpace's ``data/`` container.
        """
        caller = self._catalog.caller()
        data_space = await self._catalog.get(EntityRef.data_space(data_space_id, tenant_id))
        self._catalog.projector.require(data_space, caller, Action.WRITE)
        if not self._in_data_container(data.file_uri, data_space_id, tenant_id):
            container = self._data_container(data_space_id, tenant_id)
            msg = f"Attachment file must live under {container}, got {data.file_uri}."
            raise ValueError(msg)

        index_uri = self._index_uri(data_space_id, tenant_id)
        doc = await self._load_index(index_uri)
        attachment = Attachment(data_space_id=data_space_id, uploaded_by=caller, **data.model_dump())
        doc.set_thing(encode_attachment(attachment, index_uri))
        await self._store.put(index_uri, doc)

        logger.info("Registered attachment %s (%s) in %s", attachment.id, attachment.file_name, data_space_id)
        self._publish(caller, AuditAction.CREATE, f"{index_uri}#{attachment.id}", index_uri)
        return attachment

    async def list(self, data_space_id: str, tenant_id: str | None = None) -> list[Attachment]:
        """All entries, newest upload first. A missing index yields ``[]``."""
        doc = await self._load_index(self._index_uri(data_space_id, tenant_id))
        return sorted(decode_index(doc), key=lambda a: a.uploaded_at, reverse=True)

    async def get(self, data_space_id: str, attachment_id: str, tenant_id: str | None = None) -> Attachment:
        for attachment in await self.list(data_space_id, tenant_id):
            if attachment.id == attachment_id:
                return attachment
        msg = f"Attachment {attachment_id} not found in DataSpace {data_space_id}."
        raise NotFoundError(msg)

    async def delete(self, data_space_id: str, attachment_id: str, tenant_id: str | None = None) -> Attachment:
        """Remove the file (best-effort) and then its index entry."""
        caller = self._catalog.caller()
        data_space = await self._catalog.get(EntityRef.data_space(data_space_id, tenant_id))
        self._catalog.projector.require(data_space, caller, Action.WRITE)

        index_uri = self._index_uri(data_space_id, tenant_id)
        doc = await self._load_index(index_uri)
        attachment = next((a for a in decode_index(doc) if a.id == attachment_id), None)
        if attachment is None:
            msg = f"Attachment {attachment_id} not found in DataSpace {data_space_id}."
            raise NotFoundError(msg, uri=index_uri)

        if not self._in_data_container(attachment.file_uri, data_space_id, tenant_id):
            logger.warning("Not deleting %s: outside the DataSpace data container", attachment.file_uri)
        else:
            try:
                await self._store.delete(attachment.file_uri)
            except CatalogError as exc:
                logger.warning("Could not delete file %s: %s", attachment.file_uri, exc)

        doc.remove_thing(f"{index_uri}#{attachment_id}")
        await self._store.put(index_uri, doc)
        self._publish(caller, AuditAction.DELETE, f"{index_uri}#{attachment_id}", index_uri)
        return attachment

    async def search(
        self,
        data_space_id: str,
        query: str = "",
        category: str | None = None,
        tenant_id: str | None = None,
    ) -> list[Attachment]:
        """Case-insensitive substring match over title, description, file name, category and tags."""
        needle = query.strip().lower()
        results: list[Attachment] = []
        for attachment in await self.list(data_space_id, tenant_id):
            if category and attachment.category.lower() != category.lower():
                continue
            haystack = " ".join([
                attachment.title,
                attachment.description,
                attachment.file_name,
                attachment.category,
                *attachment.tags,
            ]).lower()
            if needle in haystack:
                results.append(attachment)
        return results

    # ----- Helpers -----

    def _index_uri(self, data_space_id: str, tenant_id: str | None) -> str:
        tenant = tenant_id or self._catalog.caller()
        return self._catalog.resolver.attachment_index_for(tenant, data_space_id)

    def _data_container(self, data_space_id: str, tenant_id: str | None) -> str:
        tenant = tenant_id or self._catalog.caller()
        return self._catalog.resolver.attachment_container_for(tenant, data_space_id)

    def _in_data_container(self, file_uri: str, data_space_id: str, tenant_id: str | None) -> bool:
        """Only files under the DataSpace's ``data/`` container are managed here."""
        container = self._data_container(data_space_id, tenant_id)
        if not file_uri.startswith(container):
            return False
        name = file_uri[len(container):]
        return bool(name) and ".." not in name.split("/")

    async def _load_index(self, index_uri: str) -> Document:
        try:
            return await self._store.get(index_uri)
        except NotFoundError:
            return Document(uri=index_uri)

    def _publish(self, actor: str, action: AuditAction, obj: str, target: str) -> None:
        if self._audit is None:
            return
        try:
            self._audit.publish(AuditEvent(actor=actor, action=action, object=obj, target=target))
        except Exception:
            logger.warning("Could not publish %s audit event for %s", action, obj, exc_info=True)
