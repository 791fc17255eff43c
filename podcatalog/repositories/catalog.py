"""Catalog Store: DataSpace / Asset CRUD, membership and metadata over a document store.

One logical entity is one document: the header plus every Member and Metadata
sub-record. Every mutation is a read-modify-write of that whole document with
no version check, so concurrent writers race and the last write wins. Nothing
is retried.

Mutations are gated by the ``AccessControlProjector`` (advisory, see that
module) and publish audit events to the bus. Publishing never fails the
operation, and the two writes are not transactional.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import urljoin

from podcatalog.codec.entities import AssetCodec, DataSpaceCodec, EntityCodec
from podcatalog.errors import (
    CatalogError,
    LastAdminError,
    MembershipError,
    NotFoundError,
    ParseError,
    ReadError,
)
from podcatalog.governance.access_control import AccessControlProjector, Action
from podcatalog.identity.resolver import ContainerResolver, IdentityProvider, require_identity
from podcatalog.models.audit import AuditEvent
from podcatalog.models.catalog import (
    AddAssetMetadataInput,
    Asset,
    AssetMetadata,
    CreateAssetInput,
    CreateDataSpaceInput,
    DataSpace,
    Entity,
    EntityChanges,
    Member,
    MetadataEntry,
    MetadataValue,
)
from podcatalog.models.common import AuditAction, EntityKind, Role, new_entity_id
from podcatalog.models.document import Document
from podcatalog.observability.events import AuditPublisher
from podcatalog.storage.base import DocumentStore

logger = logging.getLogger(__name__)

_CODECS: dict[EntityKind, EntityCodec] = {
    EntityKind.DATA_SPACE: DataSpaceCodec(),
    EntityKind.ASSET: AssetCodec(),
}


@dataclass(frozen=True)
class EntityRef:
    """Address of one entity. ``tenant_id=None`` means the caller's own pod."""

    kind: EntityKind
    entity_id: str
    data_space_id: str | None = None
    tenant_id: str | None = None

    @classmethod
    def data_space(cls, data_space_id: str, tenant_id: str | None = None) -> EntityRef:
        return cls(EntityKind.DATA_SPACE, data_space_id, tenant_id=tenant_id)

    @classmethod
    def asset(cls, data_space_id: str, asset_id: str, tenant_id: str | None = None) -> EntityRef:
        return cls(EntityKind.ASSET, asset_id, data_space_id=data_space_id, tenant_id=tenant_id)

    @property
    def parent(self) -> EntityRef | None:
        if self.kind != EntityKind.ASSET or self.data_space_id is None:
            return None
        return EntityRef.data_space(self.data_space_id, tenant_id=self.tenant_id)


class CatalogStore:
    """Entity operations for the caller supplied by ``identity``."""

    def __init__(
        self,
        store: DocumentStore,
        resolver: ContainerResolver,
        identity: IdentityProvider,
        audit: AuditPublisher | None = None,
        projector: AccessControlProjector | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._identity = identity
        self._audit = audit
        self._acl = projector or AccessControlProjector()

    @property
    def resolver(self) -> ContainerResolver:
        return self._resolver

    @property
    def projector(self) -> AccessControlProjector:
        return self._acl

    def caller(self) -> str:
        """Current caller identity.

        Raises:
            NotAuthenticatedError: If no identity is available.
        """
        return require_identity(self._identity)

    # ----- Create -----

    async def create_data_space(self, data: CreateDataSpaceInput) -> DataSpace:
        """Create a DataSpace in the caller's pod with the caller as sole admin.

        Raises:
            NotAuthenticatedError: If there is no caller identity.
            WriteError: If the store rejects the document.
        """
        caller = self.caller()
        ds_id = new_entity_id(EntityKind.DATA_SPACE.id_prefix)
        uri = self._resolver.document_for(caller, EntityKind.DATA_SPACE, ds_id)
        data_space = DataSpace(
            id=ds_id,
            title=data.title,
            description=data.description,
            purpose=data.purpose,
            access_mode=data.access_mode,
            storage_location=(
                data.storage_location or self._resolver.default_storage_location(caller, ds_id)
            ),
            creator=caller,
            tags=data.tags,
            category=data.category,
            members=[Member(entity_id=ds_id, web_id=caller, role=Role.ADMIN)],
        )
        await self._write(data_space, uri)
        logger.info("Created DataSpace %s at %s", ds_id, uri)
        self._publish(AuditAction.CREATE, _entity_iri(uri, ds_id), self._container_of(uri))
        return data_space

    async def create_asset(
        self,
        data_space_id: str,
        data: CreateAssetInput,
        tenant_id: str | None = None,
    ) -> Asset:
        """Create an Asset inside an existing DataSpace.

        The caller needs write access to the DataSpace and becomes the
        Asset's sole admin.

        Raises:
            NotFoundError: If the DataSpace does not exist.
            PermissionDeniedError: If the caller cannot write to the DataSpace.
            WriteError: If the store rejects the document.
        """
        caller = self.caller()
        tenant = tenant_id or caller
        parent = await self.get(EntityRef.data_space(data_space_id, tenant_id=tenant))
        self._acl.require(parent, caller, Action.WRITE)

        asset_id = new_entity_id(EntityKind.ASSET.id_prefix)
        uri = self._resolver.document_for(tenant, EntityKind.ASSET, asset_id, data_space_id)
        asset = Asset(
            id=asset_id,
            title=data.title,
            description=data.description,
            data_space_id=data_space_id,
            creator=caller,
            tags=data.tags,
            category=data.category,
            members=[Member(entity_id=asset_id, web_id=caller, role=Role.ADMIN)],
        )
        await self._write(asset, uri)
        logger.info("Created Asset %s in DataSpace %s", asset_id, data_space_id)
        self._publish(AuditAction.CREATE, _entity_iri(uri, asset_id), self._container_of(uri))
        return asset

    # ----- Read -----

    async def get(self, ref: EntityRef) -> Entity:
        """Fetch one entity, inactive ones included.

        Raises:
            NotFoundError: If the document or its header is absent.
            ParseError: If the document cannot be decoded.
        """
        _, entity = await self._load(ref)
        return entity

    async def list_in_container(self, kind: EntityKind, container_uri: str) -> list[Entity]:
        """Decode every document of ``kind`` in a container; active ones only.

        Documents that fail to read or decode are skipped and logged. A
        missing container yields ``[]``. When structured listing finds no
        candidate document, the container's raw representation is pattern
        matched instead (degraded mode for stale container metadata).
        """
        try:
            uris = await self._store.list(container_uri)
        except NotFoundError:
            return []

        pattern = self._document_pattern(kind)
        candidates = [u for u in uris if pattern.fullmatch(u.rsplit("/", 1)[-1])]
        if not candidates:
            candidates = await self._fallback_uris(kind, container_uri)

        codec = _CODECS[kind]
        entities: list[Entity] = []
        skipped = 0
        for uri in candidates:
            entity_id = self._resolver.entity_id_from_uri(uri)
            try:
                doc = await self._store.get(uri)
                entity = codec.decode(doc, entity_id)
            except (NotFoundError, ReadError, ParseError) as exc:
                skipped += 1
                logger.warning("Skipping unreadable %s document %s: %s", kind, uri, exc)
                continue
            if entity.active:
                entities.append(entity)

        if skipped:
            logger.warning("Skipped %d of %d documents in %s", skipped, len(candidates), container_uri)
        entities.sort(key=lambda e: e.created_at, reverse=True)
        return entities

    async def list_data_spaces(self, tenant_id: str | None = None) -> list[DataSpace]:
        tenant = tenant_id or self.caller()
        container = self._resolver.container_for(tenant, EntityKind.DATA_SPACE)
        return await self.list_in_container(EntityKind.DATA_SPACE, container)  # type: ignore[return-value]

    async def list_assets(self, data_space_id: str, tenant_id: str | None = None) -> list[Asset]:
        tenant = tenant_id or self.caller()
        container = self._resolver.container_for(tenant, EntityKind.ASSET, data_space_id)
        return await self.list_in_container(EntityKind.ASSET, container)  # type: ignore[return-value]

    # ----- Update / delete -----

    async def update(self, ref: EntityRef, changes: EntityChanges) -> Entity:
        """Apply a partial header update. Last write wins.

        Only fields the caller set are applied. An explicit ``None`` clears a
        nullable field such as ``category`` and is ignored for the rest.
        Fields that do not exist on the entity kind (``purpose`` and
        ``access_mode`` on an Asset) are ignored.
        """
        doc, entity = await self._load(ref)
        self._acl.require(entity, self.caller(), Action.WRITE)

        fields = type(entity).model_fields
        updates = {
            k: v for k, v in changes.model_dump(exclude_unset=True).items()
            if k in fields and (v is not None or fields[k].default is None)
        }
        if not updates:
            return entity
        updated = type(entity).model_validate({**entity.model_dump(), **updates})
        await self._write(updated, doc.uri, into=doc)
        self._publish(AuditAction.UPDATE, _entity_iri(doc.uri, updated.id), self._container_of(doc.uri))
        return updated

    async def soft_delete(self, ref: EntityRef) -> Entity:
        """Flag the entity inactive. The document is never removed."""
        doc, entity = await self._load(ref)
        self._acl.require(entity, self.caller(), Action.MANAGE)
        if not entity.active:
            return entity
        entity.active = False
        await self._write(entity, doc.uri, into=doc)
        logger.info("Soft-deleted %s %s", entity.kind, entity.id)
        self._publish(AuditAction.DELETE, _entity_iri(doc.uri, entity.id), self._container_of(doc.uri))
        return entity

    # ----- Members -----

    async def add_member(
        self,
        ref: EntityRef,
        web_id: str,
        role: Role = Role.READ,
        granted_by: str | None = None,
    ) -> Member:
        """Add ``web_id`` with ``role``, or change the role of an existing member.

        ``granted_by`` names the admin whose authority the change rests on when
        it is not the caller (an accepted invitation); the caller stays the
        audited actor.

        Raises:
            PermissionDeniedError: If the granting user is not an admin.
            MembershipError: If an Asset member is not a member of its DataSpace.
            LastAdminError: If the change would leave the entity without an admin.
        """
        doc, entity = await self._load(ref)
        self._acl.require(entity, granted_by or self.caller(), Action.MANAGE)

        if isinstance(entity, Asset):
            parent = await self.get(ref.parent or EntityRef.data_space(entity.data_space_id, ref.tenant_id))
            if self._acl.effective_role(parent, web_id) is None:
                msg = f"{web_id} is not a member of DataSpace {parent.id}; asset members must be."
                raise MembershipError(msg)

        member = next((m for m in entity.members if m.web_id == web_id), None)
        if member is None:
            member = Member(entity_id=entity.id, web_id=web_id, role=role)
            entity.members.append(member)
        else:
            member.role = role
            _ensure_admin_remains(entity)

        await self._write(entity, doc.uri, into=doc)
        self._publish(AuditAction.PERMISSION_CHANGE, web_id, _entity_iri(doc.uri, entity.id))
        return member

    async def remove_member(self, ref: EntityRef, web_id: str) -> Entity:
        """Remove ``web_id`` from the entity's members.

        Raises:
            NotFoundError: If ``web_id`` is not a member.
            LastAdminError: If it is the last admin.
        """
        doc, entity = await self._load(ref)
        self._acl.require(entity, self.caller(), Action.MANAGE)

        remaining = [m for m in entity.members if m.web_id != web_id]
        if len(remaining) == len(entity.members):
            msg = f"{web_id} is not a member of {entity.kind} {entity.id}."
            raise NotFoundError(msg, uri=doc.uri)
        entity.members = remaining
        _ensure_admin_remains(entity)

        await self._write(entity, doc.uri, into=doc)
        self._publish(AuditAction.PERMISSION_CHANGE, web_id, _entity_iri(doc.uri, entity.id))
        return entity

    async def update_member_role(self, ref: EntityRef, web_id: str, role: Role) -> Member:
        """Change the role of an existing member.

        Raises:
            NotFoundError: If ``web_id`` is not a member.
            LastAdminError: If it would demote the last admin.
        """
        doc, entity = await self._load(ref)
        self._acl.require(entity, self.caller(), Action.MANAGE)

        member = next((m for m in entity.members if m.web_id == web_id), None)
        if member is None:
            msg = f"{web_id} is not a member of {entity.kind} {entity.id}."
            raise NotFoundError(msg, uri=doc.uri)
        member.role = role
        _ensure_admin_remains(entity)

        await self._write(entity, doc.uri, into=doc)
        self._publish(AuditAction.PERMISSION_CHANGE, web_id, _entity_iri(doc.uri, entity.id))
        return member

    # ----- Metadata -----

    async def add_metadata(self, ref: EntityRef, key: str, value: MetadataValue) -> MetadataEntry:
        doc, entity = await self._load(ref)
        caller = self.caller()
        self._acl.require(entity, caller, Action.WRITE)

        entry = MetadataEntry(key=key, value=value, created_by=caller)
        entity.metadata.append(entry)
        await self._write(entity, doc.uri, into=doc)
        self._publish(AuditAction.UPDATE, _entity_iri(doc.uri, entity.id), self._container_of(doc.uri))
        return entry

    async def remove_metadata(self, ref: EntityRef, metadata_id: str) -> Entity:
        doc, entity = await self._load(ref)
        self._acl.require(entity, self.caller(), Action.WRITE)

        remaining = [m for m in entity.metadata if m.id != metadata_id]
        if len(remaining) == len(entity.metadata):
            msg = f"Metadata {metadata_id} not found on {entity.kind} {entity.id}."
            raise NotFoundError(msg, uri=doc.uri)
        entity.metadata = remaining
        await self._write(entity, doc.uri, into=doc)
        self._publish(AuditAction.UPDATE, _entity_iri(doc.uri, entity.id), self._container_of(doc.uri))
        return entity

    async def add_asset_metadata(self, ref: EntityRef, data: AddAssetMetadataInput) -> AssetMetadata:
        doc, asset = await self._load_asset(ref)
        caller = self.caller()
        self._acl.require(asset, caller, Action.WRITE)

        record = AssetMetadata(**data.model_dump(), created_by=caller)
        asset.asset_metadata.append(record)
        await self._write(asset, doc.uri, into=doc)
        self._publish(AuditAction.UPDATE, _entity_iri(doc.uri, asset.id), self._container_of(doc.uri))
        return record

    async def remove_asset_metadata(self, ref: EntityRef, record_id: str) -> Asset:
        doc, asset = await self._load_asset(ref)
        self._acl.require(asset, self.caller(), Action.WRITE)

        remaining = [r for r in asset.asset_metadata if r.id != record_id]
        if len(remaining) == len(asset.asset_metadata):
            msg = f"Asset metadata {record_id} not found on Asset {asset.id}."
            raise NotFoundError(msg, uri=doc.uri)
        asset.asset_metadata = remaining
        await self._write(asset, doc.uri, into=doc)
        self._publish(AuditAction.UPDATE, _entity_iri(doc.uri, asset.id), self._container_of(doc.uri))
        return asset

    # ----- Helpers -----

    def document_uri(self, ref: EntityRef) -> str:
        tenant = ref.tenant_id or self.caller()
        return self._resolver.document_for(tenant, ref.kind, ref.entity_id, ref.data_space_id)

    async def _load(self, ref: EntityRef) -> tuple[Document, Entity]:
        uri = self.document_uri(ref)
        doc = await self._store.get(uri)
        return doc, _CODECS[ref.kind].decode(doc, ref.entity_id)

    async def _load_asset(self, ref: EntityRef) -> tuple[Document, Asset]:
        if ref.kind != EntityKind.ASSET:
            msg = f"Structured asset metadata only applies to assets, not {ref.kind}."
            raise ValueError(msg)
        doc, entity = await self._load(ref)
        return doc, entity  # type: ignore[return-value]

    async def _write(self, entity: Entity, uri: str, into: Document | None = None) -> None:
        doc = _CODECS[entity.kind].encode(entity, uri, into=into)
        await self._store.put(uri, doc)

    def _publish(self, action: AuditAction, obj: str, target: str) -> None:
        if self._audit is None:
            return
        try:
            self._audit.publish(AuditEvent(actor=self.caller(), action=action, object=obj, target=target))
        except Exception:
            logger.warning("Could not publish %s audit event for %s", action, obj, exc_info=True)

    def _document_pattern(self, kind: EntityKind) -> re.Pattern[str]:
        return re.compile(rf"{re.escape(kind.id_prefix)}-[\w\-]+{re.escape(self._resolver.extension)}")

    async def _fallback_uris(self, kind: EntityKind, container_uri: str) -> list[str]:
        try:
            raw = await self._store.read_raw(container_uri)
        except CatalogError as exc:
            logger.warning("Fallback listing of %s unavailable: %s", container_uri, exc)
            return []
        pattern = re.compile(
            rf"(?<![\w\-]){re.escape(kind.id_prefix)}-[\w\-]+{re.escape(self._resolver.extension)}"
        )
        names = dict.fromkeys(m.group(0) for m in pattern.finditer(raw))
        if names:
            logger.info("Fallback listing found %d %s documents in %s", len(names), kind, container_uri)
        return [urljoin(container_uri, name) for name in names]

    @staticmethod
    def _container_of(uri: str) -> str:
        return uri.rsplit("/", 1)[0] + "/"


def _entity_iri(uri: str, entity_id: str) -> str:
    return f"{uri}#{entity_id}"


def _ensure_admin_remains(entity: Entity) -> None:
    if not any(m.role == Role.ADMIN for m in entity.members):
        msg = f"{entity.kind} {entity.id} must keep at least one admin member."
        raise LastAdminError(msg)
