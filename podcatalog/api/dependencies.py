"""FastAPI dependency factories.

Long-lived collaborators (document store, resolver, audit bus) live on
``app.state``; request-scoped services are built from them per request, with
the caller identity taken from the ``X-WebID`` header. Verifying that header
is the job of the authentication layer in front of this API.
"""

from fastapi import Depends, Header, Request

from podcatalog.config.settings import Settings, get_settings
from podcatalog.identity.resolver import ContainerResolver, IdentityProvider, StaticIdentityProvider
from podcatalog.observability.audit_log import AuditLog
from podcatalog.observability.events import AuditEventBus
from podcatalog.repositories.attachments import AttachmentIndex
from podcatalog.repositories.catalog import CatalogStore
from podcatalog.repositories.invitations import InvitationService
from podcatalog.services.retrieval import RetrievalService
from podcatalog.storage.base import DocumentStore


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_resolver(request: Request) -> ContainerResolver:
    return request.app.state.resolver


def get_audit_bus(request: Request) -> AuditEventBus:
    return request.app.state.audit_bus


def get_audit_log(bus: AuditEventBus = Depends(get_audit_bus)) -> AuditLog:
    return bus.log


def get_identity(
    x_webid: str | None = Header(default=None, alias="X-WebID"),
) -> IdentityProvider:
    return StaticIdentityProvider(x_webid)


def get_catalog(
    store: DocumentStore = Depends(get_document_store),
    resolver: ContainerResolver = Depends(get_resolver),
    identity: IdentityProvider = Depends(get_identity),
    bus: AuditEventBus = Depends(get_audit_bus),
) -> CatalogStore:
    return CatalogStore(store, resolver, identity, audit=bus)


def get_attachment_index(
    store: DocumentStore = Depends(get_document_store),
    catalog: CatalogStore = Depends(get_catalog),
    bus: AuditEventBus = Depends(get_audit_bus),
) -> AttachmentIndex:
    return AttachmentIndex(store, catalog, audit=bus)


def get_invitation_service(
    store: DocumentStore = Depends(get_document_store),
    catalog: CatalogStore = Depends(get_catalog),
    bus: AuditEventBus = Depends(get_audit_bus),
) -> InvitationService:
    return InvitationService(store, catalog, audit=bus)


def get_retrieval_service(
    catalog: CatalogStore = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> RetrievalService:
    return RetrievalService(catalog, default_limit=settings.RETRIEVAL_DEFAULT_LIMIT)
