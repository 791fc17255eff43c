"""Identity & Container Resolver.

Derives canonical container and document URIs from a tenant identity (a
WebID) and an entity kind/id. Pure: the same inputs give the same URIs in
every process, so two users resolving "DataSpace X of tenant T" land on the
same document.

Layout under a tenant's pod root::

    <root>/dataspaces/                          DataSpace documents
    <root>/dataspaces/<ds>.jsonld
    <root>/dataspaces/<ds>/assets/              Asset documents
    <root>/dataspaces/<ds>/assets/<asset>.jsonld
    <root>/dataspaces/<ds>/index.jsonld         attachment index
    <root>/dataspaces/<ds>/data/                attachment files
    <root>/notifications.jsonld                 DataSpace invitations received
"""

from typing import Protocol

from podcatalog.errors import NotAuthenticatedError, UnresolvedIdentityError
from podcatalog.models.common import EntityKind


class IdentityProvider(Protocol):
    """Boundary with authentication: who is calling."""

    def current_identity(self) -> str | None: ...


class StaticIdentityProvider:
    """Identity fixed at construction (per request, per test, per CLI run)."""

    def __init__(self, web_id: str | None) -> None:
        self._web_id = web_id or None

    def current_identity(self) -> str | None:
        return self._web_id


def require_identity(identity: IdentityProvider) -> str:
    """Return the caller's identity or raise NotAuthenticatedError."""
    web_id = identity.current_identity()
    if not web_id:
        msg = "User not authenticated."
        raise NotAuthenticatedError(msg)
    return web_id


def pod_root(tenant_id: str) -> str:
    """Pod root of a WebID: fragment dropped, path cut at ``/profile``.

    ``https://alice.example/profile/card#me`` -> ``https://alice.example``
    """
    base, _, _ = tenant_id.partition("#")
    base = base.split("/profile", 1)[0]
    return base.rstrip("/")


class ContainerResolver:
    """Maps (tenant, kind, id) to container and document URIs."""

    def __init__(self, extension: str = ".jsonld") -> None:
        self._ext = extension

    @property
    def extension(self) -> str:
        return self._ext

    def container_for(
        self,
        tenant_id: str | None,
        kind: EntityKind,
        parent_id: str | None = None,
    ) -> str:
        """Container holding documents of ``kind`` for ``tenant_id``.

        Raises:
            UnresolvedIdentityError: If ``tenant_id`` is absent.
            ValueError: If an Asset container is requested without its DataSpace id.
        """
        root = self._root(tenant_id)
        if kind == EntityKind.DATA_SPACE:
            return f"{root}/dataspaces/"
        if not parent_id:
            msg = "Asset containers are scoped to a DataSpace; parent_id is required."
            raise ValueError(msg)
        return f"{root}/dataspaces/{parent_id}/assets/"

    def document_for(
        self,
        tenant_id: str | None,
        kind: EntityKind,
        entity_id: str,
        parent_id: str | None = None,
    ) -> str:
        return f"{self.container_for(tenant_id, kind, parent_id)}{entity_id}{self._ext}"

    def default_storage_location(self, tenant_id: str | None, data_space_id: str) -> str:
        return f"{self.container_for(tenant_id, EntityKind.DATA_SPACE)}{data_space_id}/"

    def attachment_index_for(self, tenant_id: str | None, data_space_id: str) -> str:
        return f"{self._root(tenant_id)}/dataspaces/{data_space_id}/index{self._ext}"

    def attachment_container_for(self, tenant_id: str | None, data_space_id: str) -> str:
        return f"{self._root(tenant_id)}/dataspaces/{data_space_id}/data/"

    def notifications_for(self, tenant_id: str | None) -> str:
        return f"{self._root(tenant_id)}/notifications{self._ext}"

    def entity_id_from_uri(self, uri: str) -> str:
        """Last path segment without the document extension."""
        name = uri.rstrip("/").rsplit("/", 1)[-1]
        return name[: -len(self._ext)] if self._ext and name.endswith(self._ext) else name

    def _root(self, tenant_id: str | None) -> str:
        if not tenant_id:
            msg = "Cannot resolve storage location without a tenant identity."
            raise UnresolvedIdentityError(msg)
        return pod_root(tenant_id)
