"""Shared pytest fixtures for the podcatalog test suite.

Provides:
- store: in-memory document store (serialized documents, injectable raw bytes)
- resolver / audit_log / audit_bus: the collaborators services are built from
- catalog_for: factory for a CatalogStore acting as a given WebID
- client: AsyncClient over the FastAPI app, wired to the same in-memory store
"""

from collections.abc import Callable

import pytest
from httpx import ASGITransport, AsyncClient

from podcatalog.identity.resolver import ContainerResolver, StaticIdentityProvider
from podcatalog.observability.audit_log import AuditLog
from podcatalog.observability.events import AuditEventBus
from podcatalog.repositories.catalog import CatalogStore
from podcatalog.storage.memory import InMemoryDocumentStore

ALICE = "https://alice.example/profile/card#me"
BOB = "https://bob.example/profile/card#me"
CAROL = "https://carol.example/profile/card#me"
AUDIT_CONTAINER = "http://localhost:3000/org/audit/ldes/"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def resolver() -> ContainerResolver:
    return ContainerResolver(".jsonld")


@pytest.fixture
def audit_log(store: InMemoryDocumentStore) -> AuditLog:
    return AuditLog(store, AUDIT_CONTAINER)


@pytest.fixture
def audit_bus(audit_log: AuditLog) -> AuditEventBus:
    return AuditEventBus(audit_log)


@pytest.fixture
def catalog_for(
    store: InMemoryDocumentStore,
    resolver: ContainerResolver,
    audit_bus: AuditEventBus,
) -> Callable[[str | None], CatalogStore]:
    def _make(web_id: str | None) -> CatalogStore:
        return CatalogStore(store, resolver, StaticIdentityProvider(web_id), audit=audit_bus)

    return _make


@pytest.fixture
def alice(catalog_for: Callable[[str | None], CatalogStore]) -> CatalogStore:
    return catalog_for(ALICE)


@pytest.fixture
def bob(catalog_for: Callable[[str | None], CatalogStore]) -> CatalogStore:
    return catalog_for(BOB)


@pytest.fixture
async def client(store: InMemoryDocumentStore, audit_bus: AuditEventBus):
    """AsyncClient whose app state points at the test store and audit bus.

    ASGITransport does not run the lifespan, so the audit bus has no worker
    here; ``AuditEventBus.flush`` drains it inline.
    """
    from podcatalog.api.main import app

    app.state.store = store
    app.state.resolver = ContainerResolver(".jsonld")
    app.state.audit_bus = audit_bus

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    for name in ("store", "resolver", "audit_bus"):
        delattr(app.state, name)
