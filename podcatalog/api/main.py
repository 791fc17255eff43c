"""FastAPI application entry point for podcatalog.

The lifespan builds the long-lived collaborators on ``app.state`` (document
store, resolver, audit log and bus), starts the audit worker and flushes it
on shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from podcatalog import __version__
from podcatalog.api.assets import router as assets_router
from podcatalog.api.attachments import router as attachments_router
from podcatalog.api.audit import router as audit_router
from podcatalog.api.dataspaces import router as dataspaces_router
from podcatalog.api.invitations import router as invitations_router
from podcatalog.api.retrieval import router as retrieval_router
from podcatalog.config.settings import Settings, StoreBackend, get_settings
from podcatalog.errors import (
    CatalogError,
    LastAdminError,
    MembershipError,
    NotAuthenticatedError,
    NotFoundError,
    ParseError,
    PermissionDeniedError,
    ReadError,
    WriteError,
)
from podcatalog.identity.resolver import ContainerResolver
from podcatalog.observability.audit_log import AuditLog
from podcatalog.observability.events import AuditEventBus
from podcatalog.storage.base import DocumentStore
from podcatalog.storage.http import HttpDocumentStore
from podcatalog.storage.memory import InMemoryDocumentStore

APP_VERSION = __version__

settings = get_settings()

_LOG_NAME_TO_LEVEL: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# --- Structured logging ---
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if settings.ENVIRONMENT == "dev"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        _LOG_NAME_TO_LEVEL[settings.LOG_LEVEL.value],
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)
logging.basicConfig(level=_LOG_NAME_TO_LEVEL[settings.LOG_LEVEL.value])

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


# --- Application state ---


def init_state(app: FastAPI, config: Settings, store: DocumentStore | None = None) -> None:
    """Attach store, resolver and audit bus to ``app.state``."""
    if store is None:
        store = (
            HttpDocumentStore.from_settings(config)
            if config.STORE_BACKEND == StoreBackend.HTTP
            else InMemoryDocumentStore()
        )
    audit_log = AuditLog(store, config.AUDIT_CONTAINER_URL, extension=config.DOCUMENT_EXTENSION)
    app.state.store = store
    app.state.resolver = ContainerResolver(config.DOCUMENT_EXTENSION)
    app.state.audit_bus = AuditEventBus(audit_log, maxsize=config.AUDIT_QUEUE_MAXSIZE)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if not hasattr(app.state, "store"):
        init_state(app, settings)
    bus: AuditEventBus = app.state.audit_bus
    bus.start()
    logger.info("podcatalog started", store=type(app.state.store).__name__,
                audit_container=bus.log.container_uri)
    try:
        yield
    finally:
        await bus.close()
        await app.state.store.aclose()
        logger.info("podcatalog stopped", audit_written=bus.written,
                    audit_failed=bus.failed, audit_dropped=bus.dropped)


# --- FastAPI app ---
app = FastAPI(
    title="podcatalog API",
    description="Multi-tenant DataSpace / Asset catalog over personal document stores.",
    version=APP_VERSION,
    lifespan=lifespan,
)

# --- CORS middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENVIRONMENT == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error mapping ---

# Most specific first: subclasses must precede their bases.
_ERROR_STATUS: tuple[tuple[type[CatalogError], int], ...] = (
    (NotAuthenticatedError, 401),
    (PermissionDeniedError, 403),
    (NotFoundError, 404),
    (LastAdminError, 409),
    (MembershipError, 422),
    (ParseError, 502),
    (ReadError, 502),
    (WriteError, 502),
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    status = next((code for cls, code in _ERROR_STATUS if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.warning("store failure", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc), "error": "ValueError"})


# --- Routers ---
app.include_router(dataspaces_router)
app.include_router(assets_router)
app.include_router(attachments_router)
app.include_router(invitations_router)
app.include_router(audit_router)
app.include_router(retrieval_router)


# --- Infrastructure Endpoints (global) ---


@app.get("/health")
async def health_check(request: Request) -> dict:
    """Liveness check. Returns 200 always (degraded if the audit worker is down)."""
    bus: AuditEventBus | None = getattr(request.app.state, "audit_bus", None)
    checks: dict[str, bool] = {
        "api": True,
        "audit_worker": bus is not None and bus.running,
    }
    all_ok = all(checks.values())

    return {
        "status": "ok" if all_ok else "degraded",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "checks": checks,
        "audit": {
            "pending": bus.pending if bus else 0,
            "written": bus.written if bus else 0,
            "failed": bus.failed if bus else 0,
            "dropped": bus.dropped if bus else 0,
        },
    }


@app.get("/api/version")
async def get_version() -> dict[str, str]:
    """Return application name, version, and environment."""
    return {
        "name": "podcatalog",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
    }
