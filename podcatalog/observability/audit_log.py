"""Audit Log Appender / Reader over a shared, multi-tenant container.

One immutable document per event, named by its UTC timestamp so the
container listing is chronological. Appending is fire-and-forget: a failed
write is logged and swallowed, never surfaced to the action being audited.
Reading is tolerant: partially written or malformed documents are skipped and
counted.
"""

import logging
from dataclasses import dataclass, field

from podcatalog.codec.audit import AuditEventCodec, audit_filename
from podcatalog.errors import CatalogError, NotFoundError
from podcatalog.models.audit import AuditEvent
from podcatalog.storage.base import DocumentStore

logger = logging.getLogger(__name__)


@dataclass
class AuditReadResult:
    """Events read back from the audit container, newest first."""

    events: list[AuditEvent] = field(default_factory=list)
    skipped: int = 0

    def to_dict(self) -> dict:
        return {
            "events": [e.model_dump(mode="json") for e in self.events],
            "skipped": self.skipped,
        }


class AuditLog:
    """Append-only audit trail backed by a ``DocumentStore`` container."""

    def __init__(
        self,
        store: DocumentStore,
        container_uri: str,
        extension: str = ".jsonld",
    ) -> None:
        self._store = store
        self._container = container_uri if container_uri.endswith("/") else f"{container_uri}/"
        self._ext = extension
        self._codec = AuditEventCodec()

    @property
    def container_uri(self) -> str:
        return self._container

    async def append(self, event: AuditEvent) -> str | None:
        """Write ``event`` once. Returns the document URI, or ``None`` on failure.

        Documents are write-once: if one already exists under the event's
        timestamp name the append fails rather than overwrite it. Never raises.
        """
        uri = f"{self._container}{audit_filename(event.created_at, self._ext)}"
        try:
            if await self._exists(uri):
                logger.warning("Audit document %s already exists, dropping %s by %s", uri, event.action, event.actor)
                return None
            await self._store.put(uri, self._codec.encode(event, uri))
        except Exception:
            logger.warning(
                "Audit append failed for %s %s by %s",
                event.action, event.object, event.actor, exc_info=True,
            )
            return None
        logger.debug("Audit event %s written to %s", event.action, uri)
        return uri

    async def _exists(self, uri: str) -> bool:
        try:
            await self._store.read_raw(uri)
        except NotFoundError:
            return False
        return True

    async def read_all(self) -> AuditReadResult:
        """Read every event in the container, newest first.

        A missing container yields an empty result. Listing failures other
        than "not found" propagate; per-document failures are skipped.
        """
        try:
            uris = await self._store.list(self._container)
        except NotFoundError:
            return AuditReadResult()

        result = AuditReadResult()
        for uri in uris:
            if uri.endswith("/") or (self._ext and not uri.endswith(self._ext)):
                continue
            try:
                doc = await self._store.get(uri)
                result.events.append(self._codec.decode(doc))
            except CatalogError as exc:
                result.skipped += 1
                logger.warning("Skipping unreadable audit document %s: %s", uri, exc)

        result.events.sort(key=lambda e: e.created_at, reverse=True)
        return result
