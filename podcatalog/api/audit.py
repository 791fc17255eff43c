"""FastAPI audit trail endpoint.

GET /v1/audit/events - events in the shared audit container, newest first
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from podcatalog.api.dependencies import get_audit_bus
from podcatalog.models.audit import AuditEvent
from podcatalog.observability.events import AuditEventBus

router = APIRouter(prefix="/v1/audit", tags=["audit"])


class AuditEventResponse(BaseModel):
    actor: str
    action: str
    object: str
    target: str
    created_at: str
    uri: str | None = None

    @classmethod
    def from_event(cls, event: AuditEvent) -> "AuditEventResponse":
        return cls(
            actor=event.actor,
            action=event.action.value,
            object=event.object,
            target=event.target,
            created_at=event.created_at.isoformat(),
            uri=event.uri,
        )


class AuditEventsResponse(BaseModel):
    events: list[AuditEventResponse]
    total: int
    skipped: int


@router.get("/events", response_model=AuditEventsResponse)
async def list_audit_events(
    limit: int | None = Query(default=None, ge=1),
    bus: AuditEventBus = Depends(get_audit_bus),
) -> AuditEventsResponse:
    """Read the audit container after draining events still in flight."""
    await bus.flush()
    result = await bus.log.read_all()
    events = result.events[:limit] if limit else result.events
    return AuditEventsResponse(
        events=[AuditEventResponse.from_event(e) for e in events],
        total=len(result.events),
        skipped=result.skipped,
    )
