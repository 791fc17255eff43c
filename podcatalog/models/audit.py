"""Audit event model: one immutable event per document in the shared audit container."""

from pydantic import Field

from podcatalog.models.common import AuditAction, CatalogBase, UTCTimestamp, utc_now


class AuditEvent(CatalogBase, frozen=True):
    """Who did what to which object, under which target, and when.

    ``object`` and ``target`` are IRIs: for entity lifecycle actions the
    object is the entity and the target its container; for permission
    changes the object is the affected member identity and the target the
    entity.
    """

    actor: str = Field(..., min_length=1)
    action: AuditAction
    object: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    uri: str | None = Field(
        default=None,
        description="Document URI the event was read from (None until written).",
        exclude=True,
    )
