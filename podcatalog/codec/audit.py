"""Audit event codec: ActivityStreams activity, one per document.

The activity is the document itself (subject IRI == document URI) with
``rdf:type`` as:Create / as:Update / as:Delete / as:Announce, plus
``as:actor``, ``as:object``, ``as:target`` and ``dct:created``.
"""

from datetime import datetime, timezone

from pydantic import ValidationError

from podcatalog.codec.terms import datetime_term, first_datetime
from podcatalog.codec.vocab import AS, DCTERMS, RDF_TYPE
from podcatalog.errors import ParseError
from podcatalog.models.audit import AuditEvent
from podcatalog.models.common import AuditAction
from podcatalog.models.document import Document, Term, Thing

_ACTION_TYPES: dict[AuditAction, str] = {
    AuditAction.CREATE: AS.Create,
    AuditAction.UPDATE: AS.Update,
    AuditAction.DELETE: AS.Delete,
    AuditAction.PERMISSION_CHANGE: AS.PermissionChange,
}
_TYPE_ACTIONS: dict[str, AuditAction] = {v: k for k, v in _ACTION_TYPES.items()}


def audit_filename(created_at: datetime, extension: str) -> str:
    """Canonical, filesystem-safe, lexically sortable name for an event document.

    ``2026-10-19T08:15:02.123456Z`` becomes ``2026-10-19T08-15-02.123456Z<ext>``.
    """
    stamp = created_at.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return f"{stamp.replace(':', '-')}{extension}"


class AuditEventCodec:
    """Encode/decode AuditEvent <-> Document."""

    def encode(self, event: AuditEvent, uri: str) -> Document:
        thing = Thing(iri=uri)
        thing.set(RDF_TYPE, [Term.iri(_ACTION_TYPES[event.action])])
        thing.set(AS.actor, [Term.iri(event.actor)])
        thing.set(AS.object, [Term.iri(event.object)])
        thing.set(AS.target, [Term.iri(event.target)])
        thing.set(DCTERMS.created, [datetime_term(event.created_at)])
        return Document(uri=uri, things=[thing])

    def decode(self, doc: Document) -> AuditEvent:
        """Rebuild the event stored in ``doc``.

        Raises:
            ParseError: If the activity is missing or lacks a required field.
        """
        thing = doc.get_thing(doc.uri) or self._find_activity(doc)
        if thing is None:
            msg = "Document holds no activity."
            raise ParseError(msg, uri=doc.uri)

        action = next(
            (_TYPE_ACTIONS[t.value] for t in thing.values(RDF_TYPE) if t.value in _TYPE_ACTIONS),
            None,
        )
        actor = thing.first(AS.actor)
        obj = thing.first(AS.object)
        target = thing.first(AS.target)
        try:
            created_at = first_datetime(thing, DCTERMS.created)
        except ParseError as exc:
            raise ParseError(str(exc), uri=doc.uri) from exc

        missing = [
            name for name, value in (
                ("action", action), ("actor", actor), ("object", obj),
                ("target", target), ("created", created_at),
            ) if value is None
        ]
        if missing:
            msg = f"Activity is missing required fields: {', '.join(missing)}"
            raise ParseError(msg, uri=doc.uri)

        try:
            return AuditEvent(
                actor=actor.value,  # type: ignore[union-attr]
                action=action,  # type: ignore[arg-type]
                object=obj.value,  # type: ignore[union-attr]
                target=target.value,  # type: ignore[union-attr]
                created_at=created_at,  # type: ignore[arg-type]
                uri=doc.uri,
            )
        except ValidationError as exc:
            msg = f"Invalid activity: {exc}"
            raise ParseError(msg, uri=doc.uri) from exc

    @staticmethod
    def _find_activity(doc: Document) -> Thing | None:
        for thing in doc.things:
            if any(t.value in _TYPE_ACTIONS for t in thing.values(RDF_TYPE)):
                return thing
        return None
