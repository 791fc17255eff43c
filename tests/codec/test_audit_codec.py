"""Tests for the audit event codec and canonical audit filenames."""

from datetime import datetime, timedelta, timezone

import pytest

from podcatalog.codec.audit import AuditEventCodec, audit_filename
from podcatalog.codec.vocab import AS, DCTERMS, RDF_TYPE
from podcatalog.errors import ParseError
from podcatalog.models.audit import AuditEvent
from podcatalog.models.common import AuditAction
from podcatalog.models.document import Document, Term, Thing

URI = "http://localhost:3000/org/audit/ldes/2026-10-19T08-15-02.123456Z.jsonld"
T0 = datetime(2026, 10, 19, 8, 15, 2, 123456, tzinfo=timezone.utc)


def _event(action: AuditAction = AuditAction.CREATE) -> AuditEvent:
    return AuditEvent(
        actor="https://alice.example/profile/card#me",
        action=action,
        object="https://alice.example/dataspaces/ds-1.jsonld#ds-1",
        target="https://alice.example/dataspaces/",
        created_at=T0,
    )


class TestAuditFilename:
    def test_colons_replaced(self) -> None:
        assert audit_filename(T0, ".jsonld") == "2026-10-19T08-15-02.123456Z.jsonld"

    def test_converted_to_utc(self) -> None:
        local = T0.astimezone(timezone(timedelta(hours=2)))
        assert audit_filename(local, ".ttl") == "2026-10-19T08-15-02.123456Z.ttl"

    def test_lexical_order_is_chronological(self) -> None:
        names = [audit_filename(T0 + timedelta(microseconds=d), ".jsonld") for d in (0, 5, 1_000_000)]
        assert names == sorted(names)


class TestAuditEventCodec:
    @pytest.mark.parametrize("action", list(AuditAction))
    def test_round_trip(self, action: AuditAction) -> None:
        codec = AuditEventCodec()
        decoded = codec.decode(codec.encode(_event(action), URI))
        assert decoded.model_dump() == _event(action).model_dump()
        assert decoded.uri == URI

    def test_permission_change_written_as_announce(self) -> None:
        doc = AuditEventCodec().encode(_event(AuditAction.PERMISSION_CHANGE), URI)
        assert doc.get_thing(URI).first(RDF_TYPE) == Term.iri(AS.PermissionChange)

    def test_object_and_target_are_iris(self) -> None:
        thing = AuditEventCodec().encode(_event(), URI).get_thing(URI)
        assert thing.first(AS.object).is_iri
        assert thing.first(AS.target).is_iri

    def test_empty_document_raises(self) -> None:
        with pytest.raises(ParseError):
            AuditEventCodec().decode(Document(uri=URI))

    def test_missing_actor_raises(self) -> None:
        doc = AuditEventCodec().encode(_event(), URI)
        doc.get_thing(URI).set(AS.actor, [])
        with pytest.raises(ParseError, match="actor"):
            AuditEventCodec().decode(doc)

    def test_unknown_activity_type_raises(self) -> None:
        thing = Thing(iri=URI)
        thing.set(RDF_TYPE, [Term.iri("https://www.w3.org/ns/activitystreams#Like")])
        thing.set(DCTERMS.created, [Term.literal(T0.isoformat())])
        with pytest.raises(ParseError):
            AuditEventCodec().decode(Document(uri=URI, things=[thing]))

    def test_activity_found_when_subject_differs(self) -> None:
        doc = AuditEventCodec().encode(_event(), URI)
        doc.uri = URI.replace(".jsonld", "-copy.jsonld")
        assert AuditEventCodec().decode(doc).action == AuditAction.CREATE
