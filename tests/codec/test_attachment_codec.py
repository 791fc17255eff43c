"""Tests for attachment index entry encoding."""

from datetime import datetime, timezone

from podcatalog.codec.attachments import decode_attachment, decode_index, encode_attachment
from podcatalog.codec.vocab import DS, RDF_TYPE
from podcatalog.models.attachment import Attachment
from podcatalog.models.document import Document, Term, Thing

INDEX = "https://alice.example/dataspaces/ds-1/index.jsonld"


def _attachment(**overrides) -> Attachment:
    defaults = dict(
        id="data-1",
        data_space_id="ds-1",
        title="Grid load",
        description="Hourly load",
        file_name="load.csv",
        file_size=2048,
        mime_type="text/csv",
        file_uri="https://alice.example/dataspaces/ds-1/data/load.csv",
        uploaded_by="https://alice.example/profile/card#me",
        uploaded_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
        tags=["energy"],
        category="timeseries",
        extra={"source": "SCADA"},
    )
    defaults.update(overrides)
    return Attachment(**defaults)


class TestAttachmentCodec:
    def test_round_trip(self) -> None:
        attachment = _attachment()
        assert decode_attachment(encode_attachment(attachment, INDEX)) == attachment

    def test_entry_is_data_entry_fragment(self) -> None:
        thing = encode_attachment(_attachment(), INDEX)
        assert thing.iri == f"{INDEX}#data-1"
        assert thing.has_type(DS.DataEntry)

    def test_unparsable_extra_is_ignored(self) -> None:
        thing = encode_attachment(_attachment(), INDEX)
        thing.set(DS.hasMetadata, [Term.literal("{oops")])
        assert decode_attachment(thing).extra == {}

    def test_decode_index_skips_malformed_entries(self) -> None:
        good = encode_attachment(_attachment(), INDEX)
        bad = Thing(iri=f"{INDEX}#data-bad")
        bad.set(RDF_TYPE, [Term.iri(DS.DataEntry)])
        doc = Document(uri=INDEX, things=[good, bad])
        assert [a.id for a in decode_index(doc)] == ["data-1"]
