"""Tests for the triples document model and its JSON-LD wire form."""

import json

import pytest

from podcatalog.errors import ParseError
from podcatalog.models.document import (
    RDF_TYPE,
    XSD_BOOLEAN,
    XSD_STRING,
    Document,
    Term,
    Thing,
)

DOC = "https://alice.example/dataspaces/ds-1.jsonld"
TYPE_A = "https://example.org/vocab#A"
TITLE = "http://purl.org/dc/terms/title"


def _doc() -> Document:
    thing = Thing(iri=f"{DOC}#one")
    thing.set(RDF_TYPE, [Term.iri(TYPE_A)])
    thing.set(TITLE, [Term.literal("Hello")])
    return Document(uri=DOC, things=[thing])


class TestThing:
    def test_fragment(self) -> None:
        assert Thing(iri=f"{DOC}#member-abc").fragment == "member-abc"

    def test_set_empty_removes_predicate(self) -> None:
        thing = Thing(iri=f"{DOC}#x")
        thing.set(TITLE, [Term.literal("a")])
        thing.set(TITLE, [])
        assert TITLE not in thing.predicates
        assert thing.first(TITLE) is None

    def test_has_type(self) -> None:
        assert _doc().things[0].has_type(TYPE_A)


class TestDocument:
    def test_set_thing_replaces_in_place(self) -> None:
        doc = _doc()
        doc.set_thing(Thing(iri=f"{DOC}#two"))
        replacement = Thing(iri=f"{DOC}#one")
        replacement.set(TITLE, [Term.literal("Changed")])
        doc.set_thing(replacement)
        assert [t.iri for t in doc.things] == [f"{DOC}#one", f"{DOC}#two"]
        assert doc.things[0].first(TITLE).value == "Changed"

    def test_remove_thing(self) -> None:
        doc = _doc()
        assert doc.remove_thing(f"{DOC}#one") is True
        assert doc.remove_thing(f"{DOC}#one") is False

    def test_things_of_type(self) -> None:
        doc = _doc()
        doc.set_thing(Thing(iri=f"{DOC}#untyped"))
        assert [t.iri for t in doc.things_of_type(TYPE_A)] == [f"{DOC}#one"]

    def test_bytes_round_trip(self) -> None:
        doc = _doc()
        assert Document.from_bytes(doc.to_bytes(), uri=DOC) == doc

    def test_jsonld_shape(self) -> None:
        payload = _doc().to_jsonld()
        assert payload["@id"] == DOC
        node = payload["@graph"][0]
        assert node[RDF_TYPE] == [{"@id": TYPE_A}]
        assert node[TITLE] == [{"@value": "Hello", "@type": XSD_STRING}]


class TestParsing:
    def test_invalid_json_raises(self) -> None:
        with pytest.raises(ParseError):
            Document.from_bytes(b"{not json", uri=DOC)

    def test_graph_must_be_list(self) -> None:
        with pytest.raises(ParseError):
            Document.from_bytes(json.dumps({"@graph": {}}).encode(), uri=DOC)

    def test_node_without_id_raises(self) -> None:
        payload = {"@graph": [{TITLE: [{"@value": "x"}]}]}
        with pytest.raises(ParseError):
            Document.from_jsonld(payload, uri=DOC)

    def test_plain_values_are_accepted(self) -> None:
        payload = {"@graph": [{"@id": f"{DOC}#a", TITLE: "plain", "urn:flag": {"@value": True}}]}
        doc = Document.from_jsonld(payload, uri=DOC)
        thing = doc.get_thing(f"{DOC}#a")
        assert thing.first(TITLE) == Term.literal("plain")
        assert thing.first("urn:flag") == Term.literal("true", XSD_BOOLEAN)

    def test_missing_document_id_falls_back_to_uri(self) -> None:
        doc = Document.from_jsonld({"@graph": []}, uri=DOC)
        assert doc.uri == DOC

    def test_non_string_document_id_raises(self) -> None:
        with pytest.raises(ParseError):
            Document.from_bytes(b'{"@id": 5, "@graph": []}', uri=DOC)
