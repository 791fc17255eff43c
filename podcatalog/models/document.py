"""Semantic graph document: the atomic unit of storage.

A Document is a flat list of Things (subjects). Each Thing maps predicate
IRIs to an ordered list of Terms, where a Term is either an IRI reference or
a typed literal. The wire form is expanded JSON-LD::

    {"@id": "<doc uri>",
     "@graph": [{"@id": "<doc uri>#ds-1",
                 "http://purl.org/dc/terms/title": [{"@value": "Research",
                                                     "@type": "xsd:string"}]}]}

Things the local code does not understand are kept verbatim so a
read-modify-write never drops foreign data.
"""

from __future__ import annotations

import json

from pydantic import Field, ValidationError

from podcatalog.errors import ParseError
from podcatalog.models.common import CatalogBase

RDF_TYPE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"

XSD = "http://www.w3.org/2001/XMLSchema#"
XSD_STRING = f"{XSD}string"
XSD_BOOLEAN = f"{XSD}boolean"
XSD_DATETIME = f"{XSD}dateTime"
XSD_DECIMAL = f"{XSD}decimal"
XSD_INTEGER = f"{XSD}integer"

JSONLD_MEDIA_TYPE = "application/ld+json"


class Term(CatalogBase, frozen=True):
    """Object position of a triple: IRI reference or typed literal."""

    value: str
    datatype: str | None = Field(
        default=XSD_STRING,
        description="XSD datatype IRI for literals; None for IRI references.",
    )

    @property
    def is_iri(self) -> bool:
        return self.datatype is None

    @classmethod
    def iri(cls, value: str) -> Term:
        return cls(value=value, datatype=None)

    @classmethod
    def literal(cls, value: str, datatype: str = XSD_STRING) -> Term:
        return cls(value=value, datatype=datatype)


class Thing(CatalogBase):
    """A subject and its predicate -> terms map."""

    iri: str
    predicates: dict[str, list[Term]] = Field(default_factory=dict)

    @property
    def fragment(self) -> str:
        """Local fragment id (text after '#'), or '' for the document itself."""
        _, _, frag = self.iri.partition("#")
        return frag

    def values(self, predicate: str) -> list[Term]:
        return list(self.predicates.get(predicate, []))

    def first(self, predicate: str) -> Term | None:
        terms = self.predicates.get(predicate)
        return terms[0] if terms else None

    def set(self, predicate: str, terms: list[Term]) -> None:
        """Replace all values of ``predicate`` (removes it if ``terms`` is empty)."""
        if terms:
            self.predicates[predicate] = list(terms)
        else:
            self.predicates.pop(predicate, None)

    def has_type(self, type_iri: str) -> bool:
        return any(t.value == type_iri for t in self.predicates.get(RDF_TYPE, []))


class Document(CatalogBase):
    """A semantic graph document: one entity header plus its co-located sub-records."""

    uri: str = ""
    things: list[Thing] = Field(default_factory=list)

    # ----- Thing access -----

    def get_thing(self, iri: str) -> Thing | None:
        for thing in self.things:
            if thing.iri == iri:
                return thing
        return None

    def set_thing(self, thing: Thing) -> None:
        """Insert or replace a thing, keeping its original position."""
        for i, existing in enumerate(self.things):
            if existing.iri == thing.iri:
                self.things[i] = thing
                return
        self.things.append(thing)

    def remove_thing(self, iri: str) -> bool:
        before = len(self.things)
        self.things = [t for t in self.things if t.iri != iri]
        return len(self.things) != before

    def things_of_type(self, type_iri: str) -> list[Thing]:
        return [t for t in self.things if t.has_type(type_iri)]

    # ----- Wire format -----

    def to_jsonld(self) -> dict:
        graph: list[dict] = []
        for thing in self.things:
            node: dict = {"@id": thing.iri}
            for predicate, terms in thing.predicates.items():
                node[predicate] = [
                    {"@id": t.value} if t.is_iri else {"@value": t.value, "@type": t.datatype}
                    for t in terms
                ]
            graph.append(node)
        return {"@id": self.uri, "@graph": graph}

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_jsonld(), ensure_ascii=False, indent=2).encode("utf-8")

    @classmethod
    def from_jsonld(cls, payload: dict, uri: str = "") -> Document:
        """Build a Document from expanded JSON-LD.

        Raises:
            ParseError: If the payload is not a JSON-LD graph of nodes.
        """
        if not isinstance(payload, dict):
            msg = "JSON-LD document must be an object."
            raise ParseError(msg, uri=uri)
        nodes = payload.get("@graph", [])
        if not isinstance(nodes, list):
            msg = "'@graph' must be a list of nodes."
            raise ParseError(msg, uri=uri)

        things: list[Thing] = []
        for node in nodes:
            if not isinstance(node, dict) or not isinstance(node.get("@id"), str):
                msg = "Every graph node must be an object with a string '@id'."
                raise ParseError(msg, uri=uri)
            predicates: dict[str, list[Term]] = {}
            for key, raw_terms in node.items():
                if key == "@id":
                    continue
                if not isinstance(raw_terms, list):
                    raw_terms = [raw_terms]
                predicates[key] = [_parse_term(raw, uri) for raw in raw_terms]
            things.append(Thing(iri=node["@id"], predicates=predicates))

        doc_id = payload.get("@id")
        if doc_id is not None and not isinstance(doc_id, str):
            msg = "Document '@id' must be a string."
            raise ParseError(msg, uri=uri)
        try:
            return cls(uri=doc_id or uri, things=things)
        except ValidationError as exc:
            msg = f"Invalid document: {exc}"
            raise ParseError(msg, uri=uri) from exc

    @classmethod
    def from_bytes(cls, content: bytes, uri: str = "") -> Document:
        """Parse serialized JSON-LD bytes.

        Raises:
            ParseError: On invalid JSON or an invalid graph shape.
        """
        try:
            payload = json.loads(content)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            msg = f"Document is not valid JSON: {exc}"
            raise ParseError(msg, uri=uri) from exc
        return cls.from_jsonld(payload, uri=uri)


def _parse_term(raw: object, uri: str) -> Term:
    if isinstance(raw, dict) and isinstance(raw.get("@id"), str):
        return Term.iri(raw["@id"])
    if isinstance(raw, dict) and "@value" in raw:
        value = raw["@value"]
        datatype = raw.get("@type") or XSD_STRING
        if isinstance(value, bool):
            value = "true" if value else "false"
            datatype = raw.get("@type") or XSD_BOOLEAN
        try:
            return Term.literal(str(value), datatype)
        except ValidationError as exc:
            msg = f"Invalid literal: {exc}"
            raise ParseError(msg, uri=uri) from exc
    if isinstance(raw, str):
        return Term.literal(raw)
    msg = f"Unsupported JSON-LD term: {raw!r}"
    raise ParseError(msg, uri=uri)
