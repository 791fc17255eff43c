"""Document Codec for catalog entities.

One entity = one document. The header thing lives at ``<doc>#<entity id>``;
Members, Metadata and AssetMetadata are sibling things with their own
fragment ids. Decoding rebuilds every collection by scanning the document for
things of the matching ``rdf:type``; the header never lists its children.

Encoding into an existing document (``into=``) rewrites only the codec's own
predicates on the header and the codec's own sub-record types. Foreign things
and unknown header predicates survive the round trip.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import ValidationError

from podcatalog.codec.terms import (
    FieldSpec,
    FieldType,
    datetime_term,
    first_datetime,
    first_string,
    parse_boolean,
    parse_datetime,
    read_fields,
    write_fields,
)
from podcatalog.codec.vocab import DCTERMS, DS, RDF_TYPE
from podcatalog.errors import NotFoundError, ParseError
from podcatalog.models.catalog import (
    AccessMode,
    Asset,
    AssetMetadata,
    BooleanValue,
    DataSpace,
    DateValue,
    Member,
    MetadataEntry,
    MetadataValue,
    NumberValue,
    StringValue,
    UrlValue,
)
from podcatalog.models.common import Role, utc_now
from podcatalog.models.document import (
    XSD_BOOLEAN,
    XSD_DATETIME,
    XSD_DECIMAL,
    XSD_INTEGER,
    XSD_STRING,
    Document,
    Term,
    Thing,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", DataSpace, Asset)

_NUMERIC_DATATYPES = frozenset({
    XSD_DECIMAL,
    XSD_INTEGER,
    "http://www.w3.org/2001/XMLSchema#double",
    "http://www.w3.org/2001/XMLSchema#float",
})


# ---------------------------------------------------------------------------
# Metadata values
# ---------------------------------------------------------------------------


def encode_value(value: MetadataValue) -> Term:
    """Map a typed metadata value to a term."""
    if isinstance(value, StringValue):
        return Term.literal(value.value, XSD_STRING)
    if isinstance(value, NumberValue):
        return Term.literal(str(value.value), XSD_DECIMAL)
    if isinstance(value, BooleanValue):
        return Term.literal("true" if value.value else "false", XSD_BOOLEAN)
    if isinstance(value, DateValue):
        return datetime_term(value.value)
    if isinstance(value, UrlValue):
        return Term.iri(value.value)
    msg = f"Unhandled metadata value kind: {type(value).__name__}"
    raise TypeError(msg)


def decode_value(term: Term) -> MetadataValue:
    """Map a term back to a typed metadata value.

    Literals with an unknown datatype are read as strings.
    """
    if term.is_iri:
        return UrlValue(value=term.value)
    if term.datatype in _NUMERIC_DATATYPES:
        try:
            return NumberValue(value=float(term.value))
        except ValueError as exc:
            msg = f"Invalid numeric literal: {term.value!r}"
            raise ParseError(msg) from exc
    if term.datatype == XSD_BOOLEAN:
        parsed = parse_boolean(term.value)
        if parsed is None:
            msg = f"Invalid boolean literal: {term.value!r}"
            raise ParseError(msg)
        return BooleanValue(value=parsed)
    if term.datatype == XSD_DATETIME:
        return DateValue(value=parse_datetime(term.value))
    return StringValue(value=term.value)


# ---------------------------------------------------------------------------
# Field tables
# ---------------------------------------------------------------------------

_DATA_SPACE_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("title", DCTERMS.title),
    FieldSpec("description", DCTERMS.description),
    FieldSpec("purpose", DS.purpose),
    FieldSpec("access_mode", DS.accessMode),
    FieldSpec("storage_location", DS.storageLocation),
    FieldSpec("created_at", DCTERMS.created, FieldType.DATETIME),
    FieldSpec("active", DS.isActive, FieldType.BOOLEAN),
    FieldSpec("creator", DCTERMS.creator),
    FieldSpec("tags", DCTERMS.subject, FieldType.STRINGS),
    FieldSpec("category", DS.category),
)

_ASSET_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("title", DCTERMS.title),
    FieldSpec("description", DCTERMS.description),
    FieldSpec("data_space_id", DS.belongsToDataSpace),
    FieldSpec("created_at", DCTERMS.created, FieldType.DATETIME),
    FieldSpec("active", DS.isActive, FieldType.BOOLEAN),
    FieldSpec("creator", DCTERMS.creator),
    FieldSpec("tags", DCTERMS.subject, FieldType.STRINGS),
    FieldSpec("category", DS.category),
)

_MEMBER_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("web_id", DS.memberWebId),
    FieldSpec("role", DS.memberRole),
    FieldSpec("joined_at", DS.joinedAt, FieldType.DATETIME),
)

_ASSET_METADATA_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("title", DS.metadataTitle),
    FieldSpec("asset_created", DS.assetCreated, FieldType.DATETIME),
    FieldSpec("asset_last_modified", DS.assetLastModified, FieldType.DATETIME),
    FieldSpec("description", DCTERMS.description),
    FieldSpec("original_title", DS.originalTitle),
    FieldSpec("open_data_source_link", DS.openDataSourceLink),
    FieldSpec("data_format", DS.dataFormat),
    FieldSpec("categories", DS.category, FieldType.STRINGS),
    FieldSpec("chargeable", DS.chargeable, FieldType.BOOLEAN),
    FieldSpec("use_setting", DS.useSetting),
    FieldSpec("datasource_language", DS.datasourceLanguage),
    FieldSpec("metadata_language", DS.metadataLanguage),
    FieldSpec("temporal_coverage_beginning", DS.temporalCoverageBeginning, FieldType.DATETIME),
    FieldSpec("temporal_coverage_ending", DS.temporalCoverageEnding, FieldType.DATETIME),
    FieldSpec("linked_metadata", DS.linkedMetadata),
    FieldSpec("update_frequency", DS.updateFrequency),
    FieldSpec("geographic_coverage", DS.geographicCoverage),
    FieldSpec("geographic_expansion", DS.geographicExpansion),
    FieldSpec("resource_size", DS.resourceSize),
    FieldSpec("resource_encoding", DS.resourceEncoding),
    FieldSpec("datasource_link", DS.datasourceLink),
    FieldSpec("created_at", DCTERMS.created, FieldType.DATETIME),
    FieldSpec("created_by", DS.createdBy),
)


# ---------------------------------------------------------------------------
# Codecs
# ---------------------------------------------------------------------------


class EntityCodec(ABC, Generic[E]):
    """Encode/decode one entity kind to and from its document."""

    header_type: str
    member_type: str
    header_fields: tuple[FieldSpec, ...]

    # ----- Public API -----

    def encode(self, entity: E, uri: str, into: Document | None = None) -> Document:
        """Serialize ``entity`` as the document at ``uri``.

        With ``into``, the given document is copied and updated in place of
        building a fresh one, so foreign content is preserved.
        """
        doc = into.model_copy(deep=True) if into is not None else Document(uri=uri)
        doc.uri = uri

        header_iri = f"{uri}#{entity.id}"
        header = doc.get_thing(header_iri) or self._find_header(doc, header_iri)
        if header is None:
            header = Thing(iri=header_iri)
        header.set(RDF_TYPE, [Term.iri(self.header_type)])
        write_fields(header, self._header_values(entity), self.header_fields)
        doc.set_thing(header)

        for sub_type in self._sub_record_types():
            for stale in doc.things_of_type(sub_type):
                doc.remove_thing(stale.iri)

        for member in entity.members:
            doc.set_thing(self._encode_member(member, uri))
        for entry in entity.metadata:
            doc.set_thing(self._encode_metadata(entry, uri))
        for thing in self._encode_extra_sub_records(entity, uri):
            doc.set_thing(thing)
        return doc

    def decode(self, doc: Document, entity_id: str) -> E:
        """Rebuild the entity ``entity_id`` from ``doc``.

        Raises:
            NotFoundError: If the document holds no header of this kind.
            ParseError: If the header cannot be turned into a valid entity.
        """
        header_iri = f"{doc.uri}#{entity_id}"
        header = self._find_header(doc, header_iri)
        if header is None:
            msg = f"{self.header_type.rsplit('#', 1)[-1]} {entity_id} not found in document."
            raise NotFoundError(msg, uri=doc.uri)

        values = read_fields(header, self.header_fields)
        values["id"] = entity_id
        created_at = values.get("created_at") or utc_now()
        values["created_at"] = created_at
        values["members"] = [
            m for m in (
                self._decode_member(t, entity_id, created_at)  # type: ignore[arg-type]
                for t in doc.things_of_type(self.member_type)
            ) if m is not None
        ]
        values["metadata"] = [
            m for m in (self._decode_metadata(t) for t in doc.things_of_type(DS.Metadata))
            if m is not None
        ]
        values.update(self._decode_extra_sub_records(doc))
        self._apply_header_defaults(values)
        try:
            return self._build(values)
        except ValidationError as exc:
            msg = f"Invalid entity header for {entity_id}: {exc}"
            raise ParseError(msg, uri=doc.uri) from exc

    # ----- Hooks -----

    @abstractmethod
    def _build(self, values: dict[str, object]) -> E: ...

    def _sub_record_types(self) -> tuple[str, ...]:
        return (self.member_type, DS.Metadata)

    def _header_values(self, entity: E) -> dict[str, object]:
        return entity.model_dump(include={s.attr for s in self.header_fields})

    def _encode_extra_sub_records(self, entity: E, uri: str) -> list[Thing]:
        return []

    def _decode_extra_sub_records(self, doc: Document) -> dict[str, object]:
        return {}

    def _apply_header_defaults(self, values: dict[str, object]) -> None:
        return None

    # ----- Helpers -----

    def _find_header(self, doc: Document, header_iri: str) -> Thing | None:
        thing = doc.get_thing(header_iri)
        if thing is not None and thing.has_type(self.header_type):
            return thing
        candidates = doc.things_of_type(self.header_type)
        return candidates[0] if candidates else None

    def _encode_member(self, member: Member, uri: str) -> Thing:
        thing = Thing(iri=f"{uri}#{member.id}")
        thing.set(RDF_TYPE, [Term.iri(self.member_type)])
        write_fields(thing, member.model_dump(), _MEMBER_FIELDS)
        return thing

    def _decode_member(self, thing: Thing, entity_id: str, fallback_joined: object) -> Member | None:
        values = read_fields(thing, _MEMBER_FIELDS)
        if values.get("role") not in {r.value for r in Role}:
            values["role"] = Role.READ
        values.setdefault("joined_at", fallback_joined)
        try:
            return Member(id=thing.fragment, entity_id=entity_id, **values)
        except ValidationError:
            logger.warning("Skipping malformed member record %s", thing.iri)
            return None

    def _encode_metadata(self, entry: MetadataEntry, uri: str) -> Thing:
        thing = Thing(iri=f"{uri}#{entry.id}")
        thing.set(RDF_TYPE, [Term.iri(DS.Metadata)])
        thing.set(DS.metadataKey, [Term.literal(entry.key)])
        thing.set(DS.metadataValue, [encode_value(entry.value)])
        thing.set(DS.createdBy, [Term.literal(entry.created_by)])
        thing.set(DCTERMS.created, [datetime_term(entry.created_at)])
        return thing

    def _decode_metadata(self, thing: Thing) -> MetadataEntry | None:
        key = first_string(thing, DS.metadataKey)
        value_term = thing.first(DS.metadataValue)
        if not key or value_term is None:
            logger.warning("Skipping metadata record without key/value %s", thing.iri)
            return None
        try:
            return MetadataEntry(
                id=thing.fragment,
                key=key,
                value=decode_value(value_term),
                created_by=first_string(thing, DS.createdBy) or "",
                created_at=first_datetime(thing, DCTERMS.created) or utc_now(),
            )
        except (ParseError, ValidationError):
            logger.warning("Skipping malformed metadata record %s", thing.iri)
            return None


class DataSpaceCodec(EntityCodec[DataSpace]):
    header_type = DS.DataSpace
    member_type = DS.Member
    header_fields = _DATA_SPACE_FIELDS

    def _build(self, values: dict[str, object]) -> DataSpace:
        return DataSpace.model_validate(values)

    def _apply_header_defaults(self, values: dict[str, object]) -> None:
        values.setdefault("title", "")
        if values.get("access_mode") not in {m.value for m in AccessMode}:
            values["access_mode"] = AccessMode.PRIVATE


class AssetCodec(EntityCodec[Asset]):
    header_type = DS.Asset
    member_type = DS.AssetMember
    header_fields = _ASSET_FIELDS

    def _build(self, values: dict[str, object]) -> Asset:
        return Asset.model_validate(values)

    def _apply_header_defaults(self, values: dict[str, object]) -> None:
        values.setdefault("title", "")
        values.setdefault("data_space_id", "")

    def _sub_record_types(self) -> tuple[str, ...]:
        return (self.member_type, DS.Metadata, DS.AssetMetadata)

    def _encode_extra_sub_records(self, entity: Asset, uri: str) -> list[Thing]:
        things: list[Thing] = []
        for record in entity.asset_metadata:
            thing = Thing(iri=f"{uri}#{record.id}")
            thing.set(RDF_TYPE, [Term.iri(DS.AssetMetadata)])
            write_fields(thing, record.model_dump(), _ASSET_METADATA_FIELDS)
            things.append(thing)
        return things

    def _decode_extra_sub_records(self, doc: Document) -> dict[str, object]:
        records: list[AssetMetadata] = []
        for thing in doc.things_of_type(DS.AssetMetadata):
            try:
                values = read_fields(thing, _ASSET_METADATA_FIELDS)
                values.setdefault("created_at", utc_now())
                records.append(AssetMetadata(id=thing.fragment, **values))
            except (ParseError, ValidationError):
                logger.warning("Skipping malformed asset metadata record %s", thing.iri)
        return {"asset_metadata": records}


def codec_for(entity: DataSpace | Asset) -> EntityCodec:
    return AssetCodec() if isinstance(entity, Asset) else DataSpaceCodec()
