"""Attachment index codec.

A DataSpace's attachment index is a single document holding one
``DataEntry`` thing per uploaded file. Free-form ``extra`` fields travel as a
JSON string on ``ds:hasMetadata``.
"""

import json
import logging

from pydantic import ValidationError

from podcatalog.codec.terms import FieldSpec, FieldType, read_fields, write_fields
from podcatalog.codec.vocab import DCTERMS, DS, RDF_TYPE
from podcatalog.errors import ParseError
from podcatalog.models.attachment import Attachment
from podcatalog.models.document import Document, Term, Thing

logger = logging.getLogger(__name__)

_ATTACHMENT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("title", DCTERMS.title),
    FieldSpec("description", DCTERMS.description),
    FieldSpec("file_name", DS.fileName),
    FieldSpec("file_size", DS.fileSize, FieldType.INTEGER),
    FieldSpec("mime_type", DS.mimeType),
    FieldSpec("file_uri", DS.filePath),
    FieldSpec("data_space_id", DS.dataSpaceId),
    FieldSpec("uploaded_by", DS.uploadedBy),
    FieldSpec("uploaded_at", DCTERMS.created, FieldType.DATETIME),
    FieldSpec("category", DS.category),
    FieldSpec("tags", DS.tags, FieldType.STRINGS),
)


def encode_attachment(attachment: Attachment, index_uri: str) -> Thing:
    thing = Thing(iri=f"{index_uri}#{attachment.id}")
    thing.set(RDF_TYPE, [Term.iri(DS.DataEntry)])
    write_fields(thing, attachment.model_dump(), _ATTACHMENT_FIELDS)
    if attachment.extra:
        thing.set(DS.hasMetadata, [Term.literal(json.dumps(attachment.extra, sort_keys=True))])
    return thing


def decode_attachment(thing: Thing) -> Attachment:
    """Rebuild one index entry.

    Raises:
        ParseError: If required fields are missing or invalid.
    """
    values = read_fields(thing, _ATTACHMENT_FIELDS)
    raw_extra = thing.first(DS.hasMetadata)
    extra: dict[str, str] = {}
    if raw_extra is not None:
        try:
            parsed = json.loads(raw_extra.value)
            extra = {str(k): str(v) for k, v in parsed.items()}
        except (ValueError, AttributeError):
            logger.warning("Ignoring unparsable extra metadata on %s", thing.iri)
    try:
        return Attachment(id=thing.fragment, extra=extra, **values)
    except ValidationError as exc:
        msg = f"Invalid attachment entry {thing.iri}: {exc}"
        raise ParseError(msg) from exc


def decode_index(doc: Document) -> list[Attachment]:
    """All well-formed entries of an index document; malformed ones are skipped."""
    attachments: list[Attachment] = []
    for thing in doc.things_of_type(DS.DataEntry):
        try:
            attachments.append(decode_attachment(thing))
        except ParseError:
            logger.warning("Skipping malformed attachment entry %s", thing.iri)
    return attachments
