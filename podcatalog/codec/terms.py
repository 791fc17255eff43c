"""Typed literal helpers and table-driven field mapping shared by the codecs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum

from podcatalog.errors import ParseError
from podcatalog.models.document import (
    XSD_BOOLEAN,
    XSD_DATETIME,
    XSD_INTEGER,
    Term,
    Thing,
)

logger = logging.getLogger(__name__)


class FieldType(StrEnum):
    STRING = "string"
    STRINGS = "strings"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    INTEGER = "integer"


@dataclass(frozen=True)
class FieldSpec:
    """Maps one model attribute to one predicate."""

    attr: str
    predicate: str
    type: FieldType = FieldType.STRING


# ---------------------------------------------------------------------------
# Literal <-> Python value
# ---------------------------------------------------------------------------


def datetime_term(value: datetime) -> Term:
    return Term.literal(value.isoformat(), XSD_DATETIME)


def boolean_term(value: bool) -> Term:
    return Term.literal("true" if value else "false", XSD_BOOLEAN)


def parse_datetime(lexical: str) -> datetime:
    """Parse an xsd:dateTime literal. Values without an offset are taken as UTC."""
    try:
        value = datetime.fromisoformat(lexical.replace("Z", "+00:00"))
    except ValueError as exc:
        msg = f"Invalid xsd:dateTime literal: {lexical!r}"
        raise ParseError(msg) from exc
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def parse_boolean(lexical: str) -> bool | None:
    lowered = lexical.strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    return None


def first_string(thing: Thing, predicate: str) -> str | None:
    term = thing.first(predicate)
    return term.value if term is not None else None


def first_datetime(thing: Thing, predicate: str) -> datetime | None:
    term = thing.first(predicate)
    return parse_datetime(term.value) if term is not None else None


def first_boolean(thing: Thing, predicate: str) -> bool | None:
    term = thing.first(predicate)
    return parse_boolean(term.value) if term is not None else None


# ---------------------------------------------------------------------------
# Table-driven read / write
# ---------------------------------------------------------------------------


def write_fields(thing: Thing, values: dict[str, object], fields: tuple[FieldSpec, ...]) -> None:
    """Replace every predicate in ``fields`` with the given values.

    ``None`` and empty lists remove the predicate; predicates outside
    ``fields`` are left untouched.
    """
    for spec in fields:
        value = values.get(spec.attr)
        if value is None:
            thing.set(spec.predicate, [])
        elif spec.type == FieldType.STRINGS:
            thing.set(spec.predicate, [Term.literal(v) for v in value])  # type: ignore[union-attr]
        elif spec.type == FieldType.DATETIME:
            thing.set(spec.predicate, [datetime_term(value)])  # type: ignore[arg-type]
        elif spec.type == FieldType.BOOLEAN:
            thing.set(spec.predicate, [boolean_term(bool(value))])
        elif spec.type == FieldType.INTEGER:
            thing.set(spec.predicate, [Term.literal(str(int(value)), XSD_INTEGER)])  # type: ignore[call-overload]
        else:
            thing.set(spec.predicate, [Term.literal(str(value))])


def read_fields(thing: Thing, fields: tuple[FieldSpec, ...]) -> dict[str, object]:
    """Read the predicates in ``fields``; absent predicates are omitted."""
    result: dict[str, object] = {}
    for spec in fields:
        terms = thing.values(spec.predicate)
        if not terms:
            continue
        if spec.type == FieldType.STRINGS:
            result[spec.attr] = [t.value for t in terms]
        elif spec.type == FieldType.DATETIME:
            result[spec.attr] = parse_datetime(terms[0].value)
        elif spec.type == FieldType.BOOLEAN:
            parsed = parse_boolean(terms[0].value)
            if parsed is not None:
                result[spec.attr] = parsed
        elif spec.type == FieldType.INTEGER:
            try:
                result[spec.attr] = int(float(terms[0].value))
            except ValueError:
                logger.warning("Ignoring non-numeric %s on %s", spec.predicate, thing.iri)
        else:
            result[spec.attr] = terms[0].value
    return result
