"""Shared types, enums, and base models used across podcatalog domain models."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, Field
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_entity_id(prefix: str) -> str:
    """Generate an entity id: ``<prefix>-<uuid7 hex>``.

    UUID v7 packs a millisecond timestamp followed by random bits, so ids
    sort by creation time within a tenant and never collide in practice.
    """
    return f"{prefix}-{uuid7().hex}"


def new_fragment_id(prefix: str) -> str:
    """Generate a document-local fragment id for a sub-record."""
    return f"{prefix}-{uuid7().hex[-12:]}"


# --- Reusable annotated types ---

WebId = Annotated[str, Field(min_length=1, description="Opaque, stable caller identity.")]
UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]


# --- Shared enums ---


class EntityKind(StrEnum):
    """Catalog entity kinds; each maps to its own container and id prefix."""

    DATA_SPACE = "dataspace"
    ASSET = "asset"

    @property
    def id_prefix(self) -> str:
        return _ID_PREFIXES[self]


_ID_PREFIXES: dict[EntityKind, str] = {
    EntityKind.DATA_SPACE: "ds",
    EntityKind.ASSET: "asset",
}


class Role(StrEnum):
    """Member roles, lowest to highest privilege: read < write < admin."""

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]


_ROLE_RANK: dict[Role, int] = {
    Role.READ: 1,
    Role.WRITE: 2,
    Role.ADMIN: 3,
}


class AccessMode(StrEnum):
    """DataSpace visibility declared by its creator."""

    PUBLIC = "public"
    PRIVATE = "private"
    RESTRICTED = "restricted"


class AuditAction(StrEnum):
    """Actions recorded in the shared audit trail."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    PERMISSION_CHANGE = "PermissionChange"


# --- Base model ---


class CatalogBase(BaseModel):
    """Base model with common configuration for all podcatalog Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "ser_json_timedelta": "iso8601",
        "protected_namespaces": (),
    }
