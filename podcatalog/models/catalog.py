"""Catalog models: DataSpace, Asset, and their co-stored sub-records.

A DataSpace or Asset is one logical entity stored as one document: the
entity header plus all of its Members and Metadata as sub-records inside the
same document. Sub-records carry their own fragment id, creator, and
creation timestamp.
"""

from datetime import datetime
from typing import Annotated, ClassVar, Literal, Union

from pydantic import Field, field_validator

from podcatalog.models.common import (
    AccessMode,
    CatalogBase,
    EntityKind,
    Role,
    UTCTimestamp,
    WebId,
    new_fragment_id,
    utc_now,
)


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


class Member(CatalogBase):
    """Membership of one identity in one entity."""

    id: str = Field(default_factory=lambda: new_fragment_id("member"))
    entity_id: str
    web_id: WebId
    role: Role = Role.READ
    joined_at: UTCTimestamp = Field(default_factory=utc_now)


# ---------------------------------------------------------------------------
# Typed metadata values (tagged union on ``kind``)
# ---------------------------------------------------------------------------


class StringValue(CatalogBase, frozen=True):
    kind: Literal["string"] = "string"
    value: str


class NumberValue(CatalogBase, frozen=True):
    kind: Literal["number"] = "number"
    value: float


class BooleanValue(CatalogBase, frozen=True):
    kind: Literal["boolean"] = "boolean"
    value: bool


class DateValue(CatalogBase, frozen=True):
    kind: Literal["date"] = "date"
    value: datetime


class UrlValue(CatalogBase, frozen=True):
    kind: Literal["url"] = "url"
    value: str = Field(..., min_length=1)


MetadataValue = Annotated[
    Union[StringValue, NumberValue, BooleanValue, DateValue, UrlValue],
    Field(discriminator="kind"),
]


def render_value(value: MetadataValue) -> str:
    """Human-readable form of a metadata value."""
    if isinstance(value, StringValue):
        return value.value
    if isinstance(value, NumberValue):
        return f"{value.value:g}"
    if isinstance(value, BooleanValue):
        return "true" if value.value else "false"
    if isinstance(value, DateValue):
        return value.value.isoformat()
    if isinstance(value, UrlValue):
        return value.value
    msg = f"Unhandled metadata value kind: {type(value).__name__}"
    raise TypeError(msg)


class MetadataEntry(CatalogBase):
    """Generic key/value metadata sub-record."""

    id: str = Field(default_factory=lambda: new_fragment_id("metadata"))
    key: str = Field(..., min_length=1, max_length=255)
    value: MetadataValue
    created_by: str = ""
    created_at: UTCTimestamp = Field(default_factory=utc_now)


class AssetMetadata(CatalogBase):
    """Detailed, structured metadata record attached to an Asset."""

    id: str = Field(default_factory=lambda: new_fragment_id("assetmeta"))
    title: str = Field(..., min_length=1)
    # Asset information
    asset_created: datetime | None = None
    asset_last_modified: datetime | None = None
    description: str | None = None
    original_title: str | None = None
    open_data_source_link: str | None = None
    data_format: str | None = None
    categories: list[str] = Field(default_factory=list)
    # Usage & settings
    chargeable: bool | None = None
    use_setting: str | None = None
    datasource_language: str | None = None
    metadata_language: str | None = None
    # Temporal coverage
    temporal_coverage_beginning: datetime | None = None
    temporal_coverage_ending: datetime | None = None
    linked_metadata: str | None = None
    update_frequency: str | None = None
    # Geographic information
    geographic_coverage: str | None = None
    geographic_expansion: str | None = None
    # Resource information
    resource_size: str | None = None
    resource_encoding: str | None = None
    datasource_link: str | None = None
    # System fields
    created_by: str = ""
    created_at: UTCTimestamp = Field(default_factory=utc_now)

    @field_validator("categories")
    @classmethod
    def normalize_categories(cls, v: list[str]) -> list[str]:
        return _dedupe(v)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class DataSpace(CatalogBase):
    """A shared data space owned by its creator's pod."""

    id: str
    title: str
    description: str = ""
    purpose: str = ""
    access_mode: AccessMode = AccessMode.PRIVATE
    storage_location: str = ""
    creator: str = ""
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    active: bool = True
    members: list[Member] = Field(default_factory=list)
    metadata: list[MetadataEntry] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    category: str | None = None

    kind: ClassVar[EntityKind] = EntityKind.DATA_SPACE

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        return _dedupe(v)


class Asset(CatalogBase):
    """An asset scoped inside a DataSpace (back-reference by id only).

    Its member list is independent of the DataSpace's: asset sharing is a
    subset selection of DataSpace members, never inherited.
    """

    id: str
    title: str
    description: str = ""
    data_space_id: str
    creator: str = ""
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    active: bool = True
    members: list[Member] = Field(default_factory=list)
    metadata: list[MetadataEntry] = Field(default_factory=list)
    asset_metadata: list[AssetMetadata] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    category: str | None = None

    kind: ClassVar[EntityKind] = EntityKind.ASSET

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        return _dedupe(v)


Entity = DataSpace | Asset


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class CreateDataSpaceInput(CatalogBase):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    purpose: str = Field(default="", max_length=2000)
    access_mode: AccessMode = AccessMode.PRIVATE
    storage_location: str | None = None
    tags: list[str] = Field(default_factory=list)
    category: str | None = None


class CreateAssetInput(CatalogBase):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    tags: list[str] = Field(default_factory=list)
    category: str | None = None


class EntityChanges(CatalogBase):
    """Partial update for an entity header.

    Omitted fields are left unchanged. ``category=None`` clears the category.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    purpose: str | None = Field(default=None, max_length=2000)
    access_mode: AccessMode | None = None
    tags: list[str] | None = None
    category: str | None = None


class AddAssetMetadataInput(CatalogBase):
    """AssetMetadata fields supplied by the caller (system fields are generated)."""

    title: str = Field(..., min_length=1)
    asset_created: datetime | None = None
    asset_last_modified: datetime | None = None
    description: str | None = None
    original_title: str | None = None
    open_data_source_link: str | None = None
    data_format: str | None = None
    categories: list[str] = Field(default_factory=list)
    chargeable: bool | None = None
    use_setting: str | None = None
    datasource_language: str | None = None
    metadata_language: str | None = None
    temporal_coverage_beginning: datetime | None = None
    temporal_coverage_ending: datetime | None = None
    linked_metadata: str | None = None
    update_frequency: str | None = None
    geographic_coverage: str | None = None
    geographic_expansion: str | None = None
    resource_size: str | None = None
    resource_encoding: str | None = None
    datasource_link: str | None = None
