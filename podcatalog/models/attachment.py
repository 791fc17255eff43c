"""Attachment index entry: describes a file already uploaded into a DataSpace."""

from pydantic import Field, field_validator

from podcatalog.models.common import CatalogBase, UTCTimestamp, new_entity_id, utc_now


class Attachment(CatalogBase):
    """Index record for one uploaded file.

    The file bytes live at ``file_uri`` (written by the external upload
    plumbing); this record is what listing, search and retrieval read.
    """

    id: str = Field(default_factory=lambda: new_entity_id("data"))
    data_space_id: str
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    file_name: str = Field(..., min_length=1)
    file_size: int = Field(default=0, ge=0)
    mime_type: str = "application/octet-stream"
    file_uri: str = Field(..., min_length=1)
    uploaded_by: str = ""
    uploaded_at: UTCTimestamp = Field(default_factory=utc_now)
    tags: list[str] = Field(default_factory=list)
    category: str = ""
    extra: dict[str, str] = Field(default_factory=dict)

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v: list[str]) -> list[str]:
        return [t.strip() for t in v if t.strip()]


class RegisterAttachmentInput(CatalogBase):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    file_name: str = Field(..., min_length=1)
    file_size: int = Field(default=0, ge=0)
    mime_type: str = "application/octet-stream"
    file_uri: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    category: str = ""
    extra: dict[str, str] = Field(default_factory=dict)
