"""Request / response schemas shared by the DataSpace and Asset routers."""

from pydantic import BaseModel, Field

from podcatalog.governance.access_control import Permissions
from podcatalog.models.catalog import MetadataValue
from podcatalog.models.common import Role


class AddMemberRequest(BaseModel):
    web_id: str = Field(..., min_length=1)
    role: Role = Role.READ


class UpdateRoleRequest(BaseModel):
    web_id: str = Field(..., min_length=1)
    role: Role


class AddMetadataRequest(BaseModel):
    key: str = Field(..., min_length=1, max_length=255)
    value: MetadataValue


class PermissionsResponse(BaseModel):
    role: Role | None
    can_read: bool
    can_write: bool
    can_manage: bool

    @classmethod
    def from_permissions(cls, permissions: Permissions) -> "PermissionsResponse":
        return cls(
            role=permissions.role,
            can_read=permissions.can_read,
            can_write=permissions.can_write,
            can_manage=permissions.can_manage,
        )
