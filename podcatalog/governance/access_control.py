"""Access Control Projector: effective role of a caller over an entity.

ADVISORY ONLY. The projection decides which actions the UI (or API) offers
to a caller, based on the member list the caller itself read from the
document. It protects nothing: anyone able to write the backing document
through another path bypasses it. The real security boundary is the
document store's own access rules.
"""

from dataclasses import dataclass
from enum import StrEnum

from podcatalog.errors import PermissionDeniedError
from podcatalog.models.catalog import Asset, DataSpace
from podcatalog.models.common import Role


class Action(StrEnum):
    """Gated catalog actions."""

    READ = "read"
    WRITE = "write"
    MANAGE = "manage"  # membership changes and soft delete


_REQUIRED_ROLE: dict[Action, Role] = {
    Action.READ: Role.READ,
    Action.WRITE: Role.WRITE,
    Action.MANAGE: Role.ADMIN,
}


@dataclass(frozen=True)
class Permissions:
    """Action flags for one caller over one entity (what the UI renders)."""

    role: Role | None
    can_read: bool
    can_write: bool
    can_manage: bool


class AccessControlProjector:
    """Pure lookups over an entity's current member list."""

    def effective_role(self, entity: DataSpace | Asset, caller_id: str | None) -> Role | None:
        """Highest role held by ``caller_id``; ``None`` denies every mutating action."""
        if not caller_id:
            return None
        roles = [m.role for m in entity.members if m.web_id == caller_id]
        return max(roles, key=lambda r: r.rank) if roles else None

    def can(self, entity: DataSpace | Asset, caller_id: str | None, action: Action) -> bool:
        role = self.effective_role(entity, caller_id)
        return role is not None and role.rank >= _REQUIRED_ROLE[action].rank

    def require(self, entity: DataSpace | Asset, caller_id: str | None, action: Action) -> Role:
        """Return the caller's role, or raise if it does not allow ``action``.

        Raises:
            PermissionDeniedError: If the effective role is below what ``action`` needs.
        """
        role = self.effective_role(entity, caller_id)
        if role is None or role.rank < _REQUIRED_ROLE[action].rank:
            msg = (
                f"{caller_id or 'Anonymous caller'} cannot {action} {entity.kind} {entity.id} "
                f"(role: {role or 'none'}, requires {_REQUIRED_ROLE[action]})."
            )
            raise PermissionDeniedError(msg)
        return role

    def permissions(self, entity: DataSpace | Asset, caller_id: str | None) -> Permissions:
        role = self.effective_role(entity, caller_id)
        rank = role.rank if role is not None else 0
        return Permissions(
            role=role,
            can_read=rank >= Role.READ.rank,
            can_write=rank >= Role.WRITE.rank,
            can_manage=rank >= Role.ADMIN.rank,
        )

    def admins(self, entity: DataSpace | Asset) -> list[str]:
        return [m.web_id for m in entity.members if m.role == Role.ADMIN]
