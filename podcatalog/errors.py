"""Error taxonomy for the catalog core.

Every failure except audit-append failures propagates to the caller.
Partial failures during aggregation are returned as data, never raised.
"""


class CatalogError(Exception):
    """Base class for all catalog errors."""


class NotAuthenticatedError(CatalogError):
    """No caller identity is available for an operation that needs a tenant."""


class UnresolvedIdentityError(NotAuthenticatedError):
    """A container or document URI was requested without a tenant identity."""


class NotFoundError(CatalogError):
    """Entity or document is absent."""

    def __init__(self, message: str, uri: str | None = None) -> None:
        super().__init__(message)
        self.uri = uri


class ReadError(CatalogError):
    """The document store failed to serve a read (network, permission)."""

    def __init__(self, message: str, uri: str | None = None) -> None:
        super().__init__(message)
        self.uri = uri


class WriteError(CatalogError):
    """The document store rejected a write. Never retried."""

    def __init__(self, message: str, uri: str | None = None) -> None:
        super().__init__(message)
        self.uri = uri


class ParseError(CatalogError):
    """A document could not be decoded."""

    def __init__(self, message: str, uri: str | None = None) -> None:
        super().__init__(message)
        self.uri = uri


class PermissionDeniedError(CatalogError):
    """Caller's effective role does not allow the action (UI gating only)."""


class MembershipError(CatalogError):
    """Membership change is not valid for the entity."""


class LastAdminError(MembershipError):
    """Change would leave the entity without any admin member."""
