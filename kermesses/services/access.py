"""Role and ownership checks shared by the services."""

from uuid import UUID

from kermesses.domain import Principal, Role
from kermesses.domain.errors import PermissionDeniedError, UnauthenticatedError


def require_principal(principal: Principal | None) -> Principal:
    if principal is None:
        raise UnauthenticatedError()
    return principal


def require_role(principal: Principal | None, *roles: Role) -> Principal:
    """Return the principal if it holds one of ``roles``.

    Raises:
        UnauthenticatedError: If there is no principal.
        PermissionDeniedError: If the principal has another role.
    """
    principal = require_principal(principal)
    if roles and not principal.has_role(*roles):
        raise PermissionDeniedError("User does not have the required role")
    return principal


def require_owner(principal: Principal, owner_id: UUID) -> None:
    if principal.user_id != owner_id:
        raise PermissionDeniedError()
