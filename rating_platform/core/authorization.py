"""
Role and ownership gates.

Access policies are built from an explicit decision for every ``UserRole``
member, so adding a role without revisiting each policy fails at import.
"""
import logging
from typing import Mapping, Optional

from rating_platform.core.exceptions import PermissionDenied
from rating_platform.models.session import Principal
from rating_platform.models.user import UserRole

logger = logging.getLogger(__name__)


class RolePolicy:
    """The set of roles allowed to invoke an operation."""

    def __init__(self, name: str, decisions: Mapping[UserRole, bool]) -> None:
        unknown = [key for key in decisions if not isinstance(key, UserRole)]
        if unknown:
            raise TypeError(f"Policy {name!r} has non-role keys: {unknown!r}")
        missing = set(UserRole) - set(decisions)
        if missing:
            raise ValueError(
                f"Policy {name!r} does not decide on roles: "
                + ", ".join(sorted(role.value for role in missing))
            )
        self.name = name
        self.allowed = frozenset(role for role, ok in decisions.items() if ok)

    def permits(self, role: UserRole) -> bool:
        return role in self.allowed

    def __repr__(self) -> str:
        roles = ",".join(sorted(role.value for role in self.allowed))
        return f"RolePolicy({self.name}: {roles})"


ADMIN_ONLY = RolePolicy(
    "admin_only",
    {UserRole.ADMIN: True, UserRole.RATER: False, UserRole.STORE_OWNER: False},
)
RATER_ONLY = RolePolicy(
    "rater_only",
    {UserRole.ADMIN: False, UserRole.RATER: True, UserRole.STORE_OWNER: False},
)
STORE_OWNER_ONLY = RolePolicy(
    "store_owner_only",
    {UserRole.ADMIN: False, UserRole.RATER: False, UserRole.STORE_OWNER: True},
)
ANY_ROLE = RolePolicy(
    "any_role",
    {UserRole.ADMIN: True, UserRole.RATER: True, UserRole.STORE_OWNER: True},
)


def require_role(principal: Principal, policy: RolePolicy) -> None:
    """Raise PermissionDenied unless *principal*'s role is in *policy*."""
    if not isinstance(policy, RolePolicy):
        raise TypeError("require_role expects a RolePolicy")
    if not policy.permits(principal.role):
        logger.warning(
            "Principal id=%s role=%s rejected by %r",
            principal.id,
            principal.role.value,
            policy,
        )
        raise PermissionDenied()


def require_ownership(principal: Principal, resource_owner_id: Optional[str]) -> None:
    """
    Raise PermissionDenied unless *principal* owns the resource.

    A missing owner (or a missing resource, passed as None) is rejected the
    same way so callers cannot probe which resources exist.
    """
    if resource_owner_id is None or resource_owner_id != principal.id:
        logger.warning("Principal id=%s failed ownership check", principal.id)
        raise PermissionDenied()


def authorize(
    principal: Principal,
    policy: RolePolicy,
    *,
    owner_id: Optional[str] = None,
    check_ownership: bool = False,
) -> None:
    """Role gate first, then (optionally) the ownership predicate."""
    require_role(principal, policy)
    if check_ownership:
        require_ownership(principal, owner_id)
