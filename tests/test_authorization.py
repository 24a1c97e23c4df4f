import pytest

from rating_platform.core.authorization import (
    ADMIN_ONLY,
    ANY_ROLE,
    RATER_ONLY,
    STORE_OWNER_ONLY,
    RolePolicy,
    authorize,
    require_ownership,
    require_role,
)
from rating_platform.core.exceptions import PermissionDenied
from rating_platform.models.session import Principal
from rating_platform.models.user import UserRole

ADMIN = Principal(id="a", role=UserRole.ADMIN)
RATER = Principal(id="r", role=UserRole.RATER)
OWNER = Principal(id="o", role=UserRole.STORE_OWNER)


@pytest.mark.parametrize(
    "policy, allowed",
    [
        (ADMIN_ONLY, {UserRole.ADMIN}),
        (RATER_ONLY, {UserRole.RATER}),
        (STORE_OWNER_ONLY, {UserRole.STORE_OWNER}),
        (ANY_ROLE, set(UserRole)),
    ],
)
def test_policies_allow_exactly_their_roles(policy, allowed):
    for principal in (ADMIN, RATER, OWNER):
        if principal.role in allowed:
            require_role(principal, policy)
        else:
            with pytest.raises(PermissionDenied):
                require_role(principal, policy)


def test_policy_must_decide_on_every_role():
    with pytest.raises(ValueError, match="store_owner"):
        RolePolicy("partial", {UserRole.ADMIN: True, UserRole.RATER: False})


def test_policy_rejects_string_roles():
    with pytest.raises(TypeError):
        RolePolicy(
            "strings",
            {"admin": True, UserRole.RATER: False, UserRole.STORE_OWNER: False},
        )


def test_require_role_needs_a_policy():
    with pytest.raises(TypeError):
        require_role(ADMIN, {UserRole.ADMIN})


def test_ownership_match_passes():
    require_ownership(OWNER, "o")


@pytest.mark.parametrize("owner_id", ["someone-else", None])
def test_ownership_mismatch_or_missing_is_denied(owner_id):
    with pytest.raises(PermissionDenied):
        require_ownership(OWNER, owner_id)


def test_role_check_runs_before_ownership():
    # A rater "owning" the resource still fails on role, with the same error.
    with pytest.raises(PermissionDenied) as role_failure:
        authorize(RATER, STORE_OWNER_ONLY, owner_id="r", check_ownership=True)
    with pytest.raises(PermissionDenied) as owner_failure:
        authorize(OWNER, STORE_OWNER_ONLY, owner_id="x", check_ownership=True)

    assert role_failure.value.status_code == owner_failure.value.status_code == 403
    assert role_failure.value.detail == owner_failure.value.detail
