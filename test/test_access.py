"""Unit tests for role based access checks"""

import pytest
from stashbook.exceptions import InvalidRoleError, InvalidStatusError
from stashbook.utils.access import (
    Principal,
    Role,
    UserStatus,
    authorize,
    can_access_management,
    can_access_stash,
    coerce_role,
    has_role_at_least,
    has_route_access,
    is_admin,
    is_super_admin,
    parse_role,
    parse_status,
)


@pytest.mark.parametrize(
    "role,admin,superadmin",
    [
        ("USER", False, False),
        ("ADMIN", True, False),
        ("SUPERADMIN", True, True),
        (None, False, False),
        ("GUEST", False, False),
    ],
)
def test_role_predicates(role, admin, superadmin):
    assert is_admin(role) is admin
    assert is_super_admin(role) is superadmin
    assert can_access_stash(role) is admin
    assert can_access_management(role) is superadmin


def test_superadmin_implies_admin_for_every_role():
    for role in list(Role) + [None, "nonsense"]:
        if is_super_admin(role):
            assert is_admin(role)


def test_role_hierarchy_is_ordered():
    assert has_role_at_least(Role.SUPERADMIN, Role.ADMIN)
    assert has_role_at_least(Role.ADMIN, Role.ADMIN)
    assert not has_role_at_least(Role.USER, Role.ADMIN)


def test_authorize_accepts_single_role_or_list():
    assert authorize(Role.ADMIN, Role.ADMIN)
    assert authorize("ADMIN", ["ADMIN", "SUPERADMIN"])
    assert not authorize("USER", ["ADMIN", "SUPERADMIN"])


def test_authorize_with_no_role_is_denied():
    assert authorize(None, ["USER", "ADMIN", "SUPERADMIN"]) is False
    assert authorize("ADMIN", []) is False
    assert authorize("ADMIN", None) is False


def test_authorize_ignores_unknown_required_roles():
    assert authorize("ADMIN", ["OWNER", "ADMIN"])
    assert not authorize("USER", ["OWNER"])


def test_principal_is_accepted_wherever_a_role_is():
    principal = Principal(id=7, role=Role.ADMIN)
    assert coerce_role(principal) is Role.ADMIN
    assert is_admin(principal)


@pytest.mark.parametrize(
    "role,path,expected",
    [
        (Role.USER, "/dashboard", True),
        (Role.USER, "/loans/12", True),
        (Role.USER, "/stashes", False),
        (Role.USER, "/users", False),
        (Role.ADMIN, "/stashes", True),
        (Role.ADMIN, "/owners", True),
        (Role.ADMIN, "/activities", False),
        (Role.SUPERADMIN, "/activities", True),
        (Role.SUPERADMIN, "/anything-else", True),
        (Role.ADMIN, "/anything-else", False),
        (None, "/dashboard", False),
        (Role.SUPERADMIN, None, False),
        (Role.SUPERADMIN, "", False),
        (Role.USER, None, False),
    ],
)
def test_route_access(role, path, expected):
    assert has_route_access(role, path) is expected


def test_parse_role_normalises_case():
    assert parse_role(" admin ") is Role.ADMIN


def test_parse_role_rejects_unknown_values():
    with pytest.raises(InvalidRoleError):
        parse_role("ROOT")
    assert coerce_role("ROOT") is None


def test_parse_status():
    assert parse_status("active") is UserStatus.ACTIVE
    with pytest.raises(InvalidStatusError):
        parse_status("BANNED")
