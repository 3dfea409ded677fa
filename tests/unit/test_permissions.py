from __future__ import annotations

import pytest

from household_ledger.access.permissions import can_view, resolve_accessible_ids, resolve_target_user
from household_ledger.auth.models import Role
from household_ledger.errors import AccessDenied


@pytest.mark.parametrize("target", ["u1", "u2", "someone-else"])
def test_admin_can_view_anyone(target) -> None:
    assert can_view(Role.ADMIN, "u1", target) is True
    assert can_view("ADMIN", "u1", target) is True


def test_user_can_view_only_self() -> None:
    assert can_view(Role.USER, "u1", "u1") is True
    assert can_view(Role.USER, "u1", "u2") is False


@pytest.mark.parametrize("role", ["OWNER", "admin", "", None])
def test_unknown_role_fails_closed(role) -> None:
    assert can_view(role, "u1", "u2") is False
    assert can_view(role, "u1", "u1") is False


def test_resolve_target_user_defaults_to_self() -> None:
    assert resolve_target_user(Role.ADMIN, "u1", None) == "u1"
    assert resolve_target_user(Role.USER, "u1", None) == "u1"
    assert resolve_target_user(Role.USER, "u1", "") == "u1"


def test_resolve_target_user_admin_other() -> None:
    assert resolve_target_user(Role.ADMIN, "u1", "u2") == "u2"


def test_resolve_target_user_user_other_is_denied() -> None:
    with pytest.raises(AccessDenied) as exc_info:
        resolve_target_user(Role.USER, "u1", "u2")
    assert exc_info.value.http_status == 403
    assert exc_info.value.message == "access denied"


def test_resolve_target_user_unknown_role_denied_even_for_self() -> None:
    with pytest.raises(AccessDenied):
        resolve_target_user("GUEST", "u1", None)


def test_resolve_accessible_ids_admin() -> None:
    assert resolve_accessible_ids(Role.ADMIN, "u1", "u2") == frozenset({"u2"})
    # Empty means unrestricted.
    assert resolve_accessible_ids(Role.ADMIN, "u1", None) == frozenset()


def test_resolve_accessible_ids_user() -> None:
    assert resolve_accessible_ids(Role.USER, "u1", None) == frozenset({"u1"})
    assert resolve_accessible_ids(Role.USER, "u1", "u1") == frozenset({"u1"})


def test_resolve_accessible_ids_user_other_is_denied() -> None:
    with pytest.raises(AccessDenied):
        resolve_accessible_ids(Role.USER, "u1", "u2")


def test_resolve_accessible_ids_unknown_role_denied() -> None:
    with pytest.raises(AccessDenied):
        resolve_accessible_ids("GUEST", "u1", None)
