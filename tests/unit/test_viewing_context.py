from __future__ import annotations

import pytest

from household_ledger.auth.models import Role
from household_ledger.viewing.context import ViewingContext, open_session, show_user_selector


def test_starts_on_self() -> None:
    ctx = ViewingContext("me")
    assert ctx.target_user_id is None
    assert ctx.is_viewing_other is False
    assert ctx.can_mutate is True
    assert ctx.view_user_id == "me"


def test_select_other_then_self() -> None:
    ctx = ViewingContext("me")
    ctx.set_target("partner")
    assert ctx.target_user_id == "partner"
    assert ctx.is_viewing_other is True
    assert ctx.can_mutate is False
    assert ctx.view_user_id == "partner"

    ctx.set_target("me")
    assert ctx.target_user_id is None
    assert ctx.is_viewing_other is False


def test_selecting_self_from_self_is_a_no_op() -> None:
    ctx = ViewingContext("me")
    ctx.set_target("me")
    assert ctx.target_user_id is None
    assert ctx.is_viewing_other is False


def test_reset_returns_to_self() -> None:
    ctx = ViewingContext("me")
    ctx.set_target("partner")
    ctx.reset()
    assert ctx.target_user_id is None
    assert ctx.is_viewing_other is False


def test_target_before_identity_loads_counts_as_viewing() -> None:
    ctx = ViewingContext()
    assert ctx.view_user_id is None
    ctx.set_target("partner")
    assert ctx.is_viewing_other is True

    ctx.identify("me")
    assert ctx.is_viewing_other is True


def test_identity_loading_as_the_target_clears_viewing_flag() -> None:
    ctx = ViewingContext()
    ctx.set_target("me")
    assert ctx.is_viewing_other is True
    ctx.identify("me")
    assert ctx.is_viewing_other is False


def test_snapshot_detects_target_change() -> None:
    ctx = ViewingContext("me")
    ctx.set_target("partner")
    snap = ctx.snapshot()
    assert ctx.is_current(snap)
    ctx.reset()
    assert not ctx.is_current(snap)


def test_session_context_is_discarded_on_exit() -> None:
    with open_session("me") as ctx:
        ctx.set_target("partner")
        assert ctx.is_viewing_other
    assert ctx.target_user_id is None

    with open_session("me") as fresh:
        assert fresh.target_user_id is None


@pytest.mark.parametrize(
    "role,count,expected",
    [
        (Role.ADMIN, 2, True),
        ("ADMIN", 1, False),
        (Role.USER, 2, False),
        ("GUEST", 3, False),
        (None, 2, False),
    ],
)
def test_show_user_selector(role, count, expected) -> None:
    assert show_user_selector(role, count) is expected
