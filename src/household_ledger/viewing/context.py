from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from household_ledger.auth.models import Role
from household_ledger.configs.logging_config import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class ViewSnapshot:
    """Target that was active when a request was issued."""

    target_user_id: Optional[str]


class ViewingContext:
    """
    Tracks whose data a client session is looking at.

    Two states: Self (no target) and Viewing(target). The context is a
    display aid only. It performs no permission checks; the API resolves and
    enforces access on every request.
    """

    def __init__(self, own_user_id: Optional[str] = None):
        self._own_user_id = own_user_id or None
        self._target_user_id: Optional[str] = None

    @property
    def own_user_id(self) -> Optional[str]:
        return self._own_user_id

    @property
    def target_user_id(self) -> Optional[str]:
        return self._target_user_id

    def identify(self, own_user_id: Optional[str]) -> None:
        """Record the principal's id once the session has loaded."""
        self._own_user_id = own_user_id or None

    def set_target(self, requested_id: Optional[str]) -> None:
        if not requested_id or requested_id == self._own_user_id:
            self._target_user_id = None
        else:
            self._target_user_id = requested_id
        log.debug("viewing.set_target target=%s", self._target_user_id)

    def reset(self) -> None:
        self._target_user_id = None

    @property
    def is_viewing_other(self) -> bool:
        # With the own id not loaded yet, any target counts as "other" so the
        # read-only UI does not flicker while identity resolves.
        if not self._target_user_id:
            return False
        return self._own_user_id is None or self._target_user_id != self._own_user_id

    @property
    def can_mutate(self) -> bool:
        """Create/edit/delete and settings affordances are shown only when True."""
        return not self.is_viewing_other

    @property
    def view_user_id(self) -> Optional[str]:
        """Value sent as `viewUserId` on listing requests; None omits it."""
        return self._target_user_id or self._own_user_id

    def snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(target_user_id=self._target_user_id)

    def is_current(self, snapshot: ViewSnapshot) -> bool:
        """False when the target changed since `snapshot` was taken."""
        return snapshot.target_user_id == self._target_user_id


def show_user_selector(role: Optional[Role | str], member_count: int) -> bool:
    """The member selector is offered only to roles that can cross-view, in multi-member households."""
    if Role.parse(role) in (None, Role.USER):
        return False
    return member_count > 1


@contextmanager
def open_session(own_user_id: Optional[str] = None) -> Iterator[ViewingContext]:
    """Create a context for one UI session; it is dropped when the block exits."""
    ctx = ViewingContext(own_user_id)
    log.debug("viewing.session.open own_user_id=%s", own_user_id)
    try:
        yield ctx
    finally:
        ctx.reset()
        log.debug("viewing.session.close own_user_id=%s", ctx.own_user_id)
