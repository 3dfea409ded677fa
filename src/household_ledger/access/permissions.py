"""
Read-access rules between household members.

Every function here is pure: no I/O, no logging, no shared state. Callers
pass the role and id of the verified principal plus whatever target id the
client asked for, and get back either the id that may scope the query or an
`AccessDenied`.

Rules:
- ADMIN may read any member's data, their own included.
- USER may read only their own data.
- Anything else is denied, self included.
"""

from __future__ import annotations

from typing import Optional, Union

from household_ledger.auth.models import Role
from household_ledger.errors import AccessDenied

RoleLike = Union[Role, str]


def can_view(caller_role: RoleLike, caller_id: str, target_id: str) -> bool:
    """Whether `caller_id` acting as `caller_role` may read `target_id`'s data."""
    role = Role.parse(caller_role)
    if role is Role.ADMIN:
        return True
    if role is Role.USER:
        return target_id == caller_id
    return False


def resolve_accessible_ids(
    caller_role: RoleLike, caller_id: str, requested_id: Optional[str] = None
) -> frozenset[str]:
    """
    Resolve the owner ids a bulk listing may cover.

    An EMPTY result means "no owner restriction" and is only ever returned
    for an ADMIN that did not name a member. Data-layer callers must apply
    it through `repositories.scoping.owner_filter`, never as "match nothing".

    A USER naming another member is denied, same as `resolve_target_user`.
    """
    role = Role.parse(caller_role)
    if role is Role.ADMIN:
        if requested_id:
            return frozenset({requested_id})
        return frozenset()
    if role is Role.USER:
        if requested_id and requested_id != caller_id:
            raise AccessDenied()
        return frozenset({caller_id})
    raise AccessDenied()


def resolve_target_user(
    caller_role: RoleLike, caller_id: str, requested_id: Optional[str] = None
) -> str:
    """
    Return the single owner id a request may be scoped to.

    Without `requested_id` the caller's own id is used. This is the only
    value listing endpoints may filter by.
    """
    target_id = requested_id or caller_id
    if not can_view(caller_role, caller_id, target_id):
        raise AccessDenied()
    return target_id
