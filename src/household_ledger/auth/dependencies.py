from __future__ import annotations

from fastapi import Depends, Request

from household_ledger.auth.jwt import decode_token
from household_ledger.auth.models import Principal, Role
from household_ledger.configs.settings import Settings, get_settings
from household_ledger.errors import AuthError
from household_ledger.configs.logging_config import get_logger

log = get_logger(__name__)


def _bearer_token(value: str | None) -> str:
    if not value:
        raise AuthError("missing authorization header")
    scheme, _, token = value.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("invalid authorization header")
    return token.strip()


def _session_token(request: Request, settings: Settings) -> str:
    header = request.headers.get("authorization")
    if header:
        return _bearer_token(header)
    cookie = request.cookies.get(settings.session_cookie_name)
    if cookie:
        return cookie
    log.info("auth.missing_session")
    raise AuthError("missing authorization header")


def principal_from_claims(claims: dict) -> Principal:
    user_id = claims.get("sub")
    raw_role = claims.get("role")
    email = claims.get("email")

    if not user_id or not raw_role or not email:
        log.info(
            "auth.token_missing_claims has_sub=%s has_role=%s has_email=%s",
            bool(user_id),
            bool(raw_role),
            bool(email),
        )
        raise AuthError("token missing required claims")

    role = Role.parse(raw_role)
    if role is None:
        # Unknown roles never reach the permission layer.
        log.warning("auth.unknown_role user_id=%s role=%s", user_id, raw_role)
        raise AuthError("invalid role claim")

    return Principal(user_id=str(user_id), role=role, email=str(email))


async def get_principal(request: Request, settings: Settings = Depends(get_settings)) -> Principal:
    """
    Resolve the authenticated principal from the session token.

    The token is read from the bearer header first and the session cookie
    second. Role and id come only from verified claims.
    """
    claims = decode_token(_session_token(request, settings), settings)
    principal = principal_from_claims(claims)
    log.info("auth.principal user_id=%s role=%s", principal.user_id, principal.role.value)
    return principal
