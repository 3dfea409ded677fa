from __future__ import annotations

from typing import Any

from jose import JWTError, jwt

from household_ledger.configs.settings import Settings
from household_ledger.errors import AuthError
from household_ledger.configs.logging_config import get_logger

log = get_logger(__name__)


def decode_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode and validate a session token issued by the sign-in service.

    Only a shared-secret algorithm is supported; the sign-in service and this
    API share `jwt_secret`.
    """
    try:
        log.debug("jwt.decode start alg=%s iss=%s aud=%s", settings.jwt_alg, settings.jwt_issuer, settings.jwt_audience)
        options = {"verify_aud": settings.jwt_audience is not None}
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_alg],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options=options,
        )
        log.debug("jwt.decode ok sub=%s role=%s", claims.get("sub"), claims.get("role"))
        return claims
    except JWTError as e:
        log.info("JWT decode failed: %s", str(e))
        raise AuthError("invalid token") from e


def encode_token(claims: dict[str, Any], settings: Settings) -> str:
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_alg)
