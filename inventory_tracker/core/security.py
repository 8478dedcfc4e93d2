from __future__ import annotations

from typing import Optional

import jwt
from fastapi import HTTPException, status

from inventory_tracker.config import get_settings


def _load_api_keys() -> dict[str, str]:
    """Map each configured API key to the user it acts for.

    ``API_KEYS`` is a comma separated list of ``key`` or ``user:key`` items;
    a bare key acts for ``DEFAULT_USER_ID``.
    """
    settings = get_settings()
    keys: dict[str, str] = {}
    for item in (settings.API_KEYS or "").split(","):
        item = item.strip()
        if not item:
            continue
        user_id, separator, key = item.rpartition(":")
        if not separator:
            user_id, key = settings.DEFAULT_USER_ID, item
        user_id = user_id.strip() or settings.DEFAULT_USER_ID
        if key.strip():
            keys[key.strip()] = user_id
    return keys


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _decode_jwt(token: str) -> dict:
    settings = get_settings()
    if not settings.JWT_SECRET:
        raise _unauthorized("JWT auth is not configured")

    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options={"verify_aud": bool(settings.JWT_AUDIENCE)},
        )
    except jwt.PyJWTError as exc:
        raise _unauthorized("Invalid JWT") from exc


def _jwt_subject(claims: dict) -> str:
    subject = str(claims.get("sub") or "").strip()
    if not subject:
        raise _unauthorized("JWT has no subject")
    return subject


def auth_configured() -> bool:
    settings = get_settings()
    return bool(_load_api_keys() or settings.JWT_SECRET or settings.JWT_REQUIRED)


def authenticate_request(
    api_key: Optional[str],
    authorization: Optional[str],
    *,
    require_auth: bool = False,
) -> Optional[dict]:
    """Identify the caller from the API key header or a bearer JWT.

    Returns ``{"auth_type", "user_id"}`` for an authenticated caller and
    ``None`` for an anonymous one while no credentials are configured.
    """
    settings = get_settings()
    keys = _load_api_keys()
    require_auth = require_auth or settings.JWT_REQUIRED

    if api_key and api_key in keys and not settings.JWT_REQUIRED:
        return {"auth_type": "api_key", "user_id": keys[api_key]}

    token = _get_bearer_token(authorization)
    if token:
        claims = None
        try:
            claims = _decode_jwt(token)
        except HTTPException:
            if settings.JWT_REQUIRED:
                raise
        if claims is not None:
            return {"auth_type": "jwt", "user_id": _jwt_subject(claims), "claims": claims}

    if (require_auth or keys) and auth_configured():
        raise _unauthorized("Not authenticated")
    return None


def resolve_user_id(auth: Optional[dict]) -> str:
    """User id that scopes every collection for the request."""
    if auth and auth.get("user_id"):
        return auth["user_id"]
    return get_settings().DEFAULT_USER_ID


__all__ = ["auth_configured", "authenticate_request", "resolve_user_id"]
