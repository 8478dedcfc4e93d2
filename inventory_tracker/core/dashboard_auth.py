"""Session login for the dashboard.

A single operator account is configured through the environment, either as
a plain ``DASHBOARD_PASSWORD`` or as a PBKDF2 ``DASHBOARD_PASSWORD_HASH``
with its salt. The logged-in user id is the case-folded login name, so the
same person always lands on the same inventory.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Optional

from fastapi import Request
from fastapi.responses import RedirectResponse

from inventory_tracker.config import get_settings

SESSION_USER_KEY = "user"
LOGIN_PATH = "/login"


def dashboard_auth_enabled() -> bool:
    settings = get_settings()
    has_secret = settings.DASHBOARD_PASSWORD or settings.DASHBOARD_PASSWORD_HASH
    return bool((settings.DASHBOARD_USERNAME or "").strip() and has_secret)


def hash_password(password: str, salt: str, rounds: int) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        rounds,
    ).hex()


def _password_matches(password: str) -> bool:
    settings = get_settings()
    if settings.DASHBOARD_PASSWORD_HASH:
        if not settings.DASHBOARD_PASSWORD_SALT:
            raise ValueError("Dashboard password salt is not configured.")
        computed = hash_password(password, settings.DASHBOARD_PASSWORD_SALT, settings.DASHBOARD_PBKDF2_ROUNDS)
        return hmac.compare_digest(computed, settings.DASHBOARD_PASSWORD_HASH)
    return hmac.compare_digest(password, (settings.DASHBOARD_PASSWORD or "").strip())


def verify_dashboard_credentials(username: str, password: str) -> bool:
    if not dashboard_auth_enabled():
        return False
    expected = get_settings().DASHBOARD_USERNAME.strip()
    if not hmac.compare_digest(username.strip().casefold(), expected.casefold()):
        return False
    return _password_matches(password.strip())


def login_session(request: Request, username: str) -> str:
    user_id = username.strip().casefold()
    request.session[SESSION_USER_KEY] = user_id
    return user_id


def logout_session(request: Request) -> None:
    request.session.clear()


def session_user(request: Request) -> Optional[str]:
    # routes mounted without SessionMiddleware have no session in scope
    if "session" not in request.scope:
        return None
    return request.session.get(SESSION_USER_KEY)


def redirect_if_unauthenticated(request: Request) -> Optional[RedirectResponse]:
    if not dashboard_auth_enabled() or session_user(request):
        return None
    return RedirectResponse(url=LOGIN_PATH, status_code=303)


__all__ = [
    "LOGIN_PATH",
    "dashboard_auth_enabled",
    "hash_password",
    "login_session",
    "logout_session",
    "redirect_if_unauthenticated",
    "session_user",
    "verify_dashboard_credentials",
]
