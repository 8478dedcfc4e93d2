from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from inventory_tracker.core.constants import DEFAULT_DASHBOARD_PATH
from inventory_tracker.core.dashboard_auth import (
    LOGIN_PATH,
    dashboard_auth_enabled,
    login_session,
    logout_session,
    verify_dashboard_credentials,
)
from inventory_tracker.database.session import get_db
from inventory_tracker.dependencies import get_gateway
from inventory_tracker.schemas.stock import UserProfileRead
from inventory_tracker.services.persistence_gateway import PersistenceGateway

router = APIRouter(tags=["Auth"])


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "login.html",
        {"error": None, "auth_enabled": dashboard_auth_enabled()},
    )


@router.post("/login", response_class=HTMLResponse)
def login_submit(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    templates = request.app.state.templates

    if not dashboard_auth_enabled():
        return templates.TemplateResponse(
            request,
            "login.html",
            {
                "error": "Login is not configured. Set dashboard credentials in the environment.",
                "auth_enabled": False,
            },
            status_code=400,
        )

    try:
        if verify_dashboard_credentials(username, password):
            user_id = login_session(request, username)
            PersistenceGateway(db, user_id).get_user_profile(email=username.strip())
            return RedirectResponse(url=DEFAULT_DASHBOARD_PATH, status_code=303)
    except ValueError as exc:
        error_message = str(exc)
    else:
        error_message = "Invalid login ID or password."

    return templates.TemplateResponse(
        request,
        "login.html",
        {"error": error_message, "auth_enabled": True},
        status_code=401,
    )


@router.post("/logout")
def logout(request: Request):
    logout_session(request)
    return RedirectResponse(url=LOGIN_PATH, status_code=303)


@router.get("/me", response_model=UserProfileRead)
def me(gateway: PersistenceGateway = Depends(get_gateway)):
    return gateway.get_user_profile()


__all__ = ["router"]
