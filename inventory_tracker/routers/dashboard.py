from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from inventory_tracker.core.dashboard_auth import (
    dashboard_auth_enabled,
    redirect_if_unauthenticated,
)
from inventory_tracker.database.session import get_db
from inventory_tracker.dependencies import current_user_id
from inventory_tracker.services.persistence_gateway import PersistenceGateway
from inventory_tracker.services.stock_service import stock_control

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_class=HTMLResponse)
def dashboard_page(
    request: Request,
    query: str | None = Query(None),
    status: str = Query("all"),
    sort: str = Query("name"),
    direction: str = Query("ascending"),
    db: Session = Depends(get_db),
):
    redirect = redirect_if_unauthenticated(request)
    if redirect:
        return redirect

    user_id = current_user_id(request)
    gateway = PersistenceGateway(db, user_id)
    error = None
    try:
        data = stock_control(gateway, query=query, status=status, sort=sort, direction=direction)
    except ValueError as exc:
        error = str(exc)
        data = stock_control(gateway, query=query)

    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "stock": data,
            "query": query or "",
            "status": status,
            "sort": sort,
            "direction": direction,
            "error": error,
            "auth_enabled": dashboard_auth_enabled(),
        },
    )
