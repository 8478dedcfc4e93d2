import logging
import secrets

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from inventory_tracker.config import Settings, get_settings
from inventory_tracker.core.constants import DEFAULT_DASHBOARD_PATH, STATIC_DIR, TEMPLATES_DIR
from inventory_tracker.core.errors import (
    ExtractionError,
    GatewayConnectionError,
    InventoryError,
    PermissionDeniedError,
    RecordNotFoundError,
)
from inventory_tracker.core.logging import setup_logging
from inventory_tracker.database import Base, engine, ensure_sqlite_schema
from inventory_tracker.models import import_all_models
from inventory_tracker.routers import (
    auth_router,
    consumption_router,
    dashboard_router,
    entries_router,
    exits_router,
    health_router,
    invoice_import_router,
    products_router,
    reports_router,
    stock_router,
)

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)

import_all_models()
Base.metadata.create_all(bind=engine)
ensure_sqlite_schema()

_ERROR_STATUS = (
    (RecordNotFoundError, 404),
    (PermissionDeniedError, 403),
    (GatewayConnectionError, 503),
    (ExtractionError, 502),
)


def error_status(exc: InventoryError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


app = FastAPI(title=settings.APP_NAME)
app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.DASHBOARD_SESSION_SECRET or settings.JWT_SECRET or secrets.token_urlsafe(32),
    session_cookie=settings.DASHBOARD_SESSION_COOKIE,
    same_site="lax",
    https_only=settings.ENVIRONMENT.lower() != "local",
)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    status_code = error_status(exc)
    if status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
    )


app.include_router(health_router)
app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(products_router)
app.include_router(entries_router)
app.include_router(exits_router)
app.include_router(stock_router)
app.include_router(consumption_router)
app.include_router(reports_router)
app.include_router(invoice_import_router)


@app.get("/")
def root():
    return RedirectResponse(url=DEFAULT_DASHBOARD_PATH, status_code=302)


__all__ = ["app", "error_status", "root"]
