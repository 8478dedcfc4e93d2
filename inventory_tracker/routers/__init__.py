from inventory_tracker.routers.auth import router as auth_router
from inventory_tracker.routers.consumption import router as consumption_router
from inventory_tracker.routers.dashboard import router as dashboard_router
from inventory_tracker.routers.entries import router as entries_router
from inventory_tracker.routers.exits import router as exits_router
from inventory_tracker.routers.health import router as health_router
from inventory_tracker.routers.invoice_import import router as invoice_import_router
from inventory_tracker.routers.products import router as products_router
from inventory_tracker.routers.reports import router as reports_router
from inventory_tracker.routers.stock import router as stock_router

__all__ = [
    "auth_router",
    "consumption_router",
    "dashboard_router",
    "entries_router",
    "exits_router",
    "health_router",
    "invoice_import_router",
    "products_router",
    "reports_router",
    "stock_router",
]
