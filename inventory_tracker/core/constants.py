from pathlib import Path


PACKAGE_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = PACKAGE_DIR.parent

TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

PRODUCTS = "products"
ENTRIES = "entries"
EXITS = "exits"
COLLECTIONS = (PRODUCTS, ENTRIES, EXITS)

STATUS_FILTERS = ("all", "ok", "low")
SORT_KEYS = ("name", "balance", "status")
SORT_DIRECTIONS = ("ascending", "descending")

CONSUMPTION_LEVELS = ("ok", "warning", "danger")

UNKNOWN_PRODUCT_LABEL = "N/A"

DEFAULT_DASHBOARD_PATH = "/dashboard"
