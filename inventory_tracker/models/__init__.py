import importlib

from inventory_tracker.models.product import Product
from inventory_tracker.models.stock_entry import StockEntry
from inventory_tracker.models.stock_exit import StockExit
from inventory_tracker.models.user_profile import UserProfile


def import_all_models() -> None:
    for module_name in (
        "inventory_tracker.models.product",
        "inventory_tracker.models.stock_entry",
        "inventory_tracker.models.stock_exit",
        "inventory_tracker.models.user_profile",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Product",
    "StockEntry",
    "StockExit",
    "UserProfile",
    "import_all_models",
]
