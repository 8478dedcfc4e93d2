from inventory_tracker.services.persistence_gateway import PersistenceGateway
from inventory_tracker.services.report_service import export_csv, report_summary
from inventory_tracker.services.stock_service import consumption_overview, stock_control

__all__ = [
    "PersistenceGateway",
    "consumption_overview",
    "export_csv",
    "report_summary",
    "stock_control",
]
