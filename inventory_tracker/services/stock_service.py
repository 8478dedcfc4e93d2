from datetime import date

from inventory_tracker.config import get_settings
from inventory_tracker.core.consumption_rules import (
    compute_consumption,
    consumption_level,
    progress_width,
)
from inventory_tracker.core.constants import ENTRIES, EXITS, PRODUCTS
from inventory_tracker.core.dates import window_start
from inventory_tracker.core.stock_rules import compute_stock_levels, query_stock_levels


def load_collections(gateway):
    return (
        gateway.get_all(PRODUCTS),
        gateway.get_all(ENTRIES),
        gateway.get_all(EXITS),
    )


def _level_payload(level):
    return {
        "product_id": level.product_id,
        "name": level.name,
        "unit": level.unit,
        "min_stock": level.min_stock,
        "price": level.price,
        "total_entries": level.total_entries,
        "total_exits": level.total_exits,
        "balance": level.balance,
        "low_stock": level.low_stock,
        "status": level.status,
    }


def stock_control(gateway, query=None, status="all", sort="name", direction="ascending"):
    products, entries, exits = load_collections(gateway)
    all_levels = compute_stock_levels(products, entries, exits)
    levels = query_stock_levels(
        products,
        entries,
        exits,
        query=query,
        status=status,
        sort=sort,
        direction=direction,
    )
    return {
        "count": len(levels),
        "total_count": len(all_levels),
        "low_stock_count": sum(1 for level in all_levels if level.low_stock),
        "results": [_level_payload(level) for level in levels],
    }


def last_exit_dates(exits):
    """Most recent exit date per product."""
    latest = {}
    for exit_record in exits:
        current = latest.get(exit_record.product_id)
        if current is None or exit_record.date > current:
            latest[exit_record.product_id] = exit_record.date
    return latest


def low_stock_notifications(gateway):
    products, entries, exits = load_collections(gateway)
    latest_exits = last_exit_dates(exits)
    results = [
        {
            "product_id": level.product_id,
            "name": level.name,
            "balance": level.balance,
            "min_stock": level.min_stock,
            "last_exit_date": latest_exits.get(level.product_id),
        }
        for level in compute_stock_levels(products, entries, exits)
        if level.low_stock
    ]
    return {"count": len(results), "results": results}


def product_history(gateway, product_id, limit=None):
    settings = get_settings()
    if limit is None:
        limit = settings.HISTORY_LIMIT
    product = gateway.get(PRODUCTS, product_id)
    entries, exits = gateway.get_dependents(product_id)
    entries = sorted(entries, key=lambda item: item.date, reverse=True)
    exits = sorted(exits, key=lambda item: item.date, reverse=True)
    balance = sum(item.quantity for item in entries) - sum(item.quantity for item in exits)
    return {
        "product_id": product.id,
        "name": product.name,
        "balance": balance,
        "entries": entries[:limit],
        "exits": exits[:limit],
    }


def consumption_overview(gateway, monthly_forecast=None, today=None):
    settings = get_settings()
    if today is None:
        today = date.today()
    if monthly_forecast is None:
        monthly_forecast = gateway.get_user_profile().monthly_forecast or 0

    products = gateway.get_all(PRODUCTS)
    exits = gateway.get_all(EXITS)
    rows = compute_consumption(
        products,
        exits,
        monthly_forecast,
        today=today,
        window_days=settings.CONSUMPTION_WINDOW_DAYS,
    )
    return {
        "monthly_forecast": monthly_forecast,
        "window_days": settings.CONSUMPTION_WINDOW_DAYS,
        "since": window_start(today, settings.CONSUMPTION_WINDOW_DAYS),
        "results": [
            {
                "product_id": row.product_id,
                "name": row.name,
                "consumption_unit": row.consumption_unit,
                "consumption_rate": row.consumption_rate,
                "planned_consumption": row.planned_consumption,
                "actual_consumption": row.actual_consumption,
                "balance": row.balance,
                "consumption_percentage": row.consumption_percentage,
                "progress_width": progress_width(row.consumption_percentage),
                "level": consumption_level(
                    row.consumption_percentage,
                    warning=settings.CONSUMPTION_WARNING_PERCENT,
                    danger=settings.CONSUMPTION_DANGER_PERCENT,
                ),
            }
            for row in rows
        ],
    }


__all__ = [
    "consumption_overview",
    "last_exit_dates",
    "load_collections",
    "low_stock_notifications",
    "product_history",
    "stock_control",
]
