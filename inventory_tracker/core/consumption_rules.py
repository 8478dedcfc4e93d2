from dataclasses import dataclass
from datetime import date

from inventory_tracker.core.dates import normalize_date, window_start

DEFAULT_WINDOW_DAYS = 30
WARNING_PERCENT = 80.0
DANGER_PERCENT = 100.0


@dataclass
class ConsumptionRow:
    product_id: str
    name: str
    consumption_unit: str
    consumption_rate: float
    planned_consumption: float
    actual_consumption: int
    balance: float
    consumption_percentage: float


def tracks_consumption(product) -> bool:
    unit = (getattr(product, "consumption_unit", None) or "").strip()
    rate = getattr(product, "consumption_rate", None)
    return bool(unit) and rate is not None and rate > 0


def consumption_percentage(actual, planned) -> float:
    if planned == 0:
        return 0.0
    return actual / planned * 100


def progress_width(percentage) -> float:
    """Bar width only; the percentage label keeps the unclamped value."""
    return max(0.0, min(float(percentage), 100.0))


def consumption_level(percentage, warning=WARNING_PERCENT, danger=DANGER_PERCENT) -> str:
    if percentage > danger:
        return "danger"
    if percentage > warning:
        return "warning"
    return "ok"


def compute_consumption(
    products,
    exits,
    monthly_forecast,
    today: date | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[ConsumptionRow]:
    if monthly_forecast is None or monthly_forecast < 0:
        raise ValueError("monthly forecast must be a non-negative number.")
    if today is None:
        today = date.today()
    since = window_start(today, window_days)

    recent_totals: dict[str, int] = {}
    for exit_record in exits:
        exit_date = normalize_date(exit_record.date)
        if exit_date is None or exit_date < since:
            continue
        recent_totals[exit_record.product_id] = (
            recent_totals.get(exit_record.product_id, 0) + exit_record.quantity
        )

    rows = []
    for product in products:
        if not tracks_consumption(product):
            continue
        planned = monthly_forecast * product.consumption_rate
        actual = recent_totals.get(product.id, 0)
        rows.append(
            ConsumptionRow(
                product_id=product.id,
                name=product.name,
                consumption_unit=product.consumption_unit,
                consumption_rate=product.consumption_rate,
                planned_consumption=planned,
                actual_consumption=actual,
                balance=planned - actual,
                consumption_percentage=consumption_percentage(actual, planned),
            )
        )
    return rows


__all__ = [
    "ConsumptionRow",
    "compute_consumption",
    "consumption_level",
    "consumption_percentage",
    "progress_width",
    "tracks_consumption",
]
