from dataclasses import dataclass, field

from inventory_tracker.core.constants import SORT_DIRECTIONS, SORT_KEYS, STATUS_FILTERS


@dataclass
class StockLevel:
    product_id: str
    name: str
    unit: str
    min_stock: int
    price: float
    total_entries: int = 0
    total_exits: int = 0
    consumption_unit: str | None = None
    consumption_rate: float | None = None
    balance: int = field(init=False)
    low_stock: bool = field(init=False)

    def __post_init__(self):
        self.balance = self.total_entries - self.total_exits
        self.low_stock = is_low_stock(self.balance, self.min_stock)

    @property
    def status(self) -> str:
        return "low" if self.low_stock else "ok"

    @property
    def stock_value(self) -> float:
        return self.balance * self.price


def is_low_stock(balance: int, min_stock: int) -> bool:
    return balance <= min_stock


def sum_quantities_by_product(movements) -> dict[str, int]:
    totals: dict[str, int] = {}
    for movement in movements:
        totals[movement.product_id] = totals.get(movement.product_id, 0) + movement.quantity
    return totals


def compute_stock_levels(products, entries, exits) -> list[StockLevel]:
    """Balance and low-stock flag for every product, in input order.

    Recomputed from the complete movement lists on every call. Exits are not
    checked against the available balance, so a balance can go negative.
    """
    entry_totals = sum_quantities_by_product(entries)
    exit_totals = sum_quantities_by_product(exits)
    return [
        StockLevel(
            product_id=product.id,
            name=product.name,
            unit=product.unit,
            min_stock=product.min_stock,
            price=product.price,
            total_entries=entry_totals.get(product.id, 0),
            total_exits=exit_totals.get(product.id, 0),
            consumption_unit=getattr(product, "consumption_unit", None),
            consumption_rate=getattr(product, "consumption_rate", None),
        )
        for product in products
    ]


def normalize_status_filter(status) -> str:
    value = str(status or "all").strip().lower()
    if value not in STATUS_FILTERS:
        raise ValueError("status must be one of: {}".format(", ".join(STATUS_FILTERS)))
    return value


def filter_stock_levels(levels, query=None, status="all") -> list[StockLevel]:
    status = normalize_status_filter(status)
    query_text = str(query).strip().lower() if query else ""

    filtered = list(levels)
    if query_text:
        filtered = [level for level in filtered if query_text in level.name.lower()]
    if status == "low":
        filtered = [level for level in filtered if level.low_stock]
    elif status == "ok":
        filtered = [level for level in filtered if not level.low_stock]
    return filtered


def _sort_value(level: StockLevel, key: str):
    if key == "name":
        return level.name.lower()
    if key == "balance":
        return level.balance
    return 1 if level.low_stock else 0


def sort_stock_levels(levels, key="name", direction="ascending") -> list[StockLevel]:
    # list.sort is stable for reverse=True as well, so ties keep input order
    if key not in SORT_KEYS:
        raise ValueError("sort must be one of: {}".format(", ".join(SORT_KEYS)))
    if direction not in SORT_DIRECTIONS:
        raise ValueError("direction must be one of: {}".format(", ".join(SORT_DIRECTIONS)))
    return sorted(
        levels,
        key=lambda level: _sort_value(level, key),
        reverse=direction == "descending",
    )


def query_stock_levels(
    products,
    entries,
    exits,
    *,
    query=None,
    status="all",
    sort="name",
    direction="ascending",
) -> list[StockLevel]:
    levels = compute_stock_levels(products, entries, exits)
    levels = filter_stock_levels(levels, query=query, status=status)
    return sort_stock_levels(levels, key=sort, direction=direction)


__all__ = [
    "StockLevel",
    "compute_stock_levels",
    "filter_stock_levels",
    "is_low_stock",
    "normalize_status_filter",
    "query_stock_levels",
    "sort_stock_levels",
    "sum_quantities_by_product",
]
