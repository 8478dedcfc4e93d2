import csv
import io

from openpyxl import Workbook

from inventory_tracker.config import get_settings
from inventory_tracker.core.constants import UNKNOWN_PRODUCT_LABEL
from inventory_tracker.core.stock_rules import compute_stock_levels
from inventory_tracker.services.stock_service import load_collections

CSV_BOM = "\ufeff"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

PRODUCT_COLUMNS = (
    ("id", "ID"),
    ("name", "Nome do Produto"),
    ("unit", "Unidade"),
    ("min_stock", "Estoque Mínimo"),
    ("price", "Preço (R$)"),
)
ENTRY_COLUMNS = (
    ("id", "ID da Entrada"),
    ("date", "Data"),
    ("product_name", "Produto"),
    ("supplier", "Fornecedor"),
    ("quantity", "Quantidade"),
    ("product_id", "ID do Produto"),
)
EXIT_COLUMNS = (
    ("id", "ID da Saída"),
    ("date", "Data"),
    ("product_name", "Produto"),
    ("quantity", "Quantidade"),
    ("product_id", "ID do Produto"),
)

EXPORTS = {
    "products": ("produtos.csv", PRODUCT_COLUMNS),
    "entries": ("entradas.csv", ENTRY_COLUMNS),
    "exits": ("saidas.csv", EXIT_COLUMNS),
}


def _report_line(level):
    return {
        "product_id": level.product_id,
        "name": level.name,
        "balance": level.balance,
        "min_stock": level.min_stock,
        "total_exits": level.total_exits,
    }


def build_summary(products, entries, exits, top_limit=None):
    if top_limit is None:
        top_limit = get_settings().TOP_MOVED_LIMIT
    levels = compute_stock_levels(products, entries, exits)

    low_stock = sorted(
        (level for level in levels if level.low_stock),
        key=lambda level: level.name.casefold(),
    )
    most_moved = sorted(levels, key=lambda level: level.total_exits, reverse=True)[:top_limit]

    return {
        "total_stock_value": sum(level.stock_value for level in levels),
        "low_stock_count": len(low_stock),
        "total_items_in_stock": sum(level.balance for level in levels),
        "product_diversity": len(products),
        "low_stock_products": [_report_line(level) for level in low_stock],
        "most_moved_products": [_report_line(level) for level in most_moved],
    }


def report_summary(gateway):
    products, entries, exits = load_collections(gateway)
    return build_summary(products, entries, exits)


def _csv_value(value):
    if value is None:
        return ""
    return str(value)


def render_csv(rows, columns) -> bytes:
    """UTF-8 CSV with a byte-order mark so spreadsheet apps detect the encoding."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow([label for _key, label in columns])
    for row in rows:
        writer.writerow([_csv_value(row.get(key)) for key, _label in columns])
    return (CSV_BOM + buffer.getvalue()).encode("utf-8")


def _record_row(record, columns, product_names=None):
    row = {key: getattr(record, key, None) for key, _label in columns}
    if product_names is not None:
        row["product_name"] = product_names.get(record.product_id, UNKNOWN_PRODUCT_LABEL)
    return row


def export_rows(collection, products, entries, exits):
    _filename, columns = EXPORTS[collection]
    if collection == "products":
        return [_record_row(product, columns) for product in products]
    product_names = {product.id: product.name for product in products}
    records = entries if collection == "entries" else exits
    return [_record_row(record, columns, product_names) for record in records]


def export_csv(gateway, collection):
    if collection not in EXPORTS:
        raise ValueError("Unknown export {!r}".format(collection))
    filename, columns = EXPORTS[collection]
    products, entries, exits = load_collections(gateway)
    return filename, render_csv(export_rows(collection, products, entries, exits), columns)


def export_workbook(gateway) -> bytes:
    products, entries, exits = load_collections(gateway)
    workbook = Workbook()
    workbook.remove(workbook.active)
    for collection, (filename, columns) in EXPORTS.items():
        worksheet = workbook.create_sheet(title=filename.rsplit(".", 1)[0])
        worksheet.append([label for _key, label in columns])
        for row in export_rows(collection, products, entries, exits):
            worksheet.append([row.get(key) for key, _label in columns])
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


__all__ = [
    "CSV_MEDIA_TYPE",
    "EXPORTS",
    "XLSX_MEDIA_TYPE",
    "build_summary",
    "export_csv",
    "export_rows",
    "export_workbook",
    "render_csv",
    "report_summary",
]
