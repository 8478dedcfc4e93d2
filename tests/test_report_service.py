import unittest
from datetime import date
from types import SimpleNamespace

from inventory_tracker.services.report_service import (
    ENTRY_COLUMNS,
    PRODUCT_COLUMNS,
    build_summary,
    export_rows,
    render_csv,
)


def product(product_id, name, min_stock, price):
    return SimpleNamespace(id=product_id, name=name, unit="un", min_stock=min_stock, price=price)


def entry(entry_id, product_id, quantity):
    return SimpleNamespace(
        id=entry_id,
        date=date(2026, 10, 1),
        product_id=product_id,
        supplier="MedSul",
        quantity=quantity,
    )


def exit_of(product_id, quantity):
    return SimpleNamespace(id="x-" + product_id, date=date(2026, 10, 2), product_id=product_id, quantity=quantity)


class CsvExportTest(unittest.TestCase):
    def test_fields_with_separators_are_quoted(self):
        content = render_csv(
            [{"id": "p1", "name": 'Caixa, 10kg "grande"', "unit": "cx", "min_stock": 2, "price": 9.9}],
            PRODUCT_COLUMNS,
        ).decode("utf-8")

        self.assertTrue(content.startswith("\ufeff"))
        header, row = content.lstrip("\ufeff").rstrip("\n").split("\n")
        self.assertEqual(header, "ID,Nome do Produto,Unidade,Estoque Mínimo,Preço (R$)")
        self.assertEqual(row, 'p1,"Caixa, 10kg ""grande""",cx,2,9.9')

    def test_none_becomes_empty_field(self):
        content = render_csv([{"id": "p1", "name": None}], PRODUCT_COLUMNS).decode("utf-8")
        self.assertTrue(content.endswith("p1,,,,\n"))

    def test_movements_resolve_product_names(self):
        rows = export_rows(
            "entries",
            [product("p1", "Luva", 5, 1.0)],
            [entry("e1", "p1", 4), entry("e2", "gone", 2)],
            [],
        )
        self.assertEqual([row["product_name"] for row in rows], ["Luva", "N/A"])

        content = render_csv(rows, ENTRY_COLUMNS).decode("utf-8")
        self.assertIn("e2,2026-10-01,N/A,MedSul,2,gone", content)


class SummaryTest(unittest.TestCase):
    def test_summary_figures(self):
        products = [
            product("p1", "Seringa", min_stock=10, price=2.0),
            product("p2", "Algodão", min_stock=1, price=5.0),
            product("p3", "Gaze", min_stock=0, price=1.5),
        ]
        entries = [entry("e1", "p1", 50), entry("e2", "p2", 3), entry("e3", "p3", 8)]
        exits = [exit_of("p1", 45), exit_of("p2", 2), exit_of("p3", 6)]

        summary = build_summary(products, entries, exits, top_limit=2)

        self.assertEqual(summary["total_stock_value"], 5 * 2.0 + 1 * 5.0 + 2 * 1.5)
        self.assertEqual(summary["total_items_in_stock"], 8)
        self.assertEqual(summary["product_diversity"], 3)
        self.assertEqual(summary["low_stock_count"], 2)
        self.assertEqual(
            [line["name"] for line in summary["low_stock_products"]],
            ["Algodão", "Seringa"],
        )
        self.assertEqual(
            [line["name"] for line in summary["most_moved_products"]],
            ["Seringa", "Gaze"],
        )

    def test_empty_inventory(self):
        summary = build_summary([], [], [], top_limit=5)
        self.assertEqual(summary["total_stock_value"], 0)
        self.assertEqual(summary["low_stock_products"], [])


if __name__ == "__main__":
    unittest.main()
