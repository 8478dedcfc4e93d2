import unittest
from datetime import date, timedelta
from types import SimpleNamespace

from inventory_tracker.core.consumption_rules import (
    compute_consumption,
    consumption_level,
    consumption_percentage,
    progress_width,
)

TODAY = date(2026, 10, 17)


def product(product_id, name, unit=None, rate=None):
    return SimpleNamespace(id=product_id, name=name, consumption_unit=unit, consumption_rate=rate)


def exit_on(product_id, days_ago, quantity):
    return SimpleNamespace(product_id=product_id, date=TODAY - timedelta(days=days_ago), quantity=quantity)


class ConsumptionRulesTest(unittest.TestCase):
    def test_planned_actual_balance_and_percentage(self):
        rows = compute_consumption(
            [product("p1", "Luva", "atendimento", 2)],
            [exit_on("p1", 1, 100), exit_on("p1", 29, 80)],
            100,
            today=TODAY,
        )
        (row,) = rows
        self.assertEqual(row.planned_consumption, 200)
        self.assertEqual(row.actual_consumption, 180)
        self.assertEqual(row.balance, 20)
        self.assertEqual(row.consumption_percentage, 90.0)

    def test_window_boundary_is_inclusive(self):
        (row,) = compute_consumption(
            [product("p1", "Luva", "atendimento", 1)],
            [exit_on("p1", 30, 5), exit_on("p1", 31, 7)],
            10,
            today=TODAY,
        )
        self.assertEqual(row.actual_consumption, 5)

    def test_zero_forecast_has_zero_percentage(self):
        (row,) = compute_consumption(
            [product("p1", "Luva", "atendimento", 3)],
            [exit_on("p1", 0, 4)],
            0,
            today=TODAY,
        )
        self.assertEqual(row.planned_consumption, 0)
        self.assertEqual(row.consumption_percentage, 0)
        self.assertEqual(row.balance, -4)

    def test_products_without_consumption_settings_are_excluded(self):
        rows = compute_consumption(
            [
                product("p1", "No unit", None, 2),
                product("p2", "Zero rate", "atendimento", 0),
                product("p3", "Blank unit", "  ", 1),
                product("p4", "Tracked", "atendimento", 0.5),
            ],
            [],
            40,
            today=TODAY,
        )
        self.assertEqual([row.product_id for row in rows], ["p4"])
        self.assertEqual(rows[0].planned_consumption, 20)

    def test_iso_string_dates_are_accepted(self):
        exits = [SimpleNamespace(product_id="p1", date="2026-10-01", quantity=3)]
        (row,) = compute_consumption([product("p1", "Luva", "kit", 1)], exits, 10, today=TODAY)
        self.assertEqual(row.actual_consumption, 3)

    def test_negative_forecast_rejected(self):
        with self.assertRaises(ValueError):
            compute_consumption([], [], -1, today=TODAY)

    def test_percentage_is_not_clamped_but_bar_is(self):
        self.assertEqual(consumption_percentage(150, 100), 150.0)
        self.assertEqual(progress_width(150.0), 100.0)
        self.assertEqual(progress_width(42.5), 42.5)

    def test_levels(self):
        self.assertEqual(consumption_level(80), "ok")
        self.assertEqual(consumption_level(80.1), "warning")
        self.assertEqual(consumption_level(100), "warning")
        self.assertEqual(consumption_level(100.5), "danger")


if __name__ == "__main__":
    unittest.main()
