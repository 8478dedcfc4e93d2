import json
import unittest
from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from urllib import error

from inventory_tracker.config import Settings
from inventory_tracker.core.errors import ExtractionError
from inventory_tracker.schemas.extraction import (
    EntryImportConfirm,
    InvoiceEntries,
    InvoiceProducts,
    ProductImportConfirm,
)
from inventory_tracker.services import extraction_service

CATALOG = [
    SimpleNamespace(id="p1", name="Luva Nitrílica"),
    SimpleNamespace(id="p2", name="Gaze Estéril"),
]


def gemini_payload(document):
    return {"candidates": [{"content": {"parts": [{"text": json.dumps(document)}]}}]}


class FakeGateway:
    def __init__(self, products):
        self.products = products
        self.added = []

    def get_all(self, collection):
        return list(self.products)

    def add_multiple(self, collection, items):
        self.added.append((collection, items))
        return items


class GenerateContentTest(unittest.TestCase):
    def setUp(self):
        settings_patch = patch.object(
            extraction_service,
            "get_settings",
            return_value=Settings(GEMINI_API_KEY="test-key"),
        )
        settings_patch.start()
        self.addCleanup(settings_patch.stop)

    def _respond_with(self, urlopen, payload):
        response = MagicMock()
        response.read.return_value = json.dumps(payload).encode("utf-8")
        urlopen.return_value.__enter__.return_value = response

    @patch.object(extraction_service.request, "urlopen")
    def test_extracts_invoice_entries(self, urlopen):
        self._respond_with(
            urlopen,
            gemini_payload(
                {
                    "supplier": "MedSul",
                    "date": "2026-10-02",
                    "items": [{"name": "Luva Nitrílica M", "quantity": 20}],
                }
            ),
        )

        invoice = extraction_service.extract_invoice_entries(b"%PDF-1.4", "application/pdf")

        self.assertEqual(invoice.supplier, "MedSul")
        self.assertEqual(invoice.items[0].quantity, 20)
        sent = urlopen.call_args[0][0]
        self.assertTrue(sent.full_url.endswith("/models/gemini-2.5-flash:generateContent"))
        self.assertEqual(sent.get_header("X-goog-api-key"), "test-key")
        body = json.loads(sent.data.decode("utf-8"))
        self.assertEqual(body["generationConfig"]["responseMimeType"], "application/json")
        self.assertEqual(body["contents"][0]["parts"][1]["inline_data"]["mime_type"], "application/pdf")

    @patch.object(extraction_service.request, "urlopen")
    def test_extracts_product_names(self, urlopen):
        self._respond_with(urlopen, gemini_payload({"items": [{"name": "Seringa 5ml"}]}))
        invoice = extraction_service.extract_invoice_products(b"\x89PNG", "image/png")
        self.assertEqual([item.name for item in invoice.items], ["Seringa 5ml"])

    @patch.object(extraction_service.request, "urlopen")
    def test_network_failure_raises_extraction_error(self, urlopen):
        urlopen.side_effect = error.URLError("offline")
        with self.assertLogs(extraction_service.logger, level="ERROR"):
            with self.assertRaises(ExtractionError):
                extraction_service.extract_invoice_entries(b"data", "image/jpeg")

    @patch.object(extraction_service.request, "urlopen")
    def test_schema_mismatch_raises_extraction_error(self, urlopen):
        self._respond_with(urlopen, gemini_payload({"supplier": "MedSul"}))
        with self.assertRaises(ExtractionError):
            extraction_service.extract_invoice_entries(b"data", "image/jpeg")

    @patch.object(extraction_service.request, "urlopen")
    def test_empty_candidates_raise_extraction_error(self, urlopen):
        self._respond_with(urlopen, {"candidates": []})
        with self.assertRaises(ExtractionError):
            extraction_service.extract_invoice_products(b"data", "image/jpeg")

    @patch.object(extraction_service.request, "urlopen")
    def test_unsupported_file_never_reaches_the_api(self, urlopen):
        with self.assertRaises(ExtractionError):
            extraction_service.extract_invoice_entries(b"data", "text/plain")
        with self.assertRaises(ExtractionError):
            extraction_service.extract_invoice_entries(b"", "image/png")
        urlopen.assert_not_called()

    def test_missing_api_key(self):
        with patch.object(extraction_service, "get_settings", return_value=Settings(GEMINI_API_KEY="")):
            with self.assertRaises(ExtractionError):
                extraction_service.extract_invoice_entries(b"data", "image/png")


class RequestBuildingTest(unittest.TestCase):
    def test_validate_api_url_strips_trailing_slash(self):
        self.assertEqual(
            extraction_service.validate_api_url("https://generativelanguage.googleapis.com/v1beta/"),
            "https://generativelanguage.googleapis.com/v1beta",
        )

    def test_validate_api_url_rejects_relative_urls(self):
        with self.assertRaises(ExtractionError):
            extraction_service.validate_api_url("/v1beta")
        with self.assertRaises(ExtractionError):
            extraction_service.validate_api_url("ftp://example.com")

    def test_request_body_inlines_the_document(self):
        body = extraction_service.build_request_body("prompt", {"type": "OBJECT"}, b"abc", "image/png")
        inline = body["contents"][0]["parts"][1]["inline_data"]
        self.assertEqual(inline["data"], "YWJj")
        self.assertEqual(body["generationConfig"]["responseSchema"], {"type": "OBJECT"})


class SuggestionTest(unittest.TestCase):
    def test_entry_suggestions_match_catalog(self):
        invoice = InvoiceEntries(
            supplier=" MedSul ",
            date="2026-10-02",
            items=[
                {"name": "Luva Nitrílica M", "quantity": 20},
                {"name": "Seringa 5ml", "quantity": 3},
            ],
        )

        preview = extraction_service.build_entry_suggestions(invoice, CATALOG)

        self.assertEqual(preview["supplier"], "MedSul")
        self.assertEqual(preview["date"], date(2026, 10, 2))
        first, second = preview["items"]
        self.assertEqual(first["product_id"], "p1")
        self.assertAlmostEqual(first["score"], 0.7875)
        self.assertIsNone(second["product_id"])
        self.assertEqual(preview["unmatched_count"], 1)

    def test_fractional_quantities_are_rounded_and_flagged(self):
        invoice = InvoiceEntries(
            supplier="MedSul",
            date="2026-10-02",
            items=[{"name": "Gaze Estéril", "quantity": 2.5}, {"name": "Luva", "quantity": 4}],
        )
        first, second = extraction_service.build_entry_suggestions(invoice, CATALOG)["items"]
        self.assertEqual((first["quantity"], first["quantity_rounded"]), (3, True))
        self.assertEqual((second["quantity"], second["quantity_rounded"]), (4, False))

    def test_day_first_invoice_dates_are_read(self):
        invoice = InvoiceEntries(supplier="MedSul", date="02/10/2026", items=[])
        preview = extraction_service.build_entry_suggestions(invoice, CATALOG)
        self.assertEqual(preview["date"], date(2026, 10, 2))

    def test_missing_date_defaults_to_today(self):
        invoice = InvoiceEntries(supplier="MedSul", date="", items=[])
        preview = extraction_service.build_entry_suggestions(invoice, CATALOG, today=date(2026, 10, 17))
        self.assertEqual(preview["date"], date(2026, 10, 17))

    def test_product_suggestions_skip_known_and_duplicate_names(self):
        invoice = InvoiceProducts(
            items=[
                {"name": " Seringa 5ml "},
                {"name": "luva nitrílica"},
                {"name": ""},
                {"name": "Atadura"},
                {"name": "SERINGA 5ML"},
            ]
        )

        preview = extraction_service.build_product_suggestions(invoice, CATALOG)

        names = [item["name"] for item in preview["items"]]
        self.assertEqual(names, ["SERINGA 5ML", "Atadura"])
        self.assertTrue(all(item["min_stock"] == 10 for item in preview["items"]))
        self.assertTrue(all(item["unit"] == "" for item in preview["items"]))


class ConfirmImportTest(unittest.TestCase):
    def test_entry_import_keeps_assigned_positive_lines(self):
        gateway = FakeGateway(CATALOG)
        payload = EntryImportConfirm(
            supplier="MedSul",
            date=date(2026, 10, 2),
            items=[
                {"product_id": "p1", "quantity": 20},
                {"product_id": None, "quantity": 5},
                {"product_id": "p2", "quantity": 0},
            ],
        )

        stored = extraction_service.confirm_entry_import(gateway, payload)

        self.assertEqual(len(stored), 1)
        self.assertEqual(stored[0]["product_id"], "p1")
        self.assertEqual(stored[0]["supplier"], "MedSul")
        self.assertEqual(len(gateway.added), 1)

    def test_entry_import_rejects_empty_selection_and_unknown_products(self):
        gateway = FakeGateway(CATALOG)
        with self.assertRaises(ValueError):
            extraction_service.confirm_entry_import(
                gateway,
                EntryImportConfirm(supplier="MedSul", date=date(2026, 10, 2), items=[{"quantity": 4}]),
            )
        with self.assertRaises(ValueError):
            extraction_service.confirm_entry_import(
                gateway,
                EntryImportConfirm(
                    supplier="MedSul",
                    date=date(2026, 10, 2),
                    items=[{"product_id": "ghost", "quantity": 4}],
                ),
            )
        self.assertEqual(gateway.added, [])

    def test_entry_import_rejects_fractional_quantities(self):
        gateway = FakeGateway(CATALOG)
        with self.assertRaises(ValueError) as ctx:
            extraction_service.confirm_entry_import(
                gateway,
                EntryImportConfirm(
                    supplier="MedSul",
                    date=date(2026, 10, 2),
                    items=[{"product_id": "p1", "quantity": 2.5}],
                ),
            )
        self.assertIn("whole units", str(ctx.exception))
        self.assertEqual(gateway.added, [])

        stored = extraction_service.confirm_entry_import(
            gateway,
            EntryImportConfirm(
                supplier="MedSul",
                date=date(2026, 10, 2),
                items=[{"product_id": "p1", "quantity": 3.0}],
            ),
        )
        self.assertEqual(stored[0]["quantity"], 3)
        self.assertIsInstance(stored[0]["quantity"], int)

    def test_product_import_skips_incomplete_lines(self):
        gateway = FakeGateway([])
        payload = ProductImportConfirm(
            items=[
                {"name": "Seringa 5ml", "unit": "caixa", "min_stock": 10, "price": 12.5},
                {"name": "Atadura", "unit": "", "min_stock": 10, "price": 1.0},
                {"name": "Cateter", "unit": "un", "min_stock": -1, "price": 1.0},
            ]
        )

        stored = extraction_service.confirm_product_import(gateway, payload)

        self.assertEqual([item["name"] for item in stored], ["Seringa 5ml"])
        self.assertIsNone(stored[0]["consumption_unit"])

    def test_product_import_requires_one_valid_line(self):
        with self.assertRaises(ValueError):
            extraction_service.confirm_product_import(
                FakeGateway([]), ProductImportConfirm(items=[{"name": "Atadura"}])
            )


if __name__ == "__main__":
    unittest.main()
