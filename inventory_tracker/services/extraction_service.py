import base64
import json
import logging
import time
from datetime import date
from urllib import error, request
from urllib.parse import quote, urlparse

from pydantic import ValidationError

from inventory_tracker.config import get_settings
from inventory_tracker.core.constants import ENTRIES, PRODUCTS
from inventory_tracker.core.dates import normalize_date
from inventory_tracker.core.errors import ExtractionError
from inventory_tracker.core.matching import find_best_product_match
from inventory_tracker.schemas.extraction import InvoiceEntries, InvoiceProducts

logger = logging.getLogger(__name__)

_ALLOWED_HTTP_SCHEMES = {"http", "https"}
ALLOWED_MIME_TYPES = {"image/png", "image/jpeg", "image/webp", "application/pdf"}

EXTRACTION_FAILED_MESSAGE = (
    "Could not extract the invoice data. Try again with a sharper image or a different file."
)

ENTRIES_PROMPT = (
    "Extract the following information from this invoice: the supplier name, "
    "the issue date (format YYYY-MM-DD) and the list of products with name and "
    "quantity. Return the answer as JSON."
)
PRODUCTS_PROMPT = (
    "Extract the list of unique product names from this invoice. Do not include "
    "quantities or prices, only the item names. Return the answer as JSON."
)

ENTRIES_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "supplier": {"type": "STRING", "description": "Supplier name"},
        "date": {"type": "STRING", "description": "Issue date as YYYY-MM-DD"},
        "items": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING", "description": "Product name"},
                    "quantity": {"type": "NUMBER", "description": "Product quantity"},
                },
                "required": ["name", "quantity"],
            },
        },
    },
    "required": ["supplier", "date", "items"],
}
PRODUCTS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "items": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING", "description": "Product name"},
                },
                "required": ["name"],
            },
        },
    },
    "required": ["items"],
}

DEFAULT_IMPORT_MIN_STOCK = 10


def validate_api_url(api_url):
    parsed = urlparse(api_url)
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_HTTP_SCHEMES or not parsed.netloc:
        raise ExtractionError("GEMINI_API_URL must be an absolute HTTP(S) URL")
    return api_url.rstrip("/")


def build_request_body(prompt, schema, content, mime_type):
    return {
        "contents": [
            {
                "parts": [
                    {"text": prompt},
                    {
                        "inline_data": {
                            "mime_type": mime_type,
                            "data": base64.b64encode(content).decode("ascii"),
                        }
                    },
                ]
            }
        ],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": schema,
        },
    }


def response_text(payload):
    """Text of the first candidate part of a ``generateContent`` response."""
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        raise ExtractionError(EXTRACTION_FAILED_MESSAGE) from None
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text.strip():
        raise ExtractionError(EXTRACTION_FAILED_MESSAGE)
    return text


def _check_document(content, mime_type):
    settings = get_settings()
    if not content:
        raise ExtractionError("The uploaded file is empty.")
    if len(content) > settings.EXTRACTION_MAX_BYTES:
        raise ExtractionError("The uploaded file is too large.")
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ExtractionError("Unsupported file type. Upload a PNG, JPG or PDF file.")


def generate_content(prompt, schema, content, mime_type):
    settings = get_settings()
    api_key = (settings.GEMINI_API_KEY or "").strip()
    if not api_key:
        raise ExtractionError("GEMINI_API_KEY is not configured")
    _check_document(content, mime_type)

    api_url = validate_api_url(settings.GEMINI_API_URL)
    endpoint = "{}/models/{}:generateContent".format(api_url, quote(settings.GEMINI_MODEL))
    body = json.dumps(build_request_body(prompt, schema, content, mime_type)).encode("utf-8")

    req = request.Request(
        endpoint,
        data=body,
        method="POST",
        headers={
            "Content-Type": "application/json",
            "x-goog-api-key": api_key,
        },
    )

    try:
        with request.urlopen(req, timeout=settings.EXTRACTION_TIMEOUT_SECONDS) as response:  # nosec B310
            raw = response.read()
    except error.HTTPError as exc:
        logger.exception("Invoice extraction failed: HTTP %s", exc.code)
        raise ExtractionError(EXTRACTION_FAILED_MESSAGE) from exc
    except (error.URLError, OSError) as exc:
        logger.exception("Invoice extraction failed: %s", exc)
        raise ExtractionError(
            "Could not reach the extraction service. Check your connection and try again."
        ) from exc

    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        logger.exception("Invoice extraction returned a non-JSON body")
        raise ExtractionError(EXTRACTION_FAILED_MESSAGE) from exc
    return response_text(payload)


def parse_invoice_entries(text) -> InvoiceEntries:
    try:
        return InvoiceEntries.model_validate_json(text)
    except ValidationError as exc:
        logger.warning("Invoice extraction response does not match the schema: %s", exc)
        raise ExtractionError(EXTRACTION_FAILED_MESSAGE) from exc


def parse_invoice_products(text) -> InvoiceProducts:
    try:
        return InvoiceProducts.model_validate_json(text)
    except ValidationError as exc:
        logger.warning("Invoice extraction response does not match the schema: %s", exc)
        raise ExtractionError(EXTRACTION_FAILED_MESSAGE) from exc


def extract_invoice_entries(content, mime_type) -> InvoiceEntries:
    text = generate_content(ENTRIES_PROMPT, ENTRIES_SCHEMA, content, mime_type)
    return parse_invoice_entries(text)


def extract_invoice_products(content, mime_type) -> InvoiceProducts:
    text = generate_content(PRODUCTS_PROMPT, PRODUCTS_SCHEMA, content, mime_type)
    return parse_invoice_products(text)


def _suggestion_key(index):
    return "{}-{}".format(index, int(time.time() * 1000))


def suggested_quantity(value):
    """Whole stock units for an extracted quantity, half rounding up, and whether it was rounded."""
    quantity = max(0, int(value + 0.5))
    return quantity, quantity != value


def build_entry_suggestions(invoice: InvoiceEntries, products, today=None):
    if today is None:
        today = date.today()
    items = []
    for index, item in enumerate(invoice.items):
        match, score = find_best_product_match(item.name, products)
        quantity, rounded = suggested_quantity(item.quantity)
        items.append(
            {
                "key": _suggestion_key(index),
                "original_name": item.name,
                "product_id": match.id if match else None,
                "product_name": match.name if match else None,
                "score": score,
                "quantity": quantity,
                "quantity_rounded": rounded,
            }
        )
    return {
        "supplier": (invoice.supplier or "").strip(),
        "date": normalize_date(invoice.date) or today,
        "items": items,
        "unmatched_count": sum(1 for item in items if item["product_id"] is None),
    }


def build_product_suggestions(invoice: InvoiceProducts, products):
    existing_names = {product.name.strip().lower() for product in products}
    unique = {}
    for item in invoice.items:
        name = item.name.strip()
        if not name or name.lower() in existing_names:
            continue
        unique[name.lower()] = name
    return {
        "items": [
            {
                "key": _suggestion_key(index),
                "name": name,
                "unit": "",
                "min_stock": DEFAULT_IMPORT_MIN_STOCK,
                "price": 0.0,
            }
            for index, name in enumerate(unique.values())
        ]
    }


def confirm_entry_import(gateway, payload):
    """Store the reviewed invoice lines as entries in one batch.

    Lines without a product or with a non-positive quantity are discarded.
    """
    known_ids = {product.id for product in gateway.get_all(PRODUCTS)}
    items = []
    for line in payload.items:
        if not line.product_id or line.quantity <= 0:
            continue
        if line.product_id not in known_ids:
            raise ValueError("Unknown product {}".format(line.product_id))
        if not float(line.quantity).is_integer():
            raise ValueError(
                "Quantities must be whole units; got {} for product {}.".format(line.quantity, line.product_id)
            )
        items.append(
            {
                "date": payload.date,
                "product_id": line.product_id,
                "supplier": payload.supplier,
                "quantity": int(line.quantity),
            }
        )
    if not items:
        raise ValueError("Assign a product and a positive quantity to at least one item.")
    return gateway.add_multiple(ENTRIES, items)


def confirm_product_import(gateway, payload):
    items = []
    for line in payload.items:
        name = line.name.strip()
        unit = line.unit.strip()
        if not name or not unit or line.min_stock < 0 or line.price < 0:
            continue
        if line.consumption_rate is not None and line.consumption_rate < 0:
            continue
        items.append(
            {
                "name": name,
                "unit": unit,
                "min_stock": line.min_stock,
                "price": line.price,
                "consumption_unit": (line.consumption_unit or "").strip() or None,
                "consumption_rate": line.consumption_rate,
            }
        )
    if not items:
        raise ValueError("Fill in every field for the products you want to add.")
    return gateway.add_multiple(PRODUCTS, items)


__all__ = [
    "ALLOWED_MIME_TYPES",
    "build_entry_suggestions",
    "build_product_suggestions",
    "build_request_body",
    "confirm_entry_import",
    "confirm_product_import",
    "extract_invoice_entries",
    "extract_invoice_products",
    "parse_invoice_entries",
    "parse_invoice_products",
    "response_text",
    "validate_api_url",
]
