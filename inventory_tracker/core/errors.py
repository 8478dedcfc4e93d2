"""
Typed errors raised by the persistence gateway and the invoice extractor.

    InventoryError
    |
    +-- GatewayError
    |   +-- GatewayConnectionError
    |   +-- PermissionDeniedError
    |   +-- RecordNotFoundError
    |
    +-- ExtractionError

Routers catch them by type and turn them into HTTP responses with a message
the user can act on. None of them are retried.
"""


class InventoryError(Exception):
    code = "INVENTORY_ERROR"

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class GatewayError(InventoryError):
    code = "GATEWAY_ERROR"


class GatewayConnectionError(GatewayError):
    code = "GATEWAY_UNAVAILABLE"


class PermissionDeniedError(GatewayError):
    code = "PERMISSION_DENIED"


class RecordNotFoundError(GatewayError):
    code = "RECORD_NOT_FOUND"

    def __init__(self, collection, record_id):
        super().__init__("{} record {} not found.".format(collection, record_id))
        self.collection = collection
        self.record_id = record_id


class ExtractionError(InventoryError):
    code = "EXTRACTION_FAILED"


__all__ = [
    "ExtractionError",
    "GatewayConnectionError",
    "GatewayError",
    "InventoryError",
    "PermissionDeniedError",
    "RecordNotFoundError",
]
