"""Exceptions raised by the scan-and-go services.

Every request-level error derives from ``ScanGoError`` and carries the HTTP
status the API layer reports it with. ``CatalogLoadError`` is not a request
error: it aborts application startup.
"""


class ScanGoError(Exception):
    """Base exception for all request-level errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ScanGoError):
    """Raised when required input is missing or empty."""

    status_code = 400


class NotFoundError(ScanGoError):
    """Raised when a store, product or order identifier is unknown."""

    status_code = 404

    def __init__(self, kind: str, identifier: str | None = None):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found")


class ConflictError(ScanGoError):
    """Raised when an operation is not valid for the order's current status."""

    status_code = 409


class IntegrityError(ScanGoError):
    """Raised when an order references a product missing from the catalog."""

    status_code = 422

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class PaymentGatewayError(ScanGoError):
    """Raised when the external payment gateway rejects or fails a request."""

    status_code = 502


class CatalogLoadError(Exception):
    """Raised when the store or product seed data cannot be loaded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to load catalog data from {path}: {reason}")
