# products_api/errors.py
"""Product service exceptions.

Raised by the store layer and the service logic; ``main.create_app``
registers handlers that turn each of them into a JSON response.
"""


class ProductServiceError(Exception):
    """Base class for every error the service reports to callers."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(ProductServiceError):
    """Missing or invalid product field. Surfaces as 400."""


class NotFoundError(ProductServiceError):
    """No product document matches the given id. Surfaces as 404."""

    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class StoreError(ProductServiceError):
    """Malformed id, connectivity or internal fault in the document store."""
