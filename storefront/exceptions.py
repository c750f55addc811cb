"""Custom exceptions for the storefront service.

Defines specific exception types for better error handling and reporting.
Each carries the HTTP status code the API renders it with.
"""

from typing import Any, Dict, Optional


class StorefrontException(Exception):
    """Base exception for storefront errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ProductNotFoundError(StorefrontException):
    """Raised when a product id does not match any record."""

    def __init__(self, product_id: str):
        super().__init__(
            message="product not found",
            status_code=404,
            details={"product_id": product_id},
        )


class NoFeaturedProductsError(StorefrontException):
    """Raised when neither the cache nor the store holds featured products."""

    def __init__(self):
        super().__init__(message="no featured product found", status_code=404)


class UpstreamError(StorefrontException):
    """Raised when a store, cache or image host call fails.

    The message is the underlying error text; callers only ever see a generic
    "server error" alongside it.
    """

    def __init__(self, operation: str, error: Exception):
        super().__init__(
            message=str(error),
            status_code=500,
            details={
                "operation": operation,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
        self.operation = operation


class ImageHostError(Exception):
    """Raised by the image host client when an upload or delete fails."""
