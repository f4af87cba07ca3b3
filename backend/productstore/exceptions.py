"""
Product Store — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for each failure the API can report.
How:   Each exception carries a client-facing message, an HTTP status code and
       an optional context dict. Global handlers (registered in main.py) turn
       them into `{"message": ...}` JSON responses.
Who:   Raised by the codec and ProductService; caught by global handlers.

Exception Hierarchy:
    ProductStoreError (base)
    ├── InvalidBodyError         → 400 "Incorrect body"
    ├── DuplicateProductError    → 400 "Product with this id already exists"
    ├── ProductNotFoundError     → 404 "Product not found"
    ├── DatabaseError            → 500 "Database error"
    └── ResponseEncodingError    → 500 "Response encoding error"

The messages are part of the public contract; clients match on them.
Context is logged server-side only.
"""

from typing import Any, Dict, Optional


class ProductStoreError(Exception):
    """
    Base exception for all Product Store errors.

    Attributes:
        message:      User-facing error description (returned in the response body)
        context:      Additional debug info (logged but NOT returned to client)
        status_code:  HTTP status the global handler responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidBodyError(ProductStoreError):
    """
    Raised when a request body cannot be decoded into a Product.

    When:    Malformed JSON, a non-object payload, or a field of the wrong type.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Incorrect body",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DuplicateProductError(ProductStoreError):
    """
    Raised when an insert collides with the unique index on `id`.

    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        product_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if product_id is not None:
            ctx["product_id"] = product_id
        super().__init__(message="Product with this id already exists", context=ctx)
        self.product_id = product_id


class ProductNotFoundError(ProductStoreError):
    """
    Raised when no document matches the requested id.

    When:    GET, PUT or DELETE on /products/{id} for an id that is not stored.
    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        product_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if product_id is not None:
            ctx["product_id"] = product_id
        super().__init__(message="Product not found", context=ctx)
        self.product_id = product_id


class DatabaseError(ProductStoreError):
    """
    Raised when a storage operation fails.

    When:    Connection lost, server selection failure, write error, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always the fixed "Database error";
    the driver's error text goes into `context` for the server log.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Database error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ResponseEncodingError(ProductStoreError):
    """
    Raised when a response payload cannot be serialized to JSON.

    HTTP:    500 Internal Server Error (this request only; the process keeps serving)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Response encoding error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
