# minimarket/core/errors.py
"""
Domain error taxonomy.

Services raise these; `minimarket.main` maps any MiniMarketError to a JSON
response using its `status_code` and `detail`. Repositories raise StoreError,
which the order pipeline wraps before it reaches a caller.
"""

from typing import Any

from fastapi import status


class MiniMarketError(Exception):
    """Base class for every error the storefront surfaces to callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def extra(self) -> dict[str, Any]:
        """Additional fields merged into the JSON error body."""
        return {}


class InvalidAmount(MiniMarketError):
    default_detail = "Amount must be non-negative"


class InvalidQuantity(MiniMarketError):
    default_detail = "Quantity must be a positive integer"


class EmptyCart(MiniMarketError):
    default_detail = "Cart is empty"


class OrderSubmissionFailed(MiniMarketError):
    """
    The persistence round trip for a new order failed.

    `cause` carries the underlying message so the client can show it next
    to a retry button. The cart is never touched when this is raised.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Failed to create order"

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"{self.default_detail}: {cause}")

    def extra(self) -> dict[str, Any]:
        return {"cause": self.cause}


class Unauthenticated(MiniMarketError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class NotFound(MiniMarketError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class MalformedCatalog(MiniMarketError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Invalid product data format"


class InvalidCredentials(MiniMarketError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid email or password"


class DuplicateEmail(MiniMarketError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "User with this email already exists"


class ValidationError(MiniMarketError):
    """
    Signup input rejected. `fields` maps each offending field to a message,
    e.g. {"password": "Password must be at least 6 characters"}.
    """

    status_code = 422
    default_detail = "Validation failed"

    def __init__(self, fields: dict[str, str]):
        self.fields = fields
        super().__init__(self.default_detail)

    def extra(self) -> dict[str, Any]:
        return {"fields": self.fields}


class StoreError(Exception):
    """Raised by persistence collaborators when a read or write fails."""
