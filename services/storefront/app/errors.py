from __future__ import annotations


class StorefrontError(Exception):
    """Base class for storefront client errors."""


class StorefrontValidationError(StorefrontError):
    """The action was blocked locally; nothing was sent to the server."""


class InvalidQuantityError(StorefrontValidationError):
    def __init__(self, product_id: int, quantity: int) -> None:
        super().__init__(
            f"Quantity must be at least 1 (got {quantity} for product {product_id}). "
            "Remove the item instead."
        )
        self.product_id = product_id
        self.quantity = quantity


class CheckoutValidationError(StorefrontValidationError):
    pass


class StorefrontNetworkError(StorefrontError):
    """The request failed or timed out before the server answered."""


class StorefrontAuthError(StorefrontError):
    def __init__(self, message: str = "Your session has expired. Please log in.") -> None:
        super().__init__(message)


class StorefrontServerRejection(StorefrontError):
    def __init__(self, status_code: int, server_message: str | None = None) -> None:
        super().__init__(server_message or f"Server rejected the request (HTTP {status_code})")
        self.status_code = status_code
        # Only set when the server sent a plain string we can show as-is.
        self.server_message = server_message
