"""Errors raised by the ordering context.

Every error extends a Protean exception, so the Protean FastAPI handlers map
them onto HTTP responses: validation failures become 400s, missing rows 404s.
`AccountRestricted` gets its own 403 handler in the API layer.
"""

from protean.exceptions import (
    InvalidOperationError,
    ObjectNotFoundError,
    ValidationError,
)


# ---------------------------------------------------------------------------
# Validation (400)
# ---------------------------------------------------------------------------
class InvalidOrderRequest(ValidationError):
    """The checkout payload is malformed: no items, no address, bad quantities."""


class InsufficientStock(ValidationError):
    """A reservation asked for more units than the product has available."""

    def __init__(self, product_id, requested, available):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            {"quantity": [f"Insufficient stock for product {product_id}: requested {requested}, available {available}"]}
        )


class IllegalStateTransition(ValidationError):
    """The order's current status does not allow the requested transition."""

    def __init__(self, current_status, target_status):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__({"status": [f"Cannot transition from {current_status} to {target_status}"]})


class InvalidStatus(ValidationError):
    def __init__(self, status):
        self.status = status
        super().__init__({"status": [f"Invalid order status: {status}"]})


class MissingConfirmation(ValidationError):
    def __init__(self):
        super().__init__({"confirm": ["Delivery must be confirmed before marking the order as delivered"]})


# ---------------------------------------------------------------------------
# Not found (404)
# ---------------------------------------------------------------------------
class OrderNotFound(ObjectNotFoundError):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class ProductNotFound(ObjectNotFoundError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


# ---------------------------------------------------------------------------
# Forbidden (403)
# ---------------------------------------------------------------------------
class AccountRestricted(InvalidOperationError):
    """The requesting account is locked or deactivated and cannot place orders."""

    def __init__(self, user_id, reason):
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"Account {user_id} is {reason} and cannot place orders")
