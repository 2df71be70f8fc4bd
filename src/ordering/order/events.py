"""Domain events for the Order aggregate.

Events are immutable facts recorded when an order changes status. They are
stored alongside the order when its Unit of Work commits and form the order's
audit trail; customer and staff notifications are dispatched separately by the
workflow once the commit has succeeded.
"""

from protean.fields import Date, DateTime, Decimal, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A checkout was converted into a pending order with its stock reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total_amount = Decimal(required=True)
    item_count = Integer(required=True)
    tracking_number = String()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentConfirmed:
    """Payment was confirmed; the order moved from pending to processing."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    tracking_number = String()
    shipping_provider = String()
    estimated_delivery_date = Date()
    shipped_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled; its reserved stock goes back to inventory."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusOverridden:
    """An admin forced a status change outside the regular transition rules."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    overridden_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDetailsAmended:
    """An admin patched status or shipping details of an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    shipping_provider = String()
    amended_at = DateTime(required=True)
