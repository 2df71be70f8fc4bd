"""Order aggregate — one customer order and its line items.

State Machine:
    pending → processing → shipped → delivered
    pending/processing → cancelled

`pending` is the initial state; `delivered` and `cancelled` are terminal. The
dedicated transition methods only move forward along that path. The single
exception is `override_status`, an audited admin escape hatch that accepts any
known status.

Money is held as `decimal.Decimal`. `total_amount` is the checkout total the
customer agreed to and is never recomputed from the line items. Each line item
snapshots the unit price at purchase time.
"""

import time
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal as D
from enum import Enum
from uuid import uuid4

from protean.fields import (
    Date,
    DateTime,
    Decimal,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering, setting
from ordering.exceptions import (
    IllegalStateTransition,
    InvalidOrderRequest,
    InvalidStatus,
    MissingConfirmation,
)
from ordering.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderDetailsAmended,
    OrderPlaced,
    OrderShipped,
    OrderStatusOverridden,
    PaymentConfirmed,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# States from which cancellation is allowed
_CANCELLABLE_STATES = {
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
}

_ADDRESS_FIELDS = ("full_name", "address", "city", "postal_code", "phone")


def parse_status(value):
    """Resolve a status string (case-insensitive) or raise InvalidStatus."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        raise InvalidStatus(value) from None


def generate_tracking_number():
    """`TRK-<epoch millis>-<8 uppercase hex chars>`."""
    millis = int(time.time() * 1000)
    return f"TRK-{millis}-{uuid4().hex[:8].upper()}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Address:
    """A delivery or billing address captured at checkout time.

    Once recorded on an Order the address is a snapshot; later changes to the
    customer's saved addresses do not reach existing orders.
    """

    full_name = String(max_length=255)
    address = String(required=True, max_length=500)
    city = String(max_length=100)
    postal_code = String(max_length=20)
    phone = String(max_length=30)

    @classmethod
    def from_mapping(cls, data, field_name="shipping"):
        """Build an Address from a checkout payload, rejecting a missing street line."""
        if isinstance(data, Address):
            return data
        if not isinstance(data, dict) or not str(data.get("address") or "").strip():
            raise InvalidOrderRequest({field_name: ["Shipping address is required"]})
        return cls(**{key: data[key] for key in _ADDRESS_FIELDS if data.get(key) is not None})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLineItem:
    """One product line of an order.

    `unit_price_at_purchase` and `subtotal` are frozen when the order is
    placed. The product's name and images shown to customers come from the live
    product at read time.
    """

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price_at_purchase = Decimal(required=True, min_value=0)
    subtotal = Decimal(required=True, min_value=0)
    position = Integer(default=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    total_amount = Decimal(required=True, min_value=0)
    tax_amount = Decimal(min_value=0)
    shipping_cost = Decimal(min_value=0, default=D("0"))
    shipping_address = ValueObject(Address, required=True)
    billing_address = ValueObject(Address)
    line_items = HasMany(OrderLineItem)
    tracking_number = String(max_length=100)
    shipping_provider = String(max_length=100)
    estimated_delivery_date = Date()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        user_id,
        shipping_address,
        total_amount,
        shipping_cost=None,
        tax_amount=None,
        billing_address=None,
        tracking_number=None,
        shipping_provider=None,
    ):
        """Start a pending order from checkout data.

        Line items are attached afterwards with `add_line_item`, then `place`
        checks the order is complete and records the OrderPlaced event.

        Args:
            user_id: The customer placing the order.
            shipping_address: Dict or Address; `address` is mandatory.
            total_amount: Checkout total, stored as given.
            billing_address: Defaults to the shipping address.
            tracking_number: Placeholder tracking number; generated when omitted.
        """
        if total_amount is None:
            raise InvalidOrderRequest({"total": ["Order total is required"]})

        shipping = Address.from_mapping(shipping_address, "shipping")
        billing = Address.from_mapping(billing_address, "billing") if billing_address else shipping
        now = datetime.now(UTC)

        return cls(
            user_id=str(user_id),
            status=OrderStatus.PENDING.value,
            total_amount=D(str(total_amount)),
            tax_amount=D(str(tax_amount)) if tax_amount is not None else None,
            shipping_cost=D(str(shipping_cost)) if shipping_cost is not None else D("0"),
            shipping_address=shipping,
            billing_address=billing,
            tracking_number=tracking_number or generate_tracking_number(),
            shipping_provider=shipping_provider or setting("DEFAULT_SHIPPING_PROVIDER", "Standard Shipping"),
            estimated_delivery_date=date.today() + timedelta(days=setting("ESTIMATED_DELIVERY_DAYS", 7)),
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Line items
    # -------------------------------------------------------------------
    def add_line_item(self, product_id, quantity, unit_price, product_name=None):
        """Append a line item, snapshotting its unit price."""
        if quantity is None or int(quantity) <= 0:
            raise InvalidOrderRequest({"quantity": [f"Quantity for product {product_id} must be positive"]})

        unit_price = D(str(unit_price))
        item = OrderLineItem(
            product_id=str(product_id),
            product_name=product_name,
            quantity=int(quantity),
            unit_price_at_purchase=unit_price,
            subtotal=unit_price * int(quantity),
            position=len(self.line_items or []),
        )
        self.add_line_items(item)
        return item

    @property
    def ordered_line_items(self):
        return sorted(self.line_items or [], key=lambda item: item.position or 0)

    @property
    def item_count(self):
        return sum(item.quantity for item in self.line_items or [])

    def place(self):
        """Seal a freshly created order. An order without line items is rejected."""
        if not self.line_items:
            raise InvalidOrderRequest({"items": ["Order must contain at least one item"]})

        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                user_id=str(self.user_id),
                total_amount=self.total_amount,
                item_count=self.item_count,
                tracking_number=self.tracking_number,
                placed_at=self.created_at or datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise IllegalStateTransition(current.value, target_status.value)

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def confirm_payment(self):
        """pending → processing."""
        self._assert_can_transition(OrderStatus.PROCESSING)
        self.status = OrderStatus.PROCESSING.value
        self._touch()

        self.raise_(
            PaymentConfirmed(
                order_id=str(self.id),
                user_id=str(self.user_id),
                confirmed_at=self.updated_at,
            )
        )

    def mark_shipped(self, tracking_number=None, shipping_provider=None):
        """processing → shipped.

        Non-blank tracking number and provider replace the stored ones; the
        estimated delivery date is reset relative to today.
        """
        self._assert_can_transition(OrderStatus.SHIPPED)
        self.status = OrderStatus.SHIPPED.value
        if tracking_number and tracking_number.strip():
            self.tracking_number = tracking_number.strip()
        if shipping_provider and shipping_provider.strip():
            self.shipping_provider = shipping_provider.strip()
        self.estimated_delivery_date = date.today() + timedelta(days=setting("SHIPPED_DELIVERY_DAYS", 5))
        self._touch()

        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                user_id=str(self.user_id),
                tracking_number=self.tracking_number,
                shipping_provider=self.shipping_provider,
                estimated_delivery_date=self.estimated_delivery_date,
                shipped_at=self.updated_at,
            )
        )

    def mark_delivered(self, confirmation_provided):
        """shipped → delivered. Staff must confirm the hand-over."""
        if not confirmation_provided:
            raise MissingConfirmation()

        self._assert_can_transition(OrderStatus.DELIVERED)
        self.status = OrderStatus.DELIVERED.value
        self.estimated_delivery_date = date.today()
        self._touch()

        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                user_id=str(self.user_id),
                delivered_at=self.updated_at,
            )
        )

    def cancel(self):
        """pending/processing → cancelled. Returns the status the order left."""
        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise IllegalStateTransition(current.value, OrderStatus.CANCELLED.value)

        self.status = OrderStatus.CANCELLED.value
        self._touch()

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                user_id=str(self.user_id),
                previous_status=current.value,
                cancelled_at=self.updated_at,
            )
        )
        return current

    # -------------------------------------------------------------------
    # Admin operations
    # -------------------------------------------------------------------
    def override_status(self, new_status):
        """Set any known status without checking the transition map.

        Returns the previous status.
        """
        target = parse_status(new_status)
        previous = OrderStatus(self.status)
        self.status = target.value
        self._touch()

        self.raise_(
            OrderStatusOverridden(
                order_id=str(self.id),
                user_id=str(self.user_id),
                previous_status=previous.value,
                new_status=target.value,
                overridden_at=self.updated_at,
            )
        )
        return previous

    def amend(self, status=None, tracking_number=None, shipping_provider=None):
        """Apply an admin patch. Returns True when the status actually changed."""
        target = parse_status(status) if status else None
        previous = OrderStatus(self.status)

        if target is not None:
            self.status = target.value
        if tracking_number and tracking_number.strip():
            self.tracking_number = tracking_number.strip()
        if shipping_provider and shipping_provider.strip():
            self.shipping_provider = shipping_provider.strip()
        self._touch()

        self.raise_(
            OrderDetailsAmended(
                order_id=str(self.id),
                user_id=str(self.user_id),
                previous_status=previous.value,
                new_status=self.status,
                tracking_number=self.tracking_number,
                shipping_provider=self.shipping_provider,
                amended_at=self.updated_at,
            )
        )
        return target is not None and target != previous
