"""Product aggregate — the stock-bearing side of the Inventory Ledger.

A Product carries display metadata (name, images) that can be edited freely and
an `available_quantity` that must never go negative. Stock only moves through
`reserve` and `restore`, which the InventoryLedger calls under a per-product
lock; nothing else writes the quantity directly.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Decimal, DateTime, Integer, List, String

from ordering.domain import ordering, setting
from ordering.exceptions import InsufficientStock

DEFAULT_LOW_STOCK_THRESHOLD = 10


def _default_threshold():
    return setting("LOW_STOCK_THRESHOLD", DEFAULT_LOW_STOCK_THRESHOLD)


@ordering.aggregate
class Product:
    name = String(required=True, max_length=255)
    sku = String(max_length=50)
    unit_price = Decimal(required=True, min_value=0)
    available_quantity = Integer(min_value=0, default=0)
    low_stock_threshold = Integer(min_value=0, default=DEFAULT_LOW_STOCK_THRESHOLD)
    images = List(content_type=String(max_length=500))
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_go_negative(self):
        if self.available_quantity is not None and self.available_quantity < 0:
            raise ValidationError({"available_quantity": ["Stock cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        name,
        unit_price,
        available_quantity=0,
        low_stock_threshold=None,
        sku=None,
        images=None,
        product_id=None,
    ):
        now = datetime.now(UTC)
        identity = {"id": str(product_id)} if product_id else {}
        return cls(
            **identity,
            name=name,
            sku=sku,
            unit_price=unit_price,
            available_quantity=available_quantity,
            low_stock_threshold=(
                _default_threshold() if low_stock_threshold is None else low_stock_threshold
            ),
            images=images or [],
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def reserve(self, quantity):
        """Take `quantity` units out of available stock and return what is left."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if quantity > self.available_quantity:
            raise InsufficientStock(str(self.id), quantity, self.available_quantity)

        self.available_quantity -= quantity
        self.updated_at = datetime.now(UTC)
        return self.available_quantity

    def restore(self, quantity):
        """Put `quantity` units back into available stock."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        self.available_quantity += quantity
        self.updated_at = datetime.now(UTC)
        return self.available_quantity

    def is_low_on_stock(self, quantity=None):
        """True when `quantity` (default: current stock) is at or below the threshold."""
        threshold = self.low_stock_threshold
        if threshold is None:
            threshold = _default_threshold()
        if quantity is None:
            quantity = self.available_quantity
        return quantity <= threshold

    # -------------------------------------------------------------------
    # Display metadata
    # -------------------------------------------------------------------
    def update_details(self, name=None, images=None):
        """Rename or re-image the product. Prices and stock are not touched."""
        if name:
            self.name = name
        if images is not None:
            self.images = images
        self.updated_at = datetime.now(UTC)
