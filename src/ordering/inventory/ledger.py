"""Inventory ledger: single source of truth for product stock.

Every stock movement goes through `reserve` or `restore`. Each runs under the
product's lock and inside a Unit of Work; when the caller already has a Unit of
Work open (a checkout reserving several products) the ledger joins it, so the
reservations commit or roll back together with the order.
"""

import structlog
from protean.core.unit_of_work import UnitOfWork
from protean.utils.globals import current_domain

from ordering.exceptions import ProductNotFound
from ordering.inventory.product import Product
from ordering.utils.locks import product_locks

logger = structlog.get_logger(__name__)


class InventoryLedger:
    def __init__(self, locks=None):
        self._locks = locks or product_locks

    @property
    def _repo(self):
        return current_domain.repository_for(Product)

    def product(self, product_id) -> Product:
        """Load a product or raise ProductNotFound."""
        product = self._repo.get_or_none(str(product_id))
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def reserve(self, product_id, quantity: int) -> int:
        """Atomically take `quantity` units of a product and return the new stock level.

        Raises:
            ProductNotFound: no such product.
            InsufficientStock: `quantity` exceeds the available stock; stock is unchanged.
        """
        with self._locks.hold(product_id), UnitOfWork():
            product = self.product(product_id)
            new_quantity = product.reserve(quantity)
            self._repo.add(product)

        logger.info(
            "Stock reserved",
            product_id=str(product_id),
            quantity=quantity,
            available=new_quantity,
        )
        return new_quantity

    def restore(self, product_id, quantity: int) -> int:
        """Return `quantity` units to a product's stock and return the new stock level."""
        with self._locks.hold(product_id), UnitOfWork():
            product = self.product(product_id)
            new_quantity = product.restore(quantity)
            self._repo.add(product)

        logger.info(
            "Stock restored",
            product_id=str(product_id),
            quantity=quantity,
            available=new_quantity,
        )
        return new_quantity

    def check_low_stock(self, product_id, new_quantity: int) -> bool:
        """True when `new_quantity` is at or below the product's low-stock threshold."""
        return self.product(product_id).is_low_on_stock(new_quantity)
