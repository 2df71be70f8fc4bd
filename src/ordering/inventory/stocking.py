"""Product stocking — commands and handler for registering and editing products.

Stock levels are not edited here: reservations and restocks go through the
InventoryLedger so they are serialized per product.
"""

from protean import handle
from protean.fields import Decimal, Identifier, Integer, List, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.exceptions import ProductNotFound
from ordering.inventory.product import Product


@ordering.command(part_of="Product")
class RegisterProduct:
    product_id: Identifier()
    name: String(required=True, max_length=255)
    sku: String(max_length=50)
    unit_price: Decimal(required=True, min_value=0)
    available_quantity: Integer(min_value=0, default=0)
    low_stock_threshold: Integer(min_value=0)
    images: List(content_type=String(max_length=500))


@ordering.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    images: List(content_type=String(max_length=500))


@ordering.command_handler(part_of=Product)
class StockingHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        product = Product.register(
            product_id=command.product_id,
            name=command.name,
            sku=command.sku,
            unit_price=command.unit_price,
            available_quantity=command.available_quantity or 0,
            low_stock_threshold=command.low_stock_threshold,
            images=command.images,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_or_none(command.product_id)
        if product is None:
            raise ProductNotFound(command.product_id)

        product.update_details(name=command.name, images=command.images or None)
        repo.add(product)
