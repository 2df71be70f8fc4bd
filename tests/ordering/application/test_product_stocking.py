from decimal import Decimal

import pytest
from ordering.exceptions import ProductNotFound
from ordering.inventory.product import Product
from ordering.inventory.stocking import RegisterProduct, UpdateProductDetails
from protean import current_domain


class TestRegisterProduct:
    def test_register_returns_id(self):
        product_id = current_domain.process(
            RegisterProduct(name="Tea Pot", unit_price=Decimal("24.00"), available_quantity=7),
            asynchronous=False,
        )

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Tea Pot"
        assert product.available_quantity == 7
        assert product.low_stock_threshold == 10

    def test_register_with_explicit_id(self):
        product_id = current_domain.process(
            RegisterProduct(product_id="tea-pot", name="Tea Pot", unit_price=Decimal("24.00")),
            asynchronous=False,
        )
        assert product_id == "tea-pot"
        assert current_domain.repository_for(Product).get("tea-pot").available_quantity == 0


class TestUpdateProductDetails:
    def test_rename(self, make_product):
        product = make_product(name="Tea Pot", available_quantity=4)

        current_domain.process(
            UpdateProductDetails(product_id=product.id, name="Teapot"),
            asynchronous=False,
        )

        stored = current_domain.repository_for(Product).get(product.id)
        assert stored.name == "Teapot"
        assert stored.available_quantity == 4

    def test_unknown_product(self):
        with pytest.raises(ProductNotFound):
            current_domain.process(
                UpdateProductDetails(product_id="missing", name="Teapot"),
                asynchronous=False,
            )
