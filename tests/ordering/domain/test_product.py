from decimal import Decimal

import pytest
from ordering.exceptions import InsufficientStock
from ordering.inventory.product import Product
from protean.exceptions import ValidationError


def _product(available_quantity=5, low_stock_threshold=10):
    return Product.register(
        name="Desk Lamp",
        unit_price=Decimal("39.90"),
        available_quantity=available_quantity,
        low_stock_threshold=low_stock_threshold,
    )


class TestRegistration:
    def test_register_sets_timestamps_and_stock(self):
        product = _product()
        assert product.available_quantity == 5
        assert product.unit_price == Decimal("39.90")
        assert product.created_at is not None
        assert product.images == []

    def test_threshold_defaults_to_configured_value(self):
        product = Product.register(name="Desk Lamp", unit_price=Decimal("1.00"))
        assert product.low_stock_threshold == 10
        assert product.available_quantity == 0

    def test_register_with_explicit_id(self):
        product = Product.register(name="Desk Lamp", unit_price=Decimal("1.00"), product_id="lamp-1")
        assert product.id == "lamp-1"


class TestReservation:
    def test_reserve_returns_remaining_stock(self):
        product = _product(available_quantity=5)
        assert product.reserve(3) == 2
        assert product.available_quantity == 2

    def test_reserve_everything(self):
        product = _product(available_quantity=5)
        assert product.reserve(5) == 0

    def test_reserve_more_than_available(self):
        product = _product(available_quantity=5)
        with pytest.raises(InsufficientStock) as exc:
            product.reserve(6)

        assert exc.value.requested == 6
        assert exc.value.available == 5
        assert "quantity" in exc.value.messages
        assert product.available_quantity == 5

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_reserve_non_positive(self, quantity):
        product = _product()
        with pytest.raises(ValidationError):
            product.reserve(quantity)

    def test_restore(self):
        product = _product(available_quantity=1)
        assert product.restore(4) == 5


class TestLowStock:
    def test_at_threshold_is_low(self):
        product = _product(available_quantity=10, low_stock_threshold=10)
        assert product.is_low_on_stock() is True

    def test_above_threshold_is_not_low(self):
        product = _product(available_quantity=11, low_stock_threshold=10)
        assert product.is_low_on_stock() is False

    def test_explicit_quantity(self):
        product = _product(available_quantity=50, low_stock_threshold=10)
        assert product.is_low_on_stock(0) is True


class TestDetails:
    def test_update_name_and_images(self):
        product = _product()
        product.update_details(name="Floor Lamp", images=["https://cdn.example.com/lamp.png"])
        assert product.name == "Floor Lamp"
        assert product.images == ["https://cdn.example.com/lamp.png"]

    def test_blank_name_is_ignored(self):
        product = _product()
        product.update_details(name="")
        assert product.name == "Desk Lamp"
