from decimal import Decimal

import pytest
from ordering.exceptions import InvalidStatus, OrderNotFound
from ordering.inventory.product import Product
from protean import current_domain


@pytest.fixture()
def orders(workflow, make_product, checkout_request):
    """Three orders: two for user-001 (one processing), one for user-002 (cancelled)."""
    product = make_product(name="Mug", available_quantity=100)
    first = workflow.create_order("user-001", checkout_request((product, 1), total="10.00"))["id"]
    second = workflow.create_order("user-001", checkout_request((product, 2), total="20.00"))["id"]
    third = workflow.create_order("user-002", checkout_request((product, 3), total="30.00"))["id"]
    workflow.confirm_payment(second)
    workflow.cancel(third)
    return {"first": first, "second": second, "third": third, "product": product}


class TestCustomerViews:
    def test_list_by_user_newest_first(self, listing, orders):
        views = listing.list_by_user("user-001")
        assert [view["id"] for view in views] == [orders["second"], orders["first"]]

    def test_list_by_user_without_orders(self, listing, orders):
        assert listing.list_by_user("user-999") == []

    def test_get_own_order(self, listing, orders):
        view = listing.get_order_by_id("user-001", orders["first"])

        assert view["id"] == orders["first"]
        assert view["item_count"] == 1
        [item] = view["items"]
        assert item["subtotal"] == item["unit_price_at_purchase"] * item["quantity"]

    def test_someone_elses_order_is_not_found(self, listing, orders):
        with pytest.raises(OrderNotFound):
            listing.get_order_by_id("user-002", orders["first"])

    def test_missing_order(self, listing):
        with pytest.raises(OrderNotFound):
            listing.get_order_by_id("user-001", "missing-order")


class TestProductEnrichment:
    def test_views_show_live_name_and_images_with_snapshot_price(self, listing, orders):
        repo = current_domain.repository_for(Product)
        product = repo.get(orders["product"].id)
        product.update_details(name="Mug v2", images=["https://cdn.example.com/mug2.png"])
        product.unit_price = Decimal("99.00")
        repo.add(product)

        [item] = listing.get_order_by_id("user-001", orders["first"])["items"]

        assert item["product_name"] == "Mug v2"
        assert item["images"] == ["https://cdn.example.com/mug2.png"]
        assert item["unit_price_at_purchase"] == Decimal("12.50")


class TestStaffViews:
    def test_list_all_newest_first(self, listing, orders):
        views = listing.list_all()
        assert [view["id"] for view in views] == [orders["third"], orders["second"], orders["first"]]

    def test_filter_by_status(self, listing, orders):
        views = listing.list_all(status="PROCESSING")
        assert [view["id"] for view in views] == [orders["second"]]

    def test_invalid_status_filter(self, listing, orders):
        with pytest.raises(InvalidStatus):
            listing.list_all(status="lost")

    def test_search_by_user_id(self, listing, orders):
        views = listing.list_all(search="USER-002")
        assert [view["id"] for view in views] == [orders["third"]]

    def test_search_by_order_id(self, listing, orders):
        views = listing.list_all(search=orders["first"][:8])
        assert orders["first"] in [view["id"] for view in views]

    def test_search_by_tracking_number(self, listing, orders):
        tracking = listing.get_order(orders["second"])["tracking_number"]
        views = listing.list_all(search=tracking.lower())
        assert [view["id"] for view in views] == [orders["second"]]

    def test_blank_search_is_ignored(self, listing, orders):
        assert len(listing.list_all(search="   ")) == 3

    def test_customer_details_are_added(self, listing, accounts, orders):
        accounts.add_profile("user-002", "Sam", "Lee", "sam@example.com")

        view = listing.get_order(orders["third"])

        assert view["first_name"] == "Sam"
        assert view["last_name"] == "Lee"
        assert view["email"] == "sam@example.com"

    def test_customer_lookup_failure_is_skipped(self, listing, accounts, orders):
        accounts.configure(should_succeed=False)

        views = listing.list_all()

        assert len(views) == 3
        assert all("email" not in view for view in views)

    def test_statistics(self, listing, orders):
        stats = listing.statistics()

        assert stats["total_orders"] == 3
        assert stats["orders_by_status"] == {
            "pending": 1,
            "processing": 1,
            "shipped": 0,
            "delivered": 0,
            "cancelled": 1,
        }
        assert stats["total_revenue"] == Decimal("30.00")
