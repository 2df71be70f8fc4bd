"""Shared BDD fixtures and step definitions for the Ordering domain."""

from decimal import Decimal

import pytest
from ordering.inventory.product import Product
from ordering.order.order import Order
from protean import current_domain
from protean.exceptions import ProteanException
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def state():
    """Scenario scratchpad: products by name, the current order, the last error."""
    return {"products": {}, "order_id": None, "error": None}


@pytest.fixture()
def checkout(workflow, state):
    """Run a checkout for `[(product name, quantity), ...]`, recording the order or the error."""

    def _run(user_id, items):
        request = {
            "items": [
                {"product_id": state["products"][name], "quantity": quantity}
                for name, quantity in items
            ],
            "total": "100.00",
            "shipping": {"address": {"full_name": "Jane Doe", "address": "12 Market Street"}},
        }
        try:
            state["order_id"] = workflow.create_order(user_id, request)["id"]
        except ProteanException as exc:
            state["error"] = exc

    return _run


@pytest.fixture()
def attempt(state):
    """Run a workflow call that may be refused, recording the error."""

    def _run(action, *args):
        try:
            action(*args)
        except ProteanException as exc:
            state["error"] = exc

    return _run


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse(
        'a product "{name}" with {quantity:d} units in stock and a low-stock threshold of {threshold:d}'
    )
)
def product_in_stock(state, name, quantity, threshold):
    product = Product.register(
        name=name,
        unit_price=Decimal("19.99"),
        available_quantity=quantity,
        low_stock_threshold=threshold,
    )
    current_domain.repository_for(Product).add(product)
    state["products"][name] = str(product.id)


@given(parsers.cfparse('user "{user_id}" has placed an order for {quantity:d} units of "{name}"'))
def placed_order(checkout, state, user_id, quantity, name):
    checkout(user_id, [(name, quantity)])
    assert state["error"] is None


# ---------------------------------------------------------------------------
# Transition steps
# ---------------------------------------------------------------------------
@given("payment is confirmed")
@when("payment is confirmed")
def payment_confirmed(workflow, state):
    workflow.confirm_payment(state["order_id"])


@given(parsers.cfparse('the order is shipped with tracking number "{tracking}"'))
@when(parsers.cfparse('the order is shipped with tracking number "{tracking}"'))
def order_shipped(workflow, state, tracking):
    workflow.mark_shipped(state["order_id"], tracking)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def order_status_is(state, status):
    assert state["order_id"] is not None
    assert current_domain.repository_for(Order).get(state["order_id"]).status == status


@then(parsers.cfparse('"{name}" has {quantity:d} units in stock'))
def stock_level_is(state, name, quantity):
    product = current_domain.repository_for(Product).get(state["products"][name])
    assert product.available_quantity == quantity


@then(parsers.cfparse('the checkout is rejected with "{error_name}"'))
@then(parsers.cfparse('the transition is rejected with "{error_name}"'))
def rejected_with(state, error_name):
    assert state["error"] is not None
    assert type(state["error"]).__name__ == error_name


@then("no order exists")
def no_order_exists():
    assert current_domain.repository_for(Order).with_status() == []
