from decimal import Decimal

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _fresh_adapters():
    from ordering.adapters import reset_adapters

    reset_adapters()
    yield
    reset_adapters()


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def notifier():
    from ordering.adapters import Collaborator, get_adapter

    return get_adapter(Collaborator.NOTIFIER.value)


@pytest.fixture()
def cart():
    from ordering.adapters import Collaborator, get_adapter

    return get_adapter(Collaborator.CART.value)


@pytest.fixture()
def accounts():
    from ordering.adapters import Collaborator, get_adapter

    return get_adapter(Collaborator.ACCOUNTS.value)


@pytest.fixture()
def audit_log():
    from ordering.adapters import Collaborator, get_adapter

    return get_adapter(Collaborator.AUDIT_LOG.value)


@pytest.fixture()
def workflow(notifier, cart, accounts, audit_log):
    from ordering.workflow.engine import OrderWorkflow

    return OrderWorkflow(notifier=notifier, cart=cart, accounts=accounts, audit_log=audit_log)


@pytest.fixture()
def listing(accounts):
    from ordering.listing.service import OrderListing

    return OrderListing(accounts=accounts)


@pytest.fixture()
def ledger():
    from ordering.inventory.ledger import InventoryLedger

    return InventoryLedger()


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    from protean import current_domain

    from ordering.inventory.product import Product

    def _make(name="Ceramic Mug", unit_price="12.50", available_quantity=20, low_stock_threshold=5, **kwargs):
        product = Product.register(
            name=name,
            unit_price=Decimal(unit_price),
            available_quantity=available_quantity,
            low_stock_threshold=low_stock_threshold,
            **kwargs,
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def shipping_address():
    return {
        "full_name": "Jane Doe",
        "address": "12 Market Street",
        "city": "Springfield",
        "postal_code": "12345",
        "phone": "+1-555-0100",
    }


@pytest.fixture()
def checkout_request(shipping_address):
    def _build(*items, total="50.00", tax=None, shipping_cost="5.00", billing=None):
        request = {
            "items": [
                {"product_id": str(product.id), "quantity": quantity}
                for product, quantity in items
            ],
            "total": total,
            "shipping": {"address": dict(shipping_address), "cost": shipping_cost},
        }
        if tax is not None:
            request["tax"] = tax
        if billing is not None:
            request["billing"] = {"address": billing}
        return request

    return _build


@pytest.fixture()
def placed_order(workflow, make_product, checkout_request):
    """A pending order for two units of a well-stocked product."""
    product = make_product(available_quantity=50)
    view = workflow.create_order("user-001", checkout_request((product, 2)))
    return view["id"]
