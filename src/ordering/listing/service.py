"""Query/Listing service: read-side views of orders.

Views are plain dicts. Line items carry the price snapshot taken at checkout
and the product's *current* name and images, looked up at read time. Staff
listings are also joined with the customer's name and email from the account
directory; a failing lookup leaves those fields out rather than failing the
listing.
"""

from decimal import Decimal

import structlog
from protean.utils.globals import current_domain

from ordering.adapters import Collaborator, get_adapter
from ordering.domain import ordering
from ordering.exceptions import OrderNotFound
from ordering.inventory.product import Product
from ordering.order.order import Order, OrderStatus, parse_status

logger = structlog.get_logger(__name__)


def _matches(order, term: str) -> bool:
    candidates = (order.user_id, order.id, order.tracking_number)
    return any(term in str(value).lower() for value in candidates if value)


@ordering.application_service(part_of=Order)
class OrderListing:
    def __init__(self, accounts=None):
        self.accounts = accounts or get_adapter(Collaborator.ACCOUNTS.value)

    @property
    def _orders(self):
        return current_domain.repository_for(Order)

    # -------------------------------------------------------------------
    # Customer views
    # -------------------------------------------------------------------
    def list_by_user(self, user_id) -> list[dict]:
        """All orders placed by one user, newest first."""
        return [self.describe(order) for order in self._orders.for_user(user_id)]

    def get_order_by_id(self, user_id, order_id) -> dict:
        """One of the user's orders. Someone else's order is reported as not found."""
        order = self._orders.get_or_none(str(order_id))
        if order is None or str(order.user_id) != str(user_id):
            raise OrderNotFound(order_id)
        return self.describe(order)

    # -------------------------------------------------------------------
    # Staff views
    # -------------------------------------------------------------------
    def get_order(self, order_id) -> dict:
        order = self._orders.get_or_none(str(order_id))
        if order is None:
            raise OrderNotFound(order_id)
        return self._with_customer(self.describe(order), order.user_id)

    def list_all(self, status=None, search=None) -> list[dict]:
        """Every order, optionally filtered by status and a search term.

        The search term is matched case-insensitively as a substring of the
        user id, the order id and the tracking number.
        """
        status_value = parse_status(status).value if status else None
        orders = self._orders.with_status(status_value)

        if search and search.strip():
            term = search.strip().lower()
            orders = [order for order in orders if _matches(order, term)]

        return [self._with_customer(self.describe(order), order.user_id) for order in orders]

    def statistics(self) -> dict:
        """Order counts per status and revenue from orders that were not cancelled."""
        counts = {status.value: 0 for status in OrderStatus}
        revenue = Decimal("0")

        orders = self._orders.with_status()
        for order in orders:
            counts[order.status] += 1
            if order.status != OrderStatus.CANCELLED.value:
                revenue += order.total_amount or Decimal("0")

        return {
            "total_orders": len(orders),
            "orders_by_status": counts,
            "total_revenue": revenue,
        }

    # -------------------------------------------------------------------
    # View assembly
    # -------------------------------------------------------------------
    def describe(self, order) -> dict:
        """Flatten an order and its line items into a view, enriching products."""
        product_repo = current_domain.repository_for(Product)
        products = {}
        items = []
        for item in order.ordered_line_items:
            product_id = str(item.product_id)
            if product_id not in products:
                products[product_id] = product_repo.get_or_none(product_id)
            product = products[product_id]

            items.append(
                {
                    "id": str(item.id),
                    "product_id": product_id,
                    "product_name": product.name if product else item.product_name,
                    "images": list(product.images or []) if product else [],
                    "quantity": item.quantity,
                    "unit_price_at_purchase": item.unit_price_at_purchase,
                    "subtotal": item.subtotal,
                }
            )

        return {
            "id": str(order.id),
            "user_id": str(order.user_id),
            "status": order.status,
            "total_amount": order.total_amount,
            "tax_amount": order.tax_amount,
            "shipping_cost": order.shipping_cost,
            "shipping_address": order.shipping_address.to_dict() if order.shipping_address else None,
            "billing_address": order.billing_address.to_dict() if order.billing_address else None,
            "tracking_number": order.tracking_number,
            "shipping_provider": order.shipping_provider,
            "estimated_delivery_date": order.estimated_delivery_date,
            "created_at": order.created_at,
            "updated_at": order.updated_at,
            "item_count": order.item_count,
            "items": items,
        }

    def _with_customer(self, view: dict, user_id) -> dict:
        try:
            profile = self.accounts.profile(str(user_id))
        except Exception as e:
            logger.warning("Failed to load customer details", user_id=str(user_id), error=str(e))
            return view

        if profile:
            view.update(
                first_name=profile.get("first_name"),
                last_name=profile.get("last_name"),
                email=profile.get("email"),
            )
        return view
