"""Order workflow engine: checkout and the order status state machine.

`OrderWorkflow` is the only writer of orders. Every operation follows the same
shape:

1. validate the input and the caller's right to act;
2. take the locks for the aggregates it touches (products by id for stock,
   the order by id for transitions);
3. load, change and save inside one Unit of Work, so reservations and the
   order write commit or roll back together;
4. after the commit, run the best-effort side effects: notifications, the cart
   clear and the audit entry. These are logged when they fail and never undo
   or fail the committed change.

Collaborators are passed to the constructor and default to the adapters in
`ordering.adapters`, which makes every side effect observable in tests.
"""

from decimal import Decimal, InvalidOperation

import structlog
from protean.core.unit_of_work import UnitOfWork
from protean.utils.globals import current_domain

from ordering.adapters import Collaborator, get_adapter
from ordering.domain import ordering
from ordering.exceptions import AccountRestricted, InvalidOrderRequest, OrderNotFound
from ordering.inventory.ledger import InventoryLedger
from ordering.listing.service import OrderListing
from ordering.notification.dispatch import NotificationDispatcher
from ordering.order.order import Order, OrderStatus, parse_status
from ordering.utils.locks import order_locks, product_locks

logger = structlog.get_logger(__name__)

# Recorded as the actor when an admin change arrives without one
SYSTEM_ACTOR = "system"


def _to_decimal(value, field_name):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidOrderRequest({field_name: [f"Not a valid amount: {value}"]}) from None
    if not amount.is_finite() or amount < 0:
        raise InvalidOrderRequest({field_name: [f"Not a valid amount: {value}"]})
    return amount


def _field(data, name):
    """Read a key from a dict payload or an attribute from a request object."""
    if data is None:
        return None
    if isinstance(data, dict):
        return data.get(name)
    return getattr(data, name, None)


@ordering.application_service(part_of=Order)
class OrderWorkflow:
    def __init__(
        self,
        notifier=None,
        cart=None,
        accounts=None,
        audit_log=None,
        ledger=None,
    ):
        self.notifier = notifier or get_adapter(Collaborator.NOTIFIER.value)
        self.cart = cart or get_adapter(Collaborator.CART.value)
        self.accounts = accounts or get_adapter(Collaborator.ACCOUNTS.value)
        self.audit_log = audit_log or get_adapter(Collaborator.AUDIT_LOG.value)
        self.ledger = ledger or InventoryLedger()
        self.dispatcher = NotificationDispatcher(self.notifier)
        self.listing = OrderListing(accounts=self.accounts)

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def create_order(self, user_id, request) -> dict:
        """Convert a checkout request into a pending order and reserve its stock.

        Args:
            user_id: The already-authenticated customer.
            request: Mapping shaped like
                `{items: [{product_id|id, quantity, price?, product_name?}],
                total, tax?, shipping: {address: {...}, cost?}, billing?: {address: {...}}}`.

        Returns:
            The hydrated order view, as `OrderListing.get_order_by_id` returns it.

        Raises:
            AccountRestricted: the account is locked or deactivated.
            InvalidOrderRequest: missing address or total, no items, bad quantities.
            ProductNotFound: an item references an unknown product.
            InsufficientStock: an item asks for more than is available. Nothing
                is reserved or persisted in that case.
        """
        user_id = str(user_id)
        self._ensure_account_can_order(user_id)
        items = self._parse_items(_field(request, "items"))

        shipping = _field(request, "shipping")
        shipping_address = _field(shipping, "address")
        if not shipping_address or not str(_field(shipping_address, "address") or "").strip():
            raise InvalidOrderRequest({"shipping": ["Shipping address is required"]})

        total = _field(request, "total")
        if total is None:
            raise InvalidOrderRequest({"total": ["Order total is required"]})

        shipping_cost = _field(shipping, "cost")
        tax = _field(request, "tax")
        billing_address = _field(_field(request, "billing"), "address")

        low_stock = []
        with product_locks.hold(*[item["product_id"] for item in items]), UnitOfWork():
            order = Order.create(
                user_id=user_id,
                shipping_address=_as_dict(shipping_address),
                billing_address=_as_dict(billing_address) if billing_address else None,
                total_amount=_to_decimal(total, "total"),
                shipping_cost=_to_decimal(shipping_cost, "shipping") if shipping_cost is not None else None,
                tax_amount=_to_decimal(tax, "tax") if tax is not None else None,
            )

            for item in items:
                product = self.ledger.product(item["product_id"])
                new_quantity = self.ledger.reserve(product.id, item["quantity"])
                unit_price = item["price"] if item["price"] is not None else product.unit_price
                order.add_line_item(
                    product.id,
                    item["quantity"],
                    unit_price,
                    product_name=item["product_name"] or product.name,
                )
                if product.is_low_on_stock(new_quantity):
                    low_stock.append((product, new_quantity))

            order.place()
            current_domain.repository_for(Order).add(order)

        logger.info(
            "Order created",
            order_id=str(order.id),
            user_id=user_id,
            items=len(items),
            total_amount=str(order.total_amount),
        )

        for product, new_quantity in low_stock:
            self.dispatcher.stock_alert(product, new_quantity)
        self._clear_cart(user_id)

        return self.listing.get_order_by_id(user_id, order.id)

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def confirm_payment(self, order_id) -> Order:
        """pending → processing. Notifies the customer of the payment and the new status."""
        order, previous = self._change(order_id, lambda order: order.confirm_payment())
        logger.info("Payment confirmed", order_id=str(order.id))

        self.dispatcher.payment_confirmed(order)
        self.dispatcher.order_status_changed(order, previous)
        return order

    def mark_shipped(self, order_id, tracking_number=None, shipping_provider=None) -> Order:
        """processing → shipped, recording tracking details."""
        order, previous = self._change(
            order_id,
            lambda order: order.mark_shipped(tracking_number, shipping_provider),
        )
        logger.info(
            "Order shipped",
            order_id=str(order.id),
            tracking_number=order.tracking_number,
            shipping_provider=order.shipping_provider,
        )

        self.dispatcher.order_status_changed(order, previous)
        return order

    def mark_delivered(self, order_id, confirmation_provided: bool) -> Order:
        """shipped → delivered. Requires explicit confirmation from staff."""
        order, previous = self._change(
            order_id,
            lambda order: order.mark_delivered(confirmation_provided),
        )
        logger.info("Order delivered", order_id=str(order.id))

        self.dispatcher.order_status_changed(order, previous)
        self.dispatcher.order_delivered_to_staff(order, self._customer_name(order.user_id))
        return order

    def cancel(self, order_id, actor_id=None) -> Order:
        """Cancel a pending or processing order and put its stock back."""
        order, previous = self._change_with_stock(order_id, lambda order: order.cancel())
        logger.info("Order cancelled", order_id=str(order.id), previous_status=previous)

        if actor_id is not None:
            self._audit(actor_id, "ORDER_CANCELLED", order.id, f"Order cancelled from {previous}")
        self.dispatcher.order_status_changed(order, previous)
        return order

    # -------------------------------------------------------------------
    # Admin operations
    # -------------------------------------------------------------------
    def update_status(self, order_id, new_status, actor_id=None) -> Order:
        """Set any of the known statuses, skipping the transition rules.

        This is the admin override. It is recorded in the audit log, and the
        customer is told about the new status. Moving into or out of
        `cancelled` restores or re-reserves the order's stock.

        Raises:
            InvalidStatus: `new_status` is not a known status.
            InsufficientStock: reviving a cancelled order whose stock is gone.
        """
        target = parse_status(new_status)
        order, previous = self._change_with_stock(order_id, lambda order: order.override_status(target))
        logger.warning(
            "Order status overridden",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
            actor_id=actor_id,
        )

        self._audit(
            actor_id,
            "ORDER_STATUS_OVERRIDE",
            order.id,
            f"Status changed from {previous} to {order.status}",
        )
        self.dispatcher.order_status_changed(order, previous)
        return order

    def admin_update_order(self, order_id, patch, actor_id=None) -> Order:
        """Apply an admin patch of status, tracking number and shipping provider.

        The customer is only notified when the status actually changed. Stock
        follows a status change into or out of `cancelled`, as in `update_status`.
        """
        status = _field(patch, "status")
        if status:
            parse_status(status)

        changed = {}

        def amend(order):
            changed["status"] = order.amend(
                status=status,
                tracking_number=_field(patch, "tracking_number"),
                shipping_provider=_field(patch, "shipping_provider"),
            )

        order, previous = self._change_with_stock(order_id, amend)
        logger.info(
            "Order updated by admin",
            order_id=str(order.id),
            status_changed=changed["status"],
            actor_id=actor_id,
        )

        self._audit(
            actor_id,
            "ORDER_UPDATED",
            order.id,
            f"Status {previous} -> {order.status}; tracking {order.tracking_number}; "
            f"provider {order.shipping_provider}",
        )
        if changed["status"]:
            self.dispatcher.order_status_changed(order, previous)
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _load(self, order_id, repo=None) -> Order:
        repo = repo or current_domain.repository_for(Order)
        order = repo.get_or_none(str(order_id))
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def _change(self, order_id, change):
        """Run `change(order)` under the order's lock and one Unit of Work.

        Returns the saved order and the status it had before the change.
        """
        with order_locks.hold(order_id), UnitOfWork():
            repo = current_domain.repository_for(Order)
            order = self._load(order_id, repo)
            previous = order.status
            change(order)
            repo.add(order)
        return order, previous

    def _change_with_stock(self, order_id, change):
        """Like `_change`, keeping the order's stock reservation in step with its status.

        Entering `cancelled` puts every line item back in stock. Leaving it
        reserves them again, and fails with InsufficientStock when the units
        are gone. The product locks are taken after the order lock.
        """
        with order_locks.hold(order_id):
            product_ids = [item.product_id for item in self._load(order_id).ordered_line_items]

            with product_locks.hold(*product_ids), UnitOfWork():
                repo = current_domain.repository_for(Order)
                order = self._load(order_id, repo)
                previous = order.status
                change(order)
                self._sync_reservation(order, previous)
                repo.add(order)
        return order, previous

    def _sync_reservation(self, order, previous):
        cancelled = OrderStatus.CANCELLED.value
        if previous != cancelled and order.status == cancelled:
            for item in order.ordered_line_items:
                self.ledger.restore(item.product_id, item.quantity)
        elif previous == cancelled and order.status != cancelled:
            for item in order.ordered_line_items:
                self.ledger.reserve(item.product_id, item.quantity)

    def _ensure_account_can_order(self, user_id):
        if self.accounts.is_locked(user_id):
            raise AccountRestricted(user_id, "locked")
        if self.accounts.is_deactivated(user_id):
            raise AccountRestricted(user_id, "deactivated")

    @staticmethod
    def _parse_items(raw_items) -> list[dict]:
        if not raw_items:
            raise InvalidOrderRequest({"items": ["Order must contain at least one item"]})

        items = []
        for position, raw in enumerate(raw_items, start=1):
            product_id = _field(raw, "product_id") or _field(raw, "id")
            if not product_id:
                raise InvalidOrderRequest({"items": [f"Item {position} is missing a product id"]})

            quantity = _field(raw, "quantity")
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise InvalidOrderRequest({"items": [f"Item {position} must have a positive quantity"]})

            price = _field(raw, "price")
            items.append(
                {
                    "product_id": str(product_id),
                    "quantity": quantity,
                    "price": _to_decimal(price, "price") if price is not None else None,
                    "product_name": _field(raw, "product_name"),
                }
            )
        return items

    def _clear_cart(self, user_id):
        try:
            self.cart.clear(user_id)
        except Exception as e:
            logger.warning("Failed to clear cart", user_id=user_id, error=str(e))

    def _audit(self, actor_id, action, order_id, details):
        actor_id = actor_id or SYSTEM_ACTOR
        try:
            self.audit_log.record(str(actor_id), action, str(order_id), details)
        except Exception as e:
            logger.error(
                "Failed to record audit entry",
                actor_id=str(actor_id),
                action=action,
                order_id=str(order_id),
                error=str(e),
            )

    def _customer_name(self, user_id):
        try:
            profile = self.accounts.profile(str(user_id))
        except Exception as e:
            logger.warning("Failed to load customer details", user_id=str(user_id), error=str(e))
            return None
        if not profile:
            return None
        name = f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()
        return name or profile.get("email")


def _as_dict(address):
    if address is None or isinstance(address, dict):
        return address
    if hasattr(address, "model_dump"):
        return address.model_dump()
    return dict(address)
