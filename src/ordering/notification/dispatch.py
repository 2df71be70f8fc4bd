"""Notification dispatch — translates workflow events into notifier calls.

Dispatch is a best-effort boundary: it runs after the order change has been
committed, and a failing notifier is logged and swallowed so it can never undo
or fail the operation that triggered it.
"""

import structlog

from ordering.adapters.notifier_port import NotifierPort
from ordering.notification.templates import (
    OrderStatusTemplate,
    PaymentConfirmationTemplate,
    StaffDeliveryTemplate,
    StockAlertTemplate,
)

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """Renders templates and hands the messages to a NotifierPort."""

    def __init__(self, notifier: NotifierPort):
        self.notifier = notifier

    def order_status_changed(self, order, previous_status=None) -> bool:
        """Tell the customer their order moved to a new status."""
        rendered = OrderStatusTemplate.render(
            {
                "new_status": order.status,
                "previous_status": previous_status,
                "tracking_number": order.tracking_number,
                "estimated_delivery_date": order.estimated_delivery_date,
            }
        )
        return self._send_to_user(order, OrderStatusTemplate.category, rendered)

    def payment_confirmed(self, order) -> bool:
        rendered = PaymentConfirmationTemplate.render({"tracking_number": order.tracking_number})
        return self._send_to_user(order, PaymentConfirmationTemplate.category, rendered)

    def order_delivered_to_staff(self, order, customer_name=None) -> bool:
        rendered = StaffDeliveryTemplate.render(
            {
                "order_id": str(order.id),
                "customer_name": customer_name,
                "tracking_number": order.tracking_number,
            }
        )
        return self._send_to_roles(
            StaffDeliveryTemplate.roles,
            StaffDeliveryTemplate.category,
            rendered,
            order_id=str(order.id),
        )

    def stock_alert(self, product, available_quantity) -> bool:
        """Warn administrators that a product dropped to or below its threshold."""
        rendered = StockAlertTemplate.render(
            {
                "product_name": product.name,
                "product_id": str(product.id),
                "available_quantity": available_quantity,
                "low_stock_threshold": product.low_stock_threshold,
            }
        )
        return self._send_to_roles(
            StockAlertTemplate.roles,
            StockAlertTemplate.category_for(available_quantity),
            rendered,
            product_id=str(product.id),
        )

    # -------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------
    def _send_to_user(self, order, category, rendered) -> bool:
        try:
            result = self.notifier.send(str(order.user_id), rendered["title"], rendered["body"], category)
        except Exception as e:
            logger.error(
                "Notification dispatch failed",
                order_id=str(order.id),
                user_id=str(order.user_id),
                category=category,
                error=str(e),
            )
            return False
        return self._check_result(result, category, order_id=str(order.id))

    def _send_to_roles(self, roles, category, rendered, **context) -> bool:
        try:
            result = self.notifier.send_to_roles(roles, rendered["title"], rendered["body"], category)
        except Exception as e:
            logger.error(
                "Staff notification dispatch failed",
                roles=roles,
                category=category,
                error=str(e),
                **context,
            )
            return False
        return self._check_result(result, category, **context)

    @staticmethod
    def _check_result(result, category, **context) -> bool:
        if not isinstance(result, dict):
            result = {}
        if result.get("status") == "sent":
            logger.info("Notification sent", category=category, **context)
            return True

        logger.warning(
            "Notification not delivered",
            category=category,
            error=result.get("error", "Unknown dispatch error"),
            **context,
        )
        return False
