"""Notification templates: wording for every message the workflow sends.

Each template knows its category and title and renders a body from a context
dict. Keeping the wording here lets the dispatcher stay a thin translator.
"""

from enum import Enum


class NotificationCategory(Enum):
    ORDER_STATUS = "order_status"
    PAYMENT = "payment"
    ORDER_DELIVERY = "order_delivery"
    INVENTORY_LOW_STOCK = "inventory_low_stock"
    INVENTORY_OUT_OF_STOCK = "inventory_out_of_stock"


DELIVERY_STAFF_ROLES = ["content-manager", "administrator"]
INVENTORY_ALERT_ROLES = ["administrator"]

_STATUS_MESSAGES = {
    "pending": "Your order has been received and is awaiting payment confirmation.",
    "processing": "Your payment has been confirmed and your order is being prepared for shipment.",
    "shipped": "Great news! Your order has been shipped and is on its way to you.",
    "delivered": "Your order has been delivered successfully. We hope you enjoy your purchase!",
    "cancelled": "Your order has been cancelled. If you have any questions, please contact support.",
}
_DEFAULT_STATUS_MESSAGE = "Your order status has been updated."


class OrderStatusTemplate:
    category = NotificationCategory.ORDER_STATUS.value
    title = "Order Status Updated"

    @staticmethod
    def render(context: dict) -> dict:
        status = (context.get("new_status") or "").lower()
        body = _STATUS_MESSAGES.get(status, _DEFAULT_STATUS_MESSAGE)

        tracking_number = context.get("tracking_number")
        if tracking_number:
            body += f" Tracking: {tracking_number}"
            estimated = context.get("estimated_delivery_date")
            if estimated and status == "shipped":
                body += f". Expected delivery: {estimated}"

        return {"title": OrderStatusTemplate.title, "body": body}


class PaymentConfirmationTemplate:
    category = NotificationCategory.PAYMENT.value
    title = "Payment Confirmed"

    @staticmethod
    def render(context: dict) -> dict:
        body = "Your payment has been confirmed and your order is being processed."
        tracking_number = context.get("tracking_number")
        if tracking_number:
            body += f" Tracking: {tracking_number}"
        return {"title": PaymentConfirmationTemplate.title, "body": body}


class StaffDeliveryTemplate:
    """Internal notice to staff that an order reached the customer."""

    category = NotificationCategory.ORDER_DELIVERY.value
    title = "Order Delivered"
    roles = DELIVERY_STAFF_ROLES

    @staticmethod
    def render(context: dict) -> dict:
        customer = context.get("customer_name") or "customer"
        body = f"Order #{context.get('order_id', 'N/A')} for {customer} has been marked as delivered."
        tracking_number = context.get("tracking_number")
        if tracking_number:
            body += f" Tracking number: {tracking_number}."
        return {"title": StaffDeliveryTemplate.title, "body": body}


class StockAlertTemplate:
    """Internal alert to administrators when a reservation drains a product."""

    roles = INVENTORY_ALERT_ROLES

    @staticmethod
    def category_for(quantity: int) -> str:
        if quantity <= 0:
            return NotificationCategory.INVENTORY_OUT_OF_STOCK.value
        return NotificationCategory.INVENTORY_LOW_STOCK.value

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("product_name", "N/A")
        product_id = context.get("product_id", "N/A")
        quantity = context.get("available_quantity", 0)
        threshold = context.get("low_stock_threshold", 0)

        if quantity <= 0:
            return {
                "title": "Out of Stock Alert",
                "body": f"Product '{name}' (ID #{product_id}) is out of stock.",
            }
        return {
            "title": "Low Stock Alert",
            "body": (
                f"Product '{name}' (ID #{product_id}) is low on stock: "
                f"{quantity} units (threshold: {threshold})."
            ),
        }
