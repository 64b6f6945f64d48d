"""Order status update template — sent after every status transition."""

from storefront.notifications.types import NotificationType

_HEADLINES = {
    "confirmed": "Your order has been confirmed.",
    "processing": "We are preparing your order.",
    "shipped": "Your order is on its way.",
    "delivered": "Your order has been delivered.",
    "cancelled": "Your order has been cancelled.",
    "returned": "Your order has been returned.",
}


class OrderStatusUpdateTemplate:
    notification_type = NotificationType.ORDER_STATUS_UPDATE.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        status = context.get("status", "updated")
        body = f"{_HEADLINES.get(status, f'Your order is now {status}.')}\n\nOrder: #{order_id}\n"
        if context.get("tracking_number"):
            body += f"Tracking Number: {context['tracking_number']}\n"
        if context.get("reason"):
            body += f"Reason: {context['reason']}\n"
        return {"subject": f"Order #{order_id}: {status.capitalize()}", "body": body}
