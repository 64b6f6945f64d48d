"""Order confirmation template — sent when an order is placed."""

from storefront.notifications.types import NotificationType
from storefront.shared.pricing import DEFAULT_CURRENCY


class OrderConfirmationTemplate:
    notification_type = NotificationType.ORDER_CONFIRMATION.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        name = context.get("name") or "there"
        currency = context.get("currency", DEFAULT_CURRENCY)
        lines = "\n".join(
            f"  {item.get('quantity', 1)} x {item.get('name', item.get('product_id'))}"
            f" @ {currency} {float(item.get('final_price', 0)):.2f}"
            for item in context.get("items", [])
        )
        return {
            "subject": f"Order #{order_id} Placed",
            "body": (
                f"Hi {name},\n\n"
                f"Thank you for your order #{order_id}.\n\n"
                f"{lines}\n\n"
                f"Subtotal: {currency} {float(context.get('subtotal', 0)):.2f}\n"
                f"Discount: {currency} {float(context.get('discount', 0)):.2f}\n"
                f"Shipping: {currency} {float(context.get('shipping', 0)):.2f}\n"
                f"Tax: {currency} {float(context.get('tax', 0)):.2f}\n"
                f"Total (cash on delivery): {currency} {float(context.get('total', 0)):.2f}\n\n"
                f"Your delivery verification code is {context.get('verification_code', 'N/A')}.\n"
                "Share it with the delivery agent only when you receive your package."
            ),
        }
