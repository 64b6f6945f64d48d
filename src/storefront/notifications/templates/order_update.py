"""Order update template — sent when a customer changes the order's addresses."""

from storefront.notifications.types import NotificationType
from storefront.shared.pricing import DEFAULT_CURRENCY


def _format_address(address: dict | None) -> str:
    if not address:
        return "unchanged"
    parts = [address.get(key) for key in ("street", "city", "state", "postal_code", "country")]
    return ", ".join(part for part in parts if part)


class OrderUpdateTemplate:
    notification_type = NotificationType.ORDER_UPDATE.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        currency = context.get("currency", DEFAULT_CURRENCY)
        return {
            "subject": f"Order #{order_id} Updated",
            "body": (
                f"The addresses on your order #{order_id} were updated.\n\n"
                f"Billing: {_format_address(context.get('billing_address'))}\n"
                f"Shipping: {_format_address(context.get('shipping_address'))}\n"
                f"Order Total: {currency} {float(context.get('total', 0)):.2f}\n\n"
                "If you did not make this change, please contact support."
            ),
        }
