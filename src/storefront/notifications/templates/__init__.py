"""Template registry — maps NotificationType to template classes."""

from storefront.notifications.templates.order_confirmation import OrderConfirmationTemplate
from storefront.notifications.templates.order_status_update import OrderStatusUpdateTemplate
from storefront.notifications.templates.order_update import OrderUpdateTemplate
from storefront.notifications.templates.verification_code import VerificationCodeTemplate
from storefront.notifications.types import NotificationType

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_CONFIRMATION.value: OrderConfirmationTemplate,
    NotificationType.ORDER_STATUS_UPDATE.value: OrderStatusUpdateTemplate,
    NotificationType.ORDER_UPDATE.value: OrderUpdateTemplate,
    NotificationType.VERIFICATION_CODE.value: VerificationCodeTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
