"""Order notifications — mail the customer after order changes commit."""

import json

import structlog
from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.notifications.dispatcher import NotificationDispatcher
from storefront.order.events import OrderAddressesUpdated, OrderPlaced, OrderStatusChanged
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.event_handler(part_of=Order)
class OrderNotificationsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        try:
            NotificationDispatcher().send_order_confirmation(
                event.email,
                {
                    "order_id": str(event.order_id),
                    "name": event.name,
                    "items": json.loads(event.items),
                    "subtotal": event.subtotal,
                    "discount": event.discount,
                    "shipping": event.shipping,
                    "tax": event.tax,
                    "total": event.total,
                    "verification_code": event.verification_code,
                },
            )
        except Exception as exc:
            logger.error("Order confirmation not sent", order_id=str(event.order_id), error=str(exc))

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        try:
            NotificationDispatcher().send_order_status_update(
                {
                    "order_id": str(event.order_id),
                    "email": event.email,
                    "status": event.new_status,
                    "previous_status": event.previous_status,
                    "tracking_number": event.tracking_number,
                    "reason": event.reason,
                }
            )
        except Exception as exc:
            logger.error("Order status update not sent", order_id=str(event.order_id), error=str(exc))

    @handle(OrderAddressesUpdated)
    def on_order_addresses_updated(self, event: OrderAddressesUpdated) -> None:
        try:
            NotificationDispatcher().send_order_update_notification(
                event.email,
                {
                    "order_id": str(event.order_id),
                    "billing_address": json.loads(event.billing_address) if event.billing_address else None,
                    "shipping_address": json.loads(event.shipping_address) if event.shipping_address else None,
                    "total": event.total,
                },
            )
        except Exception as exc:
            logger.error("Order update notice not sent", order_id=str(event.order_id), error=str(exc))
