"""Notification dispatcher — renders a template and hands it to the email channel.

Dispatch is best-effort. Adapter failures are logged and reported in the
returned result; they are never raised to the caller.
"""

import structlog

from storefront.notifications.channel import get_channel
from storefront.notifications.templates import get_template
from storefront.notifications.types import NotificationChannel, NotificationType

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    def __init__(self, email_adapter=None):
        self._email_adapter = email_adapter

    @property
    def email(self):
        return self._email_adapter or get_channel(NotificationChannel.EMAIL.value)

    def _send(self, notification_type: NotificationType, to: str | None, context: dict) -> dict:
        if not to:
            logger.warning("Notification skipped, no recipient", notification_type=notification_type.value)
            return {"message_id": None, "status": "skipped"}

        rendered = get_template(notification_type.value).render(context)
        try:
            result = self.email.send(to=to, subject=rendered["subject"], body=rendered["body"])
        except Exception as exc:
            logger.error(
                "Notification dispatch raised",
                notification_type=notification_type.value,
                to=to,
                error=str(exc),
                exc_info=True,
            )
            return {"message_id": None, "status": "failed", "error": str(exc)}

        if result.get("status") == "sent":
            logger.info(
                "Notification sent",
                notification_type=notification_type.value,
                to=to,
                message_id=result.get("message_id"),
            )
        else:
            logger.warning(
                "Notification delivery failed",
                notification_type=notification_type.value,
                to=to,
                error=result.get("error"),
            )
        return result

    def send_order_confirmation(self, email: str | None, payload: dict) -> dict:
        return self._send(NotificationType.ORDER_CONFIRMATION, email, payload)

    def send_order_status_update(self, order: dict) -> dict:
        return self._send(NotificationType.ORDER_STATUS_UPDATE, order.get("email"), order)

    def send_order_update_notification(self, email: str | None, payload: dict) -> dict:
        return self._send(NotificationType.ORDER_UPDATE, email, payload)

    def send_verification_code(self, email: str | None, payload: dict) -> dict:
        return self._send(NotificationType.VERIFICATION_CODE, email, payload)
