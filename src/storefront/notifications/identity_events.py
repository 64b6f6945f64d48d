"""Registration notifications — mail the sign-up verification code."""

from datetime import UTC, datetime

import structlog
from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.identity.events import RegistrationInitiated
from storefront.identity.registration import PendingRegistration
from storefront.notifications.dispatcher import NotificationDispatcher

logger = structlog.get_logger(__name__)


@storefront.event_handler(part_of=PendingRegistration)
class RegistrationNotificationsHandler:
    @handle(RegistrationInitiated)
    def on_registration_initiated(self, event: RegistrationInitiated) -> None:
        expires_at = event.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        minutes = max(round((expires_at - datetime.now(UTC)).total_seconds() / 60), 1)

        try:
            NotificationDispatcher().send_verification_code(
                event.email,
                {
                    "name": event.name,
                    "verification_code": event.verification_code,
                    "expires_in_minutes": minutes,
                },
            )
        except Exception as exc:
            logger.error("Verification code not sent", email=event.email, error=str(exc))
