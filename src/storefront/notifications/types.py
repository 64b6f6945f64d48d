from enum import Enum


class NotificationType(Enum):
    ORDER_CONFIRMATION = "order_confirmation"
    ORDER_STATUS_UPDATE = "order_status_update"
    ORDER_UPDATE = "order_update"
    VERIFICATION_CODE = "verification_code"


class NotificationChannel(Enum):
    EMAIL = "email"
