"""Verification code template — sent when a sign-up is started."""

from storefront.notifications.types import NotificationType


class VerificationCodeTemplate:
    notification_type = NotificationType.VERIFICATION_CODE.value

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("name") or "there"
        return {
            "subject": "Your verification code",
            "body": (
                f"Hi {name},\n\n"
                f"Your verification code is {context.get('verification_code', 'N/A')}.\n"
                f"It expires in {context.get('expires_in_minutes', 10)} minutes.\n\n"
                "If you did not try to sign up, you can ignore this email."
            ),
        }
