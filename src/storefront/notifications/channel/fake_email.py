"""In-memory email outbox, the default channel until a provider adapter is set."""

from itertools import count

from storefront.notifications.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    def __init__(self):
        self.outbox: list[dict] = []
        self.failure: str | None = None
        self._sequence = count(1)

    def fail_with(self, reason: str = "Email delivery failed"):
        """Make every following send report ``reason`` instead of delivering."""
        self.failure = reason

    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict:
        if self.failure:
            return {"message_id": None, "status": "failed", "error": self.failure}

        message_id = f"outbox-{next(self._sequence)}"
        self.outbox.append({"message_id": message_id, "to": to, "subject": subject, "body": body})
        return {"message_id": message_id, "status": "sent"}

    def sent_to(self, address: str) -> list[dict]:
        return [message for message in self.outbox if message["to"] == address]
