"""Fake notifier — records notifications for testing."""

from uuid import uuid4

from ordering.adapters.notifier_port import NotifierPort


class FakeNotifier(NotifierPort):
    """Notifier that records notifications in memory for test assertions."""

    def __init__(self):
        self.sent: list[dict] = []
        self.should_succeed = True
        self.raise_on_send = False
        self.failure_reason = "Notification delivery failed"

    def configure(
        self,
        should_succeed: bool = True,
        raise_on_send: bool = False,
        failure_reason: str = "Notification delivery failed",
    ):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.raise_on_send = raise_on_send
        self.failure_reason = failure_reason

    def _deliver(self, record: dict) -> dict:
        if self.raise_on_send:
            raise ConnectionError(self.failure_reason)
        if not self.should_succeed:
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
            }

        message_id = f"ntf-{uuid4().hex[:12]}"
        self.sent.append({"message_id": message_id, **record})
        return {"message_id": message_id, "status": "sent"}

    def send(self, user_id: str, title: str, body: str, category: str) -> dict:
        return self._deliver(
            {
                "user_id": user_id,
                "roles": None,
                "title": title,
                "body": body,
                "category": category,
            }
        )

    def send_to_roles(self, roles: list[str], title: str, body: str, category: str) -> dict:
        return self._deliver(
            {
                "user_id": None,
                "roles": list(roles),
                "title": title,
                "body": body,
                "category": category,
            }
        )

    def by_category(self, category: str) -> list[dict]:
        return [record for record in self.sent if record["category"] == category]

    def reset(self):
        """Clear sent notifications (useful between tests)."""
        self.sent.clear()
        self.should_succeed = True
        self.raise_on_send = False
        self.failure_reason = "Notification delivery failed"
