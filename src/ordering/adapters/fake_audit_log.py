"""Fake audit log — appends entries to an in-memory list for testing."""

from datetime import UTC, datetime

from ordering.adapters.audit_log_port import AuditLogPort


class FakeAuditLog(AuditLogPort):
    def __init__(self):
        self.entries: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Audit store unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Audit store unavailable"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def record(self, actor_id: str | None, action: str, target_id: str, details: str) -> None:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        self.entries.append(
            {
                "actor_id": actor_id,
                "action": action,
                "target_id": target_id,
                "details": details,
                "recorded_at": datetime.now(UTC),
            }
        )

    def reset(self):
        self.entries.clear()
        self.should_succeed = True
        self.failure_reason = "Audit store unavailable"
