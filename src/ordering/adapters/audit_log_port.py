"""Audit log port — append-only record of admin and staff actions."""

from abc import ABC, abstractmethod


class AuditLogPort(ABC):
    @abstractmethod
    def record(self, actor_id: str | None, action: str, target_id: str, details: str) -> None:
        """Append one entry. Entries are never updated or removed."""
        ...
