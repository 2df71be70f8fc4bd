"""Notifier port — abstract interface for customer and staff notifications."""

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    """Abstract interface for notification delivery adapters."""

    @abstractmethod
    def send(self, user_id: str, title: str, body: str, category: str) -> dict:
        """Send a notification to one user.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...

    @abstractmethod
    def send_to_roles(self, roles: list[str], title: str, body: str, category: str) -> dict:
        """Send a notification to every staff member holding one of `roles`."""
        ...
