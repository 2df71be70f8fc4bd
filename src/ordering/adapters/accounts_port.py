"""Accounts port — read-only view of customer account status and profile."""

from abc import ABC, abstractmethod


class AccountsPort(ABC):
    """Abstract interface onto the identity service."""

    @abstractmethod
    def is_locked(self, user_id: str) -> bool: ...

    @abstractmethod
    def is_deactivated(self, user_id: str) -> bool: ...

    @abstractmethod
    def profile(self, user_id: str) -> dict | None:
        """Return the user's profile.

        Returns:
            dict with keys: first_name, last_name, email; None if the user is unknown
        """
        ...
