"""Fake account directory — in-memory account status and profiles for testing."""

from ordering.adapters.accounts_port import AccountsPort


class FakeAccounts(AccountsPort):
    def __init__(self):
        self.locked: set[str] = set()
        self.deactivated: set[str] = set()
        self.profiles: dict[str, dict] = {}
        self.should_succeed = True
        self.failure_reason = "Identity service unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Identity service unavailable"):
        """Configure profile lookups to fail, for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add_profile(self, user_id: str, first_name: str, last_name: str, email: str):
        self.profiles[user_id] = {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
        }

    def lock(self, user_id: str):
        self.locked.add(user_id)

    def deactivate(self, user_id: str):
        self.deactivated.add(user_id)

    def is_locked(self, user_id: str) -> bool:
        return user_id in self.locked

    def is_deactivated(self, user_id: str) -> bool:
        return user_id in self.deactivated

    def profile(self, user_id: str) -> dict | None:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        return self.profiles.get(user_id)

    def reset(self):
        self.locked.clear()
        self.deactivated.clear()
        self.profiles.clear()
        self.should_succeed = True
        self.failure_reason = "Identity service unavailable"
