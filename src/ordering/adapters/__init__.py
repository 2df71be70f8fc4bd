"""Collaborator adapter registry — pluggable ports for the order workflow.

Provides singleton access to the adapters the workflow talks to: the customer
notifier, the shopping cart, the account directory and the audit log. In-memory
fakes are used by default; deployments swap in real adapters with
`register_adapter` at start-up.
"""

from enum import Enum


class Collaborator(Enum):
    NOTIFIER = "notifier"
    CART = "cart"
    ACCOUNTS = "accounts"
    AUDIT_LOG = "audit_log"


_adapter_instances: dict[str, object] = {}


def get_adapter(kind: str):
    """Return the configured adapter (singleton per collaborator kind).

    Args:
        kind: One of the Collaborator enum values ("notifier", "cart", "accounts", "audit_log")
    """
    if kind not in _adapter_instances:
        if kind == Collaborator.NOTIFIER.value:
            from ordering.adapters.fake_notifier import FakeNotifier

            _adapter_instances[kind] = FakeNotifier()
        elif kind == Collaborator.CART.value:
            from ordering.adapters.fake_cart import FakeCart

            _adapter_instances[kind] = FakeCart()
        elif kind == Collaborator.ACCOUNTS.value:
            from ordering.adapters.fake_accounts import FakeAccounts

            _adapter_instances[kind] = FakeAccounts()
        elif kind == Collaborator.AUDIT_LOG.value:
            from ordering.adapters.fake_audit_log import FakeAuditLog

            _adapter_instances[kind] = FakeAuditLog()
        else:
            raise ValueError(f"Unknown collaborator: {kind}")

    return _adapter_instances[kind]


def register_adapter(kind: str, adapter) -> None:
    """Install a specific adapter for a collaborator kind."""
    Collaborator(kind)
    _adapter_instances[kind] = adapter


def reset_adapters():
    """Reset all adapter singletons (useful for testing)."""
    _adapter_instances.clear()
