"""Ordering bounded context: checkout, inventory reservation and the order lifecycle.

Products, their stock ledger and orders live in one domain so that a checkout's
reservations and the order write commit in a single Unit of Work.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)


def setting(name, default=None):
    """Read a business constant from the `[custom]` section of domain.toml."""
    return ordering.config["custom"].get(name, default)
