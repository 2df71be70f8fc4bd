"""Repository for the Order aggregate, with the read queries the listing service needs."""

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    """Order repository.

    Every listing is newest first and unbounded; the default query limit would
    otherwise truncate long order histories.
    """

    def for_user(self, user_id) -> list[Order]:
        return self._dao.query.filter(user_id=str(user_id)).order_by("-created_at").limit(None).all().items

    def with_status(self, status: str | None = None) -> list[Order]:
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        return query.order_by("-created_at").limit(None).all().items
