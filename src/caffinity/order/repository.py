"""Repository for the Order aggregate. Every listing is newest first."""

from caffinity.domain import caffinity
from caffinity.order.order import Order

RECENT_ORDERS_LIMIT = 10


def _newest_first(orders):
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


@caffinity.repository(part_of=Order)
class OrderRepository:
    def find_by_user(self, user_id) -> list[Order]:
        return _newest_first(self._dao.query.filter(user_id=str(user_id)).all().items)

    def find_by_status(self, status: str) -> list[Order]:
        return _newest_first(self._dao.query.filter(status=status).all().items)

    def find_recent(self, limit: int = RECENT_ORDERS_LIMIT) -> list[Order]:
        return _newest_first(self._dao.query.all().items)[:limit]
