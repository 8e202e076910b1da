"""Daily order stats projection — dashboard figures for the shop.

Keeps per-day counts of orders placed, payments confirmed, orders completed and
cancelled, plus revenue from completed payments. Keyed by date (YYYY-MM-DD).
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from caffinity.domain import caffinity
from caffinity.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    PaymentCompleted,
)
from caffinity.order.order import Order, OrderStatus
from caffinity.projections.order_summary import OrderSummary


@caffinity.projection
class DailyOrderStats:
    date = String(identifier=True, required=True, max_length=10)  # YYYY-MM-DD
    orders_placed = Integer(default=0)
    orders_confirmed = Integer(default=0)
    orders_completed = Integer(default=0)
    orders_cancelled = Integer(default=0)
    total_revenue = Float(default=0.0)


def _get_or_create(date_key):
    repo = current_domain.repository_for(DailyOrderStats)
    try:
        return repo.get(date_key)
    except ObjectNotFoundError:
        return DailyOrderStats(
            date=date_key,
            orders_placed=0,
            orders_confirmed=0,
            orders_completed=0,
            orders_cancelled=0,
            total_revenue=0.0,
        )


@caffinity.projector(projector_for=DailyOrderStats, aggregates=[Order])
class DailyOrderStatsProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        record = _get_or_create(event.placed_at.date().isoformat())
        record.orders_placed = (record.orders_placed or 0) + 1
        current_domain.repository_for(DailyOrderStats).add(record)

    @on(PaymentCompleted)
    def on_payment_completed(self, event):
        record = _get_or_create(event.paid_at.date().isoformat())
        record.orders_confirmed = (record.orders_confirmed or 0) + 1
        record.total_revenue = round((record.total_revenue or 0.0) + (event.amount or 0.0), 2)
        current_domain.repository_for(DailyOrderStats).add(record)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        record = _get_or_create(event.completed_at.date().isoformat())
        record.orders_completed = (record.orders_completed or 0) + 1
        current_domain.repository_for(DailyOrderStats).add(record)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        record = _get_or_create(event.cancelled_at.date().isoformat())
        record.orders_cancelled = (record.orders_cancelled or 0) + 1
        current_domain.repository_for(DailyOrderStats).add(record)


def _count_in_status(status):
    summaries = current_domain.repository_for(OrderSummary)._dao.query.filter(status=status.value).all().items
    return len(summaries)


def order_statistics():
    """Totals across all days.

    Pending and confirmed counts are the orders sitting in that status right
    now. Completed and cancelled are terminal, so the daily counters already
    match the live figures.
    """
    rows = current_domain.repository_for(DailyOrderStats)._dao.query.all().items

    return {
        "total_orders": sum(row.orders_placed or 0 for row in rows),
        "pending_orders": _count_in_status(OrderStatus.PENDING),
        "confirmed_orders": _count_in_status(OrderStatus.CONFIRMED),
        "completed_orders": sum(row.orders_completed or 0 for row in rows),
        "cancelled_orders": sum(row.orders_cancelled or 0 for row in rows),
        "total_revenue": round(sum(row.total_revenue or 0.0 for row in rows), 2),
    }
