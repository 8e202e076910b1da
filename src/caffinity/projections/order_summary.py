"""Order summary — one row per order for listings and order history."""

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from caffinity.domain import caffinity
from caffinity.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    OrderPreparing,
    OrderReady,
    PaymentCompleted,
    PaymentFailed,
    PaymentInitiated,
)
from caffinity.order.order import Order, OrderStatus, PaymentStatus


@caffinity.projection
class OrderSummary:
    order_id = Identifier(identifier=True, required=True)
    user_id = Identifier(required=True)
    status = String(required=True)
    item_count = Integer(default=0)
    total_amount = Float()
    payment_method = String()
    payment_status = String()
    transaction_id = String()
    created_at = DateTime()
    updated_at = DateTime()


@caffinity.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                user_id=event.user_id,
                status=OrderStatus.PENDING.value,
                item_count=event.item_count,
                total_amount=event.total_amount,
                payment_method=event.payment_method,
                payment_status=PaymentStatus.PENDING.value,
                transaction_id=event.transaction_id,
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    def _update(self, order_id, updated_at, **changes):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(order_id)
        for field_name, value in changes.items():
            setattr(summary, field_name, value)
        summary.updated_at = updated_at
        repo.add(summary)

    @on(PaymentInitiated)
    def on_payment_initiated(self, event):
        self._update(
            event.order_id,
            event.initiated_at,
            status=OrderStatus.PAYMENT_PENDING.value,
            payment_method=event.payment_method,
        )

    @on(PaymentCompleted)
    def on_payment_completed(self, event):
        self._update(
            event.order_id,
            event.paid_at,
            status=OrderStatus.CONFIRMED.value,
            payment_status=PaymentStatus.COMPLETED.value,
            transaction_id=event.transaction_id,
        )

    @on(PaymentFailed)
    def on_payment_failed(self, event):
        self._update(
            event.order_id,
            event.failed_at,
            status=OrderStatus.PAYMENT_FAILED.value,
            payment_status=PaymentStatus.FAILED.value,
        )

    @on(OrderPreparing)
    def on_order_preparing(self, event):
        self._update(event.order_id, event.started_at, status=OrderStatus.PREPARING.value)

    @on(OrderReady)
    def on_order_ready(self, event):
        self._update(event.order_id, event.ready_at, status=OrderStatus.READY.value)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        self._update(event.order_id, event.completed_at, status=OrderStatus.COMPLETED.value)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._update(event.order_id, event.cancelled_at, status=OrderStatus.CANCELLED.value)
