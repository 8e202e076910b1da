"""Order aggregate (CQRS) — an immutable snapshot of cart lines plus a payment.

State Machine (8 states):
    PENDING → PAYMENT_PENDING → CONFIRMED → PREPARING → READY → COMPLETED
    PAYMENT_PENDING → PAYMENT_FAILED
    CANCELLED (from every state except COMPLETED and CANCELLED)

Order lines and the total are fixed when the order is placed. Later changes
to product prices or to the cart never reach the order.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

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


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PAYMENT_PENDING = "Payment_Pending"
    PAYMENT_FAILED = "Payment_Failed"
    CONFIRMED = "Confirmed"
    PREPARING = "Preparing"
    READY = "Ready"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"


class PaymentMethod(Enum):
    CASH = "Cash"
    CARD = "Card"
    E_WALLET = "E-Wallet"


DEFAULT_PAYMENT_METHOD = PaymentMethod.CASH

# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAYMENT_PENDING, OrderStatus.CANCELLED},
    OrderStatus.PAYMENT_PENDING: {
        OrderStatus.CONFIRMED,
        OrderStatus.PAYMENT_FAILED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PAYMENT_FAILED: {OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def generate_transaction_id():
    """Timestamp plus a random suffix, e.g. TXN-20260119093015123456-9F3A1C2B."""
    timestamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S%f")
    return f"TXN-{timestamp}-{uuid4().hex[:8].upper()}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@caffinity.value_object(part_of="Order")
class Payment:
    """Payment attached to an order.

    Replaced as a whole on every change. COMPLETED and FAILED are final for
    the payment; nothing retries a failed payment.
    """

    method = String(choices=PaymentMethod, default=DEFAULT_PAYMENT_METHOD.value)
    status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    transaction_id = String(required=True, max_length=100)
    amount = Float(required=True, min_value=0.0)
    failure_reason = String(max_length=500)
    paid_at = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@caffinity.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    def line_total(self):
        return round(self.quantity * self.unit_price, 2)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@caffinity.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    payment = ValueObject(Payment)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_order_lines(self):
        if not self.items:
            return
        lines_total = round(sum(item.line_total() for item in self.items), 2)
        if abs(lines_total - self.total_amount) > 0.005:
            raise ValidationError({"total_amount": ["Order total does not match its lines"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, lines, payment_method=None, transaction_id=None, cart_id=None):
        """Place an order for the given lines.

        Args:
            user_id: The customer placing the order.
            lines: List of dicts with product_id, product_name, quantity,
                unit_price, usually from `Cart.order_lines`.
            payment_method: Cash, Card or E-Wallet. Defaults to Cash.
            transaction_id: Generated when not supplied.
            cart_id: The cart the lines came from, recorded on the event.
        """
        if not lines:
            raise ValidationError({"cart": ["Cart is empty"]})

        method = payment_method or DEFAULT_PAYMENT_METHOD.value
        if method not in {m.value for m in PaymentMethod}:
            raise ValidationError({"payment_method": [f"Unsupported payment method: {method}"]})

        items = [
            OrderItem(
                product_id=line["product_id"],
                product_name=line.get("product_name"),
                quantity=line["quantity"],
                unit_price=round(float(line["unit_price"]), 2),
            )
            for line in lines
        ]
        total_amount = round(sum(item.line_total() for item in items), 2)
        transaction_id = transaction_id or generate_transaction_id()
        now = datetime.now(UTC)

        order = cls(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            items=items,
            total_amount=total_amount,
            payment=Payment(
                method=method,
                status=PaymentStatus.PENDING.value,
                transaction_id=transaction_id,
                amount=total_amount,
            ),
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                cart_id=str(cart_id) if cart_id else None,
                items=json.dumps(lines),
                item_count=sum(item.quantity for item in items),
                total_amount=total_amount,
                payment_method=method,
                transaction_id=transaction_id,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _replace_payment(self, **changes):
        current = {
            "method": self.payment.method,
            "status": self.payment.status,
            "transaction_id": self.payment.transaction_id,
            "amount": self.payment.amount,
            "failure_reason": self.payment.failure_reason,
            "paid_at": self.payment.paid_at,
        }
        current.update(changes)
        self.payment = Payment(**current)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def initiate_payment(self, payment_method=None):
        self._assert_can_transition(OrderStatus.PAYMENT_PENDING)

        if payment_method:
            if payment_method not in {m.value for m in PaymentMethod}:
                raise ValidationError({"payment_method": [f"Unsupported payment method: {payment_method}"]})
            self._replace_payment(method=payment_method)

        now = datetime.now(UTC)
        self.status = OrderStatus.PAYMENT_PENDING.value
        self.updated_at = now

        self.raise_(
            PaymentInitiated(
                order_id=str(self.id),
                payment_method=self.payment.method,
                transaction_id=self.payment.transaction_id,
                amount=self.payment.amount,
                initiated_at=now,
            )
        )

    def record_payment_success(self, transaction_id=None):
        """Mark the payment completed and confirm the order.

        Repeating the call for a payment that already completed with the same
        transaction id (or with none) changes nothing.
        """
        if self.payment.status == PaymentStatus.COMPLETED.value:
            if transaction_id is None or transaction_id == self.payment.transaction_id:
                return
            raise ValidationError({"transaction_id": ["Payment was already completed with another transaction"]})

        self._assert_can_transition(OrderStatus.CONFIRMED)

        now = datetime.now(UTC)
        self._replace_payment(
            status=PaymentStatus.COMPLETED.value,
            transaction_id=transaction_id or self.payment.transaction_id,
            paid_at=now,
        )
        self.status = OrderStatus.CONFIRMED.value
        self.updated_at = now

        self.raise_(
            PaymentCompleted(
                order_id=str(self.id),
                transaction_id=self.payment.transaction_id,
                amount=self.payment.amount,
                payment_method=self.payment.method,
                paid_at=now,
            )
        )

    def record_payment_failure(self, reason=None):
        """Mark the payment failed. Repeating the call changes nothing."""
        if self.payment.status == PaymentStatus.FAILED.value:
            return

        self._assert_can_transition(OrderStatus.PAYMENT_FAILED)

        now = datetime.now(UTC)
        self._replace_payment(status=PaymentStatus.FAILED.value, failure_reason=reason)
        self.status = OrderStatus.PAYMENT_FAILED.value
        self.updated_at = now

        self.raise_(
            PaymentFailed(
                order_id=str(self.id),
                transaction_id=self.payment.transaction_id,
                reason=reason,
                failed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Preparation lifecycle
    # -------------------------------------------------------------------
    def start_preparing(self):
        self._assert_can_transition(OrderStatus.PREPARING)
        now = datetime.now(UTC)
        self.status = OrderStatus.PREPARING.value
        self.updated_at = now
        self.raise_(OrderPreparing(order_id=str(self.id), started_at=now))

    def mark_ready(self):
        self._assert_can_transition(OrderStatus.READY)
        now = datetime.now(UTC)
        self.status = OrderStatus.READY.value
        self.updated_at = now
        self.raise_(OrderReady(order_id=str(self.id), ready_at=now))

    def complete(self):
        self._assert_can_transition(OrderStatus.COMPLETED)
        now = datetime.now(UTC)
        self.status = OrderStatus.COMPLETED.value
        self.updated_at = now
        self.raise_(OrderCompleted(order_id=str(self.id), completed_at=now))

    def cancel(self, reason=None):
        current = OrderStatus(self.status)
        if current == OrderStatus.COMPLETED:
            raise ValidationError({"status": ["Cannot cancel completed order"]})
        if current == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Order is already cancelled"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=current.value,
                reason=reason,
                cancelled_at=now,
            )
        )

    def advance_to(self, target_status, **kwargs):
        """Move to `target_status` through its named transition.

        Used by the admin status endpoint. Keyword arguments are passed on
        to the transition (payment_method, transaction_id, reason).
        """
        try:
            target = OrderStatus(target_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {target_status}"]}) from None

        if target == OrderStatus.CANCELLED:
            self.cancel(reason=kwargs.get("reason"))
            return

        self._assert_can_transition(target)

        if target == OrderStatus.PAYMENT_PENDING:
            self.initiate_payment(payment_method=kwargs.get("payment_method"))
        elif target == OrderStatus.CONFIRMED:
            self.record_payment_success(transaction_id=kwargs.get("transaction_id"))
        elif target == OrderStatus.PAYMENT_FAILED:
            self.record_payment_failure(reason=kwargs.get("reason"))
        elif target == OrderStatus.PREPARING:
            self.start_preparing()
        elif target == OrderStatus.READY:
            self.mark_ready()
        elif target == OrderStatus.COMPLETED:
            self.complete()
