"""Domain events for the Order aggregate.

Events are versioned, immutable facts. Projectors consume them to keep the
order summary and the daily statistics current.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from caffinity.domain import caffinity


@caffinity.event(part_of="Order")
class OrderPlaced:
    """An order was created from the lines of a cart."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    cart_id = Identifier()
    items = Text(required=True)  # JSON: list of line dicts
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    payment_method = String(required=True)
    transaction_id = String(required=True)
    placed_at = DateTime(required=True)


@caffinity.event(part_of="Order")
class PaymentInitiated:
    """The customer started paying for the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_method = String(required=True)
    transaction_id = String(required=True)
    amount = Float(required=True)
    initiated_at = DateTime(required=True)


@caffinity.event(part_of="Order")
class PaymentCompleted:
    """Payment went through and the order is confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    transaction_id = String(required=True)
    amount = Float(required=True)
    payment_method = String(required=True)
    paid_at = DateTime(required=True)


@caffinity.event(part_of="Order")
class PaymentFailed:
    """Payment was declined. The order can only be cancelled from here."""

    __version__ = 1

    order_id = Identifier(required=True)
    transaction_id = String(required=True)
    reason = String()
    failed_at = DateTime(required=True)


@caffinity.event(part_of="Order")
class OrderPreparing:
    """Baristas started preparing the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    started_at = DateTime(required=True)


@caffinity.event(part_of="Order")
class OrderReady:
    """The order is ready for pickup."""

    __version__ = 1

    order_id = Identifier(required=True)
    ready_at = DateTime(required=True)


@caffinity.event(part_of="Order")
class OrderCompleted:
    """The customer collected the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    completed_at = DateTime(required=True)


@caffinity.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)
