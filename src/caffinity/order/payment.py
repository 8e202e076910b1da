"""Order payment — commands and handler.

PENDING → PAYMENT_PENDING → CONFIRMED | PAYMENT_FAILED. Recording the same
outcome twice is harmless; a failed payment is never retried.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from caffinity.domain import caffinity, logger
from caffinity.order.order import Order


@caffinity.command(part_of="Order")
class InitiatePayment:
    order_id = Identifier(required=True)
    payment_method = String(max_length=20)


@caffinity.command(part_of="Order")
class RecordPaymentSuccess:
    order_id = Identifier(required=True)
    transaction_id = String(max_length=100)


@caffinity.command(part_of="Order")
class RecordPaymentFailure:
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@caffinity.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(InitiatePayment)
    def initiate_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.initiate_payment(payment_method=command.payment_method)
        repo.add(order)

    @handle(RecordPaymentSuccess)
    def record_payment_success(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment_success(transaction_id=command.transaction_id)
        repo.add(order)
        logger.info("Payment completed", order_id=str(order.id), transaction_id=order.payment.transaction_id)

    @handle(RecordPaymentFailure)
    def record_payment_failure(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment_failure(reason=command.reason)
        repo.add(order)
        logger.warning("Payment failed", order_id=str(order.id), reason=command.reason)
