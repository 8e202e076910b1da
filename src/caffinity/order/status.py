"""Admin status update — move an order to a named status."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from caffinity.domain import caffinity
from caffinity.order.order import Order


@caffinity.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    payment_method = String(max_length=20)
    transaction_id = String(max_length=100)
    reason = String(max_length=500)


@caffinity.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.advance_to(
            command.status,
            payment_method=command.payment_method,
            transaction_id=command.transaction_id,
            reason=command.reason,
        )
        repo.add(order)
        return order.status
