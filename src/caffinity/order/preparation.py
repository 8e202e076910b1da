"""Order preparation — commands and handler for CONFIRMED → PREPARING → READY → COMPLETED."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from caffinity.domain import caffinity
from caffinity.order.order import Order


@caffinity.command(part_of="Order")
class StartPreparing:
    order_id = Identifier(required=True)


@caffinity.command(part_of="Order")
class MarkReady:
    order_id = Identifier(required=True)


@caffinity.command(part_of="Order")
class CompleteOrder:
    """The customer picked up the order."""

    order_id = Identifier(required=True)


@caffinity.command_handler(part_of=Order)
class PrepareOrderHandler:
    @handle(StartPreparing)
    def start_preparing(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.start_preparing()
        repo.add(order)

    @handle(MarkReady)
    def mark_ready(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_ready()
        repo.add(order)

    @handle(CompleteOrder)
    def complete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.complete()
        repo.add(order)
