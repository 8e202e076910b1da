"""Order placement — turn (part of) a user's cart into an order.

The order snapshots the requested cart lines at their cart price. Afterwards
only the ordered quantities are taken out of the cart: a line ordered in full
disappears, a line ordered in part keeps the rest, and a cart left without
lines is deleted.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from caffinity.cart.cart import Cart
from caffinity.cart.resolution import get_or_create_cart
from caffinity.domain import caffinity, logger
from caffinity.identity.user import User
from caffinity.order.order import Order


@caffinity.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    session_id = String(max_length=255)
    items = Text()  # JSON: list of {product_id, quantity}; omitted orders the whole cart
    payment_method = String(max_length=20)
    transaction_id = String(max_length=100)


def _requested_quantities(items):
    """Parse the requested lines into {product_id: quantity}."""
    if items is None:
        return None

    entries = json.loads(items) if isinstance(items, str) else items
    requested = {}
    for entry in entries:
        product_id = str(entry["product_id"])
        if product_id in requested:
            raise ValidationError({"items": [f"Product {product_id} is listed more than once"]})
        requested[product_id] = int(entry["quantity"])
    return requested


@caffinity.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        user = current_domain.repository_for(User).get(command.user_id)

        cart = get_or_create_cart(user_id=user.id, session_id=command.session_id, create=False)
        if cart is None or not cart.items:
            raise ValidationError({"cart": ["Cart is empty"]})

        lines = cart.order_lines(_requested_quantities(command.items))

        order = Order.create(
            user_id=user.id,
            lines=lines,
            payment_method=command.payment_method,
            transaction_id=command.transaction_id,
            cart_id=cart.id,
        )
        current_domain.repository_for(Order).add(order)

        cart.consume(order.id, lines)
        cart_repo = current_domain.repository_for(Cart)
        if cart.items:
            cart_repo.add(cart)
        else:
            cart_repo._dao.delete(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(user.id),
            total_amount=order.total_amount,
            cart_deleted=not cart.items,
        )
        return str(order.id)
