"""Cart item management — commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from caffinity.cart.cart import Cart
from caffinity.cart.resolution import get_or_create_cart
from caffinity.catalogue.product import Product
from caffinity.domain import caffinity


@caffinity.command(part_of="Cart")
class AddToCart:
    user_id = Identifier()
    session_id = String(max_length=255)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)


@caffinity.command(part_of="Cart")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@caffinity.command(part_of="Cart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@caffinity.command(part_of="Cart")
class ClearCart:
    cart_id = Identifier(required=True)


@caffinity.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        if command.quantity is None or command.quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        # Product must exist before a cart is created for it
        product = current_domain.repository_for(Product).get(command.product_id)

        cart = get_or_create_cart(user_id=command.user_id, session_id=command.session_id)
        cart.add_item(
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=command.quantity,
        )
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.update_item_quantity(command.product_id, command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.remove_item(command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        repo._dao.delete(cart)
