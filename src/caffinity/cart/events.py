"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String, Text

from caffinity.domain import caffinity


@caffinity.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or its line quantity was increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)


@caffinity.event(part_of="Cart")
class CartQuantityUpdated:
    """The quantity of a cart line was set to a new value."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@caffinity.event(part_of="Cart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@caffinity.event(part_of="Cart")
class CartsMerged:
    """A guest cart's lines were folded into a signed-in user's cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    source_cart_id = Identifier(required=True)
    source_session_id = String()
    items_merged_count = Integer(required=True)


@caffinity.event(part_of="Cart")
class CartClaimed:
    """A guest cart was re-associated with the user who just signed in."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    session_id = String()


@caffinity.event(part_of="Cart")
class CartItemsOrdered:
    """Ordered quantities were taken out of the cart at checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    remaining_items = Integer(required=True)
