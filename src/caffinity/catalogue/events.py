"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from caffinity.domain import caffinity


@caffinity.event(part_of="Product")
class ProductAdded:
    """A new product was added to the menu."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    category = String(required=True)
    product_type = String()
    added_at = DateTime(required=True)


@caffinity.event(part_of="Product")
class ProductDetailsUpdated:
    """Name, description, type or price of a product changed."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    previous_price = Float(required=True)
    updated_at = DateTime(required=True)
