"""Product aggregate — the coffee and dessert menu.

Products are read-mostly. Carts copy the current price into each line when a
product is added, so later price changes never touch carts or orders.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, String, Text

from caffinity.catalogue.events import ProductAdded, ProductDetailsUpdated
from caffinity.domain import caffinity


class ProductCategory(Enum):
    COFFEE = "Coffee"
    DESSERT = "Dessert"


@caffinity.aggregate
class Product:
    name = String(required=True, max_length=100)
    description = Text()
    price = Float(required=True, min_value=0.01)
    category = String(required=True, choices=ProductCategory)
    product_type = String(max_length=50)  # e.g. Espresso, Latte, Cake
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def add(cls, name, price, category, description=None, product_type=None):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=round(float(price), 2),
            category=category,
            product_type=product_type,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                category=product.category,
                product_type=product.product_type,
                added_at=now,
            )
        )
        return product

    def update_details(self, name=None, description=None, price=None, product_type=None):
        """Change menu details. Only the supplied fields are touched."""
        if name is None and description is None and price is None and product_type is None:
            raise ValidationError({"product": ["Nothing to update"]})

        previous_price = self.price
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if product_type is not None:
            self.product_type = product_type
        if price is not None:
            self.price = round(float(price), 2)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                name=self.name,
                price=self.price,
                previous_price=previous_price,
                updated_at=now,
            )
        )
