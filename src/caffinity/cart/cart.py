"""Cart aggregate (CQRS) — the lines a guest or a signed-in user intends to buy.

A cart belongs to a browser session until its owner signs in, at which point it
is either claimed by the user or folded into the user's existing cart. Each
product appears on at most one line; every line keeps the unit price the
product had when it was first added.

Checkout never empties the cart wholesale. Only the quantities that made it
into the order are taken out, so a customer can order part of a line and keep
the rest for later.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from caffinity.cart.events import (
    CartClaimed,
    CartItemAdded,
    CartItemRemoved,
    CartItemsOrdered,
    CartQuantityUpdated,
    CartsMerged,
)
from caffinity.domain import caffinity


@caffinity.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    added_at = DateTime()

    def line_total(self):
        return round(self.quantity * self.unit_price, 2)


@caffinity.aggregate
class Cart:
    user_id = Identifier()  # Null for guest carts
    session_id = String(max_length=255)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cart_must_have_an_owner(self):
        if not self.user_id and not self.session_id:
            raise ValidationError({"cart": ["A cart must belong to a user or a session"]})

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear on only one cart line"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id=None, session_id=None):
        if not user_id and not session_id:
            raise ValidationError({"cart": ["A user id or a session id is required"]})

        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def total_price(self):
        return round(sum(item.line_total() for item in self.items), 2)

    def total_items(self):
        return sum(item.quantity for item in self.items)

    def is_guest_cart(self):
        return not self.user_id

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, product_id, unit_price, quantity=1, product_name=None):
        """Add a product, or increase its quantity if it already has a line."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.find_item(product_id)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(
                product_id=product_id,
                product_name=product_name,
                quantity=quantity,
                unit_price=round(float(unit_price), 2),
                added_at=now,
            )
            self.add_items(item)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product_id),
                quantity=quantity,
                unit_price=item.unit_price,
            )
        )

    def update_item_quantity(self, product_id, new_quantity):
        """Set a line's quantity. Zero or less removes the line."""
        if new_quantity <= 0:
            self.remove_item(product_id)
            return

        item = self.find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id):
        item = self.find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
            )
        )

    # -------------------------------------------------------------------
    # Guest → user
    # -------------------------------------------------------------------
    def merge(self, guest_cart):
        """Fold a guest cart's lines into this cart.

        Quantities of products present in both carts are summed; the user's
        price snapshot wins. Other guest lines are copied over as they are.
        """
        if guest_cart.id == self.id:
            raise ValidationError({"cart": ["A cart cannot be merged into itself"]})

        now = datetime.now(UTC)
        for guest_item in guest_cart.items:
            existing = self.find_item(guest_item.product_id)
            if existing:
                existing.quantity += guest_item.quantity
            else:
                self.add_items(
                    CartItem(
                        product_id=guest_item.product_id,
                        product_name=guest_item.product_name,
                        quantity=guest_item.quantity,
                        unit_price=guest_item.unit_price,
                        added_at=guest_item.added_at or now,
                    )
                )

        self.updated_at = now

        self.raise_(
            CartsMerged(
                cart_id=str(self.id),
                source_cart_id=str(guest_cart.id),
                source_session_id=guest_cart.session_id,
                items_merged_count=len(guest_cart.items),
            )
        )

    def claim(self, user_id):
        """Hand a guest cart over to the user who just signed in."""
        if self.user_id and str(self.user_id) != str(user_id):
            raise ValidationError({"cart": ["Cart already belongs to another user"]})

        self.user_id = user_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartClaimed(
                cart_id=str(self.id),
                user_id=str(user_id),
                session_id=self.session_id,
            )
        )

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def order_lines(self, requested=None):
        """Snapshot the lines to order.

        Args:
            requested: Optional mapping of product id → quantity. When omitted,
                every line is ordered in full.

        Returns:
            List of dicts with product_id, product_name, quantity, unit_price.
        """
        if not self.items:
            raise ValidationError({"cart": ["Cart is empty"]})

        if requested is None:
            requested = {str(item.product_id): item.quantity for item in self.items}
        if not requested:
            raise ValidationError({"items": ["At least one item must be ordered"]})

        lines = []
        for product_id, quantity in requested.items():
            item = self.find_item(product_id)
            if item is None:
                raise ValidationError({"items": [f"Product {product_id} is not in the cart"]})
            if quantity < 1:
                raise ValidationError({"items": [f"Quantity for product {product_id} must be at least 1"]})
            if quantity > item.quantity:
                raise ValidationError(
                    {"items": [f"Cannot order {quantity} of product {product_id}; the cart holds {item.quantity}"]}
                )

            lines.append(
                {
                    "product_id": str(item.product_id),
                    "product_name": item.product_name,
                    "quantity": quantity,
                    "unit_price": item.unit_price,
                }
            )
        return lines

    def consume(self, order_id, ordered_lines):
        """Take the ordered quantities out of the cart.

        Lines whose quantity is used up are removed. A line is never reduced by
        more than was ordered for its product.
        """
        consumed = []
        for line in ordered_lines:
            item = self.find_item(line["product_id"])
            if item is None or line["quantity"] > item.quantity:
                raise ValidationError({"items": [f"Cart no longer holds product {line['product_id']}"]})

            if line["quantity"] == item.quantity:
                self.remove_items(item)
            else:
                item.quantity -= line["quantity"]
            consumed.append({"product_id": str(line["product_id"]), "quantity": line["quantity"]})

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemsOrdered(
                cart_id=str(self.id),
                order_id=str(order_id),
                items=json.dumps(consumed),
                remaining_items=len(self.items),
            )
        )
