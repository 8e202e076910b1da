"""Tests for Cart aggregate creation, queries and invariants."""

import pytest
from caffinity.cart.cart import Cart, CartItem
from protean.exceptions import ValidationError


class TestCartCreation:
    def test_create_with_user_id(self):
        cart = Cart.create(user_id="user-001")
        assert str(cart.user_id) == "user-001"
        assert cart.session_id is None

    def test_create_with_session_id(self):
        cart = Cart.create(session_id="sess-guest-001")
        assert cart.user_id is None
        assert cart.session_id == "sess-guest-001"
        assert cart.is_guest_cart()

    def test_create_without_owner_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Cart.create()
        assert "cart" in exc.value.messages

    def test_create_starts_empty(self):
        cart = Cart.create(user_id="user-001")
        assert len(cart.items) == 0
        assert cart.total_items() == 0
        assert cart.total_price() == 0

    def test_create_sets_timestamps(self):
        cart = Cart.create(user_id="user-001")
        assert cart.created_at is not None
        assert cart.updated_at is not None


class TestCartTotals:
    def test_line_total(self):
        item = CartItem(product_id="prod-001", quantity=3, unit_price=2.5)
        assert item.line_total() == 7.5

    def test_total_price_is_sum_of_line_totals(self):
        cart = Cart.create(user_id="user-001")
        cart.add_item("prod-001", unit_price=2.0, quantity=3)
        cart.add_item("prod-002", unit_price=5.0, quantity=1)
        cart.add_item("prod-003", unit_price=0.1, quantity=3)

        assert cart.total_price() == round(sum(item.line_total() for item in cart.items), 2)
        assert cart.total_price() == 11.3

    def test_total_items_counts_quantities(self):
        cart = Cart.create(user_id="user-001")
        cart.add_item("prod-001", unit_price=2.0, quantity=3)
        cart.add_item("prod-002", unit_price=5.0, quantity=1)
        assert cart.total_items() == 4

