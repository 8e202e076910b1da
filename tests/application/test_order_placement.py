"""Application tests for placing orders from carts."""

import json

import pytest
from caffinity.cart.cart import Cart
from caffinity.cart.items import AddToCart
from caffinity.catalogue.management import AddProduct
from caffinity.identity.registration import RegisterUser
from caffinity.order.order import Order, OrderStatus, PaymentStatus
from caffinity.order.placement import PlaceOrder
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _add_product(name, price):
    return current_domain.process(AddProduct(name=name, price=price, category="Coffee"), asynchronous=False)


def _register(username="maria"):
    return current_domain.process(RegisterUser(username=username), asynchronous=False)


def _add_to_cart(product_id, quantity=1, **owner):
    return current_domain.process(AddToCart(product_id=product_id, quantity=quantity, **owner), asynchronous=False)


def _place_order(user_id, items=None, **kwargs):
    if items is not None:
        kwargs["items"] = json.dumps(items)
    return current_domain.process(PlaceOrder(user_id=user_id, **kwargs), asynchronous=False)


def _all_orders():
    return current_domain.repository_for(Order)._dao.query.all().items


@pytest.fixture()
def shop():
    """A user whose cart holds Product A ×3 at $2 and Product B ×1 at $5."""
    user_id = _register()
    product_a = _add_product("Product A", 2.0)
    product_b = _add_product("Product B", 5.0)
    _add_to_cart(product_a, 3, user_id=user_id)
    cart_id = _add_to_cart(product_b, 1, user_id=user_id)
    return {"user_id": user_id, "a": product_a, "b": product_b, "cart_id": cart_id}


class TestPartialOrder:
    def test_order_total_covers_ordered_lines_only(self, shop):
        order_id = _place_order(shop["user_id"], [{"product_id": shop["a"], "quantity": 2}])
        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_amount == 4.0
        assert len(order.items) == 1
        assert order.items[0].quantity == 2
        assert order.items[0].unit_price == 2.0

    def test_cart_keeps_what_was_not_ordered(self, shop):
        _place_order(shop["user_id"], [{"product_id": shop["a"], "quantity": 2}])
        cart = current_domain.repository_for(Cart).get(shop["cart_id"])
        quantities = {str(item.product_id): item.quantity for item in cart.items}
        assert quantities == {shop["a"]: 1, shop["b"]: 1}

    def test_fully_ordered_line_is_removed(self, shop):
        _place_order(shop["user_id"], [{"product_id": shop["b"], "quantity": 1}])
        cart = current_domain.repository_for(Cart).get(shop["cart_id"])
        assert [str(item.product_id) for item in cart.items] == [shop["a"]]


class TestWholeCartOrder:
    def test_order_total_equals_cart_total(self, shop):
        cart = current_domain.repository_for(Cart).get(shop["cart_id"])
        cart_total = cart.total_price()

        order_id = _place_order(shop["user_id"])

        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_amount == cart_total == 11.0

    def test_empty_cart_is_deleted(self, shop):
        _place_order(shop["user_id"])
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Cart).get(shop["cart_id"])

    def test_order_defaults(self, shop):
        order_id = _place_order(shop["user_id"])
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert order.payment.method == "Cash"
        assert order.payment.status == PaymentStatus.PENDING.value
        assert order.payment.transaction_id.startswith("TXN-")

    def test_payment_details_are_kept(self, shop):
        order_id = _place_order(shop["user_id"], payment_method="Card", transaction_id="TXN-POS-42")
        order = current_domain.repository_for(Order).get(order_id)
        assert order.payment.method == "Card"
        assert order.payment.transaction_id == "TXN-POS-42"


class TestGuestCheckout:
    def test_guest_cart_is_claimed_at_checkout(self):
        user_id = _register()
        product_id = _add_product("Latte", 3.5)
        _add_to_cart(product_id, 2, session_id="sess-001")

        order_id = _place_order(user_id, session_id="sess-001")

        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_amount == 7.0
        assert str(order.user_id) == user_id


class TestPlaceOrderFailures:
    def test_unknown_user(self, shop):
        with pytest.raises(ObjectNotFoundError):
            _place_order("user-missing")

    def test_user_without_cart(self):
        user_id = _register()
        with pytest.raises(ValidationError) as exc:
            _place_order(user_id)
        assert exc.value.messages == {"cart": ["Cart is empty"]}

    def test_more_than_in_cart_changes_nothing(self, shop):
        with pytest.raises(ValidationError):
            _place_order(shop["user_id"], [{"product_id": shop["a"], "quantity": 4}])

        assert _all_orders() == []
        cart = current_domain.repository_for(Cart).get(shop["cart_id"])
        assert cart.find_item(shop["a"]).quantity == 3

    def test_product_not_in_cart(self, shop):
        other = _add_product("Product C", 1.0)
        with pytest.raises(ValidationError):
            _place_order(shop["user_id"], [{"product_id": other, "quantity": 1}])

    def test_duplicate_product_in_request(self, shop):
        with pytest.raises(ValidationError):
            _place_order(
                shop["user_id"],
                [{"product_id": shop["a"], "quantity": 1}, {"product_id": shop["a"], "quantity": 1}],
            )

    def test_unknown_payment_method(self, shop):
        with pytest.raises(ValidationError):
            _place_order(shop["user_id"], payment_method="Cheque")
        assert _all_orders() == []

    def test_rejected_order_keeps_guest_cart_unmerged(self, shop):
        product_c = _add_product("Product C", 1.0)
        guest_cart_id = _add_to_cart(shop["a"], 1, session_id="sess-001")
        _add_to_cart(product_c, 1, session_id="sess-001")

        # The merged cart would hold A ×4, still short of five
        with pytest.raises(ValidationError):
            _place_order(
                shop["user_id"],
                [{"product_id": shop["a"], "quantity": 5}],
                session_id="sess-001",
            )

        assert _all_orders() == []
        user_cart = current_domain.repository_for(Cart).get(shop["cart_id"])
        assert {str(i.product_id): i.quantity for i in user_cart.items} == {shop["a"]: 3, shop["b"]: 1}
        guest_cart = current_domain.repository_for(Cart).get(guest_cart_id)
        assert guest_cart.user_id is None
        assert {str(i.product_id): i.quantity for i in guest_cart.items} == {shop["a"]: 1, product_c: 1}
