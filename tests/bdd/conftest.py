"""Shared BDD fixtures and step definitions for Caffinity."""

import json

import pytest
from caffinity.cart.cart import Cart
from caffinity.cart.items import AddToCart
from caffinity.cart.resolution import ResolveCart
from caffinity.catalogue.management import AddProduct
from caffinity.identity.registration import RegisterUser
from caffinity.identity.session import LogIn
from caffinity.order.cancellation import CancelOrder
from caffinity.order.order import Order
from caffinity.order.placement import PlaceOrder
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when


def _process(command):
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def shop():
    """Scenario state: product ids by name, the customer, the last order and error."""
    return {"products": {}, "user_id": None, "order_id": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the menu has "{name}" at {price:f}'))
def menu_has_product(shop, name, price):
    shop["products"][name] = _process(AddProduct(name=name, price=price, category="Coffee"))


@given(parsers.cfparse('a registered customer "{username}"'))
def registered_customer(shop, username):
    shop["user_id"] = _process(RegisterUser(username=username))


@given(parsers.cfparse('the customer\'s cart holds {qty:d} of "{name}"'))
def customer_cart_holds(shop, qty, name):
    _process(AddToCart(user_id=shop["user_id"], product_id=shop["products"][name], quantity=qty))


@given(parsers.cfparse('a guest session "{session_id}" holds {qty:d} of "{name}"'))
def guest_cart_holds(shop, session_id, qty, name):
    _process(AddToCart(session_id=session_id, product_id=shop["products"][name], quantity=qty))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@given("the customer orders the whole cart")
@when("the customer orders the whole cart")
def order_whole_cart(shop):
    shop["order_id"] = _process(PlaceOrder(user_id=shop["user_id"]))


@when(parsers.cfparse('the customer orders {qty:d} of "{name}"'))
def order_some(shop, qty, name):
    items = json.dumps([{"product_id": shop["products"][name], "quantity": qty}])
    shop["order_id"] = _process(PlaceOrder(user_id=shop["user_id"], items=items))


@when(parsers.cfparse('the customer tries to order {qty:d} of "{name}"'))
def try_to_order(shop, qty, name):
    items = json.dumps([{"product_id": shop["products"][name], "quantity": qty}])
    try:
        _process(PlaceOrder(user_id=shop["user_id"], items=items))
    except ValidationError as exc:
        shop["error"] = exc


@when(parsers.cfparse('the customer signs in from session "{session_id}"'))
def sign_in(shop, session_id):
    _process(LogIn(user_id=shop["user_id"]))
    _process(ResolveCart(user_id=shop["user_id"], session_id=session_id))


@when("the customer tries to cancel the order")
def try_to_cancel(shop):
    try:
        _process(CancelOrder(order_id=shop["order_id"]))
    except ValidationError as exc:
        shop["error"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _customer_cart(shop):
    return current_domain.repository_for(Cart).find_by_user(shop["user_id"])


@then(parsers.cfparse("the order total is {total:f}"))
def order_total_is(shop, total):
    order = current_domain.repository_for(Order).get(shop["order_id"])
    assert order.total_amount == pytest.approx(total)


@then(parsers.cfparse('the cart holds {qty:d} of "{name}"'))
def cart_holds(shop, qty, name):
    item = _customer_cart(shop).find_item(shop["products"][name])
    assert item is not None
    assert item.quantity == qty


@then(parsers.cfparse('the cart has no line for "{name}"'))
def cart_has_no_line(shop, name):
    assert _customer_cart(shop).find_item(shop["products"][name]) is None


@then("the customer has no cart")
def customer_has_no_cart(shop):
    assert _customer_cart(shop) is None


@then(parsers.cfparse('session "{session_id}" has no guest cart'))
def session_has_no_guest_cart(session_id):
    assert current_domain.repository_for(Cart).find_guest_cart(session_id) is None


@then("the order is rejected")
def order_is_rejected(shop):
    assert isinstance(shop["error"], ValidationError)


@then(parsers.cfparse('the order is rejected with "{message}"'))
def order_is_rejected_with(shop, message):
    assert isinstance(shop["error"], ValidationError)
    assert message in shop["error"].messages["status"]
