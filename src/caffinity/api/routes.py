"""FastAPI routes for Caffinity — products, users, carts and orders.

Thin adapters that translate HTTP requests into domain commands. Reads go
straight to the repositories and projections.
"""

import json

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from caffinity.api.schemas import (
    AddProductRequest,
    AddToCartRequest,
    CancelOrderRequest,
    CartIdResponse,
    CartItemResponse,
    CartResponse,
    InitiatePaymentRequest,
    LogInRequest,
    LogInResponse,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    OrderStatisticsResponse,
    PaymentResponse,
    PlaceOrderRequest,
    ProductIdResponse,
    ProductResponse,
    RecordPaymentFailureRequest,
    RecordPaymentSuccessRequest,
    RegisterUserRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UserIdResponse,
    UserResponse,
)
from caffinity.cart.cart import Cart
from caffinity.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from caffinity.cart.resolution import ResolveCart
from caffinity.catalogue.management import AddProduct, RemoveProduct, UpdateProductDetails
from caffinity.catalogue.product import Product
from caffinity.identity.registration import RegisterUser
from caffinity.identity.session import LogIn, LogOut
from caffinity.identity.user import User
from caffinity.order.cancellation import CancelOrder
from caffinity.order.order import Order
from caffinity.order.payment import InitiatePayment, RecordPaymentFailure, RecordPaymentSuccess
from caffinity.order.placement import PlaceOrder
from caffinity.order.preparation import CompleteOrder, MarkReady, StartPreparing
from caffinity.order.status import UpdateOrderStatus
from caffinity.projections.daily_order_stats import order_statistics


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------
def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        category=product.category,
        product_type=product.product_type,
    )


def _user_response(user) -> UserResponse:
    return UserResponse(
        user_id=str(user.id),
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        phone=user.phone,
        role=user.role,
        login_status=user.login_status,
        last_login_at=user.last_login_at,
    )


def _cart_response(cart) -> CartResponse:
    return CartResponse(
        cart_id=str(cart.id),
        user_id=str(cart.user_id) if cart.user_id else None,
        session_id=cart.session_id,
        items=[
            CartItemResponse(
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total(),
            )
            for item in cart.items
        ],
        total_items=cart.total_items(),
        total_price=cart.total_price(),
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        user_id=str(order.user_id),
        status=order.status,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ],
        total_amount=order.total_amount,
        payment=PaymentResponse(
            method=order.payment.method,
            status=order.payment.status,
            transaction_id=order.payment.transaction_id,
            amount=order.payment.amount,
            failure_reason=order.payment.failure_reason,
            paid_at=order.payment.paid_at,
        ),
        cancellation_reason=order.cancellation_reason,
        created_at=order.created_at,
    )


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        product_type=body.product_type,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("", response_model=list[ProductResponse])
async def list_products(category: str | None = None) -> list[ProductResponse]:
    repo = current_domain.repository_for(Product)
    products = repo.find_by_category(category) if category else repo.list_all()
    return [_product_response(product) for product in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return _product_response(product)


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProductDetails(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        product_type=body.product_type,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_product(product_id: str) -> StatusResponse:
    current_domain.process(RemoveProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(
        username=body.username,
        email=body.email,
        full_name=body.full_name,
        phone=body.phone,
        role=body.role,
    )
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


@user_router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str) -> UserResponse:
    user = current_domain.repository_for(User).get(user_id)
    return _user_response(user)


@user_router.post("/{user_id}/login", response_model=LogInResponse)
async def log_in(user_id: str, body: LogInRequest) -> LogInResponse:
    """Sign in, then claim or merge the guest cart of the given session."""
    current_domain.process(LogIn(user_id=user_id), asynchronous=False)

    cart_id = None
    if body.session_id:
        cart_id = current_domain.process(
            ResolveCart(user_id=user_id, session_id=body.session_id),
            asynchronous=False,
        )
    return LogInResponse(cart_id=cart_id)


@user_router.post("/{user_id}/logout", response_model=StatusResponse)
async def log_out(user_id: str) -> StatusResponse:
    current_domain.process(LogOut(user_id=user_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.get("", response_model=CartResponse)
async def find_cart(user_id: str | None = None, session_id: str | None = None) -> CartResponse:
    """Look up the cart of a user, or of a guest session. Nothing is created or merged."""
    repo = current_domain.repository_for(Cart)
    cart = None
    if user_id:
        cart = repo.find_by_user(user_id)
    elif session_id:
        cart = repo.find_guest_cart(session_id)

    if cart is None:
        raise HTTPException(status_code=404, detail="Cart not found")
    return _cart_response(cart)


@cart_router.post("/items", response_model=CartIdResponse)
async def add_cart_item(body: AddToCartRequest) -> CartIdResponse:
    command = AddToCart(
        user_id=body.user_id,
        session_id=body.session_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    cart = current_domain.repository_for(Cart).get(cart_id)
    return _cart_response(cart)


@cart_router.put("/{cart_id}/items/{product_id}", response_model=StatusResponse)
async def update_cart_item_quantity(cart_id: str, product_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(
        cart_id=cart_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, product_id: str) -> StatusResponse:
    current_domain.process(RemoveFromCart(cart_id=cart_id, product_id=product_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        user_id=body.user_id,
        session_id=body.session_id,
        items=json.dumps([line.model_dump() for line in body.items]) if body.items is not None else None,
        payment_method=body.payment_method,
        transaction_id=body.transaction_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(user_id: str | None = None, status: str | None = None) -> list[OrderResponse]:
    """Orders of a user or in a status, newest first. Without filters, the most recent ones."""
    repo = current_domain.repository_for(Order)
    if user_id:
        orders = repo.find_by_user(user_id)
        if status:
            orders = [order for order in orders if order.status == status]
    elif status:
        orders = repo.find_by_status(status)
    else:
        orders = repo.find_recent()
    return [_order_response(order) for order in orders]


@order_router.get("/statistics", response_model=OrderStatisticsResponse)
async def get_order_statistics() -> OrderStatisticsResponse:
    return OrderStatisticsResponse(**order_statistics())


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return _order_response(order)


@order_router.post("/{order_id}/payment", response_model=StatusResponse)
async def initiate_payment(order_id: str, body: InitiatePaymentRequest) -> StatusResponse:
    command = InitiatePayment(order_id=order_id, payment_method=body.payment_method)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/payment/success", response_model=StatusResponse)
async def record_payment_success(order_id: str, body: RecordPaymentSuccessRequest) -> StatusResponse:
    command = RecordPaymentSuccess(order_id=order_id, transaction_id=body.transaction_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/payment/failure", response_model=StatusResponse)
async def record_payment_failure(order_id: str, body: RecordPaymentFailureRequest) -> StatusResponse:
    command = RecordPaymentFailure(order_id=order_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/prepare", response_model=StatusResponse)
async def start_preparing(order_id: str) -> StatusResponse:
    current_domain.process(StartPreparing(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/ready", response_model=StatusResponse)
async def mark_ready(order_id: str) -> StatusResponse:
    current_domain.process(MarkReady(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/complete", response_model=StatusResponse)
async def complete_order(order_id: str) -> StatusResponse:
    current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id, reason=body.reason), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        payment_method=body.payment_method,
        transaction_id=body.transaction_id,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
