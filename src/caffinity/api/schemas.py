"""Pydantic request/response schemas for the Caffinity API.

These are external contracts, kept separate from the Protean commands they
are translated into.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared responses
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    name: str
    description: str | None = None
    price: float = Field(gt=0)
    category: str
    product_type: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Flat White",
                    "description": "Double ristretto with steamed milk",
                    "price": 3.8,
                    "category": "Coffee",
                    "product_type": "Espresso",
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    product_type: str | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    product_id: str
    name: str
    description: str | None = None
    price: float
    category: str
    product_type: str | None = None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    username: str
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    role: str = "Customer"


class LogInRequest(BaseModel):
    session_id: str | None = None


class UserIdResponse(BaseModel):
    user_id: str


class LogInResponse(BaseModel):
    status: str = "ok"
    cart_id: str | None = None


class UserResponse(BaseModel):
    user_id: str
    username: str
    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    role: str
    login_status: str
    last_login_at: datetime | None = None


# ---------------------------------------------------------------------------
# Carts
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    user_id: str | None = None
    session_id: str | None = None
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int  # Zero or less removes the line


class CartIdResponse(BaseModel):
    cart_id: str


class CartItemResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: float
    line_total: float


class CartResponse(BaseModel):
    cart_id: str
    user_id: str | None = None
    session_id: str | None = None
    items: list[CartItemResponse]
    total_items: int
    total_price: float


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class PlaceOrderRequest(BaseModel):
    user_id: str
    session_id: str | None = None
    items: list[OrderLineRequest] | None = None
    payment_method: str | None = None
    transaction_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-001",
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "payment_method": "Card",
                }
            ]
        }
    }


class InitiatePaymentRequest(BaseModel):
    payment_method: str | None = None


class RecordPaymentSuccessRequest(BaseModel):
    transaction_id: str | None = None


class RecordPaymentFailureRequest(BaseModel):
    reason: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str
    payment_method: str | None = None
    transaction_id: str | None = None
    reason: str | None = None


class OrderIdResponse(BaseModel):
    order_id: str


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: float


class PaymentResponse(BaseModel):
    method: str
    status: str
    transaction_id: str
    amount: float
    failure_reason: str | None = None
    paid_at: datetime | None = None


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    status: str
    items: list[OrderItemResponse]
    total_amount: float
    payment: PaymentResponse
    cancellation_reason: str | None = None
    created_at: datetime | None = None


class OrderStatisticsResponse(BaseModel):
    total_orders: int
    pending_orders: int
    confirmed_orders: int
    completed_orders: int
    cancelled_orders: int
    total_revenue: float
