"""Caffinity API package."""

from caffinity.api.routes import cart_router, order_router, product_router, user_router

__all__ = ["product_router", "user_router", "cart_router", "order_router"]
