"""Caffinity domain — coffee-shop catalogue, customers, carts and orders.

Carts are ephemeral CQRS aggregates keyed by a guest session or a signed-in
user. Checkout turns cart lines into an immutable Order that carries its own
payment record and walks a small preparation lifecycle.
"""

import os

from protean.domain import Domain

from caffinity.utils.logging import configure_logging, get_logger

# Log files only when CAFFINITY_LOG_DIR is set; console otherwise
configure_logging(log_dir=os.getenv("CAFFINITY_LOG_DIR"))

logger = get_logger(__name__)

caffinity = Domain(name="caffinity")
