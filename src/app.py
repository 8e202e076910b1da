"""Caffinity FastAPI application.

Web server that processes commands synchronously via HTTP. Every request
runs inside the caffinity domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied (see domain.toml).
from caffinity.domain import caffinity, logger  # noqa: E402
from caffinity.utils.logging import add_context, clear_context  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

caffinity.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Caffinity API",
    description="Coffee-shop ordering: menu, carts, orders and payments",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ValidationError → 400, ObjectNotFoundError → 404
register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the caffinity domain context for each request."""
    add_context(method=request.method, path=request.url.path)
    try:
        with caffinity.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from caffinity.api import cart_router, order_router, product_router, user_router  # noqa: E402

app.include_router(product_router)
app.include_router(user_router)
app.include_router(cart_router)
app.include_router(order_router)

logger.info("Caffinity API ready", routers=["products", "users", "carts", "orders"])


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": {"name": caffinity.name},
        }
    )
