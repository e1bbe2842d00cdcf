"""Tarsi Sweet FastAPI application.

Storefront checkout plus the admin back-office, served from one process.
Every router belongs to exactly one domain; requests under a router's
prefix run inside that domain's context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV picks the domain.toml overlay:
#   - default      → memory stores, event_processing = "sync"
#   - "production" → postgres + redis, event_processing = "async"
from catalogue.api import ingredient_router, product_router
from catalogue.domain import catalogue
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from ordering.api import (
    checkout_router,
    coupon_router,
    delivery_router,
    ledger_router,
    order_router,
)
from ordering.domain import ordering
from protean.integrations.fastapi import register_exception_handlers
from shared.logging import configure_logging

configure_logging()

ordering.init()
catalogue.init()

DOMAIN_ROUTERS = [
    (catalogue, [product_router, ingredient_router]),
    (ordering, [checkout_router, order_router, coupon_router, ledger_router, delivery_router]),
]

# Longest prefix wins
_PREFIXES = sorted(
    ((router.prefix, domain) for domain, routers in DOMAIN_ROUTERS for router in routers),
    key=lambda pair: len(pair[0]),
    reverse=True,
)


def resolve_domain(path: str):
    """Return the domain owning the request path, or None."""
    for prefix, domain in _PREFIXES:
        if path == prefix or path.startswith(prefix + "/"):
            return domain
    return None


app = FastAPI(
    title="Tarsi Sweet API",
    description="Artisanal bakery storefront: checkout, order tracking and back-office",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the owning Protean domain context for each request."""
    domain = resolve_domain(request.url.path)
    if domain is None:
        return await call_next(request)

    with domain.domain_context():
        return await call_next(request)


for _, routers in DOMAIN_ROUTERS:
    for router in routers:
        app.include_router(router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "domains": {
            domain.name: {"routes": [router.prefix for router in routers]} for domain, routers in DOMAIN_ROUTERS
        },
    }
