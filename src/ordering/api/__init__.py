from ordering.api.routes import (
    checkout_router,
    coupon_router,
    delivery_router,
    ledger_router,
    order_router,
)

__all__ = ["checkout_router", "coupon_router", "delivery_router", "ledger_router", "order_router"]
