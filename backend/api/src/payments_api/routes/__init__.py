"""API routers."""

from .health import router as health_router
from .payment_sheet import router as payment_sheet_router
from .webhooks import router as webhooks_router

__all__ = ["health_router", "payment_sheet_router", "webhooks_router"]
