"""FastAPI application for the booking payment functions.

This package provides REST endpoints for:
- Payment intent creation for the mobile payment sheet (POST /payment-sheet)
- Stripe webhook processing (POST /stripe-webhook)
- Liveness (GET /ping)

Each endpoint is also deployable as its own Lambda function, see
payments_api.handlers.
"""

from fastapi import APIRouter, FastAPI
from mangum import Mangum

from payments import __version__
from payments.utils.logging import configure_logging
from payments_api.exceptions import register_exception_handlers
from payments_api.middleware.correlation import CorrelationIdMiddleware
from payments_api.routes import health_router, payment_sheet_router, webhooks_router

configure_logging()


def create_app(*routers: APIRouter, title: str = "Booking Payments API") -> FastAPI:
    """Build a FastAPI app serving the given routers.

    Args:
        routers: Routers to include. Defaults to every router.
        title: OpenAPI title

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=title,
        description="Stripe payment intents and webhook processing for bookings",
        version=__version__,
    )

    app.add_middleware(CorrelationIdMiddleware)

    # Register exception handlers for consistent {"error": ...} responses
    register_exception_handlers(app)

    for router in routers or (health_router, payment_sheet_router, webhooks_router):
        app.include_router(router)

    return app


app = create_app()

# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the FastAPI server locally.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: True)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run(
            "payments_api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["backend/api/src", "backend/payments/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
