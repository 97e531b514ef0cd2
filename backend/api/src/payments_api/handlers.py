"""Lambda entrypoints, one per deployed function.

Each function gets an app with only its own route (plus /ping), so a
request to the other function's path is a plain 404.
"""

from mangum import Mangum

from payments_api.main import create_app
from payments_api.routes import health_router, payment_sheet_router, webhooks_router

payment_sheet_app = create_app(
    health_router, payment_sheet_router, title="Booking Payments - Payment Sheet"
)
stripe_webhook_app = create_app(
    health_router, webhooks_router, title="Booking Payments - Stripe Webhook"
)

payment_sheet_handler = Mangum(payment_sheet_app, lifespan="off")
stripe_webhook_handler = Mangum(stripe_webhook_app, lifespan="off")
