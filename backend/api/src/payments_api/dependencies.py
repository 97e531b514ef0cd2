"""FastAPI dependency injection providers for shared services.

Services are lazily instantiated and cached with @lru_cache so a warm Lambda
container reuses its boto3 resources and Stripe client.

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── BookingStore
        ├── StripeEventStore
        └── AdminLogStore
    StripeService (singleton via get_stripe_service)
    WebhookHandler ← all of the above

Testing:
    Use reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from payments.services.dynamodb import get_dynamodb_service
from payments.services.stores import AdminLogStore, BookingStore, StripeEventStore
from payments.services.stripe_service import get_stripe_service
from payments.services.webhook_handler import WebhookHandler


@lru_cache
def get_webhook_handler() -> WebhookHandler:
    """Get cached WebhookHandler instance.

    Returns:
        WebhookHandler configured with the DynamoDB stores and Stripe.
    """
    db = get_dynamodb_service()
    return WebhookHandler(
        bookings=BookingStore(db),
        events=StripeEventStore(db),
        admin_logs=AdminLogStore(db),
        stripe_service=get_stripe_service(),
    )


def reset_services() -> None:
    """Clear all cached service instances.

    Call this in test fixtures to ensure clean state between tests.
    Also resets the underlying DynamoDB and Stripe singletons.
    """
    from payments.services.dynamodb import reset_dynamodb_service

    get_webhook_handler.cache_clear()
    get_stripe_service.cache_clear()
    reset_dynamodb_service()
