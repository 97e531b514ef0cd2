"""Models for the Stripe webhook endpoint."""

from pydantic import BaseModel

from payments.models.stripe_event import HandlerResult


class WebhookResponse(BaseModel):
    """Acknowledgement sent back to Stripe.

    ``result`` is present when the event was dispatched, ``duplicate``
    when it had already been received.
    """

    received: bool = True
    result: HandlerResult | None = None
    duplicate: bool | None = None
