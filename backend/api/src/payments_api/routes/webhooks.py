"""Webhook endpoint for Stripe events.

Handles payment intent outcomes (succeeded, payment_failed, canceled),
refunds and disputes for bookings.

This endpoint does NOT require authentication: Stripe signs every payload
and the signature is verified against the webhook signing secret.
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from payments.models.errors import ErrorCode, ErrorResponse, PaymentsError
from payments.services.stripe_service import (
    StripeService,
    WebhookSignatureError,
    get_stripe_service,
)
from payments.utils.logging import get_logger
from payments_api.dependencies import get_webhook_handler
from payments_api.exceptions import error_response
from payments_api.models.webhooks import WebhookResponse

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

SIGNATURE_HEADER = "stripe-signature"


@router.post(
    "/stripe-webhook",
    summary="Receive Stripe webhook events",
    description="""
Endpoint for Stripe webhook events. Handles:
- payment_intent.succeeded: confirms a pending booking
- payment_intent.payment_failed: marks a pending booking as payment_failed
- payment_intent.canceled: cancels a pending booking
- charge.refunded: records a full or partial refund
- charge.dispute.created: marks the booking disputed and writes an audit log

**No authentication required** - signature is verified using Stripe webhook secret.

**Idempotent**: an event id is processed at most once; re-deliveries return
200 with `duplicate: true`. Other event types are acknowledged and ignored.
""",
    response_model=WebhookResponse,
    response_model_exclude_none=True,
    responses={
        200: {
            "description": "Event received and processed (or acknowledged)",
            "model": WebhookResponse,
        },
        400: {
            "description": "Missing or invalid signature",
            "model": ErrorResponse,
        },
        405: {"description": "Only POST is accepted", "model": ErrorResponse},
        500: {"description": "Unexpected processing error", "model": ErrorResponse},
    },
)
async def handle_stripe_webhook(request: Request) -> WebhookResponse | JSONResponse:
    """Handle incoming Stripe webhook events.

    Verifies the signature, then hands the event to the WebhookHandler,
    which deduplicates, dispatches and records it.
    """
    signature = request.headers.get(SIGNATURE_HEADER)
    if not signature:
        logger.warning("Webhook request missing Stripe-Signature header")
        raise PaymentsError(code=ErrorCode.MISSING_WEBHOOK_SIGNATURE)

    try:
        payload = await request.body()
        stripe_service = get_stripe_service()

        try:
            event = stripe_service.verify_webhook_signature(payload, signature)
        except WebhookSignatureError as e:
            logger.warning("Webhook signature verification failed: %s", e)
            raise PaymentsError(code=ErrorCode.INVALID_WEBHOOK_SIGNATURE) from e

        result, duplicate = get_webhook_handler().handle_event(
            event,
            payload_hash=StripeService.compute_payload_hash(payload),
        )
    except PaymentsError:
        raise
    except Exception as e:
        logger.exception("Webhook error: %s", e)
        return error_response(HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    if duplicate:
        return WebhookResponse(duplicate=True)
    return WebhookResponse(result=result)
