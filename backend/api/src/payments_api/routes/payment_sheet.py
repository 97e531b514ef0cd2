"""Payment sheet endpoint: creates a Stripe PaymentIntent for the mobile app.

The mobile client posts the amount and currency, receives a client secret and
completes the payment directly with Stripe. Booking status is updated later
by the Stripe webhook, never by this endpoint.
"""

from fastapi import APIRouter
from starlette.status import HTTP_200_OK

from payments.models.errors import ErrorCode, ErrorResponse, PaymentsError
from payments.services.stripe_service import StripeServiceError, get_stripe_service
from payments.utils.logging import get_logger
from payments_api.models.payment_sheet import PaymentSheetRequest, PaymentSheetResponse

logger = get_logger(__name__)

router = APIRouter(tags=["payments"])


@router.post(
    "/payment-sheet",
    summary="Create a payment intent",
    description="""
Create a Stripe PaymentIntent with automatic payment methods and return its
client secret for the mobile payment sheet.

**Notes:**
- Amount is in minor units (cents)
- No booking or payment record is written
""",
    response_model=PaymentSheetResponse,
    status_code=HTTP_200_OK,
    responses={
        200: {"description": "Payment intent created"},
        400: {
            "description": "Invalid request or Stripe error",
            "model": ErrorResponse,
        },
    },
)
async def create_payment_sheet(body: PaymentSheetRequest) -> PaymentSheetResponse:
    """Create a PaymentIntent and hand its client secret to the client."""
    try:
        client_secret = get_stripe_service().create_payment_intent(
            amount=body.amount,
            currency=body.currency,
        )
    except StripeServiceError as e:
        logger.warning("Payment intent creation failed: %s", e)
        raise PaymentsError(code=ErrorCode.STRIPE_API_ERROR, message=str(e)) from e
    except Exception as e:
        # The mobile client only understands {"error": ...} with a 400
        logger.exception("Unexpected payment sheet error: %s", e)
        raise PaymentsError(code=ErrorCode.PAYMENT_INTENT_FAILED, message=str(e)) from e

    return PaymentSheetResponse(client_secret=client_secret)
