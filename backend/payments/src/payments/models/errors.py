"""Standard error codes for the payment functions.

Errors raised here are rendered by the API layer as ``{"error": message}``
bodies so the mobile client and Stripe see the same shape from both
functions.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes."""

    # Webhook signature (ERR_STRIPE_001-002), payment sheet (ERR_STRIPE_003-004)
    MISSING_WEBHOOK_SIGNATURE = "ERR_STRIPE_001"
    INVALID_WEBHOOK_SIGNATURE = "ERR_STRIPE_002"
    STRIPE_API_ERROR = "ERR_STRIPE_003"
    PAYMENT_INTENT_FAILED = "ERR_STRIPE_004"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.MISSING_WEBHOOK_SIGNATURE: "Missing signature",
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: "Invalid signature",
    ErrorCode.STRIPE_API_ERROR: "Stripe API error occurred",
    ErrorCode.PAYMENT_INTENT_FAILED: "Payment intent could not be created",
}


class ErrorResponse(BaseModel):
    """Error body returned by both functions."""

    model_config = ConfigDict(strict=True)

    error: str


class PaymentsError(Exception):
    """Exception raised by payment operations.

    ``message`` defaults to the standard message for ``code`` and may be
    replaced with a more specific one (e.g. the Stripe error text).
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str | None = None,
    ) -> None:
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to the HTTP error body."""
        return ErrorResponse(error=self.message)
