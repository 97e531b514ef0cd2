"""Request and response models for the payment endpoints."""

from .payment_sheet import PaymentSheetRequest, PaymentSheetResponse
from .webhooks import WebhookResponse

__all__ = [
    "PaymentSheetRequest",
    "PaymentSheetResponse",
    "WebhookResponse",
]
