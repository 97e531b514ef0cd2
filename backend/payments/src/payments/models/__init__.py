"""Pydantic models for booking payment entities."""

from .admin_log import AdminLog
from .booking import BOOKING_TRANSITIONS, Booking, can_transition
from .enums import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
    StripeEventType,
    WebhookAction,
)
from .errors import ERROR_MESSAGES, ErrorCode, ErrorResponse, PaymentsError
from .stripe_event import HandlerResult, StripeEvent

__all__ = [
    # Enums
    "BookingStatus",
    "PaymentMethod",
    "PaymentStatus",
    "RefundStatus",
    "StripeEventType",
    "WebhookAction",
    # Booking
    "BOOKING_TRANSITIONS",
    "Booking",
    "can_transition",
    # Events and audit
    "AdminLog",
    "HandlerResult",
    "StripeEvent",
    # Errors
    "ERROR_MESSAGES",
    "ErrorCode",
    "ErrorResponse",
    "PaymentsError",
]
