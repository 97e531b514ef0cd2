"""Enumeration types for booking payment data models."""

from enum import Enum


class BookingStatus(str, Enum):
    """Status of a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PAYMENT_FAILED = "payment_failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    DISPUTED = "disputed"


class PaymentStatus(str, Enum):
    """Status stored in the booking's payment sub-object."""

    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RefundStatus(str, Enum):
    """Whether a charge was refunded in full or in part."""

    FULL = "full"
    PARTIAL = "partial"


class PaymentMethod(str, Enum):
    """Supported payment methods."""

    CARD = "card"


class StripeEventType(str, Enum):
    """Stripe webhook event types the processor acts on."""

    PAYMENT_SUCCEEDED = "payment_intent.succeeded"
    PAYMENT_FAILED = "payment_intent.payment_failed"
    PAYMENT_CANCELED = "payment_intent.canceled"
    CHARGE_REFUNDED = "charge.refunded"
    DISPUTE_CREATED = "charge.dispute.created"


class WebhookAction(str, Enum):
    """Outcome reported by a webhook event handler."""

    NONE = "none"
    NO_BOOKING_FOUND = "no_booking_found"
    BOOKING_ALREADY_PROCESSED = "booking_already_processed"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_PAYMENT_FAILED = "booking_payment_failed"
    BOOKING_CANCELLED = "booking_cancelled"
    NO_PAYMENT_INTENT_IN_CHARGE = "no_payment_intent_in_charge"
    BOOKING_FULLY_REFUNDED = "booking_fully_refunded"
    BOOKING_PARTIALLY_REFUNDED = "booking_partially_refunded"
    NO_PAYMENT_INTENT_IN_DISPUTE = "no_payment_intent_in_dispute"
    DISPUTE_LOGGED = "dispute_logged"
    ERROR = "error"
