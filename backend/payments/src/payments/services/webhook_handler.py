"""Webhook handler for processing Stripe events.

Provides business logic for handling webhook events separate from
HTTP routing concerns. The route verifies the signature; this module
filters, deduplicates, dispatches and records the outcome.
"""

from collections.abc import Callable
from decimal import Decimal
from typing import Any

from payments.models.booking import Booking, can_transition
from payments.models.enums import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
    RefundStatus,
    StripeEventType,
    WebhookAction,
)
from payments.models.stripe_event import HandlerResult
from payments.services.stores import (
    AdminLogStore,
    BookingStore,
    StripeEventStore,
    utc_now_iso,
)
from payments.services.stripe_service import StripeService
from payments.utils.logging import get_logger, log_webhook_event

logger = get_logger(__name__)

HANDLED_EVENT_TYPES = frozenset(event_type.value for event_type in StripeEventType)


def to_major_units(amount: int | None) -> Decimal:
    """Convert a Stripe minor-unit amount (e.g. cents) to decimal currency."""
    return Decimal(amount or 0) / 100


class WebhookHandler:
    """Handler for processing Stripe webhook events.

    Updates bookings keyed by payment intent and records every dispatched
    event in the stripe_events table so re-deliveries are not re-applied.
    """

    def __init__(
        self,
        bookings: BookingStore,
        events: StripeEventStore,
        admin_logs: AdminLogStore,
        stripe_service: StripeService,
    ) -> None:
        self._bookings = bookings
        self._events = events
        self._admin_logs = admin_logs
        self._stripe = stripe_service
        self._handlers: dict[str, Callable[[dict[str, Any]], HandlerResult]] = {
            StripeEventType.PAYMENT_SUCCEEDED.value: self.handle_payment_succeeded,
            StripeEventType.PAYMENT_FAILED.value: self.handle_payment_failed,
            StripeEventType.PAYMENT_CANCELED.value: self.handle_payment_canceled,
            StripeEventType.CHARGE_REFUNDED.value: self.handle_charge_refunded,
            StripeEventType.DISPUTE_CREATED.value: self.handle_dispute_created,
        }

    def handle_event(
        self,
        event: dict[str, Any],
        payload_hash: str | None = None,
    ) -> tuple[HandlerResult | None, bool]:
        """Process a verified Stripe event.

        Args:
            event: Parsed Stripe event
            payload_hash: SHA-256 hash of the raw body, stored for auditing

        Returns:
            Tuple of (handler result, duplicate flag). The result is None
            for ignored event types and duplicates.
        """
        event_id = event.get("id", "")
        event_type = event.get("type", "")

        log_webhook_event(logger, event_type, event_id, result="received")

        if event_type not in HANDLED_EVENT_TYPES:
            log_webhook_event(logger, event_type, event_id, result="skipped")
            return None, False

        previous = self._events.get(event_id)
        if previous is not None:
            log_webhook_event(
                logger,
                event_type,
                event_id,
                result="duplicate",
                first_received_at=previous.processed_at,
                previous_action=(previous.processing_result or {}).get("action"),
            )
            return None, True

        event_object: dict[str, Any] = event.get("data", {}).get("object", {})

        if not self._events.claim(event_id, event_type, event_object, payload_hash):
            # Another delivery of the same event claimed it between the two calls
            log_webhook_event(logger, event_type, event_id, result="duplicate")
            return None, True

        try:
            result = self._handlers[event_type](event_object)
        except Exception as e:
            self._events.complete(
                event_id,
                HandlerResult(success=False, action=WebhookAction.ERROR, error=str(e)),
            )
            log_webhook_event(logger, event_type, event_id, result="error", error=str(e))
            raise

        self._events.complete(event_id, result)
        log_webhook_event(
            logger,
            event_type,
            event_id,
            booking_id=result.booking_id,
            result=result.action,
        )
        return result, False

    # === Payment intent outcomes ===

    def _apply_payment_outcome(
        self,
        payment_intent_id: str,
        target: BookingStatus,
        payment: dict[str, Any],
        action: WebhookAction,
    ) -> HandlerResult:
        """Move a booking out of pending for a payment intent outcome."""
        booking = self._bookings.find_by_payment_intent(payment_intent_id)
        if booking is None:
            logger.info("No booking found for payment_intent: %s", payment_intent_id)
            return HandlerResult(action=WebhookAction.NO_BOOKING_FOUND)

        if not can_transition(booking.status, target):
            return HandlerResult(
                action=WebhookAction.BOOKING_ALREADY_PROCESSED,
                booking_id=booking.id,
            )

        self._bookings.update_payment(booking.id, target.value, payment)
        logger.info("Booking %s moved from %s to %s", booking.id, booking.status, target.value)
        return HandlerResult(action=action, booking_id=booking.id)

    def handle_payment_succeeded(self, payment_intent: dict[str, Any]) -> HandlerResult:
        """Confirm the booking after a successful payment."""
        payment_intent_id = payment_intent.get("id", "")
        return self._apply_payment_outcome(
            payment_intent_id,
            BookingStatus.CONFIRMED,
            {
                "status": PaymentStatus.PAID.value,
                "method": PaymentMethod.CARD.value,
                "transaction_id": payment_intent_id,
                "paid_at": utc_now_iso(),
            },
            WebhookAction.BOOKING_CONFIRMED,
        )

    def handle_payment_failed(self, payment_intent: dict[str, Any]) -> HandlerResult:
        """Mark the booking as failed, keeping Stripe's error message."""
        payment_intent_id = payment_intent.get("id", "")
        last_error = payment_intent.get("last_payment_error") or {}
        failure_message = last_error.get("message") or "Payment failed"

        return self._apply_payment_outcome(
            payment_intent_id,
            BookingStatus.PAYMENT_FAILED,
            {
                "status": PaymentStatus.FAILED.value,
                "method": PaymentMethod.CARD.value,
                "transaction_id": payment_intent_id,
                "error_message": failure_message,
                "failed_at": utc_now_iso(),
            },
            WebhookAction.BOOKING_PAYMENT_FAILED,
        )

    def handle_payment_canceled(self, payment_intent: dict[str, Any]) -> HandlerResult:
        """Cancel the booking when its payment intent is canceled."""
        payment_intent_id = payment_intent.get("id", "")
        return self._apply_payment_outcome(
            payment_intent_id,
            BookingStatus.CANCELLED,
            {
                "status": PaymentStatus.CANCELLED.value,
                "method": PaymentMethod.CARD.value,
                "transaction_id": payment_intent_id,
                "cancelled_at": utc_now_iso(),
            },
            WebhookAction.BOOKING_CANCELLED,
        )

    # === Charge events ===

    def _warn_unlisted_transition(self, booking: Booking, target: BookingStatus) -> None:
        if booking.status != target.value and not can_transition(booking.status, target):
            logger.warning(
                "Applying %s to booking %s in status %s",
                target.value,
                booking.id,
                booking.status,
            )

    def handle_charge_refunded(self, charge: dict[str, Any]) -> HandlerResult:
        """Record a full or partial refund on the booking.

        A full refund (``amount_refunded >= amount``) moves the booking to
        refunded; a partial refund only updates the payment details.
        """
        payment_intent_id = charge.get("payment_intent")
        if not payment_intent_id:
            return HandlerResult(action=WebhookAction.NO_PAYMENT_INTENT_IN_CHARGE)

        booking = self._bookings.find_by_payment_intent(payment_intent_id)
        if booking is None:
            return HandlerResult(action=WebhookAction.NO_BOOKING_FOUND)

        amount_refunded = charge.get("amount_refunded") or 0
        is_full_refund = amount_refunded >= (charge.get("amount") or 0)

        if is_full_refund:
            self._warn_unlisted_transition(booking, BookingStatus.REFUNDED)
            status = BookingStatus.REFUNDED.value
        else:
            status = booking.status

        payment = {
            **booking.payment,
            "refund_status": (RefundStatus.FULL if is_full_refund else RefundStatus.PARTIAL).value,
            "refund_amount": to_major_units(amount_refunded),
            "refunded_at": utc_now_iso(),
        }
        self._bookings.update_payment(booking.id, status, payment)

        logger.info(
            "Booking %s refund processed: %s",
            booking.id,
            "full" if is_full_refund else "partial",
        )
        return HandlerResult(
            action=(
                WebhookAction.BOOKING_FULLY_REFUNDED
                if is_full_refund
                else WebhookAction.BOOKING_PARTIALLY_REFUNDED
            ),
            booking_id=booking.id,
        )

    def handle_dispute_created(self, dispute: dict[str, Any]) -> HandlerResult:
        """Flag the booking as disputed and leave an audit entry.

        The booking is marked disputed whatever its current status.
        """
        charge_id = dispute.get("charge")
        payment_intent_id = (
            self._stripe.retrieve_charge_payment_intent(charge_id) if charge_id else None
        )
        if not payment_intent_id:
            return HandlerResult(action=WebhookAction.NO_PAYMENT_INTENT_IN_DISPUTE)

        booking = self._bookings.find_by_payment_intent(payment_intent_id)
        if booking is None:
            return HandlerResult(action=WebhookAction.NO_BOOKING_FOUND)

        self._warn_unlisted_transition(booking, BookingStatus.DISPUTED)

        dispute_amount = to_major_units(dispute.get("amount"))
        payment = {
            **booking.payment,
            "dispute_id": dispute.get("id"),
            "dispute_reason": dispute.get("reason"),
            "dispute_amount": dispute_amount,
            "dispute_created_at": utc_now_iso(),
        }
        self._bookings.update_payment(booking.id, BookingStatus.DISPUTED.value, payment)

        self._admin_logs.append(
            action="dispute_created",
            target_type="booking",
            target_id=booking.id,
            details={
                "dispute_id": dispute.get("id"),
                "reason": dispute.get("reason"),
                "amount": dispute_amount,
            },
        )

        logger.warning("Dispute created for booking %s", booking.id)
        return HandlerResult(action=WebhookAction.DISPUTE_LOGGED, booking_id=booking.id)
