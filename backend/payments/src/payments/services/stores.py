"""Typed access to the bookings, stripe_events and admin_logs tables."""

import datetime as dt
import logging
import uuid
from typing import Any

from payments.models.admin_log import AdminLog
from payments.models.booking import Booking
from payments.models.stripe_event import HandlerResult, StripeEvent
from payments.services.dynamodb import DynamoDBService, to_dynamodb_value
from payments.services.tables import (
    ADMIN_LOGS_TABLE,
    BOOKINGS_TABLE,
    PAYMENT_INTENT_INDEX,
    STRIPE_EVENTS_TABLE,
)

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return dt.datetime.now(dt.UTC).isoformat()


class BookingStore:
    """Reads and updates bookings correlated with Stripe payment intents."""

    def __init__(self, db: DynamoDBService) -> None:
        self._db = db

    def find_by_payment_intent(self, payment_intent_id: str) -> Booking | None:
        """Find the single booking for a PaymentIntent.

        Zero or several matches are both treated as "no booking": the
        webhook only acts when the correlation is unambiguous.

        Args:
            payment_intent_id: Stripe PaymentIntent ID (pi_xxx)

        Returns:
            The booking, or None
        """
        items = self._db.query_by_gsi(
            BOOKINGS_TABLE,
            PAYMENT_INTENT_INDEX,
            "payment_intent_id",
            payment_intent_id,
        )
        if len(items) != 1:
            if items:
                logger.warning(
                    "Found %d bookings for payment_intent %s, expected one",
                    len(items),
                    payment_intent_id,
                )
            return None
        return Booking.model_validate(items[0])

    def update_payment(
        self,
        booking_id: str,
        status: str,
        payment: dict[str, Any],
    ) -> None:
        """Write a booking's status and payment sub-object.

        Args:
            booking_id: Booking to update
            status: New (or unchanged) booking status
            payment: Complete payment map to store
        """
        self._db.update_item(
            BOOKINGS_TABLE,
            {"id": booking_id},
            "SET #status = :status, payment = :payment, updated_at = :now",
            {
                ":status": status,
                ":payment": to_dynamodb_value(payment),
                ":now": utc_now_iso(),
            },
            {"#status": "status"},  # status is reserved word
        )


class StripeEventStore:
    """Processed-event records keyed by Stripe event id."""

    def __init__(self, db: DynamoDBService) -> None:
        self._db = db

    def get(self, event_id: str) -> StripeEvent | None:
        """Load the record of a previously received event, if any."""
        item = self._db.get_item(STRIPE_EVENTS_TABLE, {"event_id": event_id})
        return StripeEvent.model_validate(item) if item else None

    def claim(
        self,
        event_id: str,
        event_type: str,
        payload: dict[str, Any],
        payload_hash: str | None = None,
    ) -> bool:
        """Insert the record for a new event before it is dispatched.

        The write is conditional on the event id being absent, so two
        concurrent deliveries of the same event cannot both claim it.

        Args:
            event_id: Stripe event ID
            event_type: Stripe event type
            payload: The event's data.object
            payload_hash: SHA-256 hash of the raw body

        Returns:
            True if claimed, False if another delivery already holds it
        """
        item: dict[str, Any] = {
            "event_id": event_id,
            "event_type": event_type,
            "payload": to_dynamodb_value(payload),
            "processed_at": utc_now_iso(),
        }
        if payload_hash:
            item["payload_hash"] = payload_hash

        return self._db.put_item(
            STRIPE_EVENTS_TABLE,
            item,
            condition_expression="attribute_not_exists(event_id)",
        )

    def complete(self, event_id: str, result: HandlerResult) -> None:
        """Attach the handler's result to a claimed event."""
        self._db.update_item(
            STRIPE_EVENTS_TABLE,
            {"event_id": event_id},
            "SET processing_result = :result, completed_at = :now",
            {
                ":result": to_dynamodb_value(result.to_item()),
                ":now": utc_now_iso(),
            },
        )


class AdminLogStore:
    """Append-only audit log."""

    def __init__(self, db: DynamoDBService) -> None:
        self._db = db

    def append(
        self,
        action: str,
        target_type: str,
        target_id: str,
        details: dict[str, Any],
    ) -> AdminLog:
        """Append an audit entry.

        Args:
            action: What happened (e.g. "dispute_created")
            target_type: Kind of entity concerned (e.g. "booking")
            target_id: Entity identifier
            details: Free-form context

        Returns:
            The stored entry
        """
        entry = AdminLog(
            log_id=str(uuid.uuid4()),
            action=action,
            target_type=target_type,
            target_id=target_id,
            details=details,
            created_at=utc_now_iso(),
        )
        self._db.put_item(
            ADMIN_LOGS_TABLE,
            to_dynamodb_value(entry.model_dump()),
            condition_expression="attribute_not_exists(log_id)",
        )
        return entry
