"""Booking model and payment-driven status transitions.

Bookings are created by the booking flow of the mobile app. This package only
reads them by ``payment_intent_id`` and moves them between statuses when
Stripe reports a payment outcome.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import BookingStatus

# Status changes a payment event may cause. Partial refunds keep the status,
# so they never appear here.
BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {
            BookingStatus.CONFIRMED,
            BookingStatus.PAYMENT_FAILED,
            BookingStatus.CANCELLED,
        }
    ),
    BookingStatus.CONFIRMED: frozenset(
        {
            BookingStatus.REFUNDED,
            BookingStatus.DISPUTED,
        }
    ),
    BookingStatus.PAYMENT_FAILED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.REFUNDED: frozenset(),
    BookingStatus.DISPUTED: frozenset(),
}


def can_transition(current: BookingStatus | str, target: BookingStatus | str) -> bool:
    """Check whether a booking may move from ``current`` to ``target``.

    Unknown statuses never allow a transition.

    Args:
        current: Current booking status
        target: Requested booking status

    Returns:
        True if the transition is defined
    """
    try:
        current_status = BookingStatus(current)
        target_status = BookingStatus(target)
    except ValueError:
        return False
    return target_status in BOOKING_TRANSITIONS[current_status]


class Booking(BaseModel):
    """A booking row as seen by the payment webhook.

    Only the fields the webhook reads or writes are modelled. Other
    attributes stored on the item are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(
        ...,
        description="Booking identifier",
        examples=["bk_01HZX4W9"],
    )
    status: str = Field(
        default="",
        description="Booking status (pending, confirmed, payment_failed, ...)",
        examples=["pending"],
    )
    payment_intent_id: str | None = Field(
        default=None,
        description="Stripe PaymentIntent correlated with this booking",
        examples=["pi_3ABC123DEF456"],
    )
    payment: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form payment details (status, method, refunds, disputes)",
    )
    updated_at: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_or_empty(cls, value: Any) -> Any:
        # A missing status is an unknown one: no transition accepts it
        return "" if value is None else value

    @field_validator("payment", mode="before")
    @classmethod
    def _payment_or_empty(cls, value: Any) -> Any:
        # Rows created before any payment attempt store payment as null
        return {} if value is None else value
