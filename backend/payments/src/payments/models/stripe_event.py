"""Stripe webhook event records for idempotency and auditing."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import WebhookAction


class HandlerResult(BaseModel):
    """Result of dispatching one webhook event to its handler.

    Serialized with camelCase ``bookingId`` in HTTP responses and in the
    stored ``processing_result``.
    """

    model_config = ConfigDict(
        populate_by_name=True, use_enum_values=True, validate_default=True
    )

    success: bool = True
    action: WebhookAction = WebhookAction.NONE
    booking_id: str | None = Field(default=None, alias="bookingId")
    error: str | None = None

    def to_item(self) -> dict[str, Any]:
        """Dump the result as a DynamoDB-friendly map."""
        return self.model_dump(by_alias=True, exclude_none=True)


class StripeEvent(BaseModel):
    """Log of a received Stripe webhook event.

    Used for:
    - Idempotency: one record per event id, inserted before dispatch
    - Auditing: the payload and processing result of each delivery
    """

    model_config = ConfigDict(extra="ignore")

    event_id: str = Field(
        ...,
        description="Stripe event ID (evt_xxx)",
        examples=["evt_1ABC123DEF456"],
    )
    event_type: str = Field(
        ...,
        description="Stripe event type",
        examples=["payment_intent.succeeded", "charge.refunded"],
    )
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="The event's data.object",
    )
    payload_hash: str | None = Field(
        default=None,
        description="SHA-256 hash of the raw request body",
    )
    processed_at: str = Field(
        ...,
        description="When the event was claimed for processing (ISO 8601)",
    )
    processing_result: dict[str, Any] | None = Field(
        default=None,
        description="Handler result, attached once dispatch finishes",
    )
    completed_at: str | None = None
