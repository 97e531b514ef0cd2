"""Logging with a per-request correlation id.

The API middleware stores the request's X-Correlation-ID in a context
variable; every log line written while handling that request is prefixed
with it, so one payment or webhook can be followed through CloudWatch.

Usage:
    from payments.utils.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Booking confirmed", extra={"booking_id": "bk_123"})
"""

import logging
import os
import uuid
from contextvars import ContextVar
from typing import Any

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
NO_CORRELATION_ID = "no-correlation-id"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation id to the current context, generating one if needed.

    Returns:
        The id now in effect
    """
    cid = correlation_id or str(uuid.uuid4())
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamp ``correlation_id`` onto every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Prefix each formatted line with ``[correlation-id]``."""

    def format(self, record: logging.LogRecord) -> str:
        cid = getattr(record, "correlation_id", None) or get_correlation_id() or NO_CORRELATION_ID
        return f"[{cid}] {super().format(record)}"


def configure_logging(level: str | int | None = None) -> None:
    """Install the structured formatter on the root logger.

    Lambda's runtime pre-installs a handler on the root logger, so existing
    handlers are reused rather than duplicated.

    Args:
        level: Log level name or number. Defaults to LOG_LEVEL env var or INFO.
    """
    root = logging.getLogger()
    root.setLevel(level or os.environ.get("LOG_LEVEL", "INFO"))

    if not root.handlers:
        root.addHandler(logging.StreamHandler())

    formatter = StructuredFormatter(DEFAULT_LOG_FORMAT)
    for handler in root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)`` with the correlation filter attached."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def _context(**fields: Any) -> dict[str, Any]:
    # None and empty values are left out of both the message and `extra`
    return {key: value for key, value in fields.items() if value is not None and value != ""}


def _render(headline: str, context: dict[str, Any], skip: tuple[str, ...]) -> str:
    parts = [headline]
    parts.extend(f"{key}={value}" for key, value in context.items() if key not in skip)
    return " | ".join(parts)


def log_payment_operation(
    logger: logging.Logger,
    operation: str,
    *,
    payment_intent_id: str | None = None,
    booking_id: str | None = None,
    amount: int | None = None,
    currency: str | None = None,
    status: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a Stripe payment call, at ERROR when ``error`` is set.

    Args:
        logger: Logger instance
        operation: Operation name (e.g. "create_payment_intent")
        payment_intent_id: Stripe PaymentIntent ID if available
        booking_id: Booking ID if available
        amount: Amount in minor units
        currency: ISO currency code
        status: PaymentIntent status returned by Stripe
        error: Error message if the call failed
        **extra: Additional context fields
    """
    context = _context(
        operation=operation,
        payment_intent_id=payment_intent_id,
        booking_id=booking_id,
        amount=amount,
        currency=currency,
        status=status,
        error=error,
        **extra,
    )
    message = _render(f"Payment operation: {operation}", context, skip=("operation",))
    logger.log(logging.ERROR if error else logging.INFO, message, extra=context)


def log_webhook_event(
    logger: logging.Logger,
    event_type: str,
    event_id: str,
    *,
    booking_id: str | None = None,
    payment_intent_id: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one step of webhook processing.

    ``result`` is "received", "skipped", "duplicate", "error" or the
    handler's action. Errors log at ERROR, skipped and duplicate events at
    WARNING, everything else at INFO.
    """
    context = _context(
        event_type=event_type,
        event_id=event_id,
        booking_id=booking_id,
        payment_intent_id=payment_intent_id,
        result=result,
        error=error,
        **extra,
    )
    message = _render(
        f"Webhook event: {event_type} ({event_id})", context, skip=("event_type", "event_id")
    )

    if result == "error":
        level = logging.ERROR
    elif result in ("duplicate", "skipped"):
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(level, message, extra=context)
