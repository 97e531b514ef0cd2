"""Pytest configuration and fixtures for the booking payments backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto (bookings, stripe_events, admin_logs)
- Stripe credentials through the environment
- Signed webhook payloads
- Sample booking and Stripe event data
"""

import hashlib
import hmac
import json
import os
import time
from collections.abc import Callable
from typing import Any, Generator

import boto3
import pytest
from moto import mock_aws

# === Environment ===

# boto3 needs a region even for clients built outside mock_aws
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-booking")

TEST_TABLE_PREFIX = "test-booking"
TEST_SECRET_KEY = "sk_test_abc123xyz"
TEST_WEBHOOK_SECRET = "whsec_test_secret_for_testing"
TEST_BOOKING_ID = "bk_2026_ABC123"
TEST_PAYMENT_INTENT_ID = "pi_3ABC123DEF456"


# === Service Singletons ===


@pytest.fixture(autouse=True)
def reset_service_singletons() -> Generator[None, None, None]:
    """Reset cached services before and after each test.

    Tests using mock_aws need a fresh DynamoDB resource created inside the
    mock context rather than one left over from a previous test.
    """
    from payments.services.ssm_service import SSMService, get_ssm_service
    from payments_api.dependencies import reset_services

    def _reset() -> None:
        reset_services()
        get_ssm_service.cache_clear()
        SSMService._instance = None
        SSMService._cache.clear()

    _reset()
    yield
    _reset()


@pytest.fixture(autouse=True)
def stripe_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide Stripe credentials through the environment."""
    monkeypatch.setenv("STRIPE_SECRET_KEY", TEST_SECRET_KEY)
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", TEST_WEBHOOK_SECRET)
    monkeypatch.setenv("DYNAMODB_TABLE_PREFIX", TEST_TABLE_PREFIX)
    monkeypatch.delenv("DYNAMODB_ENDPOINT_URL", raising=False)


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fake credentials so nothing under mock_aws can reach a real account."""
    for var in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SESSION_TOKEN"):
        monkeypatch.setenv(var, "testing")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")


@pytest.fixture
def dynamodb_tables(aws_credentials: None) -> Generator[Any, None, None]:
    """Create the payment tables inside a moto mock and yield a resource."""
    from payments.services.tables import create_tables

    with mock_aws():
        client = boto3.client("dynamodb", region_name="eu-west-1")
        create_tables(client, TEST_TABLE_PREFIX)
        yield boto3.resource("dynamodb", region_name="eu-west-1")


@pytest.fixture
def bookings_table(dynamodb_tables: Any) -> Any:
    """The mocked bookings table."""
    return dynamodb_tables.Table(f"{TEST_TABLE_PREFIX}-bookings")


@pytest.fixture
def stripe_events_table(dynamodb_tables: Any) -> Any:
    """The mocked stripe_events table."""
    return dynamodb_tables.Table(f"{TEST_TABLE_PREFIX}-stripe_events")


@pytest.fixture
def admin_logs_table(dynamodb_tables: Any) -> Any:
    """The mocked admin_logs table."""
    return dynamodb_tables.Table(f"{TEST_TABLE_PREFIX}-admin_logs")


@pytest.fixture
def put_booking(bookings_table: Any) -> Callable[..., dict[str, Any]]:
    """Factory storing a booking item and returning it."""

    def _put(
        status: str = "pending",
        booking_id: str = TEST_BOOKING_ID,
        payment_intent_id: str = TEST_PAYMENT_INTENT_ID,
        payment: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        booking = {
            "id": booking_id,
            "status": status,
            "payment_intent_id": payment_intent_id,
            "payment": payment or {},
            "pickup": "Rua Augusta 1, Lisboa",
            "updated_at": "2026-07-01T10:00:00+00:00",
        }
        bookings_table.put_item(Item=booking)
        return booking

    return _put


@pytest.fixture
def pending_booking(put_booking: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    """A pending booking awaiting payment."""
    return put_booking()


@pytest.fixture
def get_booking(bookings_table: Any) -> Callable[[str], dict[str, Any]]:
    """Read a booking item back from the mocked table."""

    def _get(booking_id: str = TEST_BOOKING_ID) -> dict[str, Any]:
        return bookings_table.get_item(Key={"id": booking_id})["Item"]

    return _get


# === Stripe Event Fixtures ===


def make_event(event_type: str, obj: dict[str, Any], event_id: str = "evt_1ABC123DEF456") -> dict[str, Any]:
    """Build a Stripe event envelope."""
    return {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "created": int(time.time()),
        "data": {"object": obj},
    }


@pytest.fixture
def event_factory() -> Callable[..., dict[str, Any]]:
    """Factory for Stripe event envelopes."""
    return make_event


@pytest.fixture
def payment_intent_succeeded_event() -> dict[str, Any]:
    """Sample payment_intent.succeeded event."""
    return make_event(
        "payment_intent.succeeded",
        {
            "id": TEST_PAYMENT_INTENT_ID,
            "object": "payment_intent",
            "amount": 2500,
            "currency": "eur",
            "status": "succeeded",
        },
    )


@pytest.fixture
def charge_refunded_event() -> Callable[..., dict[str, Any]]:
    """Factory for charge.refunded events."""

    def _event(amount_refunded: int, amount: int = 2500, event_id: str = "evt_refund_1") -> dict[str, Any]:
        return make_event(
            "charge.refunded",
            {
                "id": "ch_3ABC123DEF456",
                "object": "charge",
                "payment_intent": TEST_PAYMENT_INTENT_ID,
                "amount": amount,
                "amount_refunded": amount_refunded,
                "currency": "eur",
                "refunded": amount_refunded >= amount,
            },
            event_id=event_id,
        )

    return _event


# === Signing ===


def sign_payload(payload: bytes, secret: str = TEST_WEBHOOK_SECRET) -> str:
    """Create a valid Stripe-Signature header for a payload.

    Stripe signatures use HMAC-SHA256 with format: t={timestamp},v1={signature}
    """
    timestamp = str(int(time.time()))
    signed_payload = f"{timestamp}.{payload.decode('utf-8')}"
    signature = hmac.new(
        secret.encode("utf-8"),
        signed_payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture
def signed() -> Callable[[dict[str, Any]], tuple[bytes, dict[str, str]]]:
    """Serialize an event and build signed request headers for it."""

    def _signed(event: dict[str, Any]) -> tuple[bytes, dict[str, str]]:
        payload = json.dumps(event).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Stripe-Signature": sign_payload(payload),
        }
        return payload, headers

    return _signed
