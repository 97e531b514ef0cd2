"""Stripe access for the payment functions.

Creates PaymentIntents for the mobile payment sheet, verifies webhook
signatures and looks up charges, using the v8+ StripeClient. Keys are read
from the function environment, or from SSM under ``/booking/{env}/stripe/``.
"""

import hashlib
import json
import logging
import os
from functools import lru_cache
from typing import Any

import stripe
from stripe import StripeClient

from payments.utils.logging import log_payment_operation

from .ssm_service import SSMServiceError, resolve_secret

logger = logging.getLogger(__name__)


class StripeServiceError(Exception):
    """A Stripe call, or loading the Stripe credentials, failed."""

    def __init__(self, message: str, stripe_error_code: str | None = None) -> None:
        super().__init__(message)
        self.stripe_error_code = stripe_error_code


class WebhookSignatureError(StripeServiceError):
    """Raised when a webhook signature or payload fails verification."""


class StripeService:
    """Lazily-initialised Stripe client plus webhook verification.

    Usage:
        client_secret = get_stripe_service().create_payment_intent(
            amount=2500, currency="eur"
        )
    """

    def __init__(self, environment: str | None = None) -> None:
        """Credentials are resolved on first use, not here.

        Args:
            environment: Environment name (dev, prod). Defaults to ENVIRONMENT env var.
        """
        self._environment = environment or os.environ.get("ENVIRONMENT", "dev")
        self._client: StripeClient | None = None
        self._webhook_secret: str | None = None

    def _secret(self, env_var: str, name: str, failure: str) -> str:
        try:
            return resolve_secret(env_var, f"/booking/{self._environment}/stripe/{name}")
        except SSMServiceError as e:
            raise StripeServiceError(f"{failure}: {e}") from e

    def _get_client(self) -> StripeClient:
        """Build the StripeClient on first use.

        Raises:
            StripeServiceError: If the secret key cannot be resolved.
        """
        if self._client is None:
            secret_key = self._secret(
                "STRIPE_SECRET_KEY", "secret_key", "Failed to initialize Stripe client"
            )
            self._client = StripeClient(secret_key)
            logger.info("Stripe client initialized for environment: %s", self._environment)
        return self._client

    def _get_webhook_secret(self) -> str:
        if self._webhook_secret is None:
            self._webhook_secret = self._secret(
                "STRIPE_WEBHOOK_SECRET", "webhook_secret", "Failed to get webhook secret"
            )
        return self._webhook_secret

    def create_payment_intent(self, *, amount: int, currency: str) -> str:
        """Create a PaymentIntent and return its client secret.

        Payment methods are left to Stripe (automatic payment methods), so
        the mobile payment sheet offers whatever the account has enabled.

        Args:
            amount: Amount in minor units (e.g. cents).
            currency: Three-letter ISO currency code.

        Returns:
            The client secret the mobile SDK completes the payment with.

        Raises:
            StripeServiceError: Carrying Stripe's user-facing message when
                the intent is rejected.
        """
        client = self._get_client()
        params = {
            "amount": amount,
            "currency": currency,
            "automatic_payment_methods": {"enabled": True},
        }

        try:
            intent = client.payment_intents.create(params=params)
        except stripe.StripeError as e:
            code = getattr(e, "code", None)
            log_payment_operation(
                logger,
                "create_payment_intent",
                amount=amount,
                currency=currency,
                error=str(e),
                stripe_error_code=code,
            )
            raise StripeServiceError(e.user_message or str(e), stripe_error_code=code) from e

        log_payment_operation(
            logger,
            "create_payment_intent",
            payment_intent_id=intent.id,
            amount=amount,
            currency=currency,
            status=intent.status,
        )
        return intent.client_secret

    def verify_webhook_signature(self, payload: bytes, signature: str) -> dict[str, Any]:
        """Check the Stripe-Signature header and return the event as plain JSON.

        Raises:
            WebhookSignatureError: Bad signature, stale timestamp or unparseable body.
            StripeServiceError: The signing secret could not be loaded.
        """
        secret = self._get_webhook_secret()

        try:
            stripe.Webhook.construct_event(payload, signature, secret)
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", e)
            raise WebhookSignatureError("Invalid webhook signature") from e
        except ValueError as e:
            logger.warning("Invalid webhook payload: %s", e)
            raise WebhookSignatureError("Invalid webhook payload") from e

        # Handlers work on dicts, not StripeObjects
        event: dict[str, Any] = json.loads(payload)
        logger.info("Webhook signature verified for event: %s", event.get("id"))
        return event

    def retrieve_charge_payment_intent(self, charge_id: str) -> str | None:
        """Return the PaymentIntent id a charge belongs to, if any.

        Raises:
            StripeServiceError: If the charge cannot be retrieved.
        """
        client = self._get_client()

        try:
            charge = client.charges.retrieve(charge_id)
        except stripe.StripeError as e:
            code = getattr(e, "code", None)
            logger.error("Charge lookup failed for %s: %s (code: %s)", charge_id, e, code)
            raise StripeServiceError(
                f"Failed to retrieve charge {charge_id}: {e}", stripe_error_code=code
            ) from e

        payment_intent = getattr(charge, "payment_intent", None)
        if payment_intent is None or isinstance(payment_intent, str):
            return payment_intent
        # Expanded PaymentIntent object
        return getattr(payment_intent, "id", None)

    @staticmethod
    def compute_payload_hash(payload: bytes) -> str:
        """SHA-256 hex digest of the raw webhook body, kept for auditing."""
        return hashlib.sha256(payload).hexdigest()


@lru_cache(maxsize=1)
def get_stripe_service() -> StripeService:
    return StripeService()
