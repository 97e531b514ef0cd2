"""Stripe secrets from the environment or SSM Parameter Store.

Deployed functions normally receive STRIPE_SECRET_KEY and
STRIPE_WEBHOOK_SECRET as environment variables. When a variable is unset
the value is read from a SecureString parameter under ``/booking/{env}/``.
"""

import logging
import os
from functools import lru_cache
from typing import ClassVar

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class SSMServiceError(Exception):
    """Raised when SSM parameter retrieval fails."""


class SSMService:
    """Decrypting SSM reader with a per-process cache.

    Values are cached on the class, so a warm Lambda container fetches
    each parameter once.
    """

    _instance: ClassVar["SSMService | None"] = None
    _cache: ClassVar[dict[str, str]] = {}

    def __init__(self) -> None:
        self._client = boto3.client("ssm")

    @classmethod
    def get_instance(cls) -> "SSMService":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get_parameter(self, name: str, *, use_cache: bool = True) -> str:
        """Return the decrypted value of ``name``.

        Args:
            name: Full parameter path (e.g. "/booking/dev/stripe/secret_key")
            use_cache: Serve a previously fetched value when available

        Raises:
            SSMServiceError: If the parameter is missing or unreadable.
        """
        if use_cache and name in self._cache:
            return self._cache[name]

        logger.info("Fetching SSM parameter: %s", name)
        try:
            response = self._client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            if code == "ParameterNotFound":
                message = f"SSM parameter not found: {name}"
            elif code == "AccessDeniedException":
                message = f"Access denied to SSM parameter: {name}"
            else:
                message = f"Failed to retrieve SSM parameter {name}: {e}"
            raise SSMServiceError(message) from e

        value: str = response["Parameter"]["Value"]
        self._cache[name] = value
        return value


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Shared SSMService for the process."""
    return SSMService.get_instance()


def resolve_secret(env_var: str, parameter_name: str) -> str:
    """Resolve a secret from the environment, falling back to SSM.

    Args:
        env_var: Environment variable checked first (e.g. "STRIPE_SECRET_KEY")
        parameter_name: SSM parameter path used when the variable is unset

    Returns:
        The secret value.

    Raises:
        SSMServiceError: If the variable is unset and SSM retrieval fails.
    """
    value = os.environ.get(env_var)
    if value:
        return value
    return get_ssm_service().get_parameter(parameter_name)
