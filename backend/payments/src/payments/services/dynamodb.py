"""Thin DynamoDB wrapper shared by the booking, event and audit stores.

Table names are ``{prefix}-{table}``; the prefix comes from
DYNAMODB_TABLE_PREFIX or defaults to ``booking-{environment}``.
"""

import os
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"

# Reused across warm invocations of the same container
_dynamodb_service_instance: "DynamoDBService | None" = None


def get_dynamodb_service(environment: str | None = None) -> "DynamoDBService":
    """Return the process-wide DynamoDBService, creating it on first use."""
    global _dynamodb_service_instance
    if _dynamodb_service_instance is None:
        _dynamodb_service_instance = DynamoDBService(environment)
    return _dynamodb_service_instance


def reset_dynamodb_service() -> None:
    """Drop the cached instance so the next call builds a fresh resource.

    Tests call this so the boto3 resource is created inside mock_aws.
    """
    global _dynamodb_service_instance
    _dynamodb_service_instance = None


def to_dynamodb_value(value: Any) -> Any:
    """Convert JSON-like data into types DynamoDB accepts.

    DynamoDB rejects ``float``, so floats become ``Decimal`` (via their
    shortest repr). Nested maps and lists are converted recursively.
    """
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, dict):
        return {k: to_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamodb_value(v) for v in value]
    return value


class DynamoDBService:
    """Prefixed access to the payment tables."""

    def __init__(self, environment: str | None = None) -> None:
        """Resolve the table prefix and endpoint from the environment.

        Args:
            environment: Environment name (dev/prod). Defaults to ENVIRONMENT env var.
        """
        self.environment = environment or os.getenv("ENVIRONMENT", "dev")
        self.name_prefix = os.getenv("DYNAMODB_TABLE_PREFIX", f"booking-{self.environment}")
        # Set to http://localhost:8000 for DynamoDB Local
        self.endpoint_url = os.getenv("DYNAMODB_ENDPOINT_URL") or None
        self._resource = boto3.resource("dynamodb", endpoint_url=self.endpoint_url)

    def table_name(self, table: str) -> str:
        return f"{self.name_prefix}-{table}"

    def _table(self, table: str) -> Any:
        return self._resource.Table(self.table_name(table))

    def get_item(self, table: str, key: dict[str, Any]) -> dict[str, Any] | None:
        """Fetch one item by primary key, or None when absent."""
        item: dict[str, Any] | None = self._table(table).get_item(Key=key).get("Item")
        return item

    def put_item(
        self,
        table: str,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> bool:
        """Write an item, optionally guarded by a condition.

        Returns:
            False when the condition rejected the write, True otherwise.
        """
        kwargs: dict[str, Any] = {"Item": item}
        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression

        try:
            self._table(table).put_item(**kwargs)
        except ClientError as e:
            if e.response["Error"]["Code"] == CONDITIONAL_CHECK_FAILED:
                return False
            raise
        return True

    def update_item(
        self,
        table: str,
        key: dict[str, Any],
        update_expression: str,
        values: dict[str, Any],
        names: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Apply an update expression and return the item's new attributes."""
        kwargs: dict[str, Any] = {
            "Key": key,
            "UpdateExpression": update_expression,
            "ExpressionAttributeValues": values,
            "ReturnValues": "ALL_NEW",
        }
        if names:
            kwargs["ExpressionAttributeNames"] = names

        attrs: dict[str, Any] = self._table(table).update_item(**kwargs).get("Attributes", {})
        return attrs

    def query_by_gsi(
        self,
        table: str,
        index_name: str,
        attribute: str,
        value: str,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return items whose index hash key equals ``value``.

        Args:
            table: Table name without prefix
            index_name: GSI name
            attribute: Hash key attribute of the index
            value: Value to match
            limit: Max items to evaluate
        """
        kwargs: dict[str, Any] = {
            "IndexName": index_name,
            "KeyConditionExpression": Key(attribute).eq(value),
        }
        if limit:
            kwargs["Limit"] = limit

        items: list[dict[str, Any]] = self._table(table).query(**kwargs).get("Items", [])
        return items
