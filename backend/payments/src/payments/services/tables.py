"""DynamoDB table layouts used by the payment functions.

Table names here are unprefixed; ``create_tables`` applies the same
``{prefix}-{table}`` naming as DynamoDBService.
"""

from typing import Any

BOOKINGS_TABLE = "bookings"
STRIPE_EVENTS_TABLE = "stripe_events"
ADMIN_LOGS_TABLE = "admin_logs"

PAYMENT_INTENT_INDEX = "payment_intent_id-index"

TABLE_DEFINITIONS: dict[str, dict[str, Any]] = {
    BOOKINGS_TABLE: {
        "KeySchema": [{"AttributeName": "id", "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "payment_intent_id", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": PAYMENT_INTENT_INDEX,
                "KeySchema": [{"AttributeName": "payment_intent_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    STRIPE_EVENTS_TABLE: {
        "KeySchema": [{"AttributeName": "event_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": "event_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    ADMIN_LOGS_TABLE: {
        "KeySchema": [{"AttributeName": "log_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": "log_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
}


def create_tables(client: Any, prefix: str) -> list[str]:
    """Create every payment table that does not exist yet.

    Args:
        client: boto3 DynamoDB client
        prefix: Table name prefix (e.g. "booking-dev")

    Returns:
        Names of the tables that were created
    """
    existing = set(client.list_tables().get("TableNames", []))
    created = []

    for table, definition in TABLE_DEFINITIONS.items():
        name = f"{prefix}-{table}"
        if name in existing:
            continue
        client.create_table(TableName=name, **definition)
        created.append(name)

    return created
