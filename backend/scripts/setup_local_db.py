#!/usr/bin/env python3
"""Create the payment tables and optionally seed a pending booking.

Intended for DynamoDB Local or a fresh dev account, so the payment sheet and
webhook can be exercised end to end with the Stripe CLI
(``stripe listen --forward-to localhost:8080/stripe-webhook``).

Usage:
    python backend/scripts/setup_local_db.py --env dev --endpoint-url http://localhost:8000
    python backend/scripts/setup_local_db.py --env dev --seed-booking pi_3ABC123DEF456
"""

import argparse
import os
import sys
import uuid
from datetime import datetime, timezone

import boto3

from payments.services.tables import BOOKINGS_TABLE, create_tables


def get_table_prefix(env: str) -> str:
    """Table prefix matching DynamoDBService naming."""
    return os.environ.get("DYNAMODB_TABLE_PREFIX", f"booking-{env}")


def seed_pending_booking(resource, prefix: str, payment_intent_id: str) -> dict:
    """Insert a pending booking correlated with a PaymentIntent.

    Args:
        resource: boto3 DynamoDB resource
        prefix: Table name prefix
        payment_intent_id: Stripe PaymentIntent to correlate with

    Returns:
        The stored booking item
    """
    now = datetime.now(timezone.utc).isoformat()
    booking = {
        "id": f"bk_{uuid.uuid4().hex[:12]}",
        "status": "pending",
        "payment_intent_id": payment_intent_id,
        "payment": {},
        "created_at": now,
        "updated_at": now,
    }
    resource.Table(f"{prefix}-{BOOKINGS_TABLE}").put_item(Item=booking)
    return booking


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--env", default=os.environ.get("ENVIRONMENT", "dev"))
    parser.add_argument(
        "--endpoint-url",
        default=os.environ.get("DYNAMODB_ENDPOINT_URL"),
        help="DynamoDB endpoint (e.g. http://localhost:8000 for DynamoDB Local)",
    )
    parser.add_argument("--region", default=os.environ.get("AWS_DEFAULT_REGION", "eu-west-1"))
    parser.add_argument(
        "--seed-booking",
        metavar="PAYMENT_INTENT_ID",
        help="Also insert a pending booking for this PaymentIntent",
    )
    args = parser.parse_args(argv)

    prefix = get_table_prefix(args.env)
    client = boto3.client("dynamodb", endpoint_url=args.endpoint_url, region_name=args.region)

    created = create_tables(client, prefix)
    waiter = client.get_waiter("table_exists")
    for name in created:
        waiter.wait(TableName=name)
        print(f"Created table {name}")
    if not created:
        print(f"All tables for prefix {prefix} already exist")

    if args.seed_booking:
        resource = boto3.resource(
            "dynamodb", endpoint_url=args.endpoint_url, region_name=args.region
        )
        booking = seed_pending_booking(resource, prefix, args.seed_booking)
        print(f"Seeded booking {booking['id']} for {args.seed_booking}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
