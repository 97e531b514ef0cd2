"""Services for Stripe, secrets, and DynamoDB persistence."""
