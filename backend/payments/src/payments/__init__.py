"""Payment intent creation and Stripe webhook processing for ride bookings."""

__version__ = "0.1.0"
