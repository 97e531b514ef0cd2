"""Models for the payment sheet (payment intent creation) endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class PaymentSheetRequest(BaseModel):
    """Amount to collect from the mobile payment sheet."""

    amount: int = Field(
        ...,
        gt=0,
        description="Amount in minor units (e.g. cents)",
        examples=[2500],
    )
    currency: str = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Three-letter ISO currency code",
        examples=["eur"],
    )


class PaymentSheetResponse(BaseModel):
    """Client secret handed to the Stripe mobile SDK."""

    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(..., alias="clientSecret")
