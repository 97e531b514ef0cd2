"""Append-only audit log entries."""

from typing import Any

from pydantic import BaseModel, Field


class AdminLog(BaseModel):
    """An audit entry for operators to investigate.

    Written when a customer opens a dispute on a booking's charge.
    """

    log_id: str
    action: str = Field(..., examples=["dispute_created"])
    target_type: str = Field(..., examples=["booking"])
    target_id: str
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: str
