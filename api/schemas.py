"""
API Schemas Module

This module defines Pydantic models for request/response validation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VerifyPaymentRequest(BaseModel):
    """Body of the verification call, camelCase as sent by the mobile app."""

    order_id: str = Field(alias="orderId", min_length=1)
    # Kept as sent (string or number); the comparison with PayPal's value is exact.
    expected_amount: str | float = Field(alias="expectedAmount")

    model_config = ConfigDict(populate_by_name=True)


class VerifyPaymentResponse(BaseModel):
    success: bool
    details: dict[str, Any] | None = None


class HealthOut(BaseModel):
    status: str
    app_name: str
    database: str
    environment: str
