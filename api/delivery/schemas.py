"""
Delivery-data API schemas.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

DeliveryStatus = Literal["verified", "partial", "requires_verification"]


class DeliveryRecordCreate(BaseModel):
    retailer_id: int
    country_id: int
    method: str = Field(..., min_length=1, max_length=200)
    cost: str = Field(..., min_length=1, max_length=200)
    duration: str = Field(..., min_length=1, max_length=200)
    free_shipping_threshold: str | None = Field(default=None, max_length=200)
    carrier: str | None = Field(default=None, max_length=200)
    additional_notes: str | None = Field(default=None, max_length=2000)
    status: DeliveryStatus = "requires_verification"


class DeliveryRecordUpdate(BaseModel):
    method: str | None = Field(default=None, min_length=1, max_length=200)
    cost: str | None = Field(default=None, min_length=1, max_length=200)
    duration: str | None = Field(default=None, min_length=1, max_length=200)
    free_shipping_threshold: str | None = Field(default=None, max_length=200)
    carrier: str | None = Field(default=None, max_length=200)
    additional_notes: str | None = Field(default=None, max_length=2000)
    status: DeliveryStatus | None = None


class BulkUploadResponse(BaseModel):
    message: str
    filename: str
    created: int
    updated: int
    skipped: int
    total: int
