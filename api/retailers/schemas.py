"""
Retailer API schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RetailerWrite(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
