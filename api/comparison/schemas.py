"""
Comparison API schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

MAX_RETAILERS = 10


class CompareRequest(BaseModel):
    retailers: list[int] = Field(..., min_length=1, max_length=MAX_RETAILERS)
    country: int
