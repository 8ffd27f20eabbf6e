"""
Country API schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CountryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    # Omit to have a code allocated from the name.
    code: str | None = Field(default=None, pattern=r"^[A-Za-z]{2}$")
