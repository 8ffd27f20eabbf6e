"""
Retailer business logic.
"""

from __future__ import annotations

import asyncpg
from fastapi import HTTPException, status

from . import repository


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise HTTPException(status_code=422, detail="Name is required.")
    return cleaned


def _name_taken(name: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Retailer '{name}' already exists.",
    )


async def get_retailer_detail(retailer_id: int) -> dict:
    retailer = await repository.get_retailer(retailer_id)
    if retailer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Retailer not found.")
    retailer["delivery_data"] = await repository.list_delivery_for_retailer(retailer_id)
    return retailer


async def create_retailer(name: str) -> dict:
    name = _clean_name(name)
    try:
        return await repository.create_retailer(name)
    except asyncpg.UniqueViolationError as exc:
        raise _name_taken(name) from exc


async def rename_retailer(retailer_id: int, name: str) -> dict:
    name = _clean_name(name)
    try:
        retailer = await repository.update_retailer(retailer_id, name=name)
    except asyncpg.UniqueViolationError as exc:
        raise _name_taken(name) from exc
    if retailer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Retailer not found.")
    return retailer


async def delete_retailer(retailer_id: int) -> None:
    try:
        deleted = await repository.delete_retailer(retailer_id)
    except asyncpg.ForeignKeyViolationError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Retailer still has delivery data.",
        ) from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Retailer not found.")
