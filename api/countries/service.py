"""
Country business logic.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from catalog.store import CatalogStore, DuplicateRecordError

from . import codes, repository, schemas


async def get_country_detail(country_id: int) -> dict:
    country = await repository.get_country(country_id)
    if country is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Country not found.")
    country["delivery_data"] = await repository.list_delivery_for_country(country_id)
    return country


async def create_country(store: CatalogStore, payload: schemas.CountryCreate) -> dict:
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Name is required.")

    if await store.find_country_by_name(name) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Country '{name}' already exists.")

    if payload.code:
        code = payload.code.upper()
    else:
        code = await codes.allocate_code(store, name)

    try:
        return await store.create_country(name, code)
    except DuplicateRecordError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
