"""
Country API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies
from catalog.store import CatalogStore, get_store

from . import repository, schemas, service

router = APIRouter()


@router.get("")
async def list_countries() -> dict:
    countries = await repository.list_countries()
    return {"countries": countries, "count": len(countries)}


@router.get("/{country_id}")
async def get_country(country_id: int) -> dict:
    return {"country": await service.get_country_detail(country_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_country(
    payload: schemas.CountryCreate,
    store: CatalogStore = Depends(get_store),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"country": await service.create_country(store, payload)}
