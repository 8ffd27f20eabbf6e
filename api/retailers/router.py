"""
Retailer API endpoints. Reads are public; writes need a signed-in user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies

from . import repository, schemas, service

router = APIRouter()


@router.get("")
async def list_retailers(search: str = Query(default="", max_length=200)) -> dict:
    retailers = await repository.list_retailers(search=search)
    return {"retailers": retailers, "count": len(retailers)}


@router.get("/{retailer_id}")
async def get_retailer(retailer_id: int) -> dict:
    return {"retailer": await service.get_retailer_detail(retailer_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_retailer(
    payload: schemas.RetailerWrite,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"retailer": await service.create_retailer(payload.name)}


@router.put("/{retailer_id}")
async def update_retailer(
    retailer_id: int,
    payload: schemas.RetailerWrite,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"retailer": await service.rename_retailer(retailer_id, payload.name)}


@router.delete("/{retailer_id}")
async def delete_retailer(
    retailer_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    await service.delete_retailer(retailer_id)
    return {"message": "Retailer deleted successfully"}
