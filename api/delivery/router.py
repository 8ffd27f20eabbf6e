"""
Delivery-data API endpoints.

`upload_router` exposes the same CSV import under `/api/upload/csv`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from auth import dependencies as auth_dependencies
from catalog.store import CatalogStore, get_store

from . import repository, schemas, service

router = APIRouter()
upload_router = APIRouter()


@router.get("")
async def list_delivery_data(
    retailer_id: int | None = None,
    country_id: int | None = None,
    method: str = Query(default="", max_length=200),
) -> dict:
    rows = await repository.list_delivery_data(
        retailer_id=retailer_id,
        country_id=country_id,
        method=method,
    )
    return {"delivery_data": rows, "count": len(rows)}


@router.post("/bulk")
async def bulk_upload(
    file: UploadFile = File(...),
    store: CatalogStore = Depends(get_store),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.BulkUploadResponse:
    return await service.import_csv(store, file)


@router.get("/{record_id}")
async def get_delivery_data(record_id: int) -> dict:
    return {"delivery_data": await service.get_record(record_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_delivery_data(
    payload: schemas.DeliveryRecordCreate,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"delivery_data": await service.create_record(payload)}


@router.put("/{record_id}")
async def update_delivery_data(
    record_id: int,
    payload: schemas.DeliveryRecordUpdate,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return {"delivery_data": await service.update_record(record_id, payload)}


@router.delete("/{record_id}")
async def delete_delivery_data(
    record_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    await service.delete_record(record_id)
    return {"message": "Delivery data deleted successfully"}


@upload_router.post("/csv")
async def upload_csv(
    file: UploadFile = File(...),
    store: CatalogStore = Depends(get_store),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.BulkUploadResponse:
    return await service.import_csv(store, file)
