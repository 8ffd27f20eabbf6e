"""
Delivery-data business logic.

Covers single-record writes and the CSV bulk upload:
- validate and read the upload with a size limit
- parse every row before writing anything
- upsert rows one by one through the bulk engine
"""

from __future__ import annotations

import logging
from pathlib import Path

import asyncpg
from fastapi import HTTPException, UploadFile, status

from catalog.store import CatalogStore
from core import config
from countries import repository as country_repository
from retailers import repository as retailer_repository

from . import bulk, csv_rows, repository, schemas

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".csv"}
ALLOWED_CONTENT_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel"}
READ_CHUNK_BYTES = 1024 * 1024  # 1 MiB
NULLABLE_FIELDS = {"free_shipping_threshold", "carrier", "additional_notes"}
REQUIRED_TEXT_FIELDS = ("method", "cost", "duration")


def _clean_fields(fields: dict) -> dict:
    """
    Trim text values. Required ones may not end up empty; optional ones
    that do are stored as NULL.
    """
    cleaned = dict(fields)
    for key in REQUIRED_TEXT_FIELDS:
        if key not in cleaned:
            continue
        value = (cleaned[key] or "").strip()
        if not value:
            raise HTTPException(status_code=422, detail=f"{key.capitalize()} is required.")
        cleaned[key] = value
    for key in NULLABLE_FIELDS:
        if cleaned.get(key) is not None:
            cleaned[key] = cleaned[key].strip() or None
    return cleaned


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Delivery data not found.")


def _duplicate() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Delivery data already exists for this retailer, country and method.",
    )


async def get_record(record_id: int) -> dict:
    record = await repository.get_delivery_record(record_id)
    if record is None:
        raise _not_found()
    return record


async def create_record(payload: schemas.DeliveryRecordCreate) -> dict:
    if await retailer_repository.get_retailer(payload.retailer_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Retailer not found.")
    if await country_repository.get_country(payload.country_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Country not found.")

    fields = _clean_fields(payload.model_dump())
    fields["data_source"] = "manual"
    try:
        row = await repository.create_delivery_record(fields)
    except asyncpg.UniqueViolationError as exc:
        raise _duplicate() from exc
    return await get_record(int(row["id"]))


async def update_record(record_id: int, payload: schemas.DeliveryRecordUpdate) -> dict:
    # Explicit nulls only clear the optional columns.
    fields = _clean_fields(
        {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
    )
    try:
        row = await repository.update_delivery_record(record_id, fields)
    except asyncpg.UniqueViolationError as exc:
        raise _duplicate() from exc
    if row is None:
        raise _not_found()
    return await get_record(record_id)


async def delete_record(record_id: int) -> None:
    if not await repository.delete_delivery_record(record_id):
        raise _not_found()


def validate_upload(file: UploadFile) -> str:
    """
    Accept `.csv` files, or any filename sent with a CSV content type.
    """
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="CSV file is required.")

    ext = Path(file.filename).suffix.lower()
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()
    if ext not in ALLOWED_EXTENSIONS and content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only CSV files are allowed.")
    return file.filename


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    buf = bytearray()
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Max is {max_bytes} bytes.",
            )
    return bytes(buf)


async def import_csv(store: CatalogStore, file: UploadFile) -> schemas.BulkUploadResponse:
    filename = validate_upload(file)
    data = await read_upload_bytes(file, max_bytes=config.max_upload_bytes())

    try:
        rows = csv_rows.parse_rows(data)
    except csv_rows.CsvParseError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to parse CSV file: {exc}",
        ) from exc

    logger.info("csv_upload_parsed filename=%r rows=%s bytes=%s", filename, len(rows), len(data))
    result = await bulk.bulk_upsert(store, rows)

    return schemas.BulkUploadResponse(
        message="CSV uploaded and processed successfully",
        filename=filename,
        created=result.created,
        updated=result.updated,
        skipped=result.skipped,
        total=result.total,
    )
