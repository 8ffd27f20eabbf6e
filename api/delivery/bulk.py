"""
Row-by-row upsert of canonical CSV rows into retailers, countries and
delivery records.

Rows are processed sequentially and independently. There is no transaction
around the batch: a failure on row N leaves rows 1..N-1 committed, and a
request cancelled mid-upload keeps whatever was already written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from catalog.store import CatalogStore, DuplicateRecordError, Row
from countries import codes

from .csv_rows import CanonicalRow

logger = logging.getLogger(__name__)

COUNTRY_CREATE_ATTEMPTS = 3
STATUS_VERIFIED = "verified"
DATA_SOURCE_CSV = "csv"


@dataclass(frozen=True)
class BulkUpsertResult:
    created: int
    updated: int
    skipped: int

    @property
    def total(self) -> int:
        return self.created + self.updated


async def find_or_create_retailer(store: CatalogStore, name: str) -> Row:
    name = name.strip()
    retailer = await store.find_retailer_by_name(name)
    if retailer is not None:
        return retailer
    try:
        return await store.create_retailer(name)
    except DuplicateRecordError:
        retailer = await store.find_retailer_by_name(name)
        if retailer is None:
            raise
        return retailer


async def find_or_create_country(store: CatalogStore, name: str) -> Row:
    name = name.strip()
    country = await store.find_country_by_name(name)
    if country is not None:
        return country

    attempt = 0
    while True:
        attempt += 1
        code = await codes.allocate_code(store, name)
        try:
            country = await store.create_country(name, code)
            logger.info("country_created name=%r code=%s", name, code)
            return country
        except DuplicateRecordError:
            country = await store.find_country_by_name(name)
            if country is not None:
                return country
            # Someone else took the code between the probe and the insert.
            logger.warning("country_code_conflict name=%r code=%s attempt=%s", name, code, attempt)
            if attempt >= COUNTRY_CREATE_ATTEMPTS:
                raise


def _record_fields(row: CanonicalRow) -> Row:
    return {
        "cost": row.cost.strip(),
        "duration": row.duration.strip(),
        "free_shipping_threshold": (row.free_shipping_threshold or "").strip() or None,
        "carrier": (row.carrier or "").strip() or None,
        "additional_notes": (row.additional_notes or "").strip() or None,
        "status": STATUS_VERIFIED,
    }


async def upsert_row(store: CatalogStore, row: CanonicalRow) -> bool:
    """
    Upsert one complete row. Returns True when a record was created and
    False when an existing one was updated.
    """
    retailer = await find_or_create_retailer(store, row.retailer)
    country = await find_or_create_country(store, row.country)
    method = row.method.strip()
    fields = _record_fields(row)

    existing = await store.find_delivery_record(retailer["id"], country["id"], method)
    if existing is None:
        try:
            await store.create_delivery_record(
                {
                    "retailer_id": retailer["id"],
                    "country_id": country["id"],
                    "method": method,
                    "data_source": DATA_SOURCE_CSV,
                    **fields,
                }
            )
            return True
        except DuplicateRecordError:
            existing = await store.find_delivery_record(retailer["id"], country["id"], method)
            if existing is None:
                raise

    await store.update_delivery_record(existing["id"], fields)
    return False


async def bulk_upsert(store: CatalogStore, rows: Iterable[CanonicalRow]) -> BulkUpsertResult:
    """
    Upsert rows in input order; rows missing a required field are skipped.
    """
    created = updated = skipped = 0

    for line, row in enumerate(rows, start=1):
        missing = row.missing_fields()
        if missing:
            skipped += 1
            logger.debug("bulk_upsert_skip row=%s missing=%s", line, ",".join(missing))
            continue

        if await upsert_row(store, row):
            created += 1
        else:
            updated += 1

    logger.info("bulk_upsert_complete created=%s updated=%s skipped=%s", created, updated, skipped)
    return BulkUpsertResult(created=created, updated=updated, skipped=skipped)
