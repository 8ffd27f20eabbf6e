"""
Comparison business logic: request checks, running the engine, history.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from catalog.store import CatalogStore

from . import engine, schemas

logger = logging.getLogger(__name__)


def _comparison_view(row: dict) -> dict:
    # `country` is None once the country has been deleted; results keep their snapshot.
    return {
        "id": int(row["id"]),
        "retailers": list(row["retailer_ids"]),
        "country_id": int(row["country_id"]),
        "country": row.get("country_name"),
        "results": row["results"],
        "created_at": row["created_at"],
    }


async def run_comparison(store: CatalogStore, payload: schemas.CompareRequest, *, user_id: int) -> dict:
    retailer_ids = list(dict.fromkeys(payload.retailers))

    found = await store.find_retailers_by_ids(retailer_ids)
    if len(found) != len(retailer_ids):
        missing = sorted(set(retailer_ids) - {int(r["id"]) for r in found})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"One or more retailers not found: {missing}",
        )

    country = await store.get_country(payload.country)
    if country is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Country not found.")

    results = await engine.compare(store, retailer_ids, payload.country, country=country, retailers=found)
    serialized = [result.to_dict() for result in results]

    row = await store.save_comparison(
        user_id=user_id,
        retailer_ids=retailer_ids,
        country_id=int(country["id"]),
        results=serialized,
    )
    logger.info(
        "comparison_saved id=%s user_id=%s retailers=%s country_id=%s",
        row["id"],
        user_id,
        len(retailer_ids),
        country["id"],
    )
    return _comparison_view(row)


async def history(store: CatalogStore, *, user_id: int) -> list[dict]:
    return [_comparison_view(row) for row in await store.list_comparisons(user_id)]


async def get_comparison(store: CatalogStore, comparison_id: int, *, user_id: int) -> dict:
    row = await store.get_comparison(comparison_id, user_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comparison not found.")
    return _comparison_view(row)
