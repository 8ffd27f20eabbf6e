"""
Comparison history persistence.

Every row carries `country_name`, joined from `countries` at read time.
"""

from __future__ import annotations

import json
from typing import Any

from core import db

_COMPARISON_COLUMNS = "id, user_id, retailer_ids, country_id, results, created_at"

_SELECT_WITH_COUNTRY = """
    SELECT cmp.id, cmp.user_id, cmp.retailer_ids, cmp.country_id, cmp.results, cmp.created_at,
           c.name AS country_name
    FROM {source} cmp
    LEFT JOIN countries c ON c.id = cmp.country_id
"""


def _json_arg(value: list[dict[str, Any]]) -> str:
    """
    asyncpg does not encode Python objects for json/jsonb parameters.
    We pass JSON as a string and cast to jsonb in SQL.
    """
    return json.dumps(value, ensure_ascii=True)


def _decode(row: dict[str, Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None
    results = row.get("results")
    if isinstance(results, str):
        row["results"] = json.loads(results)
    row["retailer_ids"] = [int(r) for r in row.get("retailer_ids") or []]
    return row


async def insert_comparison(
    *,
    user_id: int,
    retailer_ids: list[int],
    country_id: int,
    results: list[dict[str, Any]],
) -> dict[str, Any]:
    select = _SELECT_WITH_COUNTRY.format(source="inserted")
    row = await db.fetch_one(
        f"""
        WITH inserted AS (
            INSERT INTO comparisons (user_id, retailer_ids, country_id, results)
            VALUES ($1, $2::bigint[], $3, $4::jsonb)
            RETURNING {_COMPARISON_COLUMNS}
        )
        {select}
        """,
        user_id,
        retailer_ids,
        country_id,
        _json_arg(results),
    )
    if row is None:
        raise RuntimeError("Failed to insert comparison.")
    return _decode(row)


async def list_comparisons(*, user_id: int) -> list[dict[str, Any]]:
    select = _SELECT_WITH_COUNTRY.format(source="comparisons")
    rows = await db.fetch_all(
        f"""
        {select}
        WHERE cmp.user_id = $1
        ORDER BY cmp.created_at DESC, cmp.id DESC
        """,
        user_id,
    )
    return [_decode(row) for row in rows]


async def get_comparison(comparison_id: int, *, user_id: int) -> dict[str, Any] | None:
    select = _SELECT_WITH_COUNTRY.format(source="comparisons")
    row = await db.fetch_one(
        f"""
        {select}
        WHERE cmp.id = $1
          AND cmp.user_id = $2
        """,
        comparison_id,
        user_id,
    )
    return _decode(row)
