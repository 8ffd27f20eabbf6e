"""
Country persistence.
"""

from __future__ import annotations

from typing import Any

from core import db

_COUNTRY_COLUMNS = "id, name, code, created_at, updated_at"


async def list_countries() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT c.id, c.name, c.code, c.created_at, c.updated_at,
               count(d.id) AS delivery_count
        FROM countries c
        LEFT JOIN delivery_data d ON d.country_id = c.id
        GROUP BY c.id
        ORDER BY c.name
        """
    )


async def get_country(country_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT {_COUNTRY_COLUMNS} FROM countries WHERE id = $1",
        country_id,
    )


async def get_country_by_name(name: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT {_COUNTRY_COLUMNS} FROM countries WHERE name = $1",
        name,
    )


async def get_country_by_code(code: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT {_COUNTRY_COLUMNS} FROM countries WHERE code = $1",
        code,
    )


async def create_country(*, name: str, code: str) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO countries (name, code)
        VALUES ($1, $2)
        RETURNING {_COUNTRY_COLUMNS}
        """,
        name,
        code,
    )
    if row is None:
        raise RuntimeError("Failed to create country.")
    return row


async def list_delivery_for_country(country_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT d.id, d.method, d.cost, d.duration, d.free_shipping_threshold,
               d.carrier, d.additional_notes, d.status, d.data_source,
               r.id AS retailer_id, r.name AS retailer_name
        FROM delivery_data d
        JOIN retailers r ON r.id = d.retailer_id
        WHERE d.country_id = $1
        ORDER BY r.name, d.method
        """,
        country_id,
    )
