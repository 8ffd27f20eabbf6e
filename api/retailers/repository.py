"""
Retailer persistence.
"""

from __future__ import annotations

from typing import Any

from core import db

_RETAILER_COLUMNS = "id, name, created_at, updated_at"


async def list_retailers(*, search: str = "") -> list[dict[str, Any]]:
    """
    All retailers ordered by name, each with its delivery-record count.

    `search` is a case-insensitive substring match on the name.
    """
    return await db.fetch_all(
        """
        SELECT r.id, r.name, r.created_at, r.updated_at,
               count(d.id) AS delivery_count
        FROM retailers r
        LEFT JOIN delivery_data d ON d.retailer_id = r.id
        WHERE $1 = '' OR r.name ILIKE '%' || $1 || '%'
        GROUP BY r.id
        ORDER BY r.name
        """,
        (search or "").strip(),
    )


async def get_retailer(retailer_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT {_RETAILER_COLUMNS} FROM retailers WHERE id = $1",
        retailer_id,
    )


async def get_retailer_by_name(name: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT {_RETAILER_COLUMNS} FROM retailers WHERE name = $1",
        name,
    )


async def get_retailers_by_ids(retailer_ids: list[int]) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"SELECT {_RETAILER_COLUMNS} FROM retailers WHERE id = ANY($1::bigint[])",
        retailer_ids,
    )


async def create_retailer(name: str) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO retailers (name)
        VALUES ($1)
        RETURNING {_RETAILER_COLUMNS}
        """,
        name,
    )
    if row is None:
        raise RuntimeError("Failed to create retailer.")
    return row


async def update_retailer(retailer_id: int, *, name: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE retailers
        SET name = $2, updated_at = now()
        WHERE id = $1
        RETURNING {_RETAILER_COLUMNS}
        """,
        retailer_id,
        name,
    )


async def delete_retailer(retailer_id: int) -> bool:
    status = await db.execute("DELETE FROM retailers WHERE id = $1", retailer_id)
    return db.affected_rows(status) > 0


async def list_delivery_for_retailer(retailer_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT d.id, d.method, d.cost, d.duration, d.free_shipping_threshold,
               d.carrier, d.additional_notes, d.status, d.data_source,
               c.id AS country_id, c.name AS country_name, c.code AS country_code
        FROM delivery_data d
        JOIN countries c ON c.id = d.country_id
        WHERE d.retailer_id = $1
        ORDER BY c.name, d.method
        """,
        retailer_id,
    )
