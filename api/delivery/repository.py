"""
Delivery-record persistence.

`delivery_data` is keyed naturally by (retailer_id, country_id, method); the
unique constraint on that triple is what makes concurrent bulk uploads safe.
"""

from __future__ import annotations

from typing import Any

from core import db

# Columns a caller may write. Order matters for the INSERT placeholders.
WRITABLE_COLUMNS = (
    "retailer_id",
    "country_id",
    "method",
    "cost",
    "duration",
    "free_shipping_threshold",
    "carrier",
    "additional_notes",
    "status",
    "data_source",
)

_DELIVERY_COLUMNS = (
    "id, retailer_id, country_id, method, cost, duration, free_shipping_threshold, "
    "carrier, additional_notes, status, data_source, created_at, updated_at"
)

_DELIVERY_JOINED = """
    SELECT d.id, d.retailer_id, d.country_id, d.method, d.cost, d.duration,
           d.free_shipping_threshold, d.carrier, d.additional_notes,
           d.status, d.data_source, d.created_at, d.updated_at,
           r.name AS retailer_name,
           c.name AS country_name, c.code AS country_code
    FROM delivery_data d
    JOIN retailers r ON r.id = d.retailer_id
    JOIN countries c ON c.id = d.country_id
"""


def _writable(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(WRITABLE_COLUMNS)
    if unknown:
        raise ValueError(f"Unknown delivery_data columns: {sorted(unknown)}")
    return fields


async def list_delivery_data(
    *,
    retailer_id: int | None = None,
    country_id: int | None = None,
    method: str = "",
) -> list[dict[str, Any]]:
    return await db.fetch_all(
        _DELIVERY_JOINED
        + """
        WHERE ($1::bigint IS NULL OR d.retailer_id = $1)
          AND ($2::bigint IS NULL OR d.country_id = $2)
          AND ($3 = '' OR d.method ILIKE '%' || $3 || '%')
        ORDER BY r.name, c.name, d.cost
        """,
        retailer_id,
        country_id,
        (method or "").strip(),
    )


async def get_delivery_record(record_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(_DELIVERY_JOINED + " WHERE d.id = $1", record_id)


async def get_by_natural_key(*, retailer_id: int, country_id: int, method: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_DELIVERY_COLUMNS}
        FROM delivery_data
        WHERE retailer_id = $1
          AND country_id = $2
          AND method = $3
        """,
        retailer_id,
        country_id,
        method,
    )


async def list_for_comparison(*, retailer_ids: list[int], country_id: int) -> list[dict[str, Any]]:
    """
    Every record for the given retailers in one country.

    Rows come back ordered by the raw cost text then id, which fixes the
    encounter order the comparison ranking falls back on for equal costs.
    """
    return await db.fetch_all(
        f"""
        SELECT {_DELIVERY_COLUMNS}
        FROM delivery_data
        WHERE retailer_id = ANY($1::bigint[])
          AND country_id = $2
        ORDER BY cost, id
        """,
        retailer_ids,
        country_id,
    )


async def create_delivery_record(fields: dict[str, Any]) -> dict[str, Any]:
    fields = _writable(fields)
    columns = list(fields)
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO delivery_data ({", ".join(columns)})
        VALUES ({placeholders})
        RETURNING {_DELIVERY_COLUMNS}
        """,
        *(fields[c] for c in columns),
    )
    if row is None:
        raise RuntimeError("Failed to create delivery record.")
    return row


async def update_delivery_record(record_id: int, fields: dict[str, Any]) -> dict[str, Any] | None:
    fields = _writable(fields)
    if not fields:
        return await db.fetch_one(
            f"SELECT {_DELIVERY_COLUMNS} FROM delivery_data WHERE id = $1",
            record_id,
        )

    columns = list(fields)
    assignments = ", ".join(f"{c} = ${i}" for i, c in enumerate(columns, start=2))
    return await db.fetch_one(
        f"""
        UPDATE delivery_data
        SET {assignments}, updated_at = now()
        WHERE id = $1
        RETURNING {_DELIVERY_COLUMNS}
        """,
        record_id,
        *(fields[c] for c in columns),
    )


async def delete_delivery_record(record_id: int) -> bool:
    status = await db.execute("DELETE FROM delivery_data WHERE id = $1", record_id)
    return db.affected_rows(status) > 0
