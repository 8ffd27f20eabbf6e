"""
User persistence.
"""

from __future__ import annotations

from typing import Any

from core import db

_USER_COLUMNS = "id, email, name, plan, is_active, created_at, updated_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(*, email: str, password_hash: str, name: str | None = None) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (email, password_hash, name)
        VALUES ($1, $2, $3)
        RETURNING {_USER_COLUMNS}
        """,
        normalize_email(email),
        password_hash,
        (name or "").strip() or None,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}, password_hash
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT {_USER_COLUMNS} FROM users WHERE id = $1",
        user_id,
    )
