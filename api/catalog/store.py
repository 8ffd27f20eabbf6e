"""
Storage collaborator for the catalog engines.

The CSV upsert, country-code allocation and comparison code never touch the
connection pool directly. They take a `CatalogStore`, so an in-memory fake
can stand in for Postgres in tests. `PostgresCatalogStore` delegates to the
feature repositories and turns unique-constraint violations into
`DuplicateRecordError`, which callers resolve by looking the row up again.
"""

from __future__ import annotations

from typing import Any, Protocol

import asyncpg

from comparison import repository as comparison_repository
from countries import repository as country_repository
from delivery import repository as delivery_repository
from retailers import repository as retailer_repository

Row = dict[str, Any]


class DuplicateRecordError(RuntimeError):
    """
    A create hit a unique constraint, usually because a concurrent request
    inserted the same retailer, country or natural key first.
    """


class CatalogStore(Protocol):
    async def find_retailer_by_name(self, name: str) -> Row | None: ...

    async def create_retailer(self, name: str) -> Row: ...

    async def find_retailers_by_ids(self, retailer_ids: list[int]) -> list[Row]: ...

    async def find_country_by_name(self, name: str) -> Row | None: ...

    async def find_country_by_code(self, code: str) -> Row | None: ...

    async def get_country(self, country_id: int) -> Row | None: ...

    async def create_country(self, name: str, code: str) -> Row: ...

    async def find_delivery_record(self, retailer_id: int, country_id: int, method: str) -> Row | None: ...

    async def create_delivery_record(self, fields: Row) -> Row: ...

    async def update_delivery_record(self, record_id: int, fields: Row) -> Row | None: ...

    async def find_delivery_records(self, retailer_ids: list[int], country_id: int) -> list[Row]: ...

    async def save_comparison(
        self,
        *,
        user_id: int,
        retailer_ids: list[int],
        country_id: int,
        results: list[Row],
    ) -> Row: ...

    async def list_comparisons(self, user_id: int) -> list[Row]: ...

    async def get_comparison(self, comparison_id: int, user_id: int) -> Row | None: ...


class PostgresCatalogStore:
    """
    `CatalogStore` over the shared asyncpg pool.
    """

    async def find_retailer_by_name(self, name: str) -> Row | None:
        return await retailer_repository.get_retailer_by_name(name)

    async def create_retailer(self, name: str) -> Row:
        try:
            return await retailer_repository.create_retailer(name)
        except asyncpg.UniqueViolationError as exc:
            raise DuplicateRecordError(f"Retailer '{name}' already exists.") from exc

    async def find_retailers_by_ids(self, retailer_ids: list[int]) -> list[Row]:
        return await retailer_repository.get_retailers_by_ids(retailer_ids)

    async def find_country_by_name(self, name: str) -> Row | None:
        return await country_repository.get_country_by_name(name)

    async def find_country_by_code(self, code: str) -> Row | None:
        return await country_repository.get_country_by_code(code)

    async def get_country(self, country_id: int) -> Row | None:
        return await country_repository.get_country(country_id)

    async def create_country(self, name: str, code: str) -> Row:
        try:
            return await country_repository.create_country(name=name, code=code)
        except asyncpg.UniqueViolationError as exc:
            raise DuplicateRecordError(f"Country '{name}' or code '{code}' already exists.") from exc

    async def find_delivery_record(self, retailer_id: int, country_id: int, method: str) -> Row | None:
        return await delivery_repository.get_by_natural_key(
            retailer_id=retailer_id,
            country_id=country_id,
            method=method,
        )

    async def create_delivery_record(self, fields: Row) -> Row:
        try:
            return await delivery_repository.create_delivery_record(fields)
        except asyncpg.UniqueViolationError as exc:
            raise DuplicateRecordError("Delivery record already exists for this retailer, country and method.") from exc

    async def update_delivery_record(self, record_id: int, fields: Row) -> Row | None:
        return await delivery_repository.update_delivery_record(record_id, fields)

    async def find_delivery_records(self, retailer_ids: list[int], country_id: int) -> list[Row]:
        return await delivery_repository.list_for_comparison(
            retailer_ids=retailer_ids,
            country_id=country_id,
        )

    async def save_comparison(
        self,
        *,
        user_id: int,
        retailer_ids: list[int],
        country_id: int,
        results: list[Row],
    ) -> Row:
        return await comparison_repository.insert_comparison(
            user_id=user_id,
            retailer_ids=retailer_ids,
            country_id=country_id,
            results=results,
        )

    async def list_comparisons(self, user_id: int) -> list[Row]:
        return await comparison_repository.list_comparisons(user_id=user_id)

    async def get_comparison(self, comparison_id: int, user_id: int) -> Row | None:
        return await comparison_repository.get_comparison(comparison_id, user_id=user_id)


_store = PostgresCatalogStore()


def get_store() -> CatalogStore:
    """
    FastAPI dependency; tests override it with an in-memory store.
    """
    return _store
