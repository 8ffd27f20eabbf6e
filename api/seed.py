"""
Seed sample retailers and countries, then delivery data.

    DATABASE_URL=... python -m seed

Delivery data comes from `seed-data.csv` when present. Without it, every
seeded retailer gets a Standard and an Express sample record in every seeded
country. Safe to re-run: existing names and sample records are kept and CSV
rows are upserted.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from catalog.store import CatalogStore, PostgresCatalogStore
from core import db, log
from delivery import bulk, csv_rows

logger = logging.getLogger("seed")

SEED_CSV = Path(__file__).with_name("seed-data.csv")

RETAILERS = ["Amazon", "eBay", "Walmart", "Target", "Best Buy"]

COUNTRIES = [
    ("United States", "US"),
    ("United Kingdom", "GB"),
    ("Canada", "CA"),
    ("Australia", "AU"),
    ("Germany", "DE"),
]

SAMPLE_METHODS = [
    {
        "method": "Standard",
        "cost": "$5.99",
        "duration": "5-7 business days",
        "free_shipping_threshold": "$25.00",
        "carrier": "Standard Carrier",
    },
    {
        "method": "Express",
        "cost": "$12.99",
        "duration": "2-3 business days",
        "free_shipping_threshold": "$50.00",
        "carrier": "Express Carrier",
    },
]
DATA_SOURCE_SEED = "seed"


async def seed_sample_records(store: CatalogStore, retailers: list[dict], countries: list[dict]) -> int:
    """
    Add the sample methods for every retailer/country pair. Records that
    already exist under the same natural key are left untouched.
    """
    created = 0
    for retailer in retailers:
        for country in countries:
            for sample in SAMPLE_METHODS:
                existing = await store.find_delivery_record(retailer["id"], country["id"], sample["method"])
                if existing is not None:
                    continue
                await store.create_delivery_record(
                    {
                        "retailer_id": retailer["id"],
                        "country_id": country["id"],
                        "status": bulk.STATUS_VERIFIED,
                        "data_source": DATA_SOURCE_SEED,
                        "additional_notes": None,
                        **sample,
                    }
                )
                created += 1
    return created


async def seed(store: CatalogStore, csv_path: Path = SEED_CSV) -> None:
    retailers = [await bulk.find_or_create_retailer(store, name) for name in RETAILERS]
    logger.info("seed_retailers count=%s", len(retailers))

    countries = []
    for name, code in COUNTRIES:
        country = await store.find_country_by_name(name)
        if country is None:
            country = await store.create_country(name, code)
        countries.append(country)
    logger.info("seed_countries count=%s", len(countries))

    if not csv_path.exists():
        created = await seed_sample_records(store, retailers, countries)
        logger.info("seed_samples_loaded path=%s created=%s", csv_path, created)
        return

    rows = csv_rows.parse_rows(csv_path.read_bytes())
    result = await bulk.bulk_upsert(store, rows)
    logger.info(
        "seed_csv_loaded path=%s created=%s updated=%s skipped=%s",
        csv_path,
        result.created,
        result.updated,
        result.skipped,
    )


async def main() -> None:
    log.configure_logging()
    await db.init_pool()
    try:
        await seed(PostgresCatalogStore())
    finally:
        await db.close_pool()


if __name__ == "__main__":
    asyncio.run(main())
