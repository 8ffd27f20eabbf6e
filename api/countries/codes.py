"""
Two-letter code allocation for countries first seen in a CSV upload.

Uploads only carry country names, but `countries.code` is unique and
required. Known names get their ISO 3166-1 alpha-2 code; anything else gets
initials, then a deterministic walk through alternative letter pairs when
the initials are already taken by another country.
"""

from __future__ import annotations

import logging
import re
import string
import time
from typing import Callable

from catalog.store import CatalogStore

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 50

ISO_CODES: dict[str, str] = {
    "United States": "US",
    "United Kingdom": "GB",
    "Canada": "CA",
    "Australia": "AU",
    "Germany": "DE",
    "France": "FR",
    "Italy": "IT",
    "Spain": "ES",
    "Netherlands": "NL",
    "Belgium": "BE",
    "Austria": "AT",
    "Switzerland": "CH",
    "Sweden": "SE",
    "Norway": "NO",
    "Denmark": "DK",
    "Finland": "FI",
    "Poland": "PL",
    "Portugal": "PT",
    "Ireland": "IE",
    "Greece": "GR",
    "Czech Republic": "CZ",
    "Hungary": "HU",
    "Romania": "RO",
    "Japan": "JP",
    "China": "CN",
    "India": "IN",
    "Brazil": "BR",
    "Mexico": "MX",
    "South Korea": "KR",
    "Israel": "IL",
    "New Zealand": "NZ",
    "South Africa": "ZA",
}

_LETTERS = string.ascii_uppercase
_NOT_LETTER_OR_SPACE = re.compile(r"[^a-zA-Z\s]")
_NOT_UPPER = re.compile(r"[^A-Z]")


def base_code(name: str) -> str:
    """
    Initials of each word, letters only, cut or padded with "X" to two chars.

    Single-word names fall back to their first two letters
    ("Ukraine" -> "UK", "Chad" -> "CH").
    """
    trimmed = name.strip()
    words = _NOT_LETTER_OR_SPACE.sub("", trimmed).split()
    code = "".join(word[0].upper() for word in words)[:2]

    if len(code) < 2:
        code = _NOT_UPPER.sub("", trimmed[:2].upper())

    return (code + "XX")[:2]


def _char_sum(name: str, seed: int) -> int:
    return abs(sum(ord(ch) for ch in name) + seed)


def _hash_code(value: int) -> str:
    return _LETTERS[value % 26] + _LETTERS[(value * 7) % 26]


def candidate_code(base: str, name: str, attempt: int) -> str:
    """
    The code to probe after `attempt` collisions.

    1-25 keep the first letter and walk the second through A-Y, 26-51 keep
    the second letter and walk the first through A-Z, later attempts hash the
    name's character codes seeded with the attempt number.
    """
    if attempt <= 0:
        return base
    if attempt < 26:
        return base[0] + _LETTERS[attempt - 1]
    if attempt < 52:
        return _LETTERS[attempt - 26] + base[1]
    return _hash_code(_char_sum(name, attempt))


def _available(existing: dict | None, name: str) -> bool:
    return existing is None or existing.get("name") == name


async def allocate_code(
    store: CatalogStore,
    country_name: str,
    *,
    clock_ms: Callable[[], int] | None = None,
) -> str:
    """
    Pick a code for a country that has no row yet.

    Returns within MAX_ATTEMPTS probes. If every probe is taken the code is
    hashed from the name and the current time without a further probe, so a
    collision is possible there; the unique constraint on `countries.code`
    reports it when the row is created.
    """
    name = country_name.strip()

    iso = ISO_CODES.get(name)
    if iso is not None and _available(await store.find_country_by_code(iso), name):
        return iso

    base = base_code(name)
    code = base
    attempts = 0
    while attempts < MAX_ATTEMPTS:
        existing = await store.find_country_by_code(code)
        if _available(existing, name):
            if attempts:
                logger.info("country_code_collision name=%r base=%s assigned=%s attempts=%s", name, base, code, attempts)
            return code
        attempts += 1
        code = candidate_code(base, name, attempts)

    now_ms = clock_ms() if clock_ms is not None else time.time_ns() // 1_000_000
    code = _hash_code(_char_sum(name, now_ms))
    logger.warning("country_code_fallback name=%r base=%s assigned=%s", name, base, code)
    return code
