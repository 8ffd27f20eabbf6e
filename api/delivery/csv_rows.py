"""
CSV normalization for delivery-data uploads.

Exports from different scrapers and spreadsheets name the same column in
different ways ("Retailer", "retailerCanon", "PriceRaw", ...). Each canonical
field has an ordered list of header aliases; the first alias holding a
non-blank value wins. Headers not listed anywhere are ignored.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Iterator

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "retailer": ("retailer", "Retailer", "retailerCanon", "RetailerCanon", "retailerScopedNa", "RetailerScopedNa"),
    "country": ("countryNorm", "CountryNorm", "country", "Country"),
    "method": ("method", "Method", "service", "Service"),
    # PriceValue is preferred over PriceRaw when both are present.
    "cost": ("cost", "Cost", "priceValue", "PriceValue", "priceRaw", "PriceRaw"),
    "duration": ("duration", "Duration", "deliveryDays", "DeliveryDays"),
    "free_shipping_threshold": ("freeShippingThreshold", "Free Shipping Threshold"),
    "carrier": ("carrier", "Carrier"),
    "additional_notes": ("additionalNotes", "Additional Notes", "extra", "Extra"),
}

REQUIRED_FIELDS = ("retailer", "country", "method", "cost", "duration")

FREE_VARIANTS = frozenset({"FREE", "0 FREE", "O FREE"})


class CsvParseError(RuntimeError):
    pass


@dataclass(frozen=True)
class CanonicalRow:
    retailer: str
    country: str
    method: str
    cost: str
    duration: str
    free_shipping_threshold: str | None = None
    carrier: str | None = None
    additional_notes: str | None = None

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name).strip()]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()


def resolve_field(record: dict[str, str | None], aliases: tuple[str, ...]) -> str | None:
    """
    Return the first non-blank value among `aliases`, stripped.
    """
    for alias in aliases:
        value = record.get(alias)
        if value is not None and value.strip():
            return value.strip()
    return None


def normalize_cost(raw: str) -> str:
    """
    Collapse the "free" spellings scrapers emit ("FREE", "0 FREE", "O FREE")
    to "Free". Any other value is returned trimmed but otherwise verbatim,
    currency symbols and units included.
    """
    cost = raw.strip()
    if cost.upper() in FREE_VARIANTS:
        return "Free"
    return cost


def normalize_record(record: dict[str, str | None]) -> CanonicalRow:
    values = {field: resolve_field(record, aliases) for field, aliases in FIELD_ALIASES.items()}
    return CanonicalRow(
        retailer=values["retailer"] or "",
        country=values["country"] or "",
        method=values["method"] or "",
        cost=normalize_cost(values["cost"] or ""),
        duration=values["duration"] or "",
        free_shipping_threshold=values["free_shipping_threshold"],
        carrier=values["carrier"],
        additional_notes=values["additional_notes"],
    )


def iter_rows(data: bytes) -> Iterator[CanonicalRow]:
    """
    Lazily parse UTF-8 CSV bytes with a header row into canonical rows.

    The generator is single-use. A decoding or quoting error raises
    `CsvParseError` at the point it is reached; callers that need
    all-or-nothing parsing should drain it with `parse_rows`.
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CsvParseError(f"CSV is not valid UTF-8: {exc}") from exc

    reader = csv.DictReader(io.StringIO(text, newline=""), strict=True)
    try:
        for record in reader:
            # Extra cells beyond the header land under the None key.
            record.pop(None, None)
            yield normalize_record(record)
    except csv.Error as exc:
        raise CsvParseError(f"Malformed CSV at line {reader.line_num}: {exc}") from exc


def parse_rows(data: bytes) -> list[CanonicalRow]:
    """
    Parse the whole upload before anything is written, so a malformed line
    aborts the import without partial results.
    """
    return list(iter_rows(data))
