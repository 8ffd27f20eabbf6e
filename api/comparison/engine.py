"""
Retailer delivery comparison for one country.

Each requested retailer gets its delivery methods in that country and a
cheapest option; retailers are then ranked by that cheapest cost. Costs are
free-form text, so ranking goes through `parse_cost_magnitude`, which
treats "Free" and unparsable costs alike as 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from catalog.store import CatalogStore, Row
from delivery.costs import parse_cost_magnitude


@dataclass(frozen=True)
class DeliveryMethod:
    method: str
    cost: str
    duration: str
    free_shipping_threshold: str | None = None
    carrier: str | None = None
    additional_notes: str | None = None

    @classmethod
    def from_row(cls, row: Row) -> DeliveryMethod:
        return cls(
            method=row["method"],
            cost=row["cost"],
            duration=row["duration"],
            free_shipping_threshold=row.get("free_shipping_threshold") or None,
            carrier=row.get("carrier") or None,
            additional_notes=row.get("additional_notes") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"method": self.method, "cost": self.cost, "duration": self.duration}
        if self.free_shipping_threshold:
            out["freeShippingThreshold"] = self.free_shipping_threshold
        if self.carrier:
            out["carrier"] = self.carrier
        if self.additional_notes:
            out["additionalNotes"] = self.additional_notes
        return out


@dataclass(frozen=True)
class CheapestOption:
    method: str
    cost: str
    duration: str

    @property
    def magnitude(self) -> float:
        return parse_cost_magnitude(self.cost)

    def to_dict(self) -> dict[str, str]:
        return {"method": self.method, "cost": self.cost, "duration": self.duration}


@dataclass
class ComparisonResult:
    retailer: dict[str, Any]
    country: dict[str, Any]
    methods: list[DeliveryMethod] = field(default_factory=list)
    cheapest_option: CheapestOption | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "retailer": dict(self.retailer),
            "country": dict(self.country),
            "methods": [m.to_dict() for m in self.methods],
        }
        if self.cheapest_option is not None:
            out["cheapestOption"] = self.cheapest_option.to_dict()
        return out


def cheapest_of(methods: list[DeliveryMethod]) -> CheapestOption | None:
    """
    Lowest-magnitude method; the earliest one wins a tie.
    """
    if not methods:
        return None
    best = min(methods, key=lambda m: parse_cost_magnitude(m.cost))
    return CheapestOption(method=best.method, cost=best.cost, duration=best.duration)


def rank_results(results: Iterable[ComparisonResult]) -> list[ComparisonResult]:
    """
    Order results by cheapest cost, ascending.

    Equal costs keep their incoming order. Results without any delivery
    method have nothing to rank by and follow the ranked ones, in the order
    they came in.
    """
    ranked: list[ComparisonResult] = []
    unranked: list[ComparisonResult] = []
    for result in results:
        (ranked if result.cheapest_option is not None else unranked).append(result)
    ranked.sort(key=lambda r: r.cheapest_option.magnitude)
    return ranked + unranked


def _dedupe(ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(int(i) for i in ids))


async def compare(
    store: CatalogStore,
    retailer_ids: Iterable[int],
    country_id: int,
    *,
    country: Row | None = None,
    retailers: Iterable[Row] | None = None,
) -> list[ComparisonResult]:
    """
    Compare delivery options of `retailer_ids` in `country_id`.

    The caller has already checked that every id exists and that there are
    between 1 and 10 retailers. A caller holding the country row and the
    retailer rows passes them in and they are not fetched again; only the
    delivery records are read. Retailers with no records in the country are
    still returned, without a cheapest option.
    """
    wanted = _dedupe(retailer_ids)
    if country is None:
        country = await store.get_country(country_id)
        if country is None:
            raise LookupError(f"Country {country_id} not found.")
    country_summary = {"id": country["id"], "name": country["name"], "code": country["code"]}

    if retailers is None:
        retailers = await store.find_retailers_by_ids(wanted)
    by_id = {int(r["id"]): r for r in retailers}
    records = await store.find_delivery_records(wanted, country_id)

    # Grouping follows record encounter order; it is the tie-break for equal costs.
    groups: dict[int, ComparisonResult] = {}
    for record in records:
        retailer_id = int(record["retailer_id"])
        result = groups.get(retailer_id)
        if result is None:
            retailer = by_id.get(retailer_id, {"id": retailer_id, "name": record.get("retailer_name", "")})
            result = groups[retailer_id] = ComparisonResult(
                retailer={"id": retailer["id"], "name": retailer["name"]},
                country=country_summary,
            )
        result.methods.append(DeliveryMethod.from_row(record))

    for retailer_id in wanted:
        if retailer_id not in groups and retailer_id in by_id:
            retailer = by_id[retailer_id]
            groups[retailer_id] = ComparisonResult(
                retailer={"id": retailer["id"], "name": retailer["name"]},
                country=country_summary,
            )

    for result in groups.values():
        result.cheapest_option = cheapest_of(result.methods)

    return rank_results(groups.values())
