"""
Cost-string ordering helpers.

Delivery costs are stored exactly as the retailer publishes them
("$12.99", "8.99 $", "Free", "from 4,99 EUR"), so ordering needs a numeric
magnitude pulled out of free-form text.
"""

from __future__ import annotations

import re

_NON_NUMERIC = re.compile(r"[^0-9.]")
# Leading float prefix, same tolerance as JavaScript's parseFloat: "1.2.3" -> 1.2.
_FLOAT_PREFIX = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_cost_magnitude(raw: str | None) -> float:
    """
    Return the numeric magnitude of a cost string, for sorting only.

    Every character that is not a digit or "." is dropped and the remainder
    is parsed as a float. Anything that leaves no number behind ("Free", "",
    "N/A") yields 0.0.

    This is lossy: a genuine zero-cost row, a "Free" row and an unparsable
    row all compare as 0.0 and therefore sort as the cheapest. Thousands
    separators are dropped too ("1,299" -> 1299.0) while a decimal comma is
    misread ("4,99" -> 499.0). Callers must not treat the value as a price.
    """
    stripped = _NON_NUMERIC.sub("", raw or "")
    match = _FLOAT_PREFIX.match(stripped)
    if match is None:
        return 0.0
    return float(match.group(0))
