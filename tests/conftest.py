"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

API_DIR = Path(__file__).resolve().parents[1] / "api"
if str(API_DIR) not in sys.path:
    sys.path.insert(0, str(API_DIR))

from fakes import InMemoryCatalogStore  # noqa: E402


@pytest.fixture
def store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def sample_csv() -> bytes:
    return (
        "Retailer,Country,Method,PriceRaw,Duration,Carrier\n"
        "Amazon,United States,Standard,$5.99,5-7 business days,USPS\n"
        "Amazon,United States,Express,$12.99,1-2 business days,UPS\n"
        "eBay,United States,Standard,FREE,7-10 business days,\n"
        "Zalando,Germany,Standard,O FREE,2-4 Werktage,DHL\n"
    ).encode("utf-8")
