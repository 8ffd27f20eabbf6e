"""Tests for country code allocation."""

import asyncio

from countries import codes


def test_base_code_uses_initials() -> None:
    assert codes.base_code("United Arab Emirates") == "UA"
    assert codes.base_code("  Sri Lanka ") == "SL"
    assert codes.base_code("Côte d'Ivoire") == "CD"


def test_base_code_single_word_uses_first_letters() -> None:
    assert codes.base_code("Ukraine") == "UK"
    assert codes.base_code("Chad") == "CH"


def test_base_code_pads_short_names() -> None:
    assert codes.base_code("Q") == "QX"
    assert codes.base_code("42") == "XX"


def test_candidate_sequence() -> None:
    assert codes.candidate_code("UK", "Ukraine", 0) == "UK"
    assert codes.candidate_code("UK", "Ukraine", 1) == "UA"
    assert codes.candidate_code("UK", "Ukraine", 25) == "UY"
    assert codes.candidate_code("UK", "Ukraine", 26) == "AK"
    assert codes.candidate_code("UK", "Ukraine", 51) == "ZK"


def test_candidate_hash_after_letter_walks() -> None:
    total = sum(ord(ch) for ch in "Ukraine") + 52
    expected = chr(65 + total % 26) + chr(65 + (total * 7) % 26)
    assert codes.candidate_code("UK", "Ukraine", 52) == expected


def test_iso_code_for_known_country(store) -> None:
    assert asyncio.run(codes.allocate_code(store, "United States")) == "US"


def test_iso_code_reused_by_same_name(store) -> None:
    store.add_country("Germany", "DE")
    assert asyncio.run(codes.allocate_code(store, " Germany ")) == "DE"


def test_iso_code_taken_falls_back_to_initials(store) -> None:
    store.add_country("Denmark-ish", "GB")
    assert asyncio.run(codes.allocate_code(store, "United Kingdom")) == "UK"


def test_collision_walks_second_letter(store) -> None:
    store.add_country("United States", "US")
    store.add_country("Uruguay Sur", "UK")

    code = asyncio.run(codes.allocate_code(store, "Ukraine"))

    assert code == "UA"
    assert code != "US"
    assert store.code_probes == ["UK", "UA"]


def test_collision_is_deterministic(store) -> None:
    store.add_country("Uruguay Sur", "UK")
    store.add_country("Uganda Alt", "UA")
    store.add_country("Utopia Bay", "UB")

    first = asyncio.run(codes.allocate_code(store, "Ukraine"))
    second = asyncio.run(codes.allocate_code(store, "Ukraine"))

    assert first == second == "UC"


def test_collision_walks_first_letter_after_second(store) -> None:
    store.add_country("Taken Base", "UK")
    for i, letter in enumerate("ABCDEFGHIJKLMNOPQRSTUVWXY"):
        store.add_country(f"Taken {i}", "U" + letter)

    assert asyncio.run(codes.allocate_code(store, "Ukraine")) == "AK"


def test_exhausted_probes_fall_back_to_clock_hash(store) -> None:
    letters = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    for first in letters:
        for second in letters:
            store.add_country(f"Country {first}{second}", first + second)

    code = asyncio.run(codes.allocate_code(store, "Ukraine", clock_ms=lambda: 1000))

    total = sum(ord(ch) for ch in "Ukraine") + 1000
    assert code == chr(65 + total % 26) + chr(65 + (total * 7) % 26)
    assert len(store.code_probes) == codes.MAX_ATTEMPTS
