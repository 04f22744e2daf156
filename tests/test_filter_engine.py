"""Filter engine tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from tagdeck.filtering import UNCATEGORIZED, FilterCriteria, FilterEngine, normalize_image_entries
from tagdeck.filtering.engine import base_name, parse_size_kb
from tagdeck.ingestion import ImageEntry
from tagdeck.labels import Assignment

KB = 1024


def _view(**assignments: list[str]) -> dict[str, list[Assignment]]:
    return {
        f"/img/{name}.jpg": [Assignment(category_id=cid, assigned_at="") for cid in ids]
        for name, ids in assignments.items()
    }


@pytest.fixture()
def engine() -> FilterEngine:
    return FilterEngine()


def test_category_filter_preserves_order(engine: FilterEngine) -> None:
    paths = ["/img/c.jpg", "/img/a.jpg", "/img/b.jpg"]
    view = _view(a=["x"], c=["x", "y"])

    result = engine.get_filtered_images(paths, FilterCriteria(category_id="x"), view)

    assert result == ["/img/c.jpg", "/img/a.jpg"]


def test_uncategorized_filter(engine: FilterEngine) -> None:
    paths = ["/img/a.jpg", "/img/b.jpg"]
    view = {"/img/a.jpg": [Assignment(category_id="x", assigned_at="")], "/img/b.jpg": []}

    result = engine.get_filtered_images(paths, FilterCriteria(category_id=UNCATEGORIZED), view)

    assert result == ["/img/b.jpg"]


def test_no_criteria_returns_everything(engine: FilterEngine) -> None:
    paths = ["/img/a.jpg", "C:\\photos\\b.png"]

    assert engine.get_filtered_images(paths, FilterCriteria(), {}) == paths


@pytest.mark.parametrize(
    ("operator", "pattern", "expected"),
    [
        ("contains", "cat", ["/img/Cat1.png", "/img/dog_cat.jpg"]),
        ("startsWith", "cat", ["/img/Cat1.png"]),
        ("endsWith", ".JPG", ["/img/dog_cat.jpg"]),
        ("exact", "cat1.png", ["/img/Cat1.png"]),
        ("regex", "zzz", ["/img/Cat1.png", "/img/dog_cat.jpg", "/img/bird.gif"]),
    ],
)
def test_name_operators_are_case_insensitive_by_default(
    engine: FilterEngine, operator: str, pattern: str, expected: list[str]
) -> None:
    paths = ["/img/Cat1.png", "/img/dog_cat.jpg", "/img/bird.gif"]
    criteria = FilterCriteria(name_pattern=pattern, name_operator=operator)

    assert engine.get_filtered_images(paths, criteria, {}) == expected


def test_name_filter_case_sensitive(engine: FilterEngine) -> None:
    paths = ["/img/Cat1.png", "/img/cat2.png"]
    criteria = FilterCriteria(name_pattern="cat", name_operator="startsWith", case_sensitive=True)

    assert engine.get_filtered_images(paths, criteria, {}) == ["/img/cat2.png"]


def test_name_filter_uses_base_name_only(engine: FilterEngine) -> None:
    paths = ["/cats/dog.jpg", "C:\\cats\\bird.jpg"]
    criteria = FilterCriteria(name_pattern="cats")

    assert engine.get_filtered_images(paths, criteria, {}) == []
    assert base_name("C:\\cats\\bird.jpg") == "bird.jpg"


def test_size_filter_larger_than_and_less_than(engine: FilterEngine) -> None:
    entries = [
        ImageEntry(path="/img/small.jpg", size_bytes=50 * KB),
        ImageEntry(path="/img/exact.jpg", size_bytes=100 * KB),
        ImageEntry(path="/img/big.jpg", size_bytes=200 * KB),
    ]

    larger = engine.get_filtered_images(entries, FilterCriteria(size_value="100"), {})
    smaller = engine.get_filtered_images(
        entries, FilterCriteria(size_operator="lessThan", size_value="100"), {}
    )

    assert larger == ["/img/big.jpg"]
    assert smaller == ["/img/small.jpg"]


def test_size_filter_between_is_inclusive_in_either_order(engine: FilterEngine) -> None:
    entries = [
        ImageEntry(path="/img/a.jpg", size_bytes=50 * KB),
        ImageEntry(path="/img/b.jpg", size_bytes=100 * KB),
        ImageEntry(path="/img/c.jpg", size_bytes=200 * KB),
        ImageEntry(path="/img/d.jpg", size_bytes=201 * KB),
    ]
    criteria = FilterCriteria(size_operator="between", size_value="200", size_value2="100")

    assert engine.get_filtered_images(entries, criteria, {}) == ["/img/b.jpg", "/img/c.jpg"]


@pytest.mark.parametrize(
    "criteria",
    [
        FilterCriteria(size_value="abc"),
        FilterCriteria(size_value="-5"),
        FilterCriteria(size_operator="between", size_value="10", size_value2="x"),
    ],
)
def test_invalid_size_values_pass_everything(engine: FilterEngine, criteria: FilterCriteria) -> None:
    entries = [ImageEntry(path="/img/a.jpg", size_bytes=1), ImageEntry(path="/img/b.jpg")]

    assert engine.get_filtered_images(entries, criteria, {}) == ["/img/a.jpg", "/img/b.jpg"]


def test_unknown_size_operator_behaves_like_larger_than(engine: FilterEngine) -> None:
    entries = [
        ImageEntry(path="/img/a.jpg", size_bytes=1 * KB),
        ImageEntry(path="/img/b.jpg", size_bytes=3 * KB),
    ]
    criteria = FilterCriteria(size_operator="roughly", size_value="2")

    assert engine.get_filtered_images(entries, criteria, {}) == ["/img/b.jpg"]


def test_size_lookup_used_when_entry_has_no_size(engine: FilterEngine) -> None:
    sizes = {"/img/a.jpg": 10 * KB, "/img/b.jpg": None}

    result = engine.get_filtered_images(
        ["/img/a.jpg", "/img/b.jpg"], FilterCriteria(size_value="5"), {}, size_of=sizes.get
    )

    assert result == ["/img/a.jpg"]


def test_stages_combine(engine: FilterEngine) -> None:
    entries = [
        ImageEntry(path="/img/cat_big.jpg", size_bytes=500 * KB),
        ImageEntry(path="/img/cat_small.jpg", size_bytes=5 * KB),
        ImageEntry(path="/img/dog_big.jpg", size_bytes=500 * KB),
    ]
    view = _view(cat_big=["pets"], cat_small=["pets"])
    criteria = FilterCriteria(category_id="pets", name_pattern="cat", size_value="100")

    assert engine.get_filtered_images(entries, criteria, view) == ["/img/cat_big.jpg"]


def test_parse_size_kb_reads_leading_integer() -> None:
    assert parse_size_kb("12kb") == 12 * KB
    assert parse_size_kb(" 3 ") == 3 * KB
    assert parse_size_kb("") is None
    assert parse_size_kb("kb12") is None


def test_normalize_image_entries_drops_malformed_items() -> None:
    raw = [
        "/img/a.jpg",
        "",
        "   ",
        None,
        42,
        {"path": "/img/b.jpg", "size": 10},
        {"name": "no-path"},
        SimpleNamespace(path="/img/c.jpg", size_bytes=True),
        ImageEntry(path="/img/d.jpg", size_bytes=7),
    ]

    entries = normalize_image_entries(raw)

    assert [entry.path for entry in entries] == ["/img/a.jpg", "/img/b.jpg", "/img/c.jpg", "/img/d.jpg"]
    assert entries[1].size_bytes == 10
    assert entries[2].size_bytes is None


@pytest.mark.parametrize("raw", [None, "not-a-list", {"path": "/img/a.jpg"}])
def test_non_list_inputs_yield_empty_result(engine: FilterEngine, raw: object) -> None:
    assert engine.get_filtered_images(raw, FilterCriteria(), {}) == []  # type: ignore[arg-type]
