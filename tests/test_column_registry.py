from datetime import date, datetime

import pytest

from datagrid.errors import ColumnNotFound
from datagrid.services.column_registry import ColumnRegistry


def test_add_fills_defaults():
    registry = ColumnRegistry()
    registry.add("title")
    registry.add("author", label="Written by", field="author_name")

    title = registry.get("title")
    assert title.label == "title"
    assert title.field == "title"
    assert title.position == 1
    assert title.visible is True

    author = registry.get("author")
    assert author.label == "Written by"
    assert author.field == "author_name"
    assert author.position == 2


def test_get_unknown_column_raises():
    registry = ColumnRegistry()
    with pytest.raises(ColumnNotFound):
        registry.get("missing")
    with pytest.raises(ColumnNotFound):
        registry.set_label("missing", "Missing")


def test_all_visible_sorts_by_position_then_name():
    registry = ColumnRegistry()
    registry.add("c", position=2)
    registry.add("b", position=1)
    registry.add("a", position=2)

    assert [column.name for column in registry.all()] == ["b", "a", "c"]
    assert [column.name for column in registry] == ["b", "a", "c"]


def test_hidden_columns_come_first_and_positions_are_ignored():
    registry = ColumnRegistry()
    registry.add("a", position=3)
    registry.add("b", position=1, visible=False)
    registry.add("c", position=2)
    registry.add("d", position=0, visible=False)

    assert [column.name for column in registry.all()] == ["b", "d", "a", "c"]
    assert [column.name for column in registry.visible()] == ["a", "c"]


def test_get_by_offset_uses_resolved_order():
    registry = ColumnRegistry()
    registry.add("A", position=2)
    registry.add("B", position=1)

    assert registry.get_by_offset(0).name == "B"
    assert registry.get_by_offset(1).name == "A"
    with pytest.raises(ColumnNotFound):
        registry.get_by_offset(2)
    with pytest.raises(ColumnNotFound):
        registry.get_by_offset(-1)


def test_re_adding_merges_attributes():
    registry = ColumnRegistry()
    registry.add("title", label="Title", field="t.title", position=7, visible=False)
    registry.add("title", label="Headline")

    column = registry.get("title")
    assert column.label == "Headline"
    assert column.field == "t.title"
    assert column.position == 7
    assert column.visible is False
    assert len(registry) == 1


def test_default_extractor_formats_dates():
    registry = ColumnRegistry()
    registry.add("created")
    registry.add("day")

    row = {"created": datetime(2024, 1, 5, 9, 30), "day": date(2024, 1, 5)}
    assert registry.get("created").extract(row) == "2024-01-05T09:30:00"
    assert registry.get("day").extract(row) == "2024-01-05"


def test_default_extractor_missing_key_yields_none():
    registry = ColumnRegistry()
    registry.add("title")
    assert registry.get("title").extract({}) is None


def test_constant_extractor_short_circuits():
    registry = ColumnRegistry()
    registry.add("action", extractor="edit")
    registry.add("version", extractor=3)

    assert registry.get("action").extract({"action": "ignored"}) == "edit"
    assert registry.get("version").extract({}) == 3


def test_callable_extractor_and_setters():
    registry = ColumnRegistry()
    registry.add("name", extractor=lambda row: row["first"] + " " + row["last"])
    assert registry.get("name").extract({"first": "Ada", "last": "Lovelace"}) == "Ada Lovelace"

    registry.set_label("name", "Full name").set_field("name", "last").set_position("name", 4)
    registry.set_visible("name", False).set_extractor("name", lambda row: "x")
    assert registry.get_label("name") == "Full name"
    assert registry.get_field("name") == "last"
    assert registry.get_position("name") == 4
    assert registry.get_visible("name") is False
    assert registry.get_extractor("name")({}) == "x"


def test_extractor_reads_attributes_of_objects():
    class Row:
        title = "From attribute"

    registry = ColumnRegistry()
    registry.add("title")
    assert registry.get("title").extract(Row()) == "From attribute"


def test_keys_has_and_clear():
    registry = ColumnRegistry([{"name": "a"}, {"name": "b", "visible": False}])

    assert registry.keys() == {"a", "b"}
    assert registry.has("a") is True
    assert "b" in registry

    registry.clear()
    assert registry.keys() == set()
    assert registry.all() == []


def test_set_extractor_accepts_literals():
    registry = ColumnRegistry()
    registry.add("action", extractor=lambda row: row["id"])
    registry.set_extractor("action", "edit")
    registry.add("version")
    registry.set_extractor("version", 2)

    assert registry.get("action").extract({"id": 9}) == "edit"
    assert registry.get("version").extract({}) == 2
