import pytest

from datagrid.errors import ColumnNotFound
from datagrid.services.data_sources import ArrayDataSource, QueryDataSource
from datagrid.services.data_table import DataTable
from tests.models import Article


def test_array_source_filters_case_insensitively(people):
    source = ArrayDataSource(people)
    source.add_filter("name", "ALI")

    assert source.count() == 2
    assert [row["id"] for row in source.get_items(0, 10)] == [2, 4]


def test_array_source_filters_combine(people):
    source = ArrayDataSource(people)
    source.add_filter("city", "oslo")
    source.add_filter("name", "b")

    assert [row["name"] for row in source.get_items(0, 10)] == ["Bob"]


def test_array_source_compound_sort(people):
    source = ArrayDataSource(people)
    source.add_sort("city", "desc")
    source.add_sort("name", "asc")

    assert [row["id"] for row in source.get_items(0, 10)] == [4, 3, 1, 2]


def test_array_source_sorts_none_first():
    source = ArrayDataSource([{"v": 2}, {"v": None}, {"v": 1}])
    source.add_sort("v", "asc")

    assert [row["v"] for row in source.get_items(0, None)] == [None, 1, 2]


def test_array_source_pagination(people):
    source = ArrayDataSource(people)

    assert [row["id"] for row in source.get_items(1, 2)] == [2, 3]
    assert source.get_items(10, 5) == []
    assert len(source) == 4


def test_query_source_filters_sorts_and_pages(db_session, articles):
    source = QueryDataSource(db_session.query(Article))
    source.add_filter("author", "a")
    source.add_sort("created_at", "desc")

    assert source.count() == 3
    rows = source.get_items(0, 2)
    assert [row["title"] for row in rows] == ["Sorting", "Queries"]
    assert set(rows[0]) == {"id", "title", "author", "created_at"}


def test_query_source_wildcard_terms(db_session, articles):
    source = QueryDataSource(db_session.query(Article))
    source.add_filter("title", "*ort*")

    assert [row["id"] for row in source.get_items(0, None)] == [3]


def test_query_source_field_mapping(db_session, articles):
    source = QueryDataSource(
        db_session.query(Article.id, Article.title),
        fields={"headline": Article.title},
    )
    source.add_sort("headline", "asc")

    assert [row["title"] for row in source.get_items(0, None)] == [
        "<b>Intro</b>",
        "Queries",
        "Sorting",
    ]


def test_query_source_unknown_field_raises(db_session):
    source = QueryDataSource(db_session.query(Article))
    with pytest.raises(ColumnNotFound):
        source.add_sort("missing", "asc")


def test_query_backed_table_end_to_end(db_session, articles):
    data_table = DataTable(QueryDataSource(db_session.query(Article)))
    data_table.columns.add("id")
    data_table.columns.add("title")
    data_table.columns.add("created_at")

    response = data_table.get_response(
        {"sEcho": "2", "iDisplayStart": "0", "iDisplayLength": "10", "iSortCol_0": "0", "sSortDir_0": "asc"}
    )

    assert response.iTotalRecords == 3
    assert response.aaData[0] == {
        "id": "1",
        "title": "&lt;b&gt;Intro&lt;/b&gt;",
        "created_at": "2024-01-05T09:30:00",
    }
