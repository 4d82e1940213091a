"""Tests for TableFormatter."""

import pytest

from athena_query.core.models import QueryResult
from athena_query.formatters.base import Formatter
from athena_query.formatters.table import TableFormatter


def _make_result(records=None, field_names=None):
    if field_names is None:
        field_names = ["id", "name"]
    if records is None:
        records = [{"id": "1", "name": "alice"}, {"id": "2", "name": "bob"}]
    return QueryResult(field_names=field_names, records=records)


@pytest.mark.unit
def test_table_formatter_implements_protocol():
    assert isinstance(TableFormatter(), Formatter)


@pytest.mark.unit
def test_table_formatter_outputs_column_headers():
    output = "\n".join(TableFormatter().format(_make_result()))
    assert "id" in output
    assert "name" in output


@pytest.mark.unit
def test_table_formatter_outputs_row_values():
    output = "\n".join(TableFormatter().format(_make_result()))
    assert "alice" in output
    assert "bob" in output


@pytest.mark.unit
def test_table_formatter_empty_result_shows_no_results():
    lines = list(TableFormatter().format(_make_result(records=[])))
    assert lines == ["No results"]


@pytest.mark.unit
def test_table_formatter_truncates_wide_values():
    result = _make_result(records=[{"id": "1", "name": "x" * 60}])
    output = "\n".join(TableFormatter(width=20).format(result))
    assert "x" * 60 not in output
    assert "x" * 19 + "…" in output


@pytest.mark.unit
def test_table_formatter_null_values_blank():
    result = _make_result(records=[{"id": "1", "name": None}])
    output = "\n".join(TableFormatter().format(result))
    assert "None" not in output
