import pytest

from upload_analytics.core.exceptions import EmptyTableError
from upload_analytics.core.ingestion.cell_parser import CellKind, parse_cell, parse_number
from upload_analytics.core.ingestion.table import Table


@pytest.mark.parametrize("raw, kind, value", [
    (" 42 ", CellKind.NUMBER, 42),
    ("3.5e2", CellKind.NUMBER, 350.0),
    ("-0.25", CellKind.NUMBER, -0.25),
    (".5", CellKind.NUMBER, 0.5),
    ("N/A", CellKind.TEXT, "N/A"),
    ("  hello ", CellKind.TEXT, "hello"),
    ("0x1F", CellKind.TEXT, "0x1F"),
    ("inf", CellKind.TEXT, "inf"),
    ("1e999", CellKind.TEXT, "1e999"),
    ("", CellKind.EMPTY, None),
    ("   ", CellKind.EMPTY, None),
    (None, CellKind.EMPTY, None),
    (True, CellKind.TEXT, "true"),
    (7, CellKind.NUMBER, 7),
    (float("nan"), CellKind.TEXT, "nan"),
    ("9" * 400, CellKind.TEXT, "9" * 400),
    ("1" * 5000, CellKind.TEXT, "1" * 5000),
    ("0" * 5000 + "7", CellKind.NUMBER, 7),
    (10 ** 400, CellKind.TEXT, str(10 ** 400)),
    (2 ** 60, CellKind.NUMBER, float(2 ** 60)),
])
def test_parse_cell(raw, kind, value):
    cell = parse_cell(raw)
    assert cell.kind == kind
    assert cell.value == value


def test_parse_number_keeps_integers_as_int():
    assert isinstance(parse_number("12"), int)
    assert isinstance(parse_number("12.0"), float)
    assert parse_number("12abc") is None


def test_from_records_drops_fully_empty_rows():
    table = Table.from_records([
        {"a": "1", "b": "x"},
        {"a": "", "b": "  "},
        {"a": None, "b": None},
        {"a": "3", "b": ""},
    ])
    assert table.record_count == 2
    assert table.dropped_rows == 2
    assert table.columns == ["a", "b"]


def test_columns_come_from_first_record():
    table = Table.from_records([
        {"a": 1, "b": 2},
        {"a": 3, "c": 4},
    ])
    assert table.columns == ["a", "b"]
    assert table.cell(1, "b").is_empty


def test_ensure_valid_rejects_empty_table():
    table = Table.from_records([{"a": "", "b": None}])
    assert table.is_empty
    with pytest.raises(EmptyTableError, match="No valid data rows found"):
        table.ensure_valid()


def test_numeric_values_and_pairs(sales_table):
    assert sales_table.numeric_values("sales") == [120, 95.5, 80, 150]
    assert sales_table.numeric_values("units") == [4, 3, 6]
    assert sales_table.numeric_pairs("sales", "units") == [(120, 4), (95.5, 3), (150, 6)]


def test_to_rows_limits_and_projects(sales_table):
    rows = sales_table.to_rows(limit=2, columns=["region", "units"])
    assert rows == [
        {"region": "North", "units": 4},
        {"region": "South", "units": 3},
    ]
    assert sales_table.to_rows()[3]["note"] is None


def test_filled_cell_count(sales_table):
    # 16 cells, two empty
    assert sales_table.filled_cell_count() == 14


def test_parse_number_keeps_large_integers_finite():
    big = parse_number("9" * 30)
    assert isinstance(big, float)
    assert big == float("9" * 30)
    assert parse_number("9" * 400) is None


def test_from_records_with_overlong_digit_run():
    table = Table.from_records([{"a": "1" * 5000, "b": "x"}, {"a": "2", "b": "y"}])

    assert table.cell(0, "a").kind == CellKind.TEXT
    assert table.numeric_values("a") == [2]
