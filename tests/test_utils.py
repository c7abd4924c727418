import math
from datetime import date

import pandas as pd
import pytest

from purchasing.utils import (
    load_csv,
    parse_date_string,
    parse_freight_goal,
    parse_numeric,
    records_from_frame,
    to_identity,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("42", 42.0),
        ("1,234.5", 1234.5),
        (" 7 ", 7.0),
        (3, 3.0),
        ("", 0.0),
        (None, 0.0),
        (float("nan"), 0.0),
        ("abc", 0.0),
        ("-12", -12.0),
        ("1_000", 0.0),
        ("inf", 0.0),
        ("Infinity", 0.0),
        ("-inf", 0.0),
        (float("inf"), 0.0),
        ("0x1A", 0.0),
    ],
)
def test_parse_numeric(raw, expected):
    assert parse_numeric(raw) == expected


def test_parse_numeric_never_returns_nan():
    assert not math.isnan(parse_numeric("nan"))


def test_to_identity_drops_trailing_zero_on_integral_floats():
    assert to_identity(100100.0) == "100100"
    assert to_identity(100100) == "100100"
    assert to_identity("00123") == "00123"
    assert to_identity(1.5) == "1.5"


def test_parse_date_string():
    assert parse_date_string("3/5/2024") == date(2024, 3, 5)
    assert parse_date_string("12/31/2023") == date(2023, 12, 31)


@pytest.mark.parametrize("raw", [None, "", "2024-03-05", "13/1/2024", "2/30/2024", "a/b/c", "1/1/1800"])
def test_parse_date_string_falls_back_to_epoch(raw):
    assert parse_date_string(raw) == date(1970, 1, 1)


def test_parse_freight_goal():
    assert parse_freight_goal("**($1,325)**") == 1325.0
    assert parse_freight_goal("Free freight at $500.50 or more") == 500.5
    assert parse_freight_goal("**(N/A)**") == 0.0
    assert parse_freight_goal(None) == 0.0


def test_records_from_frame_turns_empty_cells_into_none():
    df = pd.DataFrame({"Item": ["A", None], "Qty": ["1", float("nan")]})
    assert records_from_frame(df) == [
        {"Item": "A", "Qty": "1"},
        {"Item": None, "Qty": None},
    ]


def test_load_csv_keeps_leading_zeros(tmp_path):
    path = tmp_path / "items.csv"
    path.write_text("Item,Qty\n00123,5\n", encoding="utf-8")
    df = load_csv(path)
    assert df["Item"].tolist() == ["00123"]
    assert df["Qty"].tolist() == ["5"]


def test_load_csv_falls_back_to_latin1(tmp_path):
    path = tmp_path / "lot.csv"
    path.write_bytes("Item,Description\n1,Caf\xe9 screw\n".encode("latin-1"))
    df = load_csv(path)
    assert df["Description"].tolist() == ["Café screw"]


def test_load_csv_reads_utf8_bom_headers(tmp_path):
    path = tmp_path / "usage.csv"
    path.write_text("Item,MO Avg\nA,3\n", encoding="utf-8-sig")
    assert list(load_csv(path).columns) == ["Item", "MO Avg"]


def test_load_csv_returns_none_for_missing_or_empty_file(tmp_path):
    assert load_csv(tmp_path / "missing.csv") is None
    empty = tmp_path / "empty.csv"
    empty.write_text("", encoding="utf-8")
    assert load_csv(empty) is None
