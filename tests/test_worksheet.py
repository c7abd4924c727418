import pytest

from purchasing.worksheet import (
    UNKNOWN_VENDOR_BUCKET,
    build_vendor_worksheets,
    export_rows,
    freight_status,
    reorder_items,
)
from conftest import make_item


@pytest.fixture
def inventory():
    return [
        make_item(item="SD9112", warehouse="PA", available=50, monthly_avg=60, unit_cost=2.0, description="SCREW"),
        make_item(item="NOVEND", warehouse="TX", available=0, monthly_avg=30, unit_cost=1.0, vendor="", vendor_code=None),
        make_item(item="PLENTY", warehouse="PA", available=1000, monthly_avg=30),
    ]


def test_reorder_items_only_below_reorder_point(inventory):
    assert [i.item for i in reorder_items(inventory)] == ["SD9112", "NOVEND"]
    assert [i.item for i in reorder_items(inventory, search="screw")] == ["SD9112"]


def test_worksheets_group_lines_by_vendor(inventory, reference):
    worksheets = {w.vendor: w for w in build_vendor_worksheets(inventory, reference)}
    assert set(worksheets) == {"SIMPSON STRONG-TIE CO INC", UNKNOWN_VENDOR_BUCKET}

    simpson = worksheets["SIMPSON STRONG-TIE CO INC"]
    (line,) = simpson.lines
    assert line.part == "SD9112"
    assert line.order_quantity == 34
    assert line.total_value == pytest.approx(68)
    assert line.reorder_point == pytest.approx(56)
    assert simpson.vendor_code == "SIMSTR"
    assert simpson.freight_goal == 1325
    assert simpson.freight_status == "below"

    unknown = worksheets[UNKNOWN_VENDOR_BUCKET]
    assert unknown.lines[0].order_quantity == 42
    assert unknown.freight_goal == 0
    assert unknown.freight_status == "none"
    assert unknown.freight_progress is None


def test_edited_quantity_replaces_suggestion(inventory, reference):
    worksheets = build_vendor_worksheets(inventory, reference, edited_quantities={"SD9112-PA": 700})
    simpson = next(w for w in worksheets if w.vendor_code == "SIMSTR")
    assert simpson.lines[0].order_quantity == 700
    assert simpson.total_value == pytest.approx(1400)
    assert simpson.freight_status == "met"


def test_negative_edit_is_clamped_to_zero(inventory, reference):
    worksheets = build_vendor_worksheets(inventory, reference, edited_quantities={"SD9112-PA": -3})
    simpson = next(w for w in worksheets if w.vendor_code == "SIMSTR")
    assert simpson.lines[0].order_quantity == 0
    assert simpson.total_value == 0


@pytest.mark.parametrize(
    "total, goal, expected",
    [
        (1325, 1325, "met"),
        (1100, 1325, "near"),
        (100, 1325, "below"),
        (100, 0, "none"),
    ],
)
def test_freight_status(total, goal, expected):
    assert freight_status(total, goal)[1] == expected


def test_export_rows(inventory, reference):
    worksheets = build_vendor_worksheets(inventory, reference)
    simpson = next(w for w in worksheets if w.vendor_code == "SIMSTR")
    assert export_rows(simpson) == [
        {
            "Part #": "SD9112",
            "Description": "SCREW",
            "Warehouse": "PA",
            "Order Quantity": 34,
            "Unit Cost": 2.0,
            "Total Value": 68.0,
        }
    ]
