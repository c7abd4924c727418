from datetime import date

import pytest

from purchasing import analytics
from conftest import make_item


@pytest.fixture
def inventory():
    return [
        make_item(item="SD9112", warehouse="PA", available=10, monthly_avg=60, unit_cost=2.0, inventory_value=20, category="Fasteners", description="STRONG-DRIVE SCREW"),
        make_item(item="SD9112", warehouse="TX", available=500, monthly_avg=60, unit_cost=2.0, inventory_value=1000, category="Fasteners", description="STRONG-DRIVE SCREW"),
        make_item(item="DB100", warehouse="NE", available=5, monthly_avg=0, unit_cost=1.0, inventory_value=5, category=None, vendor="STAR STAINLESS SCREW CO.", vendor_code="STASTA"),
        make_item(item="ZZ900", warehouse="CA", available=1, monthly_avg=30, inventory_value=3, category="Tools", vendor="", vendor_code="ELCIND"),
    ]


@pytest.fixture
def po_records():
    return [
        {"po": "P100", "status": "Open", "openTotal": "1,000.50", "vendorName": "SIMPSON", "ordDate": "12/1/2023", "item": "SD9112", "openQty": "250", "shipDate": "6/1/2024"},
        {"po": "P200", "status": "Closed", "openTotal": "5", "vendorName": "ELCO", "ordDate": "1/9/2024", "item": "SD9112", "openQty": "10", "shipDate": None},
        {"po": "P300", "status": "Open", "openTotal": None, "vendorName": "SIMPSON", "ordDate": "1/5/2024", "item": "DB100", "openQty": "5", "shipDate": None},
        {"po": "P400", "status": "Open", "openTotal": "10", "vendorName": "STAR", "ordDate": "not a date", "item": "XX1", "openQty": "1", "shipDate": None},
    ]


def test_kpi_summary(inventory, po_records):
    kpis = analytics.kpi_summary(inventory, po_records)
    assert kpis.total_value == pytest.approx(1028)
    assert kpis.total_skus == 3
    # SD9112-PA and ZZ900-CA sit at or below their reorder point.
    assert kpis.low_stock_items == 2
    assert kpis.open_pos_count == 3
    assert kpis.open_po_value == pytest.approx(1010.5)
    assert kpis.active_vendors == 2
    assert kpis.model_dump(by_alias=True)["openPOsCount"] == 3


def test_filter_inventory(inventory):
    assert [i.id for i in analytics.filter_inventory(inventory, warehouse="TX")] == ["SD9112-TX"]
    assert [i.id for i in analytics.filter_inventory(inventory, search="strong-drive")] == ["SD9112-PA", "SD9112-TX"]
    assert [i.id for i in analytics.filter_inventory(inventory, warehouse="PA", search="fasten")] == ["SD9112-PA"]
    assert analytics.filter_inventory(inventory) == inventory


def test_low_supply_items(inventory):
    # Items without usage have infinite supply.
    assert [i.id for i in analytics.low_supply_items(inventory)] == ["SD9112-PA", "ZZ900-CA"]


def test_warehouse_summary_covers_known_warehouses_only(inventory):
    summary = analytics.warehouse_summary(inventory)
    assert list(summary) == ["PA", "TX", "NE"]
    assert summary["PA"] == {"value": 20, "skus": 1, "low": 1, "over": 0}
    assert summary["TX"]["over"] == 1
    assert summary["NE"]["skus"] == 1


def test_category_summary(inventory):
    summary = analytics.category_summary(inventory)
    assert [name for name, _ in summary] == ["Fasteners", "Uncategorized", "Tools"]
    fasteners = dict(summary)["Fasteners"]
    assert fasteners["skus"] == 2
    assert fasteners["items"] == ["SD9112", "SD9112"]
    assert dict(summary)["Uncategorized"]["items"] == ["DB100"]


def test_vendor_summary_counts_distinct_items(inventory, reference):
    vendors_data = [{"vendorCode": "QQQ", "vendorName": "Q VENDOR"}]
    inventory = inventory + [
        make_item(item="QQ1", vendor="", vendor_code="QQQ", inventory_value=1),
        make_item(item="RR1", vendor="", vendor_code="RRR", inventory_value=0.5),
        make_item(item="NC1", vendor_code=None, inventory_value=999),
    ]
    summaries = analytics.vendor_summary(inventory, vendors_data, reference)
    by_code = {s.code: s for s in summaries}

    assert [s.code for s in summaries] == ["SIMSTR", "STASTA", "ELCIND", "QQQ", "RRR"]
    assert by_code["SIMSTR"].name == "SIMPSON STRONG-TIE CO INC"
    assert by_code["SIMSTR"].sku_count == 1
    assert by_code["SIMSTR"].low_stock_items == 1
    assert by_code["SIMSTR"].inventory_value == pytest.approx(1020)
    assert by_code["ELCIND"].name == "BLACK & DECKER INC."
    assert by_code["QQQ"].name == "Q VENDOR"
    assert by_code["RRR"].name == "Vendor RRR"


def test_vendor_summary_search(inventory, reference):
    summaries = analytics.vendor_summary(inventory, [], reference, search="stasta")
    assert [s.code for s in summaries] == ["STASTA"]


def test_top_vendor_items(inventory):
    top = analytics.top_vendor_items(inventory, "SIMSTR", n=1)
    assert [i.id for i in top] == ["SD9112-TX"]
    assert analytics.top_vendor_items(inventory, "") == []


def test_open_purchase_orders_newest_first(po_records):
    assert [po["po"] for po in analytics.open_purchase_orders(po_records)] == ["P300", "P100", "P400"]
    assert [po["po"] for po in analytics.open_purchase_orders(po_records, search="star")] == ["P400"]


def test_availability_lookup(inventory, po_records):
    results = analytics.availability_lookup("sd91", inventory, po_records)
    assert list(results) == ["SD9112"]
    entry = results["SD9112"]
    assert entry["warehouses"] == {"PA": 10, "TX": 500}
    assert entry["inbound"] == [{"po": "P100", "qty": 250.0, "shipDate": "6/1/2024"}]


def test_availability_lookup_needs_minimum_search_length(inventory, po_records):
    assert analytics.availability_lookup("sd", inventory, po_records) == {}
    assert analytics.availability_lookup("", inventory, po_records) == {}


def test_availability_message(inventory, po_records):
    entry = analytics.availability_lookup("SD9112", inventory, po_records)["SD9112"]
    assert analytics.availability_message("SD9112", entry) == (
        "Part: SD9112\n"
        "Desc: STRONG-DRIVE SCREW\n"
        "PA: 10 avail. | TX: 500 avail. | NE: 0 avail.\n"
        "Inbound: 250 on PO P100 (est. 6/1/2024)\n"
        "Customer Price: ~$2.80/ea"
    )


def test_availability_message_without_inbound():
    entry = {"description": "BIT", "unitCost": 1.0, "warehouses": {"NE": 1234}, "inbound": []}
    message = analytics.availability_message("DB100", entry)
    assert "NE: 1,234 avail." in message
    assert "Inbound" not in message
    assert message.endswith("Customer Price: ~$1.40/ea")


@pytest.fixture
def sales_records():
    return [
        {"order": "SO-300", "customerName": "ACME LUMBER", "item": "SD9112", "wantedDate": "7/1/2024", "qty": "10"},
        {"order": "SO-100", "customerName": "Brick Supply", "item": "DB100", "wantedDate": "5/20/2024", "qty": "4"},
        {"order": "SO-200", "customerName": "acme lumber", "item": "ZZ900", "wantedDate": "ASAP", "qty": "1"},
        {"order": "SO-400", "customerName": "Coastal", "item": "SD9114", "wantedDate": "6/1/2024", "qty": "2"},
    ]


def test_sales_orders_sorted_by_wanted_date_with_late_flag(sales_records):
    orders = analytics.sales_orders(sales_records, today=date(2024, 6, 1))
    assert [so["order"] for so in orders] == ["SO-200", "SO-100", "SO-400", "SO-300"]
    assert [so["status"] for so in orders] == ["On Time", "LATE", "On Time", "On Time"]
    assert orders[1]["late"] is True
    assert orders[1]["qty"] == "4"


def test_unparseable_wanted_date_is_never_late(sales_records):
    orders = analytics.sales_orders(sales_records, today=date(2030, 1, 1))
    by_order = {so["order"]: so for so in orders}
    assert by_order["SO-200"]["late"] is False
    assert by_order["SO-300"]["late"] is True


def test_sales_orders_search_is_case_insensitive(sales_records):
    orders = analytics.sales_orders(sales_records, search="ACME", today=date(2024, 6, 1))
    assert [so["order"] for so in orders] == ["SO-200", "SO-300"]
    assert [so["order"] for so in analytics.sales_orders(sales_records, search="sd9114")] == ["SO-400"]
    assert [so["order"] for so in analytics.sales_orders(sales_records, search="so-1")] == ["SO-100"]


def test_sales_orders_does_not_modify_input(sales_records):
    analytics.sales_orders(sales_records, today=date(2024, 6, 1))
    assert "late" not in sales_records[0]
