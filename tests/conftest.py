import pytest

from purchasing import settings
from purchasing.schemas import ReconciledInventoryItem, ReferenceData, VendorDetail


def make_item(**overrides):
    """A reconciled inventory row with sensible defaults; override any field by name."""
    values = {
        "id": "100100-PA",
        "item": "100100",
        "warehouse": "PA",
        "on_hand": 50,
        "committed": 0,
        "available": 50,
        "vendor": "SIMPSON STRONG-TIE CO INC",
        "vendor_code": "SIMSTR",
        "unit_cost": 2.0,
        "inventory_value": 100.0,
        "monthly_avg": 60,
        "lead_time": 14,
    }
    values.update(overrides)
    if "id" not in overrides:
        values["id"] = f"{values['item']}-{values['warehouse']}"
    return ReconciledInventoryItem(**values)


@pytest.fixture
def reference():
    return ReferenceData(
        lead_times={"STASTA": 21, "ELCIND": 35, "DEFAULT": 14},
        vendor_directory={
            "SIMSTR": VendorDetail(name="SIMPSON STRONG-TIE CO INC", freight_info="**($1,325)**"),
            "ELCIND": VendorDetail(name="BLACK & DECKER INC.", freight_info="**($1,500)**"),
            "STASTA": VendorDetail(name="STAR STAINLESS SCREW CO.", freight_info="**(N/A)**"),
        },
    )


@pytest.fixture
def lot_rows():
    return [
        {"item": "100100", "warehouse": "PA", "location": "A-01", "onHand": "40", "committed": "5", "available": "35", "description": "SD9112 SCREW", "vendor": None},
        {"item": "100100", "warehouse": "PA", "location": "B-07", "onHand": "20", "committed": "0", "available": "20", "description": "Other text", "vendor": None},
        {"item": "100100", "warehouse": "TX", "location": "T-10", "onHand": "12", "committed": "2", "available": "10", "description": None, "vendor": None},
        {"item": "200200", "warehouse": "PA", "location": "C-03", "onHand": "1,200", "committed": "0", "available": "1,200", "description": "DRILL BIT", "vendor": "STAR STAINLESS SCREW CO."},
    ]


@pytest.fixture
def items_rows():
    return [
        {"item": "100100", "description": "SD9112 MASTER", "unitCost": "2.50", "primaryVendor": "SIMPSON STRONG-TIE CO INC", "category": "Fasteners", "rpl": "Y", "vendorCode": "SIMSTR"},
        {"item": "200200", "description": "DRILL BIT", "unitCost": "0.75", "primaryVendor": None, "category": None, "rpl": None, "vendorCode": None},
    ]


@pytest.fixture
def usage_rows():
    return [
        {"item": "100100", "warehouse": "PA", "monthlyAvg": "60", "min": "0", "max": "0"},
        {"item": "100100", "warehouse": "TX", "monthlyAvg": "15", "min": "20", "max": "40"},
        {"item": "200200", "warehouse": "PA", "monthlyAvg": "30", "min": "0", "max": "0"},
    ]


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    """Redirects saved reports into a temporary folder."""
    out = tmp_path / "output"
    monkeypatch.setattr(settings, "OUTPUT_DIR", out)
    monkeypatch.setattr(settings, "WEBHOOK_URL", None)
    return out
