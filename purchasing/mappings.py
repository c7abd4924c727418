# --- Header Mappings ---
# For each record type: logical field -> acceptable CSV headers, in priority order.
# The first header present in a row (with a non-null value) wins.

LOT_MAPPING = {
    "item": ["Item", "item"],
    "description": ["Description", "description"],
    "warehouse": ["WH", "wh", "Warehouse"],
    "location": ["Location", "location"],
    "onHand": ["On Hand", "onHand"],
    "committed": ["Committed", "committed"],
    "available": ["Available", "available"],
    "vendor": ["Vendor", "vendor"],
}

ITEMS_MAPPING = {
    "item": ["Item", "item"],
    "description": ["Description", "description"],
    "unitCost": ["Unit Loaded Cost", "Avg Cost", "unitCost"],
    "primaryVendor": ["Primary Vendor", "primaryVendor"],
    "category": ["Categories", "Item Category", "category"],
    "rpl": ["RPL", "rpl"],
    "vendorCode": ["Vendor Code", "vendorCode"],
}

USAGE_MAPPING = {
    "item": ["Item", "item"],
    "warehouse": ["WH", "wh", "Warehouse"],
    "monthlyAvg": ["MO Avg", "monthlyAvg"],
    "min": ["Min", "min"],
    "max": ["Max", "max"],
}

PO_MAPPING = {
    "po": ["PO", "po"],
    "vendorName": ["Vendor Name", "vendorName"],
    "warehouse": ["WH", "wh", "Warehouse"],
    "ordDate": ["Ord Date", "ordDate"],
    "shipDate": ["Ship Date", "shipDate"],
    "status": ["Status", "status"],
    "openTotal": ["Open Total", "openTotal"],
    "item": ["Item", "item"],
    "openQty": ["Open", "open"],
}

SALES_MAPPING = {
    "orderDate": ["Order Date"],
    "wantedDate": ["Wanted Date"],
    "warehouse": ["WH"],
    "order": ["Order"],
    "customerName": ["Customer Name"],
    "item": ["Item"],
    "description": ["Description"],
    "qty": ["Qty"],
}

VENDORS_MAPPING = {
    "vendorCode": ["Vendor Code", "Vendor"],
    "vendorName": ["Vendor Name", "Name"],
}

FIELD_MAPPINGS = {
    "lot": LOT_MAPPING,
    "items": ITEMS_MAPPING,
    "usage": USAGE_MAPPING,
    "po": PO_MAPPING,
    "sales": SALES_MAPPING,
    "vendors": VENDORS_MAPPING,
}

# Identity fields each record type must carry before it can take part in a join.
REQUIRED_FIELDS = {
    "lot": ("item", "warehouse"),
    "items": ("item",),
    "usage": ("item", "warehouse"),
}
