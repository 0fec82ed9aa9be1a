import os
import tempfile

# must happen before config/logger are imported by any test module
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="zws-salesorder-logs-"))

import pytest

from models import SalesOrder


REFERENCE_ORDER = {
    "custPo": "PO1",
    "custPoDate": "2024-01-01",
    "orderType": "OR",
    "salesChannel": "10",
    "salesDivision": "00",
    "salesOrg": "1000",
    "shipToParty": "CUST1",
    "soldToParty": "CUST1",
    "items": [{
        "materialNo": "100001",
        "material": "Widget",
        "unit": "EA",
        "qty": "10.000",
        "custMaterial": "CM1",
        "plant": "1000",
        "shippingPoint": "1000",
        "deliveryDate": "2024-01-10",
    }],
}


@pytest.fixture
def order_data():
    # deep enough copy for tests that drop or mutate keys
    data = dict(REFERENCE_ORDER)
    data["items"] = [dict(it) for it in REFERENCE_ORDER["items"]]
    return data


@pytest.fixture
def order(order_data):
    return SalesOrder.from_dict(order_data)
