# scripts/send_sample_order.py
# Manual smoke test: posts one known-good order to the configured SAP endpoint.
# Uses SOAP_ENDPOINT / SOAP_USERNAME / SOAP_PASSWORD / SOAP_TIMEOUT_MS.

import asyncio
import json
import os, sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from config import load_soap_config
from exceptions import SalesOrderError
from models import SalesOrder
from services.salesorder import build_sales_order_envelope, call_sales_order_service


SAMPLE_ORDER = {
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


def main() -> int:
    order = SalesOrder.from_dict(SAMPLE_ORDER)
    config = load_soap_config()

    print("Envelope:")
    print(build_sales_order_envelope(order))

    try:
        result = asyncio.run(call_sales_order_service(order, config))
    except SalesOrderError as e:
        print(f"FAILED: {e}")
        return 1

    print(f"SOAP {'succeeded' if result.ok else 'failed'} ({result.status} {result.status_text}) against {config.endpoint}")
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
