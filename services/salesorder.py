#salesorder.py
from typing import List, Optional

import aiohttp

from api import send_soap_request
from config import SoapConfig
from exceptions import SalesOrderValidationError
from logger import get_logger
from models import CallResult, OrderItem, SalesOrder, camel
from services.envelope import render_fields

log = get_logger("salesorder")

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
RFC_NS = "urn:sap-com:document:sap:rfc:functions"
OPERATION = "ZBAPI_SALESORDER_CREATE"
SOAP_ACTION = f"{RFC_NS}:ZWS_BAPI_SALESORDER_CREATE:{OPERATION}Request"

# Element order follows the RFC signature in the WSDL; IT_SO_ITEM sits between
# CUST_PO_DATE and ORDER_TYPE.
HEADER_TAGS_BEFORE_ITEMS = [
    ("cust_po", "CUST_PO"),
    ("cust_po_date", "CUST_PO_DATE"),
]
HEADER_TAGS_AFTER_ITEMS = [
    ("order_type", "ORDER_TYPE"),
    ("sales_channel", "SALES_CHANNEL"),
    ("sales_division", "SALES_DIVISION"),
    ("sales_org", "SALES_ORG"),
    ("ship_to_party", "SHIP_TO_PARTY"),
    ("sold_to_party", "SOLD_TO_PARTY"),
]
HEADER_TAGS = HEADER_TAGS_BEFORE_ITEMS + HEADER_TAGS_AFTER_ITEMS

ITEM_TAGS = [
    ("material_no", "MATERIAL_NO"),
    ("material", "MATERIAL"),
    ("unit", "UNIT"),
    ("qty", "QTY"),
    ("cust_material", "CUST_MATERIAL"),
    ("plant", "PLANT"),
    ("shipping_point", "SHIPPING_POINT"),
    ("delivery_date", "DELIVERY_DATE"),
]


def _missing(obj, tag_map) -> List[str]:
    return [camel(attr) for attr, _ in tag_map if getattr(obj, attr, None) is None]


def _validate(order: SalesOrder) -> None:
    missing = _missing(order, HEADER_TAGS)
    if missing:
        raise SalesOrderValidationError(f"Missing required fields: {', '.join(missing)}", missing=missing)

    if not order.items:
        raise SalesOrderValidationError("Sales order requires at least one item", missing=["items"])

    for idx, item in enumerate(order.items, start=1):
        missing = _missing(item, ITEM_TAGS)
        if missing:
            raise SalesOrderValidationError(
                f"Item {idx} is missing required fields: {', '.join(missing)}",
                missing=missing,
                item_index=idx,
            )


def _build_item_xml(item: OrderItem) -> str:
    return "\n".join([
        "        <item>",
        render_fields(item, ITEM_TAGS, indent="          "),
        "        </item>",
    ])


def build_sales_order_envelope(order: SalesOrder) -> str:
    """
    Render the ZBAPI_SALESORDER_CREATE request envelope.
    Only presence is checked (None == missing); field content is passed through
    escaped but otherwise untouched.
    """
    _validate(order)

    items_xml = "\n".join(_build_item_xml(it) for it in order.items)

    return "\n".join([
        f'<soapenv:Envelope xmlns:soapenv="{SOAP_ENV_NS}" xmlns:urn="{RFC_NS}">',
        "  <soapenv:Header/>",
        "  <soapenv:Body>",
        f"    <urn:{OPERATION}>",
        render_fields(order, HEADER_TAGS_BEFORE_ITEMS, indent="      "),
        "      <IT_SO_ITEM>",
        items_xml,
        "      </IT_SO_ITEM>",
        render_fields(order, HEADER_TAGS_AFTER_ITEMS, indent="      "),
        f"    </urn:{OPERATION}>",
        "  </soapenv:Body>",
        "</soapenv:Envelope>",
    ])


async def call_sales_order_service(
    order: SalesOrder,
    config: SoapConfig,
    session: Optional[aiohttp.ClientSession] = None,
) -> CallResult:
    config.require()

    envelope = build_sales_order_envelope(order)
    log.info(f"SO create: CustPO={order.cust_po} items={len(order.items)} endpoint={config.endpoint}")
    log.debug(f"SO create envelope:\n{envelope}")

    result = await send_soap_request(
        endpoint=config.endpoint,
        envelope=envelope,
        soap_action=SOAP_ACTION,
        username=config.username,
        password=config.password,
        timeout_ms=config.timeout_ms,
        session=session,
    )

    if not result.ok:
        log.warning(f"SO create failed: CustPO={order.cust_po} http_status={result.status} {result.status_text}")
    return result
