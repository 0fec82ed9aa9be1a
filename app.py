# app.py

import sys
from typing import Annotated, Mapping, Optional

import aiohttp
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from config import SERVER_NAME, load_soap_config
from exceptions import SalesOrderError
from logger import get_logger
from models import CallResult, SalesOrder
from schemas import HttpUrlStr, IsoDate, NonEmptyStr, OrderItemInput, PositiveMs
from services.salesorder import call_sales_order_service

log = get_logger("app")

TOOL_NAME = "createSalesOrder"
TOOL_DESCRIPTION = "Call the SAP ZBAPI_SALESORDER_CREATE SOAP endpoint defined in the bundled WSDL."

mcp = FastMCP(SERVER_NAME)


def _text(text: str) -> TextContent:
    return TextContent(type="text", text=text)


def format_call_result(result: CallResult, endpoint: str) -> CallToolResult:
    outcome = "succeeded" if result.ok else "failed"
    return CallToolResult(
        content=[
            _text(f"SOAP {outcome} ({result.status} {result.status_text}) against {endpoint}"),
            _text(result.body),
        ],
        isError=not result.ok,
    )


def format_error(error: Exception) -> CallToolResult:
    return CallToolResult(content=[_text(str(error))], isError=True)


async def run_create_sales_order(
    order: SalesOrder,
    endpoint: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    timeout_ms: Optional[int] = None,
    environ: Optional[Mapping[str, str]] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> CallToolResult:
    try:
        config = load_soap_config(
            endpoint=endpoint,
            username=username,
            password=password,
            timeout_ms=timeout_ms,
            environ=environ,
        )
        result = await call_sales_order_service(order, config, session=session)
    except SalesOrderError as e:
        log.error(f"{TOOL_NAME} CustPO={order.cust_po}: {e}")
        return format_error(e)

    return format_call_result(result, config.endpoint)


@mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION, structured_output=False)
async def create_sales_order(
    custPo: Annotated[NonEmptyStr, Field(description="Customer PO number (char35)")],
    custPoDate: Annotated[IsoDate, Field(description="PO date, YYYY-MM-DD")],
    orderType: Annotated[NonEmptyStr, Field(description="Order type (char4)")],
    salesChannel: Annotated[NonEmptyStr, Field(description="Sales channel (char2)")],
    salesDivision: Annotated[NonEmptyStr, Field(description="Sales division (char2)")],
    salesOrg: Annotated[NonEmptyStr, Field(description="Sales org (char4)")],
    shipToParty: Annotated[NonEmptyStr, Field(description="Ship-to party (char10)")],
    soldToParty: Annotated[NonEmptyStr, Field(description="Sold-to party (char10)")],
    items: Annotated[list[OrderItemInput], Field(min_length=1, description="Sales order items")],
    endpoint: Annotated[
        Optional[HttpUrlStr], Field(description="Override SOAP endpoint URL (defaults to WSDL endpoint)")
    ] = None,
    username: Annotated[
        Optional[str], Field(description="Override Basic Auth username (fallback to env SOAP_USERNAME)")
    ] = None,
    password: Annotated[
        Optional[str], Field(description="Override Basic Auth password (fallback to env SOAP_PASSWORD)")
    ] = None,
    timeoutMs: Annotated[
        Optional[PositiveMs], Field(description="Request timeout in milliseconds (default 15000)")
    ] = None,
) -> CallToolResult:
    order = SalesOrder(
        cust_po=custPo,
        cust_po_date=custPoDate,
        order_type=orderType,
        sales_channel=salesChannel,
        sales_division=salesDivision,
        sales_org=salesOrg,
        ship_to_party=shipToParty,
        sold_to_party=soldToParty,
        items=[it.to_item() for it in items],
    )
    return await run_create_sales_order(
        order,
        endpoint=endpoint,
        username=username,
        password=password,
        timeout_ms=timeoutMs,
    )


def main() -> None:
    log.info(f"Starting MCP server '{SERVER_NAME}' on stdio")
    try:
        mcp.run(transport="stdio")
    except Exception as e:
        log.exception(f"MCP server failed: {e}")
        print(f"{SERVER_NAME} failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
