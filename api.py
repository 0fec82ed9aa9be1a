#api.py
import asyncio
import base64
from typing import Optional

import aiohttp

from config import new_session
from exceptions import SoapTimeoutError, SoapTransportError
from logger import get_logger
from models import CallResult

log = get_logger("api")


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


async def send_soap_request(
    endpoint: str,
    envelope: str,
    soap_action: str,
    username: str,
    password: str,
    timeout_ms: int,
    session: Optional[aiohttp.ClientSession] = None,
) -> CallResult:
    """
    POST one SOAP envelope and hand back whatever the server said.

    timeout_ms is a single deadline for the whole exchange: connect, headers
    and body. When it expires aiohttp cancels the request, the connection is
    dropped and SoapTimeoutError is raised. Network failures raise
    SoapTransportError. Any HTTP status, 2xx or not, is returned as a
    CallResult with the raw body.
    """
    headers = {
        "Content-Type": "text/xml; charset=utf-8",
        "SOAPAction": soap_action,
        "Authorization": basic_auth_header(username, password),
    }
    timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000.0)

    own_session = session is None
    if own_session:
        session = new_session()

    log.info(f"[SOAP POST] endpoint={endpoint} action={soap_action} timeout_ms={timeout_ms}")

    try:
        async with session.post(endpoint, data=envelope.encode("utf-8"), headers=headers, timeout=timeout) as resp:
            raw = await resp.read()
            result = CallResult(
                ok=resp.ok,
                status=resp.status,
                status_text=resp.reason or "",
                headers={k.lower(): v for k, v in resp.headers.items()},
                # decoded like fetch's Response.text(): always UTF-8, never parsed
                body=raw.decode("utf-8", errors="replace"),
            )
    except asyncio.TimeoutError as e:
        log.error(f"[SOAP POST] endpoint={endpoint} timed out after {timeout_ms} ms")
        raise SoapTimeoutError(
            f"SOAP request to {endpoint} timed out after {timeout_ms} ms",
            endpoint=endpoint,
            timeout_ms=timeout_ms,
            cause=e,
        ) from e
    except aiohttp.ClientError as e:
        log.error(f"[SOAP POST] endpoint={endpoint} failed: {e}")
        raise SoapTransportError(f"SOAP request to {endpoint} failed: {e}", endpoint=endpoint, cause=e) from e
    finally:
        if own_session:
            await session.close()

    log.info(f"[SOAP POST] http_status={result.status} {result.status_text}")
    log.debug(f"[SOAP POST] raw_response={result.body[:2000]}")
    return result
