# config.py
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

import aiohttp

from exceptions import SoapConfigError

# ---------------- Paths (stable, absolute) ----------------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Logging
LOG_DIR = os.getenv("LOG_DIR", os.path.join(BASE_DIR, "logs"))
LOG_FILE = os.getenv("LOG_FILE", "zws_salesorder.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
# MCP clients show a stdio server's stderr in their own logs
LOG_STDERR = os.getenv("LOG_STDERR", "0").strip().lower() in ("1", "true", "yes")

# ---------------- MCP server ----------------
SERVER_NAME = "zws-bapi-salesorder-create"

# ---------------- SAP SOAP service ----------------
# QAS binding from the ZWS_BAPI_SALESORDER_CREATE WSDL
DEFAULT_ENDPOINT = (
    "https://vhivcqasci.sap.inventec.com:44300/sap/bc/srt/rfc/sap/"
    "zws_bapi_salesorder_create/100/zws_bapi_salesorder_create_sev/"
    "zws_bapi_salesorder_create_binding"
)
DEFAULT_TIMEOUT_MS = 15000

ENV_ENDPOINT = "SOAP_ENDPOINT"
ENV_USERNAME = "SOAP_USERNAME"
ENV_PASSWORD = "SOAP_PASSWORD"
ENV_TIMEOUT_MS = "SOAP_TIMEOUT_MS"


@dataclass(frozen=True)
class SoapConfig:
    endpoint: str
    username: Optional[str]
    password: Optional[str] = field(repr=False)
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    def require(self) -> None:
        """Fail before any network activity if the call cannot be made."""
        if not self.endpoint:
            raise SoapConfigError("SOAP endpoint URL is required")
        if not self.username or not self.password:
            raise SoapConfigError("SOAP basic auth username/password are required")
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int) or self.timeout_ms <= 0:
            raise SoapConfigError(f"SOAP timeout must be a positive number of milliseconds, got {self.timeout_ms!r}")


def _parse_timeout_ms(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise SoapConfigError(f"{ENV_TIMEOUT_MS} must be an integer number of milliseconds, got {raw!r}") from None


def load_soap_config(
    endpoint: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    timeout_ms: Optional[int] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SoapConfig:
    """
    Resolve per-call SOAP settings.
    Precedence for every field: explicit argument > environment > built-in default.
    Credentials have no built-in default.
    """
    env = os.environ if environ is None else environ

    if timeout_ms is None:
        raw_timeout = env.get(ENV_TIMEOUT_MS)
        timeout_ms = _parse_timeout_ms(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_MS

    return SoapConfig(
        endpoint=endpoint if endpoint is not None else env.get(ENV_ENDPOINT, DEFAULT_ENDPOINT),
        username=username if username is not None else env.get(ENV_USERNAME),
        password=password if password is not None else env.get(ENV_PASSWORD),
        timeout_ms=timeout_ms,
    )


# -------------- HTTP Session --------------
def new_session() -> aiohttp.ClientSession:
    # One connection per call, closed afterwards; nothing is pooled or replayed.
    # Must be called from inside the running event loop.
    return aiohttp.ClientSession(connector=aiohttp.TCPConnector(force_close=True))
