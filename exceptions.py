# exceptions.py

class SalesOrderError(Exception):
    """Base for every failure reported back to the tool caller as a message."""


class SalesOrderValidationError(SalesOrderError):
    """
    Raised when the order cannot be turned into an envelope: a header field or
    an item field is missing, or there are no items. Nothing is sent.
    """
    def __init__(self, message: str, *, missing: list[str] | None = None, item_index: int | None = None):
        super().__init__(message)
        self.missing = missing or []
        self.item_index = item_index


class SoapConfigError(SalesOrderError):
    """Endpoint or credentials are absent, or the timeout is unusable."""


class SoapTransportError(SalesOrderError):
    """
    Raised when the POST never produced an HTTP response (DNS, connect, TLS,
    reset). HTTP error statuses are NOT raised; they come back as CallResult.
    """
    def __init__(self, message: str, *, endpoint: str | None = None, cause: BaseException | None = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.cause = cause


class SoapTimeoutError(SoapTransportError):
    def __init__(self, message: str, *, endpoint: str | None = None, timeout_ms: int | None = None,
                 cause: BaseException | None = None):
        super().__init__(message, endpoint=endpoint, cause=cause)
        self.timeout_ms = timeout_ms
