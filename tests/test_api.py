import base64
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

import api
from api import basic_auth_header, send_soap_request
from config import new_session
from exceptions import SoapTimeoutError, SoapTransportError


async def _send(endpoint, timeout_ms=2000, session=None):
    return await send_soap_request(
        endpoint=endpoint,
        envelope="<soapenv:Envelope/>",
        soap_action="urn:test:Action",
        username="user",
        password="pass",
        timeout_ms=timeout_ms,
        session=session,
    )


def test_basic_auth_header():
    assert basic_auth_header("user", "pass") == "Basic " + base64.b64encode(b"user:pass").decode()
    assert basic_auth_header("jürgen", "p:w") == "Basic " + base64.b64encode("jürgen:p:w".encode()).decode()


# ---------------- well-behaved server ----------------
class _Handler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        self.server.requests.append((dict(self.headers), self.rfile.read(length)))
        status, body, delay = self.server.reply
        if delay:
            time.sleep(delay)
        try:
            self.send_response(status)
            self.send_header("Content-Type", "text/xml; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, *args):
        pass


@pytest.fixture
def soap_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    server.requests = []
    server.reply = (200, b"<ok/>", 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


def _url(server):
    host, port = server.server_address
    return f"http://{host}:{port}/sap/bc/srt/rfc"


@pytest.mark.asyncio
async def test_posts_envelope_with_soap_headers(soap_server):
    result = await _send(_url(soap_server))

    headers, body = soap_server.requests[0]
    assert body == b"<soapenv:Envelope/>"
    assert headers["Authorization"] == "Basic " + base64.b64encode(b"user:pass").decode()
    assert headers["SOAPAction"] == "urn:test:Action"
    assert headers["Content-Type"] == "text/xml; charset=utf-8"

    assert result.ok is True
    assert result.status == 200
    assert result.status_text == "OK"
    assert result.headers["content-type"] == "text/xml; charset=utf-8"
    assert result.body == "<ok/>"


@pytest.mark.asyncio
async def test_http_500_is_returned_not_raised(soap_server):
    soap_server.reply = (500, b"<soapenv:Fault>bad order</soapenv:Fault>", 0)
    result = await _send(_url(soap_server))
    assert result.ok is False
    assert result.status == 500
    assert result.status_text == "Internal Server Error"
    assert result.body == "<soapenv:Fault>bad order</soapenv:Fault>"


@pytest.mark.asyncio
async def test_body_is_decoded_as_utf8(soap_server):
    soap_server.reply = (200, "<a>größe</a>".encode("utf-8"), 0)
    assert (await _send(_url(soap_server))).body == "<a>größe</a>"


@pytest.mark.asyncio
async def test_server_that_never_answers_times_out(soap_server):
    soap_server.reply = (200, b"<late/>", 1.5)
    started = time.monotonic()
    with pytest.raises(SoapTimeoutError) as exc:
        await _send(_url(soap_server), timeout_ms=200)
    assert time.monotonic() - started < 1.0
    assert exc.value.timeout_ms == 200
    assert exc.value.endpoint == _url(soap_server)


@pytest.mark.asyncio
async def test_owned_session_is_closed(soap_server, monkeypatch):
    sessions = []

    def tracked():
        sessions.append(new_session())
        return sessions[-1]

    monkeypatch.setattr(api, "new_session", tracked)
    await _send(_url(soap_server))
    assert sessions[0].closed


@pytest.mark.asyncio
async def test_caller_session_is_left_open(soap_server):
    session = new_session()
    try:
        await _send(_url(soap_server), session=session)
        assert not session.closed
    finally:
        await session.close()


@pytest.mark.asyncio
async def test_connection_refused_is_transport_error():
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()

    with pytest.raises(SoapTransportError) as exc:
        await _send(f"http://127.0.0.1:{port}/soap")
    assert not isinstance(exc.value, SoapTimeoutError)
    assert exc.value.cause is not None


# ---------------- trickling server ----------------
class _TrickleServer:
    """Sends `prefix` at once, then `trickled` one byte per `interval`; notes when the client hangs up."""

    def __init__(self, prefix: bytes, trickled: bytes, interval: float = 0.1):
        self.prefix = prefix
        self.trickled = trickled
        self.interval = interval
        self.aborted = threading.Event()
        self.sock = socket.socket()
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(1)
        self.thread = threading.Thread(target=self._serve, daemon=True)
        self.thread.start()

    @property
    def url(self):
        host, port = self.sock.getsockname()
        return f"http://{host}:{port}/soap"

    def _serve(self):
        try:
            conn, _ = self.sock.accept()
        except OSError:
            return
        with conn:
            conn.recv(65536)
            try:
                conn.sendall(self.prefix)
                for i in range(len(self.trickled)):
                    conn.sendall(self.trickled[i:i + 1])
                    time.sleep(self.interval)
            except OSError:
                self.aborted.set()

    def close(self):
        self.sock.close()


BODY = b"<soapenv:Envelope>" + b"x" * 40 + b"</soapenv:Envelope>"
HEADERS = f"HTTP/1.1 200 OK\r\nContent-Type: text/xml\r\nContent-Length: {len(BODY)}\r\n\r\n".encode()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "prefix, trickled",
    [(HEADERS, BODY), (b"", HEADERS + BODY)],
    ids=["slow-body", "slow-headers"],
)
async def test_trickling_response_hits_single_deadline(prefix, trickled):
    server = _TrickleServer(prefix, trickled, interval=0.1)
    try:
        started = time.monotonic()
        with pytest.raises(SoapTimeoutError):
            await _send(server.url, timeout_ms=300)
        assert time.monotonic() - started < 0.8

        # the client dropped the connection; the server notices on its next writes
        assert server.aborted.wait(timeout=3.0)
    finally:
        server.close()
