import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List, Tuple

import pytest
from requests.structures import CaseInsensitiveDict

from api_client import Client, ClientConfig


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: CaseInsensitiveDict
    body: bytes


class MockBackend:
    """Local HTTP server answering canned responses and recording every request."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, str, bytes, Dict[str, str]]] = {}
        self.requests: List[RecordedRequest] = []
        self._lock = threading.Lock()
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), self._handler_class())
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def on(self, method, path, body=b"", status=200, content_type="text/plain", headers=None):
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.routes[(method, path)] = (status, content_type, body, headers or {})

    def start(self):
        self._thread.start()

    def stop(self):
        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=5)

    def _record(self, request: RecordedRequest):
        with self._lock:
            self.requests.append(request)

    def _handler_class(self):
        backend = self

        class Handler(BaseHTTPRequestHandler):
            def _handle(self):
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length else b""
                backend._record(RecordedRequest(
                    self.command, self.path, CaseInsensitiveDict(self.headers.items()), body,
                ))

                route = (self.command, self.path.split("?", 1)[0])
                status, content_type, payload, extra = backend.routes.get(
                    route, (404, "text/plain", b"no route", {})
                )
                self.send_response(status)
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(payload)))
                for name, value in extra.items():
                    self.send_header(name, value)
                self.end_headers()
                self.wfile.write(payload)

            do_GET = do_PUT = do_POST = do_DELETE = _handle

            def log_message(self, format, *args):
                pass

        return Handler


@pytest.fixture
def backend():
    server = MockBackend()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def client(backend):
    with Client(ClientConfig(base_url=backend.url)) as c:
        yield c
