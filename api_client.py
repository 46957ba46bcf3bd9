# api_client.py - HTTP client wrapper around requests for API integration tests
"""
Client for exercising a web service from tests.

    client = Client(ClientConfig(base_url="http://localhost:3000/"))

    user = client.get_json("/users/12345", User)
    user.name = "Tom"
    client.put_json("/users/12345", user)

    page = client.post_page("/login", {"user": "tom", "password": "hunter2"})

Every call goes out as a single request, non-2xx responses raise a
`utils.exceptions.ResponseError` subclass and the response is closed before
the call returns.
"""
import copy
import os
from dataclasses import dataclass
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

import requests
from requests.structures import CaseInsensitiveDict

from utils.codec import decode_into, decode_json, encode_form, encode_json
from utils.exceptions import BinaryBodyError, BodyReadError, DecodeError, StatusError
from utils.logger import get_logger, redact_headers
from utils.urls import rebase_url

logger = get_logger("api-client")

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
HTML_ACCEPT = "text/html"

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ClientConfig:
    base_url: Optional[str] = None
    timeout: Optional[float] = DEFAULT_TIMEOUT

    def __post_init__(self):
        if self.base_url:
            parts = urlsplit(self.base_url)
            if not parts.scheme or not parts.netloc:
                raise ValueError(f"base URL needs a scheme and a host: {self.base_url!r}")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Read BASE_URL and TIMEOUT from the environment."""
        base_url = os.environ.get("BASE_URL") or None
        timeout = float(os.environ.get("TIMEOUT", str(DEFAULT_TIMEOUT)))
        return cls(base_url=base_url, timeout=timeout)


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _read_body(response: requests.Response) -> bytes:
    try:
        return response.content
    except requests.RequestException as err:
        raise BodyReadError(response.status_code, err) from err


def _check_status(response: requests.Response) -> None:
    if _is_success(response.status_code):
        return
    body = _read_body(response)
    try:
        body.decode("utf-8")
    except UnicodeDecodeError:
        raise BinaryBodyError(response.status_code, body) from None
    raise StatusError(response.status_code, body)


def _page_text(response: requests.Response, body: bytes) -> str:
    # requests falls back to ISO-8859-1 for text/* without a charset; only
    # trust the encoding when the server actually declared one
    content_type = response.headers.get("Content-Type", "")
    encoding = "utf-8"
    if "charset" in content_type.lower() and response.encoding:
        encoding = response.encoding
    try:
        return body.decode(encoding, errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def _set_headers(request: requests.Request, content_type: str, accept: str) -> None:
    headers = CaseInsensitiveDict(request.headers or {})
    headers["Content-Type"] = content_type
    headers["Accept"] = accept
    request.headers = headers


class Client:
    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or ClientConfig()
        self.session = session or requests.Session()
        # responses must not leave cookies behind for later calls
        self.session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _rebase(self, request: requests.Request) -> requests.Request:
        rebased = copy.copy(request)
        rebased.headers = CaseInsensitiveDict(request.headers or {})
        rebased.url = rebase_url(request.url, self.config.base_url)
        return rebased

    def do(self, request: requests.Request, stream: bool = False) -> requests.Response:
        """
        Send `request`, moved onto the configured base URL if there is one.
        The caller's request is left untouched. Transport errors are raised
        as they come from requests. The caller owns the returned response.
        """
        if self.config.base_url:
            request = self._rebase(request)

        prepared = self.session.prepare_request(request)
        logger.debug("%s %s", prepared.method, prepared.url)
        for k, v in redact_headers(prepared.headers).items():
            logger.debug("REQ-HEADER %s: %s", k, v)

        response = self.session.send(prepared, stream=stream, timeout=self.config.timeout)
        logger.debug("%s %s -> %s", prepared.method, prepared.url, response.status_code)
        return response

    # JSON

    def do_json(self, request: requests.Request, target: Any = None) -> Any:
        """
        Send `request` as a JSON call and decode a 2xx body into `target`
        (see utils.codec.decode_into). With no target the body is discarded
        and None returned.
        """
        _set_headers(request, JSON_CONTENT_TYPE, JSON_CONTENT_TYPE)

        response = self.do(request, stream=True)
        try:
            _check_status(response)
            body = _read_body(response)
            if target is None:
                return None
            try:
                return decode_into(target, decode_json(body))
            except (ValueError, TypeError) as err:
                raise DecodeError(response.status_code, err) from err
        finally:
            response.close()

    def get_json(self, path: str, target: Any = None) -> Any:
        return self.do_json(requests.Request("GET", path), target)

    def put_json(self, path: str, payload: Any, target: Any = None) -> Any:
        data = encode_json(payload)
        return self.do_json(requests.Request("PUT", path, data=data), target)

    def post_json(self, path: str, payload: Any, target: Any = None) -> Any:
        data = encode_json(payload)
        return self.do_json(requests.Request("POST", path, data=data), target)

    def delete_json(self, path: str, target: Any = None) -> Any:
        return self.do_json(requests.Request("DELETE", path), target)

    # HTML pages / forms

    def do_page(self, request: requests.Request) -> str:
        """Send `request` as a form call and return the 2xx body as text."""
        _set_headers(request, FORM_CONTENT_TYPE, HTML_ACCEPT)

        response = self.do(request, stream=True)
        try:
            _check_status(response)
            return _page_text(response, _read_body(response))
        finally:
            response.close()

    def get_page(self, path: str) -> str:
        return self.do_page(requests.Request("GET", path))

    def put_page(self, path: str, values: Mapping[str, Any]) -> str:
        return self.do_page(requests.Request("PUT", path, data=encode_form(values)))

    def post_page(self, path: str, values: Mapping[str, Any]) -> str:
        return self.do_page(requests.Request("POST", path, data=encode_form(values)))

    def delete_page(self, path: str) -> str:
        return self.do_page(requests.Request("DELETE", path))
