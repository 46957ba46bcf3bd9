"""Errors raised by the API client for responses it could not accept."""
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    STATUS = "status"
    BINARY = "binary"
    READ = "read"
    DECODE = "decode"


class ResponseError(Exception):
    """
    Base error for a response that came back but could not be used.

    `status_code` is the HTTP status of the response, `raw_message` the text
    after the status prefix and `cause` the underlying exception, if any.
    """
    kind: Optional[ErrorKind] = None

    def __init__(self, status_code: int, raw_message: str, cause: Optional[BaseException] = None):
        super().__init__(f"got {status_code} code and {raw_message}")
        self.status_code = status_code
        self.raw_message = raw_message
        self.cause = cause


class StatusError(ResponseError):
    """Non-2xx status with a text body; the body is part of the message."""
    kind = ErrorKind.STATUS

    def __init__(self, status_code: int, body: bytes):
        super().__init__(status_code, f"response: {body.decode('utf-8')}")
        self.body = body


class BinaryBodyError(StatusError):
    """Non-2xx status with a body that is not UTF-8; only its size is reported."""
    kind = ErrorKind.BINARY

    def __init__(self, status_code: int, body: bytes):
        ResponseError.__init__(self, status_code, f"{len(body)} bytes of binary data")
        self.body = body


class BodyReadError(ResponseError):
    kind = ErrorKind.READ

    def __init__(self, status_code: int, cause: BaseException):
        super().__init__(status_code, f"failed to read response body: {cause}", cause)


class DecodeError(ResponseError):
    kind = ErrorKind.DECODE

    def __init__(self, status_code: int, cause: BaseException):
        super().__init__(status_code, f"failed to decode response body: {cause}", cause)
