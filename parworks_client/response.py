"""
Response envelope pairing a raw HTTP response with its decoder.
"""

import threading
from typing import Any, Callable, Generic, Mapping, TypeVar

import requests

from .exceptions import ARClientError, DomainError, ProtocolError

T = TypeVar('T')

Extractor = Callable[[requests.Response], T]

_UNSET = object()


class ARResponse(Generic[T]):
    """
    Lazily decoded platform response.

    The extractor runs on the first call to decoded(); its result (or the
    error it raised) is cached for later calls.
    """

    def __init__(self, raw: requests.Response, extractor: Extractor):
        self._raw = raw
        self._extractor = extractor
        self._lock = threading.Lock()
        self._value = _UNSET
        self._error = None

    @classmethod
    def from_response(cls, raw: requests.Response, extractor: Extractor) -> 'ARResponse[T]':
        return cls(raw, extractor)

    @property
    def raw_response(self) -> requests.Response:
        return self._raw

    @property
    def status_code(self) -> int:
        return self._raw.status_code

    def decoded(self) -> T:
        """Run the extractor once and return its payload."""
        with self._lock:
            if self._value is _UNSET and self._error is None:
                try:
                    self._value = self._extractor(self._raw)
                except ARClientError as e:
                    self._error = e
                except Exception as e:
                    # success body the extractor could not read
                    error = ProtocolError(
                        f"The server response body was incomplete: {type(e).__name__}"
                    )
                    error.__cause__ = e
                    self._error = error
            if self._error is not None:
                raise self._error
            return self._value

    @property
    def payload(self) -> T:
        return self.decoded()


def json_body(raw: requests.Response) -> Mapping[str, Any]:
    """Parse a JSON object body."""
    try:
        body = raw.json()
    except ValueError as e:
        raise ProtocolError("The server response body was not valid JSON") from e
    if not isinstance(body, dict):
        raise ProtocolError("The server response body was not a JSON object")
    return body


def require_success(raw: requests.Response, message: str) -> Mapping[str, Any]:
    """Parse the body and raise DomainError unless it reports success."""
    body = json_body(raw)
    if body.get('success') is not True:
        raise DomainError(message)
    return body
