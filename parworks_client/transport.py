"""
HTTP transport for signed ParWorks requests.

A single requests.Session is shared by every call made through a client
handle; requests sessions are safe to use from the async worker threads.
"""

import http.client
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import requests

from .exceptions import ProtocolError, TransportError
from .signer import Credentials

logger = logging.getLogger(__name__)

_PROTOCOL_ERRORS = (
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
    requests.exceptions.TooManyRedirects,
)


def is_malformed_response(error: BaseException) -> bool:
    """
    Tell whether a connection error was caused by an unparseable response.

    requests wraps http.client parse failures (bad status line, oversized
    header line) in urllib3's ProtocolError inside a ConnectionError. A
    connection closed before any status line (RemoteDisconnected) is a
    transport failure, not a malformed response.
    """
    seen = set()
    pending = [error]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))

        # RemoteDisconnected subclasses BadStatusLine
        if isinstance(current, http.client.RemoteDisconnected):
            return False
        if isinstance(current, (http.client.BadStatusLine, http.client.LineTooLong)):
            return True

        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                pending.append(linked)
    return False


class HTTPTransport:
    """Dispatches one authenticated request per call, without retry."""

    METHODS = ('GET', 'POST')

    def __init__(self, timeout: float = 30):
        self.timeout = timeout
        self.session = requests.Session()

    def send(
        self,
        credentials: Credentials,
        method: str,
        url: str,
        files: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> requests.Response:
        """
        Make authenticated HTTP request.

        Args:
            credentials: Auth triple placed in the request headers
            method: 'GET' or 'POST'
            url: Absolute URL including the encoded query string
            files: Multipart form parts (POST only)
            timeout: Deadline in seconds, defaults to the transport timeout

        Returns:
            requests.Response with its body already read

        Raises:
            ProtocolError: If the server response is malformed
            TransportError: If the connection fails or times out
        """
        method = method.upper()
        if method not in self.METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        if files and method != 'POST':
            raise ValueError("Multipart bodies are only sent with POST")

        kwargs = {
            'headers': credentials.headers(),
            'timeout': self.timeout if timeout is None else timeout,
        }
        if files:
            kwargs['files'] = files

        logger.debug("%s %s", method, urlsplit(url).path)
        try:
            response = self.session.request(method, url, **kwargs)
        except _PROTOCOL_ERRORS as e:
            raise ProtocolError(
                f"The HTTP response from the server was invalid: {type(e).__name__}"
            ) from e
        except requests.ConnectionError as e:
            if is_malformed_response(e):
                raise ProtocolError(
                    "The HTTP response from the server was invalid: malformed status or headers"
                ) from e
            raise TransportError(
                f"The HTTP connection was aborted or a problem occurred: {type(e).__name__}"
            ) from e
        except requests.RequestException as e:
            raise TransportError(
                f"The HTTP connection was aborted or a problem occurred: {type(e).__name__}"
            ) from e

        logger.debug("%s %s -> %s", method, urlsplit(url).path, response.status_code)
        return response

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
