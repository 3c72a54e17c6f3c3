"""
Synchronous and asynchronous invocation of platform calls.

Both forms share one pipeline: build the URL, send the request, classify
the status, wrap the response in an ARResponse. The synchronous form
decodes on the caller's thread; the asynchronous form runs the pipeline
and the decode on a worker thread and reports through a Future and the
optional success/error callbacks.
"""

import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from .exceptions import ARClientError
from .response import ARResponse, Extractor
from .signer import Credentials
from .status import check_status
from .transport import HTTPTransport
from .urls import build_url

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[ARResponse], Any]
ErrorCallback = Callable[[ARClientError], Any]


@dataclass(frozen=True)
class ARCall:
    """Everything needed to perform one platform call."""

    method: str
    path: str
    extractor: Extractor
    params: Mapping[str, Any] = field(default_factory=dict)
    files: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        method = self.method.upper()
        if method not in HTTPTransport.METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if self.files and method != 'POST':
            raise ValueError("Multipart bodies are only sent with POST")
        object.__setattr__(self, 'method', method)


class Invoker:
    """Runs ARCalls against the platform for one client handle."""

    def __init__(
        self,
        credentials: Credentials,
        transport: HTTPTransport,
        base_url: str,
        executor: Executor
    ):
        self.credentials = credentials
        self.transport = transport
        self.base_url = base_url
        self.executor = executor
        self._worker = threading.local()

    def execute(self, call: ARCall, timeout: Optional[float] = None) -> ARResponse:
        """
        Compose, dispatch and classify one call.

        Args:
            call: Call descriptor
            timeout: Per-call deadline in seconds

        Returns:
            Undecoded ARResponse bound to the call's extractor

        Raises:
            EncodingError: Before any I/O, if a parameter is not UTF-8
            TransportError, ProtocolError: If the request fails
            HTTPStatusError: If the status code is not a success
        """
        url = build_url(self.base_url, call.path, call.params)
        raw = self.transport.send(
            self.credentials,
            call.method,
            url,
            files=call.files,
            timeout=timeout
        )
        check_status(raw.status_code)
        return ARResponse.from_response(raw, call.extractor)

    def call(self, call: ARCall, timeout: Optional[float] = None):
        """Perform a call on the caller's thread and return its payload."""
        return self.execute(call, timeout).decoded()

    def call_async(
        self,
        call: ARCall,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        timeout: Optional[float] = None
    ) -> 'Future[ARResponse]':
        """
        Perform a call on a worker thread.

        Exactly one of on_success (with the decoded ARResponse) or on_error
        (with the ARClientError) is invoked on the worker thread before the
        returned Future settles. The Future resolves to the ARResponse or
        raises the same error.
        """
        logger.debug("Dispatching async %s %s", call.method, call.path)
        return self.executor.submit(self._run, call, on_success, on_error, timeout)

    def in_worker(self) -> bool:
        """True when called from one of this invoker's async worker threads."""
        return getattr(self._worker, 'active', False)

    def _run(self, call, on_success, on_error, timeout) -> ARResponse:
        self._worker.active = True
        try:
            return self._deliver(call, on_success, on_error, timeout)
        finally:
            self._worker.active = False

    def _deliver(self, call, on_success, on_error, timeout) -> ARResponse:
        try:
            response = self.execute(call, timeout)
            response.decoded()
        except ARClientError as e:
            error = e
        except Exception as e:
            error = ARClientError(f"The call failed unexpectedly: {type(e).__name__}")
            error.__cause__ = e
        else:
            if on_success is not None:
                on_success(response)
            return response

        if on_error is not None:
            on_error(error)
        raise error
