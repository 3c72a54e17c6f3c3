"""
Custom exceptions for the ParWorks AR client library.
"""


class ARClientError(Exception):
    """Base exception for ParWorks AR client errors."""
    pass


class ConfigurationError(ARClientError):
    """Raised when client configuration is invalid."""
    pass


class EncodingError(ARClientError):
    """Raised when a query parameter value cannot be encoded as UTF-8."""
    pass


class TransportError(ARClientError):
    """Raised when the HTTP connection fails (I/O, DNS, TLS, timeout)."""
    pass


class ProtocolError(ARClientError):
    """Raised when the server response is malformed."""
    pass


class HTTPStatusError(ARClientError):
    """Raised when the server answers with a non-success status code."""

    def __init__(self, status_code: int, message: str = None):
        if message is None:
            message = f"The server responded with status code: {status_code}"
        super().__init__(message)
        self.status_code = status_code


class BadRequestError(HTTPStatusError):
    """400: the input parameters were rejected."""

    def __init__(self):
        super().__init__(
            400,
            "The server responded with 400 bad request. "
            "There was probably a problem with the input parameters."
        )


class AuthenticationError(HTTPStatusError):
    """401: the credentials were rejected."""

    def __init__(self):
        super().__init__(
            401,
            "The server responded with 401 authentication failed. "
            "The credentials were incorrect."
        )


class PathError(HTTPStatusError):
    """404: the endpoint path does not exist."""

    def __init__(self):
        super().__init__(
            404,
            "The server responded with 404 problem accessing path. "
            "There was an error in the path."
        )


class DomainError(ARClientError):
    """Raised when the server reports success == false for a call."""
    pass
