"""HTTP status classification."""

from typing import Optional

from .constants import SUCCESS_STATUS_MAX, SUCCESS_STATUS_MIN
from .exceptions import (
    AuthenticationError,
    BadRequestError,
    HTTPStatusError,
    PathError
)

_KNOWN_FAILURES = {
    400: BadRequestError,
    401: AuthenticationError,
    404: PathError,
}


def is_success(status_code: int) -> bool:
    return SUCCESS_STATUS_MIN <= status_code <= SUCCESS_STATUS_MAX


def classify_status(status_code: int) -> Optional[HTTPStatusError]:
    """Return the failure for a status code, or None when it is a success."""
    if is_success(status_code):
        return None
    failure = _KNOWN_FAILURES.get(status_code)
    if failure is not None:
        return failure()
    return HTTPStatusError(status_code)


def check_status(status_code: int):
    """Raise the classified failure for a non-success status code."""
    error = classify_status(status_code)
    if error is not None:
        raise error
