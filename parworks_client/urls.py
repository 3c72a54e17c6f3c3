"""
Request URL composition.

The platform expects every query string to start with ``?`` followed by
``&name=value`` for each parameter, so an empty parameter set still ends
in ``?`` and the first pair is preceded by ``&``.
"""

from typing import Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import quote_plus

from .exceptions import EncodingError

Params = Union[Mapping[str, object], Iterable[Tuple[str, object]]]


def join_path(base_url: str, path: str) -> str:
    """Join base URL and endpoint path with exactly one slash."""
    return base_url.rstrip('/') + '/' + path.lstrip('/')


def _to_text(value) -> str:
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


def encode_query(params: Optional[Params] = None) -> str:
    """
    Encode parameters as ``&name=value`` pairs.

    Args:
        params: Mapping or iterable of (name, value) pairs. Duplicate names
            keep the last value. None values are sent empty.

    Returns:
        Encoded query fragment (without the leading ``?``)

    Raises:
        EncodingError: If a value cannot be encoded as UTF-8
    """
    if not params:
        return ''
    items = params.items() if isinstance(params, Mapping) else params

    query = ''
    for name, value in dict(items).items():
        try:
            encoded = quote_plus(_to_text(value), encoding='utf-8', errors='strict')
        except UnicodeEncodeError as e:
            raise EncodingError(f"Value of parameter '{name}' is not valid UTF-8") from e
        query += f"&{name}={encoded}"
    return query


def build_url(base_url: str, path: str, params: Optional[Params] = None) -> str:
    """Compose an absolute request URL."""
    return join_path(base_url, path) + '?' + encode_query(params)
