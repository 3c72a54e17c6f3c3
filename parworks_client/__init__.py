"""
ParWorks AR Client Library

A Python client library for the ParWorks augmented-reality platform: it
signs every request with the account's API key pair, and creates, finds
and augments images against geolocated sites.

Example usage:
    from parworks_client import ARClient

    with ARClient("your-api-key", "your-secret-key") as client:
        site = client.sites.get_existing("my-site")
        future = client.sites.near_async(37.0, -122.0)
"""

from .client import ARClient
from .exceptions import (
    ARClientError,
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    DomainError,
    EncodingError,
    HTTPStatusError,
    PathError,
    ProtocolError,
    TransportError
)
from .invoker import ARCall, Invoker
from .models import AugmentedImage, AugmentResult, BaseImage, Overlay, SiteInfo
from .response import ARResponse
from .signer import Credentials
from .sites import ARSite, ARSites
from .constants import (
    HEADER_API_KEY,
    HEADER_SALT,
    HEADER_SIGNATURE,
    DEFAULT_CONFIG,
    PARWORKS_API_BASE_URL
)

__version__ = "1.0.0"
__all__ = [
    "ARClient",
    "ARSites",
    "ARSite",
    "ARCall",
    "Invoker",
    "ARResponse",
    "Credentials",
    "SiteInfo",
    "BaseImage",
    "Overlay",
    "AugmentedImage",
    "AugmentResult",
    "ARClientError",
    "ConfigurationError",
    "EncodingError",
    "TransportError",
    "ProtocolError",
    "HTTPStatusError",
    "BadRequestError",
    "AuthenticationError",
    "PathError",
    "DomainError",
    "HEADER_API_KEY",
    "HEADER_SALT",
    "HEADER_SIGNATURE",
    "DEFAULT_CONFIG",
    "PARWORKS_API_BASE_URL"
]
