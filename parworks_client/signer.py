"""
Credential signing for the ParWorks AR platform.

Each client handle carries one authentication triple: the API key, a
millisecond timestamp (the "salt") fixed at construction, and the
HMAC-SHA256 of that timestamp keyed with the secret key.
"""

import base64
import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Dict, Optional

from .constants import (
    HEADER_API_KEY,
    HEADER_SALT,
    HEADER_SIGNATURE,
    SIGNATURE_ENCODINGS
)
from .exceptions import ConfigurationError


def sign(secret_key: str, message: str, encoding: str = 'base64') -> str:
    """
    Generate HMAC-SHA256 signature of a message.

    Args:
        secret_key: HMAC secret key
        message: Message to sign (ASCII timestamp for request auth)
        encoding: Output representation, 'base64' or 'hex'

    Returns:
        ASCII-encoded HMAC signature

    Raises:
        ConfigurationError: If encoding is not supported
    """
    if encoding not in SIGNATURE_ENCODINGS:
        raise ConfigurationError(f"Unsupported signature encoding: {encoding}")

    mac = hmac.new(
        secret_key.encode('utf-8'),
        message.encode('utf-8'),
        hashlib.sha256
    )
    if encoding == 'hex':
        return mac.hexdigest()
    return base64.b64encode(mac.digest()).decode('ascii')


def current_millis() -> int:
    """Wall-clock milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Credentials:
    """Immutable authentication triple sent with every request."""

    api_key: str
    timestamp: str
    signature: str

    @classmethod
    def create(
        cls,
        api_key: str,
        secret_key: str,
        encoding: str = 'base64',
        now_ms: Optional[int] = None
    ) -> 'Credentials':
        """
        Derive credentials from a key pair.

        Args:
            api_key: Platform API key
            secret_key: Platform secret key (never stored)
            encoding: Signature representation
            now_ms: Timestamp override in milliseconds, defaults to now

        Returns:
            Credentials with a fresh timestamp and signature
        """
        if not api_key:
            raise ConfigurationError("api_key cannot be empty")
        if not secret_key:
            raise ConfigurationError("secret_key cannot be empty")

        timestamp = str(current_millis() if now_ms is None else now_ms)
        return cls(api_key, timestamp, sign(secret_key, timestamp, encoding))

    def headers(self) -> Dict[str, str]:
        """Auth headers for one request."""
        return {
            HEADER_API_KEY: self.api_key,
            HEADER_SALT: self.timestamp,
            HEADER_SIGNATURE: self.signature,
        }

    def __repr__(self):
        return f"Credentials(api_key=***, timestamp={self.timestamp})"
