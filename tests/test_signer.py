"""
Unit tests for credential signing.
"""

import base64
import hashlib
import hmac
import os
from unittest.mock import patch

import pytest

from parworks_client import ConfigurationError, Credentials
from parworks_client.constants import HEADER_API_KEY, HEADER_SALT, HEADER_SIGNATURE
from parworks_client.signer import sign


def reference_hmac(secret: bytes, message: str) -> bytes:
    return hmac.new(secret, message.encode('ascii'), hashlib.sha256).digest()


class TestSign:
    """Test the HMAC primitive."""

    def test_sign_base64(self):
        signature = sign("S", "1700000000000")

        expected = base64.b64encode(reference_hmac(b"S", "1700000000000")).decode('ascii')
        assert signature == expected

    def test_sign_hex(self):
        signature = sign("S", "1700000000000", encoding='hex')

        assert len(signature) == 64
        assert signature == reference_hmac(b"S", "1700000000000").hex()

    def test_sign_matches_reference_for_random_secrets(self):
        for i in range(20):
            raw = os.urandom(32)
            secret = raw.hex()
            timestamp = str(1600000000000 + i * 7919)

            expected = base64.b64encode(
                reference_hmac(secret.encode('utf-8'), timestamp)
            ).decode('ascii')
            assert sign(secret, timestamp) == expected

    def test_sign_unknown_encoding(self):
        with pytest.raises(ConfigurationError):
            sign("S", "1", encoding='base32')


class TestCredentials:
    """Test the authentication triple."""

    def test_create_fixed_timestamp(self):
        credentials = Credentials.create("K", "S", now_ms=1700000000000)

        assert credentials.api_key == "K"
        assert credentials.timestamp == "1700000000000"
        assert credentials.signature == sign("S", "1700000000000")

    def test_create_uses_wall_clock(self):
        with patch('parworks_client.signer.current_millis', return_value=1234567890123):
            credentials = Credentials.create("K", "S")

        assert credentials.timestamp == "1234567890123"

    def test_same_millisecond_is_equal(self):
        first = Credentials.create("K", "S", now_ms=1700000000000)
        second = Credentials.create("K", "S", now_ms=1700000000000)

        assert first == second

    def test_different_millisecond_differs(self):
        first = Credentials.create("K", "S", now_ms=1700000000000)
        second = Credentials.create("K", "S", now_ms=1700000000001)

        assert first != second
        assert first.signature != second.signature

    def test_credentials_are_immutable(self):
        credentials = Credentials.create("K", "S", now_ms=1)

        with pytest.raises(AttributeError):
            credentials.signature = "forged"

    def test_headers(self):
        credentials = Credentials.create("K", "S", now_ms=1700000000000)

        assert credentials.headers() == {
            HEADER_API_KEY: "K",
            HEADER_SALT: "1700000000000",
            HEADER_SIGNATURE: sign("S", "1700000000000"),
        }

    def test_repr_hides_secrets(self):
        credentials = Credentials.create("my-api-key", "S", now_ms=1)

        assert "my-api-key" not in repr(credentials)
        assert credentials.signature not in repr(credentials)

    def test_empty_keys_rejected(self):
        with pytest.raises(ConfigurationError):
            Credentials.create("", "S")

        with pytest.raises(ConfigurationError):
            Credentials.create("K", "")
