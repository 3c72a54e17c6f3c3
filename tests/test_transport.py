"""
Unit tests for the HTTP transport.
"""

import http.client
import socket
import threading
from unittest.mock import patch

import pytest
import requests
import urllib3

from parworks_client import ARClient, Credentials, ProtocolError, TransportError
from parworks_client.constants import HEADER_API_KEY, HEADER_SALT, HEADER_SIGNATURE
from parworks_client.transport import HTTPTransport, is_malformed_response

from conftest import make_response

URL = "http://dev.parworksapi.com/ar/ping?"


class TestHTTPTransport:
    """Test request dispatch and failure classification."""

    @pytest.fixture
    def credentials(self):
        return Credentials.create("K", "S", now_ms=1700000000000)

    @pytest.fixture
    def transport(self):
        transport = HTTPTransport(timeout=12)
        yield transport
        transport.close()

    @patch('parworks_client.transport.requests.Session.request')
    def test_send_headers(self, mock_request, transport, credentials):
        """Test that requests carry exactly the three auth headers."""
        mock_request.return_value = make_response(200, {"success": True})

        transport.send(credentials, 'GET', URL)

        mock_request.assert_called_once()
        args, kwargs = mock_request.call_args
        assert args == ('GET', URL)
        assert kwargs['headers'] == {
            HEADER_API_KEY: "K",
            HEADER_SALT: "1700000000000",
            HEADER_SIGNATURE: credentials.signature,
        }
        assert kwargs['timeout'] == 12
        assert 'files' not in kwargs

    @patch('parworks_client.transport.requests.Session.request')
    def test_send_timeout_override(self, mock_request, transport, credentials):
        mock_request.return_value = make_response(200)

        transport.send(credentials, 'GET', URL, timeout=2.5)

        assert mock_request.call_args[1]['timeout'] == 2.5

    @patch('parworks_client.transport.requests.Session.request')
    def test_send_multipart(self, mock_request, transport, credentials):
        mock_request.return_value = make_response(200)
        files = {'image': ('photo.jpg', b'\xff\xd8\xff')}

        transport.send(credentials, 'post', URL, files=files)

        args, kwargs = mock_request.call_args
        assert args[0] == 'POST'
        assert kwargs['files'] == files

    def test_multipart_requires_post(self, transport, credentials):
        with pytest.raises(ValueError):
            transport.send(credentials, 'GET', URL, files={'image': b'x'})

    def test_unsupported_method(self, transport, credentials):
        with pytest.raises(ValueError):
            transport.send(credentials, 'DELETE', URL)

    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("slow"),
        requests.exceptions.SSLError("bad cert"),
    ])
    @patch('parworks_client.transport.requests.Session.request')
    def test_transport_failures(self, mock_request, error, transport, credentials):
        mock_request.side_effect = error

        with pytest.raises(TransportError) as excinfo:
            transport.send(credentials, 'GET', URL)

        assert excinfo.value.__cause__ is error
        assert credentials.signature not in str(excinfo.value)

    @pytest.mark.parametrize("error", [
        requests.exceptions.ChunkedEncodingError("truncated"),
        requests.exceptions.ContentDecodingError("gzip"),
    ])
    @patch('parworks_client.transport.requests.Session.request')
    def test_protocol_failures(self, mock_request, error, transport, credentials):
        mock_request.side_effect = error

        with pytest.raises(ProtocolError):
            transport.send(credentials, 'GET', URL)

    def test_context_manager(self):
        with patch.object(requests.Session, 'close') as mock_close:
            with HTTPTransport() as transport:
                assert transport.session is not None

        mock_close.assert_called_once()


def serve_once(reply: bytes) -> str:
    """Start a one-shot socket server answering any request with raw bytes."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    server.bind(('127.0.0.1', 0))
    server.listen(1)
    port = server.getsockname()[1]

    def handle():
        try:
            conn, _ = server.accept()
            with conn:
                request = b''
                while b'\r\n\r\n' not in request:
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    request += chunk
                if reply:
                    conn.sendall(reply)
        finally:
            server.close()

    threading.Thread(target=handle, daemon=True).start()
    return f"http://127.0.0.1:{port}"


class TestServerResponses:
    """Test failure classification against a real socket."""

    def test_garbage_reply_is_protocol_error(self):
        base_url = serve_once(b"THIS IS NOT HTTP\r\n\r\n")

        with ARClient("K", "S", base_url=base_url, timeout=5) as client:
            with pytest.raises(ProtocolError) as excinfo:
                client.ping()

        assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectionError)

    def test_oversized_header_is_protocol_error(self):
        base_url = serve_once(
            b"HTTP/1.1 200 OK\r\nX-Padding: " + b"a" * 70000 + b"\r\n\r\n"
        )

        with ARClient("K", "S", base_url=base_url, timeout=5) as client:
            with pytest.raises(ProtocolError):
                client.ping()

    def test_closed_without_reply_is_transport_error(self):
        base_url = serve_once(b"")

        with ARClient("K", "S", base_url=base_url, timeout=5) as client:
            with pytest.raises(TransportError):
                client.ping()

    def test_valid_reply(self):
        body = b'{"success": true}'
        base_url = serve_once(
            b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
            b"Content-Length: " + str(len(body)).encode() + b"\r\n"
            b"Connection: close\r\n\r\n" + body
        )

        with ARClient("K", "S", base_url=base_url, timeout=5) as client:
            assert client.ping() is True


class TestIsMalformedResponse:
    """Test the connection error cause walk."""

    def test_bad_status_line(self):
        cause = urllib3.exceptions.ProtocolError(
            "Connection aborted.", http.client.BadStatusLine("garbage")
        )

        assert is_malformed_response(requests.exceptions.ConnectionError(cause)) is True

    def test_line_too_long(self):
        cause = urllib3.exceptions.ProtocolError(
            "Connection aborted.", http.client.LineTooLong("header line")
        )

        assert is_malformed_response(requests.exceptions.ConnectionError(cause)) is True

    def test_remote_disconnected(self):
        cause = urllib3.exceptions.ProtocolError(
            "Connection aborted.", http.client.RemoteDisconnected("closed")
        )

        assert is_malformed_response(requests.exceptions.ConnectionError(cause)) is False

    def test_connection_refused(self):
        error = requests.exceptions.ConnectionError(ConnectionRefusedError(111, "refused"))

        assert is_malformed_response(error) is False

    def test_invalid_outgoing_header_is_transport_error(self):
        with ARClient("bad\nkey", "S", base_url="http://127.0.0.1:9", timeout=1) as client:
            with pytest.raises(TransportError) as excinfo:
                client.ping()

        assert isinstance(excinfo.value.__cause__, requests.exceptions.InvalidHeader)
