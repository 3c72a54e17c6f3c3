"""
Shared fixtures for ParWorks client tests.
"""

import json
from unittest.mock import Mock

import pytest
import requests


def make_response(status_code=200, body=None, text=None):
    """Build a requests.Response double with a JSON (or raw text) body."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    if text is None:
        text = json.dumps(body if body is not None else {})
    response.text = text
    response.content = text.encode('utf-8')
    response.json.side_effect = lambda: json.loads(text)
    return response


@pytest.fixture
def response_factory():
    return make_response
