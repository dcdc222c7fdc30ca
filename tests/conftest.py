"""
Pytest configuration and shared fixtures.

Provides framework-shaped request/response stand-ins, spec documents and
records for unit and integration tests.
"""

import pytest
from types import SimpleNamespace
from typing import Dict, Any

from src.validation.spec import parse_spec, load_spec
from tests.fakes import FakeResponse


@pytest.fixture
def request_headers() -> Dict[str, Any]:
    """Headers a browser-ish client would send."""
    return {
        "host": "shop.example.com:8080",
        "user-agent": "cool-agent",
        "content-length": "17",
        "accept": "application/json",
    }


@pytest.fixture
def fake_request(request_headers):
    """
    Fixture providing a request object with the usual framework attributes.
    
    Returns:
        SimpleNamespace: method, http_version, headers, url, hostname, socket
    """
    return SimpleNamespace(
        method="POST",
        http_version="1.1",
        headers=request_headers,
        url="/cart/items?sku=42#summary",
        hostname="shop.example.com:8080",
        socket=SimpleNamespace(
            encrypted=False,
            remote_address="10.0.0.7",
            remote_port=51234,
        ),
    )


@pytest.fixture
def fake_response():
    """Fixture providing a response with JSON content headers."""
    return FakeResponse(
        status_code=201,
        headers={"content-type": "application/json", "content-length": "42"},
    )


@pytest.fixture
def bundled_spec():
    """The spec document shipped with the package."""
    return load_spec()


@pytest.fixture
def ordering_spec():
    """
    Small spec indexing @timestamp, log.level and message in that order.
    
    Used where tests want a placeholder timestamp without datetime checks.
    """
    return parse_spec({
        "fields": {
            "@timestamp": {"type": "string", "required": True, "index": 0},
            "log.level": {"type": "string", "required": True, "index": 1, "top_level_field": True},
            "message": {"type": "string", "required": True, "index": 2},
            "ecs.version": {"type": "string", "required": True, "top_level_field": True},
        }
    })


@pytest.fixture
def valid_record() -> Dict[str, Any]:
    """A minimal record that satisfies the bundled spec."""
    return {
        "@timestamp": "2025-02-07T10:30:45.123Z",
        "log.level": "info",
        "message": "hello",
        "ecs.version": "1.6.0",
    }


def pytest_configure(config):
    """
    Pytest hook for custom configuration.
    
    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
