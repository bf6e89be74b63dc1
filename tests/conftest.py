"""Shared fixtures for visitor console tests."""

from unittest.mock import Mock

import pytest

from visitor_console.api_client import APIClient


@pytest.fixture
def session():
    """Fake requests.Session; set session.request.return_value per test"""
    return Mock()


@pytest.fixture
def client(session):
    return APIClient(
        base_url="http://api.test",
        token="test-token-1234567890",
        timeout=5,
        session=session
    )


@pytest.fixture
def mock_client():
    """Service-level fake for APIClient"""
    return Mock(spec=APIClient)
