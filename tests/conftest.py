"""
Shared test configuration and fixtures.
"""

import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from currency_layer.domain.models.currency import Currency
from currency_layer.domain.registry import CurrencyRegistry
from currency_layer.infrastructure.providers.currencylayer import CurrencyLayerProvider

TEST_API_KEY = "test_api_key_12345"

USD = Currency(code="USD", name="United States Dollar", exponent=2, symbol="$")
GBP = Currency(code="GBP", name="British Pound", exponent=2, symbol="£")
CAD = Currency(code="CAD", name="Canadian Dollar", exponent=2, symbol="$")
EUR = Currency(code="EUR", name="Euro", exponent=2, symbol="€")
JPY = Currency(code="JPY", name="Japanese Yen", exponent=0, symbol="¥")


@pytest.fixture
def registry():
    """Restricted registry so unknown-code paths are easy to hit"""
    return CurrencyRegistry([USD, GBP, CAD, EUR, JPY])


def make_response(payload, status_code=200):
    """Build a Mock standing in for an httpx.Response"""
    response = Mock()
    response.status_code = status_code
    response.text = payload if isinstance(payload, str) else json.dumps(payload)
    response.raise_for_status = Mock()
    return response


@pytest.fixture
def mock_http_client():
    return AsyncMock(spec=httpx.AsyncClient)


@pytest.fixture
def provider(mock_http_client):
    return CurrencyLayerProvider(api_key=TEST_API_KEY, client=mock_http_client)
