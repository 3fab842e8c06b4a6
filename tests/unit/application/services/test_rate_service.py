# nosec B101


from datetime import UTC, date, datetime
from decimal import Decimal

import httpx
import pytest

from currency_layer.application.services.rate_service import RateService, format_date
from currency_layer.config.settings import Settings
from currency_layer.domain.exceptions.currency import (
    InvalidCurrencyError,
    ResponseParseError,
    ServerError,
    TransportError,
)
from currency_layer.domain.models.currency import Money
from tests.conftest import TEST_API_KEY, USD, make_response
from tests.fixtures.api_responses import CURRENCYLAYER_RESPONSES


@pytest.fixture
def service(provider, registry):
    return RateService(provider, registry=registry)


# ============================================================================
# TEST: get_live_rates()
# ============================================================================

@pytest.mark.asyncio
async def test_live_rates_example_scenario(service, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['live_success'])

    result = await service.get_live_rates(['GBP', 'USD', 'CAD'])

    assert set(result.quotes) == {'GBP', 'CAD'}
    assert result.quotes['GBP'].rate == Decimal('0.7174')
    assert result.quotes['CAD'].rate == Decimal('1.2716')
    assert result.timestamp == datetime(2021, 2, 16, 2, 12, 6, tzinfo=UTC)

    converted = result.convert(Money.from_major(100, USD), 'GBP')
    assert converted.amount == Decimal('71.74')
    assert converted.currency.code == 'GBP'

    params = mock_http_client.get.call_args[1]['params']
    assert params == {'currencies': 'GBP,USD,CAD', 'format': '1', 'access_key': TEST_API_KEY}


@pytest.mark.asyncio
async def test_live_rates_normalizes_and_dedupes_codes(service, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['live_success'])

    result = await service.get_live_rates([' gbp', 'GBP', 'cad'])

    assert set(result.quotes) == {'GBP', 'CAD'}
    assert mock_http_client.get.call_args[1]['params']['currencies'] == 'GBP,CAD'


@pytest.mark.asyncio
async def test_unknown_currency_fails_before_request(service, mock_http_client):
    with pytest.raises(InvalidCurrencyError) as exc_info:
        await service.get_live_rates(['GBP', 'XYZ'])

    assert exc_info.value.code == 'XYZ'
    mock_http_client.get.assert_not_called()


@pytest.mark.asyncio
async def test_server_error_is_propagated_verbatim(service, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['usage_limit_reached'])

    with pytest.raises(ServerError) as exc_info:
        await service.get_live_rates(['GBP'])

    assert exc_info.value.code == 104
    assert exc_info.value.message == (
        'Your monthly usage limit has been reached. Please upgrade your subscription plan.'
    )


@pytest.mark.asyncio
async def test_missing_success_is_parse_error(service, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['missing_success'])

    with pytest.raises(ResponseParseError):
        await service.get_live_rates(['GBP'])


@pytest.mark.asyncio
async def test_missing_requested_currency_fails_whole_call(service, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['missing_currency'])

    with pytest.raises(InvalidCurrencyError) as exc_info:
        await service.get_live_rates(['GBP', 'CAD'])

    assert exc_info.value.code == 'CAD'


@pytest.mark.asyncio
async def test_transport_error_propagates(service, mock_http_client):
    mock_http_client.get.side_effect = httpx.ConnectError('Connection refused')

    with pytest.raises(TransportError):
        await service.get_live_rates(['GBP'])


# ============================================================================
# TEST: get_historical_rates()
# ============================================================================

@pytest.mark.asyncio
async def test_historical_rates_zero_pads_date(service, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['historical_success'])

    result = await service.get_historical_rates(['GBP', 'USD', 'CAD'], (2015, 2, 23))

    call_args = mock_http_client.get.call_args
    assert call_args[0][0].endswith('/historical')
    assert call_args[1]['params']['date'] == '2015-02-23'
    assert result.convert(Money.from_major(100, USD), 'GBP').amount == Decimal('64.70')
    assert result.timestamp == datetime(2015, 2, 23, 23, 59, 59, tzinfo=UTC)


@pytest.mark.asyncio
async def test_historical_rates_accepts_date_object(service, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['historical_success'])

    await service.get_historical_rates(['GBP'], date(2015, 2, 3))

    assert mock_http_client.get.call_args[1]['params']['date'] == '2015-02-03'


@pytest.mark.parametrize('value, expected', [
    ((2015, 2, 23), '2015-02-23'),
    ((2020, 12, 1), '2020-12-01'),
    (date(1999, 1, 9), '1999-01-09'),
])
def test_format_date(value, expected):
    assert format_date(value) == expected


@pytest.mark.parametrize('value', [
    ('2015', '02', '23'),
    (2015, 2),
    (2015, 2, 30),
    (2015, 13, 1),
    20150223,
])
def test_format_date_rejects_malformed_dates(value):
    with pytest.raises(ResponseParseError):
        format_date(value)


@pytest.mark.asyncio
async def test_malformed_historical_date_fails_before_request(service, mock_http_client):
    with pytest.raises(ResponseParseError):
        await service.get_historical_rates(['GBP'], (2015, 2))

    mock_http_client.get.assert_not_called()


# ============================================================================
# TEST: rebasing
# ============================================================================

@pytest.mark.asyncio
async def test_live_rates_rebased_appends_base_to_query(service, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['rebase_success'])

    result = await service.get_live_rates(['GBP', 'JPY'], base='eur')

    assert mock_http_client.get.call_args[1]['params']['currencies'] == 'GBP,JPY,EUR'
    assert result.base.code == 'EUR'
    assert result.quotes['GBP'].rate == Decimal('0.875')
    assert result.quotes['JPY'].rate == Decimal('125')


@pytest.mark.asyncio
async def test_default_base_currency_from_constructor(provider, registry, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['rebase_success'])
    service = RateService(provider, registry=registry, base_currency='EUR')

    result = await service.get_live_rates(['GBP'])

    assert result.base.code == 'EUR'
    assert set(result.quotes) == {'GBP'}


@pytest.mark.asyncio
async def test_rebase_without_base_quote_is_invalid_currency(service, mock_http_client):
    mock_http_client.get.return_value = make_response(CURRENCYLAYER_RESPONSES['live_success'])

    with pytest.raises(InvalidCurrencyError) as exc_info:
        await service.get_live_rates(['GBP'], base='EUR')

    assert exc_info.value.code == 'EUR'


# ============================================================================
# TEST: lifecycle / construction
# ============================================================================

@pytest.mark.asyncio
async def test_context_manager_closes_provider(service, mock_http_client):
    async with service as svc:
        assert svc is service

    mock_http_client.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_from_settings_builds_provider():
    settings = Settings(
        CURRENCYLAYER_API_KEY='from-settings',
        CURRENCYLAYER_BASE_URL='https://api.currencylayer.com',
        CURRENCYLAYER_TIMEOUT=3,
        CURRENCYLAYER_BASE_CURRENCY='gbp',
    )

    service = RateService.from_settings(settings)
    try:
        assert service.provider.api_key == 'from-settings'
        assert service.provider.base_url == 'https://api.currencylayer.com'
        assert service.base_currency == 'GBP'
    finally:
        await service.close()
