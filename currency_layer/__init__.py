"""Client for the free live and historical endpoints of https://currencylayer.com/."""

from currency_layer.application.services import RateService
from currency_layer.domain.exceptions.currency import (
    ConversionError,
    CurrencyLayerError,
    InvalidCurrencyError,
    ProviderError,
    ResponseParseError,
    ServerError,
    TransportError,
)
from currency_layer.domain.models.currency import Currency, CurrencyRates, ExchangeRate, Money
from currency_layer.domain.registry import CurrencyRegistry, default_registry

__all__ = [
    'ConversionError',
    'Currency',
    'CurrencyLayerError',
    'CurrencyRates',
    'CurrencyRegistry',
    'ExchangeRate',
    'InvalidCurrencyError',
    'Money',
    'ProviderError',
    'RateService',
    'ResponseParseError',
    'ServerError',
    'TransportError',
    'default_registry',
]
