from .currencylayer import CurrencyLayerProvider
from .schemas import CurrencyRatesResponse, ErrorResponse, SuccessGuard, parse_rates_body

__all__ = [
    'CurrencyLayerProvider',
    'CurrencyRatesResponse',
    'ErrorResponse',
    'SuccessGuard',
    'parse_rates_body',
]
