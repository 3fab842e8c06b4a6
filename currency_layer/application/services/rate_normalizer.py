import logging
from collections.abc import Sequence
from decimal import Decimal, DecimalException

from currency_layer.domain.exceptions.currency import (
    ConversionError,
    InvalidCurrencyError,
    ResponseParseError,
)
from currency_layer.domain.models.currency import Currency, CurrencyRates, ExchangeRate
from currency_layer.domain.registry import CurrencyLookup
from currency_layer.infrastructure.providers.schemas import CurrencyRatesResponse

logger = logging.getLogger(__name__)


class RateNormalizer:
    """Turns source-relative quotes into typed rates for the requested currencies.

    Two policies are offered and a call uses exactly one of them:

    * ``passthrough`` keeps the response's source currency (USD on the free
      tier) as the base of every rate.
    * ``rebase`` re-expresses the quotes from a caller-chosen base using
      ``quote[source + c] / quote[source + base]``.
    """

    def __init__(self, registry: CurrencyLookup):
        self.registry = registry

    def resolve(self, code: str) -> Currency:
        currency = self.registry.find(code)
        if currency is None:
            logger.warning(f'Unknown currency code: {code}')
            raise InvalidCurrencyError(code)
        return currency

    def passthrough(self, response: CurrencyRatesResponse, requested: Sequence[str]) -> CurrencyRates:
        base = self.resolve(response.source)
        wanted = set(requested)

        quotes: dict[str, ExchangeRate] = {}
        for pair, rate in response.quotes.items():
            source_code, target_code = pair[:3], pair[3:]
            if source_code != base.code:
                logger.warning(f'Quote {pair} is not quoted from {base.code}')
                raise ResponseParseError(f'Quote {pair} does not start with source currency {base.code}')
            source = self.resolve(source_code)
            target = self.resolve(target_code)

            # USDUSD comes back whenever the source is among the requested codes
            if source.code == target.code:
                continue
            if target.code not in wanted:
                logger.debug(f'Ignoring unrequested quote {pair}')
                continue

            quotes[target.code] = ExchangeRate(from_currency=source, to_currency=target, rate=rate)

        self._ensure_complete(quotes, requested, exclude=base.code)
        return CurrencyRates(timestamp=response.timestamp, base=base, quotes=quotes)

    def rebase(
        self, response: CurrencyRatesResponse, base_code: str, requested: Sequence[str]
    ) -> CurrencyRates:
        base = self.resolve(base_code)
        source = response.source

        base_quote = self._source_quote(response, base.code)
        if base_quote is None:
            logger.warning(f'No {source}{base.code} quote to rebase from')
            raise InvalidCurrencyError(base.code)

        try:
            factor = Decimal(1) / base_quote
        except DecimalException as e:
            raise ConversionError(f'Cannot rebase on {base.code}: quote {base_quote}') from e

        quotes: dict[str, ExchangeRate] = {}
        for code in requested:
            if code == base.code:
                continue
            target = self.resolve(code)
            quote = self._source_quote(response, target.code)
            if quote is None:
                logger.warning(f'No {source}{target.code} quote in response')
                raise InvalidCurrencyError(target.code)

            try:
                rate = factor * quote
            except DecimalException as e:
                raise ConversionError(f'Cannot compute {base.code} -> {target.code} rate') from e
            quotes[target.code] = ExchangeRate(from_currency=base, to_currency=target, rate=rate)

        self._ensure_complete(quotes, requested, exclude=base.code)
        return CurrencyRates(timestamp=response.timestamp, base=base, quotes=quotes)

    @staticmethod
    def _source_quote(response: CurrencyRatesResponse, code: str) -> Decimal | None:
        quote = response.quotes.get(f'{response.source}{code}')
        if quote is None and code == response.source:
            return Decimal(1)
        return quote

    @staticmethod
    def _ensure_complete(quotes: dict[str, ExchangeRate], requested: Sequence[str], exclude: str) -> None:
        for code in requested:
            if code != exclude and code not in quotes:
                logger.warning(f'Requested currency {code} missing from response')
                raise InvalidCurrencyError(code)
