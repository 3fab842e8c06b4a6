import datetime as dt
import logging
from collections.abc import Iterable

from currency_layer.application.services.rate_normalizer import RateNormalizer
from currency_layer.config.settings import Settings, get_settings
from currency_layer.domain.exceptions.currency import ResponseParseError
from currency_layer.domain.models.currency import CurrencyRates
from currency_layer.domain.registry import CurrencyLookup, default_registry
from currency_layer.infrastructure.providers.currencylayer import CurrencyLayerProvider
from currency_layer.infrastructure.providers.schemas import parse_rates_body

logger = logging.getLogger(__name__)

DateLike = dt.date | tuple[int, int, int]


def format_date(value: DateLike) -> str:
    """Render a date as the YYYY-MM-DD string the historical endpoint expects."""
    if not isinstance(value, dt.date):
        try:
            value = dt.date(*value)
        except (TypeError, ValueError) as e:
            raise ResponseParseError(
                f'Invalid historical date {value!r}, expected (year, month, day)'
            ) from e
    return f'{value.year}-{value.month:02d}-{value.day:02d}'


class RateService:
    """Client for the free currencylayer endpoints.

    Without a base currency rates are returned as quoted, relative to the
    API's source currency. With one, every rate is rebased so it reads
    "1 base -> N target".
    """

    def __init__(
        self,
        provider: CurrencyLayerProvider,
        registry: CurrencyLookup | None = None,
        base_currency: str | None = None,
    ):
        self.provider = provider
        self.normalizer = RateNormalizer(registry or default_registry())
        self.base_currency = base_currency.strip().upper() if base_currency else None

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, registry: CurrencyLookup | None = None
    ) -> 'RateService':
        settings = settings or get_settings()
        provider = CurrencyLayerProvider(
            api_key=settings.CURRENCYLAYER_API_KEY,
            timeout=settings.CURRENCYLAYER_TIMEOUT,
            base_url=settings.CURRENCYLAYER_BASE_URL,
        )
        return cls(provider, registry=registry, base_currency=settings.CURRENCYLAYER_BASE_CURRENCY)

    async def get_live_rates(self, currencies: Iterable[str], base: str | None = None) -> CurrencyRates:
        codes, base = self._prepare(currencies, base)
        logger.info(f'Fetching live rates for {",".join(codes)}')

        body = await self.provider.fetch_live(self._query_codes(codes, base))
        return self._normalize(body, codes, base)

    async def get_historical_rates(
        self, currencies: Iterable[str], date: DateLike, base: str | None = None
    ) -> CurrencyRates:
        codes, base = self._prepare(currencies, base)
        day = format_date(date)
        logger.info(f'Fetching historical rates for {",".join(codes)} on {day}')

        body = await self.provider.fetch_historical(self._query_codes(codes, base), day)
        return self._normalize(body, codes, base)

    def _prepare(self, currencies: Iterable[str], base: str | None) -> tuple[list[str], str | None]:
        codes: list[str] = []
        for raw in currencies:
            code = raw.strip().upper()
            if code not in codes:
                codes.append(code)

        base = base.strip().upper() if base else self.base_currency

        # Fail before spending a request on a code the registry cannot resolve
        for code in codes:
            self.normalizer.resolve(code)
        if base is not None:
            self.normalizer.resolve(base)

        return codes, base

    @staticmethod
    def _query_codes(codes: list[str], base: str | None) -> list[str]:
        if base is None or base in codes:
            return codes
        return codes + [base]

    def _normalize(self, body: str, codes: list[str], base: str | None) -> CurrencyRates:
        response = parse_rates_body(body)
        if base is None:
            return self.normalizer.passthrough(response, codes)
        return self.normalizer.rebase(response, base, codes)

    async def close(self) -> None:
        await self.provider.close()

    async def __aenter__(self) -> 'RateService':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
