import asyncio

from currency_layer import Money, RateService, default_registry
from currency_layer.config.settings import get_settings
from currency_layer.monitoring.logger import configure_logging


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    async with RateService.from_settings(settings) as service:
        result = await service.get_historical_rates(['GBP', 'USD', 'CAD'], (2015, 2, 23))

    original_usd = Money.from_major(100, default_registry().find('USD'))
    converted_to_gbp = result.convert(original_usd, 'GBP')
    # At 2015-02-23 23:59:59+00:00: $100 -> £64.70
    print(f'At {result.timestamp}: {original_usd} -> {converted_to_gbp}')


if __name__ == '__main__':
    asyncio.run(main())
