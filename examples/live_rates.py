import asyncio

from currency_layer import Money, RateService, default_registry
from currency_layer.config.settings import get_settings
from currency_layer.monitoring.logger import configure_logging


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    async with RateService.from_settings(settings) as service:
        result = await service.get_live_rates(['GBP', 'USD', 'CAD'])

    # The free API only quotes from USD
    original_usd = Money.from_major(100, default_registry().find('USD'))
    converted_to_gbp = result.convert(original_usd, 'GBP')
    print(f'At {result.timestamp}: {original_usd} -> {converted_to_gbp}')


if __name__ == '__main__':
    asyncio.run(main())
