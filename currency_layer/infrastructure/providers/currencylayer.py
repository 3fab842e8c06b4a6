import logging

import httpx

from currency_layer.domain.exceptions.currency import TransportError

logger = logging.getLogger(__name__)


class CurrencyLayerProvider:
	BASE_URL = 'http://apilayer.net/api'

	def __init__(
		self,
		api_key: str,
		client: httpx.AsyncClient | None = None,
		timeout: int = 10,
		base_url: str | None = None,
	):
		self._api_key = api_key
		self.base_url = (base_url or self.BASE_URL).rstrip('/')
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'currencylayer'

	@property
	def api_key(self) -> str:
		return self._api_key

	def build_params(self, currencies: list[str], date: str | None = None) -> dict[str, str]:
		params = {
			'currencies': ','.join(currencies),
			'format': '1',
			'access_key': self._api_key,
		}
		if date is not None:
			params['date'] = date
		return params

	async def _request(self, endpoint: str, params: dict[str, str]) -> str:
		url = f'{self.base_url}/{endpoint}'

		try:
			response = await self._client.get(url, params=params)
			response.raise_for_status()
			return response.text

		except httpx.HTTPStatusError as e:
			logger.error(f'{self.name} {endpoint} returned HTTP {e.response.status_code}')
			raise TransportError(
				f'Currency Layer HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			logger.error(f'{self.name} {endpoint} request failed: {e.__class__.__name__}')
			raise TransportError(f'Currency Layer request failed: {e.__class__.__name__}') from e

	async def fetch_live(self, currencies: list[str]) -> str:
		return await self._request('live', self.build_params(currencies))

	async def fetch_historical(self, currencies: list[str], date: str) -> str:
		return await self._request('historical', self.build_params(currencies, date))

	async def close(self) -> None:
		await self._client.aclose()
