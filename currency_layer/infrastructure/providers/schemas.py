import datetime as dt
import json
import logging
from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, StrictBool, StrictInt, ValidationError, field_validator

from currency_layer.domain.exceptions.currency import ResponseParseError, ServerError

logger = logging.getLogger(__name__)


class SuccessGuard(BaseModel):
	success: StrictBool


class CurrencyRatesResponse(BaseModel):
	timestamp: datetime = Field(..., description='Time of the request (UTC)')
	source: str = Field('USD', min_length=3, max_length=3, description='Implicit base of every quote')
	quotes: dict[str, Decimal] = Field(..., description='Rates keyed by concatenated pair, e.g. USDGBP')
	historical: bool = False
	date: dt.date | None = None

	@field_validator('timestamp', mode='before')
	@classmethod
	def epoch_seconds(cls, v):
		if isinstance(v, bool) or not isinstance(v, int):
			raise ValueError('timestamp must be integer epoch seconds')
		try:
			return datetime.fromtimestamp(v, tz=UTC)
		except (OverflowError, OSError) as e:
			raise ValueError(f'timestamp {v} is out of range') from e

	@field_validator('source')
	@classmethod
	def uppercase_source(cls, v: str):
		return v.upper()

	@field_validator('quotes')
	@classmethod
	def pair_keys(cls, v: dict[str, Decimal]):
		for key, rate in v.items():
			if len(key) != 6:
				raise ValueError(f'quote key {key!r} is not a 6 letter currency pair')
			if not rate.is_finite():
				raise ValueError(f'quote {key} is not a finite number')
		return {key.upper(): rate for key, rate in v.items()}


class ErrorBody(BaseModel):
	code: StrictInt
	info: str


class ErrorResponse(BaseModel):
	error: ErrorBody


def _decode(body: str) -> dict:
	try:
		data = json.loads(body, parse_float=Decimal)
	except ValueError as e:
		raise ResponseParseError(f'Currency Layer response is not valid JSON: {e}') from e

	if not isinstance(data, dict):
		raise ResponseParseError('Currency Layer response is not a JSON object')
	return data


def parse_rates_body(body: str) -> CurrencyRatesResponse:
	"""Interpret a live/historical response body.

	The ``success`` flag is read first so an error payload is reported as a
	ServerError with the upstream code and message rather than as a shape
	mismatch against the quotes model.
	"""
	data = _decode(body)

	try:
		guard = SuccessGuard.model_validate(data)
	except ValidationError as e:
		logger.warning(f'Response without a usable success flag: {body[:200]}')
		raise ResponseParseError(f'Currency Layer response parsing error: {e}') from e

	if not guard.success:
		try:
			result = ErrorResponse.model_validate(data)
		except ValidationError as e:
			raise ResponseParseError(f'Currency Layer error response parsing error: {e}') from e
		logger.error(f'Currency Layer error {result.error.code}: {result.error.info}')
		raise ServerError(code=result.error.code, message=result.error.info)

	try:
		return CurrencyRatesResponse.model_validate(data)
	except ValidationError as e:
		logger.warning(f'Malformed rates response: {body[:200]}')
		raise ResponseParseError(f'Currency Layer response parsing error: {e}') from e
