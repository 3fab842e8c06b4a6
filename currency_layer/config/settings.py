from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	CURRENCYLAYER_API_KEY: str = ''
	CURRENCYLAYER_BASE_URL: str = 'http://apilayer.net/api'
	CURRENCYLAYER_TIMEOUT: int = 10

	# Rebase every result on this currency instead of the API source (USD)
	CURRENCYLAYER_BASE_CURRENCY: str | None = None

	# Logging
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
