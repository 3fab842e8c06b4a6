"""Currency lookup used to turn quote codes into typed currencies.

The registry is injected wherever codes are resolved so callers (and tests)
can restrict the set of accepted currencies.
"""

from collections.abc import Iterable
from functools import lru_cache
from typing import Protocol

from babel.numbers import (
    get_currency_name,
    get_currency_precision,
    get_currency_symbol,
    list_currencies,
)

from currency_layer.domain.models.currency import Currency


class CurrencyLookup(Protocol):
    def find(self, code: str) -> Currency | None: ...


class CurrencyRegistry:
    def __init__(self, currencies: Iterable[Currency]):
        self._currencies = {c.code.upper(): c for c in currencies}

    def find(self, code: str) -> Currency | None:
        return self._currencies.get(code.upper())

    def codes(self) -> list[str]:
        return sorted(self._currencies)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._currencies

    def __len__(self) -> int:
        return len(self._currencies)


LOCALE = 'en'

# Quoted by currencylayer but not by CLDR; these win over any CLDR entry
# (code, name, exponent, symbol)
NON_ISO_CURRENCIES: tuple[tuple[str, str, int, str], ...] = (
    ('BTC', 'Bitcoin', 8, '₿'),
    ('GGP', 'Guernsey Pound', 2, '£'),
    ('IMP', 'Manx Pound', 2, '£'),
    ('JEP', 'Jersey Pound', 2, '£'),
)


def cldr_currency(code: str) -> Currency:
    return Currency(
        code=code,
        name=get_currency_name(code, locale=LOCALE),
        exponent=get_currency_precision(code),
        symbol=get_currency_symbol(code, locale=LOCALE),
    )


def cldr_codes() -> set[str]:
    # Global list covers historical codes (SLL, VEF, ...); the locale adds CNH and friends
    codes = set(list_currencies()) | set(list_currencies(LOCALE))
    return {code for code in codes if len(code) == 3 and code.isalpha() and code.isupper()}


@lru_cache
def default_registry() -> CurrencyRegistry:
    currencies = [cldr_currency(code) for code in sorted(cldr_codes())]
    currencies.extend(
        Currency(code=code, name=name, exponent=exponent, symbol=symbol)
        for code, name, exponent, symbol in NON_ISO_CURRENCIES
    )
    return CurrencyRegistry(currencies)
