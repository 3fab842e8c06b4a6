from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_EVEN, Decimal, DecimalException

from currency_layer.domain.exceptions.currency import ConversionError, InvalidCurrencyError


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    exponent: int = 2
    symbol: str = ''

    @property
    def minor_unit(self) -> Decimal:
        return Decimal(1).scaleb(-self.exponent)


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: Currency

    @classmethod
    def from_major(cls, amount: int | str | Decimal, currency: Currency) -> 'Money':
        try:
            return cls(amount=Decimal(str(amount)), currency=currency)
        except DecimalException as e:
            raise ConversionError(f'Invalid amount {amount!r} for {currency.code}') from e

    def round(self) -> 'Money':
        """Quantize to the currency's minor unit using banker's rounding."""
        try:
            amount = self.amount.quantize(self.currency.minor_unit, rounding=ROUND_HALF_EVEN)
        except DecimalException as e:
            raise ConversionError(f'Cannot round {self.amount} {self.currency.code}') from e
        return Money(amount=amount, currency=self.currency)

    def __str__(self) -> str:
        return f'{self.currency.symbol or self.currency.code + " "}{self.amount}'


@dataclass(frozen=True)
class ExchangeRate:
    """Directed rate: one unit of from_currency buys `rate` units of to_currency."""

    from_currency: Currency
    to_currency: Currency
    rate: Decimal

    def __post_init__(self):
        if self.from_currency.code == self.to_currency.code:
            raise ConversionError(
                f'Cannot create exchange rate between the same currency: {self.from_currency.code}'
            )
        if not isinstance(self.rate, Decimal) or not self.rate.is_finite() or self.rate <= 0:
            raise ConversionError(
                f'Invalid rate {self.rate!r} for {self.from_currency.code} -> {self.to_currency.code}'
            )

    def convert(self, amount: 'Money | Decimal | int | str') -> Money:
        if isinstance(amount, Money):
            if amount.currency.code != self.from_currency.code:
                raise ConversionError(
                    f'Cannot convert {amount.currency.code} with a '
                    f'{self.from_currency.code} -> {self.to_currency.code} rate'
                )
            value = amount.amount
        else:
            value = Money.from_major(amount, self.from_currency).amount

        try:
            converted = value * self.rate
        except DecimalException as e:
            raise ConversionError(f'Conversion of {value} {self.from_currency.code} failed') from e

        return Money(amount=converted, currency=self.to_currency).round()


@dataclass(frozen=True)
class CurrencyRates:
    # Upstream request time (UTC)
    timestamp: datetime
    base: Currency
    quotes: dict[str, ExchangeRate] = field(default_factory=dict)

    def get(self, code: str) -> ExchangeRate:
        try:
            return self.quotes[code.upper()]
        except KeyError as e:
            raise InvalidCurrencyError(code) from e

    def convert(self, amount: 'Money | Decimal | int | str', to_currency: str) -> Money:
        return self.get(to_currency).convert(amount)
