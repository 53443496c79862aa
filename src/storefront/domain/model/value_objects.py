"""Small immutable values used by the cart, orders and tracking.

Each one validates itself on construction, so a ``Money`` or ``Quantity``
that exists is always usable.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from storefront.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "PHP"
_CENTAVO = Decimal("0.01")
_CURRENCY_SYMBOLS = {"PHP": "₱", "USD": "$"}


@dataclass(frozen=True)
class Money:
    """A non-negative Decimal price in a single currency."""

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite() or self.amount < 0:
            raise ValidationError(f"Invalid money amount: {self.amount}")

    def __add__(self, other: Money) -> Money:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot add {other.currency} to {self.currency}"
            )
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int) or isinstance(factor, bool):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __str__(self) -> str:
        symbol = _CURRENCY_SYMBOLS.get(self.currency, f"{self.currency} ")
        return f"{symbol}{self.amount:,.2f}"

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0.00"), currency)

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Parse *amount*, rounded half-up to the centavo."""
        try:
            value = Decimal(str(amount)).quantize(_CENTAVO, rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return Money(value, currency)

    @staticmethod
    def sum(amounts: Iterable[Money], currency: str = DEFAULT_CURRENCY) -> Money:
        total = Money.zero(currency)
        for amount in amounts:
            total = total + amount
        return total


@dataclass(frozen=True)
class Quantity:
    """Units of one item on an order line. Always at least 1."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float

    def interpolate(self, other: Coordinate, t: float) -> Coordinate:
        """Linear interpolation towards *other*; each axis independently."""
        return Coordinate(
            lat=self.lat + (other.lat - self.lat) * t,
            lng=self.lng + (other.lng - self.lng) * t,
        )

    def __str__(self) -> str:
        return f"({self.lat:.4f}, {self.lng:.4f})"
