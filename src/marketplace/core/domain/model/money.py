from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation

from returns.maybe import Maybe, Nothing, Some

CENT = Decimal("0.01")

# wide enough for any float-range amount at cents, times the largest quantity
_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """A currency amount held at cent precision.

    Rounding rule: values are converted to ``Decimal`` through their decimal
    string form and quantized to 0.01 with ``ROUND_HALF_UP`` (ties go away
    from zero), so ``Money.of(1.005)`` is ``1.01`` and ``Money.of(-0.125)``
    is ``-0.13``.

    Amounts are valid when they also fit a JSON number (a finite double);
    see ``is_representable``.
    """

    amount: Decimal

    @staticmethod
    def of(amount: Decimal | int | float | str) -> "Money":
        dec = Decimal(str(amount)).quantize(CENT, context=_CONTEXT)
        return Money(dec)

    @staticmethod
    def zero() -> "Money":
        return Money.of(0)

    def __add__(self, other: "Money") -> "Money":
        return Money.of(_CONTEXT.add(self.amount, other.amount))

    def __mul__(self, n: int) -> "Money":
        return Money.of(_CONTEXT.multiply(self.amount, Decimal(n)))

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_representable(self) -> bool:
        return math.isfinite(float(self.amount))

    def to_json(self) -> float:
        return float(self.amount)


def normalize_money(value: object) -> Maybe[Money]:
    """Round ``value`` to the nearest cent, or ``Nothing`` if it is not a finite number."""
    if value is None or isinstance(value, bool):
        return Nothing
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return Nothing
    elif not isinstance(value, (int, float, Decimal)):
        return Nothing

    try:
        dec = Decimal(str(value))
    except InvalidOperation:
        return Nothing
    if not dec.is_finite() or not math.isfinite(float(dec)):
        return Nothing
    money = Money.of(dec)
    return Some(money) if money.is_representable() else Nothing
