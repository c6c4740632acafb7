"""Parsing of resource quantities such as "2.1G" or "5Gi"."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import ROUND_UP, Decimal, localcontext
from typing import Union

_NUMBER = re.compile(r"([+-]?(?:\d+(?:\.\d*)?|\.\d+))(.*)", re.DOTALL)
_EXPONENT = re.compile(r"[eE]([+-]?\d+)")

_SUFFIXES = {
    "": Decimal(1),
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
    "Ki": Decimal(1024),
    "Mi": Decimal(1024) ** 2,
    "Gi": Decimal(1024) ** 3,
    "Ti": Decimal(1024) ** 4,
    "Pi": Decimal(1024) ** 5,
    "Ei": Decimal(1024) ** 6,
}


class InvalidQuantityError(ValueError):
    """Raised when text is not a valid quantity."""


@dataclass(frozen=True)
class Quantity:
    """An exact resource amount."""

    amount: Decimal

    def _scaled(self, factor: int) -> int:
        with localcontext() as ctx:
            ctx.prec = 200
            return int((self.amount * factor).to_integral_value(rounding=ROUND_UP))

    def milli_value(self) -> int:
        """The amount in thousandths, rounded away from zero."""
        return self._scaled(1000)

    def value(self) -> int:
        """The amount as an integer, rounded away from zero."""
        return self._scaled(1)


def parse_quantity(text: Union[str, int, float, Quantity]) -> Quantity:
    """Parse a quantity given as text, a number or a Quantity."""
    if isinstance(text, Quantity):
        return text
    if isinstance(text, bool):
        raise InvalidQuantityError(f"not a quantity: {text!r}")
    if isinstance(text, int):
        return Quantity(Decimal(text))
    if isinstance(text, float):
        if not math.isfinite(text):
            raise InvalidQuantityError(f"not a finite quantity: {text!r}")
        return Quantity(Decimal(repr(text)))
    if not isinstance(text, str):
        raise InvalidQuantityError(f"not a quantity: {text!r}")

    match = _NUMBER.fullmatch(text.strip())
    if match is None:
        raise InvalidQuantityError(f"quantity has no number: {text!r}")
    number, suffix = match.groups()
    amount = Decimal(number)
    if suffix in _SUFFIXES:
        with localcontext() as ctx:
            ctx.prec = 200
            return Quantity(amount * _SUFFIXES[suffix])
    exponent = _EXPONENT.fullmatch(suffix)
    if exponent is None:
        raise InvalidQuantityError(f"unknown quantity suffix {suffix!r} in {text!r}")
    return Quantity(amount.scaleb(int(exponent.group(1))))