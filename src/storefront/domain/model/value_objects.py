"""Immutable values the storefront aggregates are built from.

Each one checks itself on construction, so an order or product can hold
a Money, Quantity or ShippingAddress without re-checking it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError

_POSTAL_CODE = re.compile(r"^\d{5,6}$")
_CARD_NUMBER = re.compile(r"^\d{13,19}$")


@dataclass(frozen=True)
class Money:
    """A non-negative price or total.

    Backed by Decimal so catalog prices such as 19.99 add up exactly.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount.is_signed() and self.amount != 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @classmethod
    def zero(cls, currency: str = "USD") -> Money:
        return cls(Decimal("0.00"), currency)

    @classmethod
    def of(cls, amount: str | float | int | Decimal) -> Money:
        """Build from whatever a client sent; floats go through ``str`` first."""
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite():
            raise ValidationError(f"Invalid money amount: {amount!r}")
        return cls(value)

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._same_currency(other).amount, self.currency)

    def __mul__(self, units: int) -> Money:
        if isinstance(units, bool) or not isinstance(units, int):
            raise TypeError(f"Money can only be multiplied by a unit count, got {units!r}")
        return Money(self.amount * units, self.currency)

    def differs_from(self, other: Money, tolerance: Decimal) -> bool:
        """True when the two amounts are further apart than *tolerance*."""
        return abs(self.amount - self._same_currency(other).amount) > tolerance

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    def _same_currency(self, other: Money) -> Money:
        if other.currency != self.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")
        return other


@dataclass(frozen=True)
class Quantity:
    """Units of one product on an order line; always at least one."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True must not pass as one unit.
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ShippingAddress:
    """Where an order is delivered.  Postal code is the only optional part."""

    street: str
    city: str
    phone: str
    postal_code: str | None = None

    def __post_init__(self) -> None:
        for name in ("street", "city", "phone"):
            value = getattr(self, name)
            if not value or not value.strip():
                raise ValidationError(f"Shipping {name} is required")
        if self.postal_code is not None and not _POSTAL_CODE.match(self.postal_code):
            raise ValidationError("Postal code must be 5 to 6 digits")


@dataclass(frozen=True)
class CardNumber:
    """A format-validated card number.  It is never charged or persisted."""

    digits: str

    def __post_init__(self) -> None:
        if not self.digits or not _CARD_NUMBER.match(self.digits):
            raise ValidationError("Invalid card number. Must be 13-19 digits.")

    @property
    def last4(self) -> str:
        return self.digits[-4:]

    def __repr__(self) -> str:
        return f"CardNumber(****{self.last4})"
