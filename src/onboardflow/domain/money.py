"""Currency amount helpers."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CENT = Decimal("0.01")


class InvalidAmountError(ValueError):
    """Raised when an amount cannot be charged."""


def to_minor_units(amount: Decimal | str | float) -> int:
    """Convert a decimal currency amount to integer minor units."""
    try:
        value = Decimal(str(amount))
        if not value.is_finite():
            raise InvalidOperation
        cents = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidAmountError(f"Invalid amount: {amount!r}") from exc
    minor = int(cents * 100)
    if minor <= 0:
        raise InvalidAmountError(f"Amount must be at least one cent: {amount!r}")
    return minor


def format_minor_units(amount: int) -> str:
    """Format minor units as a dollar string, e.g. 25000 -> $250.00."""
    return f"${Decimal(amount) / 100:.2f}"
