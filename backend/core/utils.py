from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def d(val) -> Decimal:
    """Coerce incoming values to Decimal safely."""
    if isinstance(val, Decimal):
        return val
    return Decimal(str(val))


def q2(val) -> Decimal:
    """Quantize a money amount to 2 decimal places (half up)."""
    return d(val).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def money_or_none(val) -> Optional[Decimal]:
    """Parse an optional money field; blank strings and None stay undefined."""
    if val is None:
        return None
    if isinstance(val, str) and not val.strip():
        return None
    try:
        amount = d(val)
        if amount.is_finite():
            return q2(amount)
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Not a monetary amount: {val!r}") from e
    raise ValueError(f"Not a monetary amount: {val!r}")


def profit_and_loss(sell_rate: Optional[Decimal], buy_rate: Optional[Decimal]) -> Decimal:
    """Sell minus buy, with a missing side counted as zero."""
    return q2((sell_rate if sell_rate is not None else ZERO) - (buy_rate if buy_rate is not None else ZERO))
