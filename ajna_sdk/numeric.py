from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from .constants import WAD
from .exceptions import SdkError

Numeric = Union[int, str, float, Decimal]

# enough significant digits for any uint256
PRECISION = 80


def to_wad(value: Numeric) -> int:
    """
    Converts a human readable amount to an 18 decimal fixed-point integer.

    Floats are converted through their string representation, so `to_wad(0.1)` is
    exactly 10**17.

    Raises:
        SdkError: value is not a number or has more than 18 fractional digits
    """
    if isinstance(value, bool):
        raise SdkError(f"cannot convert {value!r} to WAD")
    if isinstance(value, int):
        return value * WAD

    with localcontext() as context:
        context.prec = PRECISION
        try:
            amount = Decimal(str(value)) * WAD
        except InvalidOperation:
            raise SdkError(f"cannot convert {value!r} to WAD") from None

    if not amount.is_finite():
        raise SdkError(f"cannot convert {value!r} to WAD")
    if amount != amount.to_integral_value():
        raise SdkError(f"{value!r} has more than 18 decimal places")

    return int(amount)


def from_wad(value: int) -> Decimal:
    with localcontext() as context:
        context.prec = PRECISION
        return Decimal(value) / WAD


def wmul(x: int, y: int) -> int:
    return (x * y + WAD // 2) // WAD


def wdiv(x: int, y: int) -> int:
    return (x * WAD + y // 2) // y
