"""
Integer port of the PRBMath SD59x18 functions used by the Ajna pricing library.

Every function reproduces the on-chain rounding, so results agree with the
contracts to the last wei. Solidity integer division truncates toward zero,
which is why `_sdiv` and `_srem` are used instead of `//` and `%` wherever an
operand can be negative.
"""
from math import isqrt

SCALE = 10**18
HALF_SCALE = 5 * 10**17
SCALE_SQUARED = 10**36

# 2^59.794705707972522262 is the largest exponent whose inverse does not truncate to zero
EXP2_MIN_INPUT = -59_794705707972522261
EXP2_MAX_INPUT = 192 * SCALE


def _root_two_factors():
    """
    The magic factors of PRBMath's exp2: factor[i] is 2^(2^(i - 64)) in 64.64
    binary fixed point, rounded to nearest.
    """
    guard = 256
    factors = [0] * 64
    value = 2 << guard
    for k in range(1, 65):
        value = isqrt(value << guard)
        factors[64 - k] = (value + (1 << (guard - 65))) >> (guard - 64)
    return tuple(factors)


_EXP2_FACTORS = _root_two_factors()


def _sdiv(x: int, y: int) -> int:
    quotient = abs(x) // abs(y)
    return -quotient if (x < 0) != (y < 0) else quotient


def _srem(x: int, y: int) -> int:
    remainder = abs(x) % abs(y)
    return -remainder if x < 0 else remainder


def from_int(x: int) -> int:
    return x * SCALE


def to_int(x: int) -> int:
    return _sdiv(x, SCALE)


def mul(x: int, y: int) -> int:
    """Fixed-point product, rounding half up on the absolute value."""
    product = abs(x) * abs(y)
    result = product // SCALE
    if product % SCALE >= HALF_SCALE:
        result += 1
    return -result if (x < 0) != (y < 0) else result


def div(x: int, y: int) -> int:
    """Fixed-point quotient, truncated toward zero."""
    if y == 0:
        raise ZeroDivisionError("division by zero")
    result = abs(x) * SCALE // abs(y)
    return -result if (x < 0) != (y < 0) else result


def ceil(x: int) -> int:
    remainder = _srem(x, SCALE)
    if remainder == 0:
        return x
    result = x - remainder
    if x > 0:
        result += SCALE
    return result


def log2(x: int) -> int:
    """
    Binary logarithm of a positive SD59x18 number.

    Uses the iterative approximation from PRBMath: the integer part comes from the
    most significant bit, the fractional part from repeated squaring.
    """
    if x <= 0:
        raise ValueError(f"log2 input must be positive, got {x}")

    if x >= SCALE:
        sign = 1
    else:
        sign = -1
        x = SCALE_SQUARED // x

    n = (x // SCALE).bit_length() - 1
    result = n * SCALE

    y = x >> n
    if y == SCALE:
        return result * sign

    delta = HALF_SCALE
    while delta > 0:
        y = y * y // SCALE
        if y >= 2 * SCALE:
            result += delta
            y >>= 1
        delta >>= 1

    return result * sign


def _exp2_192x64(x: int) -> int:
    result = 1 << 191
    for bit in range(63, -1, -1):
        if x & (1 << bit):
            result = (result * _EXP2_FACTORS[bit]) >> 64
    result *= SCALE
    result >>= 191 - (x >> 64)
    return result


def exp2(x: int) -> int:
    """Binary exponent of an SD59x18 number."""
    if x < 0:
        if x < EXP2_MIN_INPUT:
            return 0
        return SCALE_SQUARED // exp2(-x)

    if x >= EXP2_MAX_INPUT:
        raise OverflowError(f"exp2 input too big: {x}")

    return _exp2_192x64((x << 64) // SCALE)
