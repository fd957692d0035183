"""
Conversion between Fenwick bucket indexes and WAD prices.

Bucket prices follow the curve `1.005 ^ (4156 - index)`. Prices are computed
with the same fixed-point routines the pool contracts use, so a price or index
resolved here is the one the contract resolves.
"""
from . import prb_math
from .constants import MAX_FENWICK_INDEX, MIN_FENWICK_INDEX, ONE_HALF_WAD
from .exceptions import RangeError

MAX_BUCKET_INDEX = 4156
MIN_BUCKET_INDEX = -3232

MIN_PRICE = 99_836_282_890
MAX_PRICE = 1_004_968_987_606512354182109771

FLOAT_STEP = 1_005000000000000000
LOG2_FLOAT_STEP = prb_math.log2(FLOAT_STEP)


def validate_index(index: int) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise RangeError(f"bucket index must be an integer, got {index!r}")
    if index < MIN_FENWICK_INDEX or index > MAX_FENWICK_INDEX:
        raise RangeError(
            f"bucket index {index} outside [{MIN_FENWICK_INDEX}, {MAX_FENWICK_INDEX}]"
        )


def index_to_price(index: int) -> int:
    """
    Returns the WAD price of the bucket at `index`.

    Args:
        index: Fenwick index, 1 (highest price) to 7388 (lowest price)

    Raises:
        RangeError: index is outside [1, 7388]
    """
    validate_index(index)
    bucket_index = MAX_BUCKET_INDEX - index
    return prb_math.exp2(
        prb_math.mul(prb_math.from_int(bucket_index), LOG2_FLOAT_STEP)
    )


def price_to_index(price: int) -> int:
    """
    Returns the Fenwick index of the bucket a WAD price falls into.

    Above the 1.0 price (indexes up to 4156) a price between two buckets resolves
    to the bucket priced at or above it. Below 1.0 it resolves to the nearest
    bucket on the logarithmic scale, as the pool contracts do.

    Raises:
        RangeError: price is not positive, is outside [MIN_PRICE, MAX_PRICE] or
            resolves to an index outside [1, 7388]
    """
    if isinstance(price, bool) or not isinstance(price, int):
        raise RangeError(f"price must be an integer WAD amount, got {price!r}")
    if price <= 0:
        raise RangeError(f"price must be positive, got {price}")
    if price < MIN_PRICE or price > MAX_PRICE:
        raise RangeError(f"price {price} outside [{MIN_PRICE}, {MAX_PRICE}]")

    index = prb_math.div(prb_math.log2(price), LOG2_FLOAT_STEP)
    ceil_index = prb_math.ceil(index)

    if index < 0 and ceil_index - index > ONE_HALF_WAD:
        fenwick_index = MAX_BUCKET_INDEX + 1 - prb_math.to_int(ceil_index)
    else:
        fenwick_index = MAX_BUCKET_INDEX - prb_math.to_int(ceil_index)

    if fenwick_index < MIN_FENWICK_INDEX or fenwick_index > MAX_FENWICK_INDEX:
        raise RangeError(
            f"price {price} resolves to index {fenwick_index}, outside "
            f"[{MIN_FENWICK_INDEX}, {MAX_FENWICK_INDEX}]"
        )

    return fenwick_index


def price_to_index_safe(price: int) -> int:
    """
    Same as `price_to_index`, but clamps the price to the lowest and highest bucket
    prices first.
    """
    lowest = index_to_price(MAX_FENWICK_INDEX)
    highest = index_to_price(MIN_FENWICK_INDEX)

    if price < lowest:
        return MAX_FENWICK_INDEX
    elif price > highest:
        return MIN_FENWICK_INDEX
    else:
        return price_to_index(price)


def is_valid_price(price: int) -> bool:
    """
    True when `price` is within the range a lender can deposit at: above the lowest bucket
    price and at most the highest.
    """
    return index_to_price(MAX_FENWICK_INDEX) < price <= index_to_price(MIN_FENWICK_INDEX)
