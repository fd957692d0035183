from dataclasses import dataclass

from .constants import DEFAULT_TTL, MAX_UINT256
from .pricing import index_to_price, validate_index


@dataclass(frozen=True)
class BucketInfo:
    price: int
    deposit: int
    collateral: int
    bucket_lps: int
    scale: int
    exchange_rate: int


class Bucket:
    """
    A single price bucket of a pool.

    Args:
        operations: `PoolOperations` of the pool the bucket belongs to
        index: Fenwick index of the bucket
    """

    def __init__(self, operations, index: int) -> None:
        validate_index(index)

        self._operations = operations
        self.index = index
        self.price = index_to_price(index)

    def __repr__(self) -> str:
        return f"<Bucket {self.index} of {self._operations.address}>"

    def get_info(self) -> BucketInfo:
        (
            price,
            deposit,
            collateral,
            bucket_lps,
            scale,
            exchange_rate,
        ) = self._operations.pool_utils.bucketInfo(
            self._operations.address, self.index
        )

        return BucketInfo(price, deposit, collateral, bucket_lps, scale, exchange_rate)

    def add_quote_token(self, signer, amount: int, ttl: int = DEFAULT_TTL):
        return self._operations.add_quote_token(signer, self.index, amount, ttl)

    def remove_quote_token(self, signer, max_amount: int = MAX_UINT256):
        return self._operations.remove_quote_token(signer, self.index, max_amount)

    def move_quote_token_to(
        self, signer, to_index: int, max_amount: int = MAX_UINT256, ttl: int = DEFAULT_TTL
    ):
        return self._operations.move_quote_token(
            signer, self.index, to_index, max_amount, ttl
        )

    def lps_to_quote_tokens(self, lps: int) -> int:
        return self._operations.pool_utils.lpToQuoteTokens(
            self._operations.address, lps, self.index
        )

    def lps_to_collateral(self, lps: int) -> int:
        return self._operations.pool_utils.lpToCollateral(
            self._operations.address, lps, self.index
        )
