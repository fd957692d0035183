"""
Ajna pools, for fungible (ERC20) and non-fungible (ERC721) collateral.

Both variants implement the `Pool` capabilities by forwarding to a shared
`PoolOperations` instance through `SharedPoolOperations`; only collateral handling
differs between them. Every mutating operation
returns a `Transaction` that still has to be verified and submitted.
"""
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from .bucket import Bucket
from .constants import (
    DEFAULT_TTL,
    DEPOSIT_PENALTY_PERIOD,
    MAX_FENWICK_INDEX,
    MAX_SETTLE_BUCKETS,
    MAX_UINT256,
)
from .contracts import create_multicall, create_transaction, get_expiry
from .numeric import wdiv
from .pricing import price_to_index, validate_index
from .transaction import Transaction


@dataclass(frozen=True)
class LenderInfo:
    lp_balance: int
    deposit_time: int


@dataclass(frozen=True)
class DebtInfo:
    pending_debt: int
    accrued_debt: int
    debt_in_auction: int


@dataclass(frozen=True)
class LoansInfo:
    max_borrower: str
    max_threshold_price: int
    no_of_loans: int


@dataclass(frozen=True)
class PoolPrices:
    hpb: int
    hpb_index: int
    htp: int
    htp_index: int
    lup: int
    lup_index: int


@dataclass(frozen=True)
class PoolStats:
    pool_size: int
    debt: int
    loans_count: int
    min_debt_amount: int
    collateralization: int
    actual_utilization: int
    target_utilization: int
    reserves: int
    claimable_reserves: int
    claimable_reserves_remaining: int
    borrow_rate: int


@dataclass(frozen=True)
class Position:
    bucket_index: int
    lp_balance: int
    deposit_time: int
    deposit_redeemable: int
    collateral_redeemable: int
    insufficient_liquidity_for_withdraw: bool
    penalty_time_remaining: int


@dataclass(frozen=True)
class Loan:
    debt: int
    collateral: int
    threshold_price: int
    t0_neutral_price: int


class Pool(Protocol):
    address: str
    quote_address: str
    collateral_address: str

    def quote_approve(self, signer, allowance: int) -> Transaction:
        ...

    def ajna_approve(self, signer, allowance: int) -> Transaction:
        ...

    def add_quote_token(
        self, signer, bucket_index: int, amount: int, ttl: int = DEFAULT_TTL
    ) -> Transaction:
        ...

    def move_quote_token(
        self,
        signer,
        from_index: int,
        to_index: int,
        max_amount: int = MAX_UINT256,
        ttl: int = DEFAULT_TTL,
    ) -> Transaction:
        ...

    def remove_quote_token(
        self, signer, bucket_index: int, max_amount: int = MAX_UINT256
    ) -> Transaction:
        ...

    def multicall(self, signer, calls: Sequence[Tuple[str, Sequence]]) -> Transaction:
        ...

    def update_interest(self, signer) -> Transaction:
        ...

    def kick(self, signer, borrower: str) -> Transaction:
        ...

    def kick_with_deposit(self, signer, bucket_index: int) -> Transaction:
        ...

    def take(
        self,
        signer,
        borrower: str,
        max_amount: int = MAX_UINT256,
        callee: Optional[str] = None,
        data: bytes = b"",
    ) -> Transaction:
        ...

    def arb_take(self, signer, borrower: str, bucket_index: int) -> Transaction:
        ...

    def deposit_take(self, signer, borrower: str, bucket_index: int) -> Transaction:
        ...

    def settle(
        self, signer, borrower: str, max_depth: int = MAX_SETTLE_BUCKETS
    ) -> Transaction:
        ...

    def kick_reserve_auction(self, signer) -> Transaction:
        ...

    def take_reserves(self, signer, max_amount: int = MAX_UINT256) -> Transaction:
        ...

    def lender_info(self, lender: str, bucket_index: int) -> LenderInfo:
        ...

    def debt_info(self) -> DebtInfo:
        ...

    def loans_info(self) -> LoansInfo:
        ...

    def deposit_index(self, debt: int) -> int:
        ...

    def get_prices(self) -> PoolPrices:
        ...

    def get_stats(self) -> PoolStats:
        ...

    def get_bucket_by_index(self, bucket_index: int) -> Bucket:
        ...

    def get_bucket_by_price(self, price: int) -> Bucket:
        ...

    def get_position(
        self, lender: str, bucket_index: int, withdrawal_amount: int = 0
    ) -> Position:
        ...

    def get_loan(self, borrower: str) -> Loan:
        ...

    def is_kickable(self, borrower: str) -> bool:
        ...


class PoolOperations:
    """
    Operations common to every pool, whatever its collateral.

    Args:
        contract: brownie contract of the pool
        quote_token: ERC20 contract of the quote token
        collateral_token: ERC20 or ERC721 contract of the collateral
        ajna_token: ERC20 contract of the AJNA token, burned when taking reserves
        pool_utils: `PoolInfoUtils` contract used for aggregated reads
        web3: web3 instance for gas estimation and block reads, brownie's by default
    """

    def __init__(
        self,
        contract,
        quote_token,
        collateral_token,
        ajna_token,
        pool_utils,
        web3=None,
    ) -> None:
        self.contract = contract
        self.address = contract.address
        self.quote_token = quote_token
        self.collateral_token = collateral_token
        self.ajna_token = ajna_token
        self.pool_utils = pool_utils
        self._web3 = web3

    def transaction(self, signer, method_name: str, *args) -> Transaction:
        return create_transaction(
            self.contract, signer, method_name, args, web3=self._web3
        )

    def token_transaction(self, token, signer, method_name: str, *args) -> Transaction:
        return create_transaction(token, signer, method_name, args, web3=self._web3)

    def expiry(self, ttl: int) -> int:
        return get_expiry(ttl, web3=self._web3)

    def quote_approve(self, signer, allowance: int) -> Transaction:
        return self.token_transaction(
            self.quote_token, signer, "approve", self.address, allowance
        )

    def ajna_approve(self, signer, allowance: int) -> Transaction:
        return self.token_transaction(
            self.ajna_token, signer, "approve", self.address, allowance
        )

    def add_quote_token(
        self, signer, bucket_index: int, amount: int, ttl: int = DEFAULT_TTL
    ) -> Transaction:
        validate_index(bucket_index)
        return self.transaction(
            signer, "addQuoteToken", amount, bucket_index, self.expiry(ttl)
        )

    def move_quote_token(
        self,
        signer,
        from_index: int,
        to_index: int,
        max_amount: int = MAX_UINT256,
        ttl: int = DEFAULT_TTL,
    ) -> Transaction:
        validate_index(from_index)
        validate_index(to_index)
        return self.transaction(
            signer,
            "moveQuoteToken",
            max_amount,
            from_index,
            to_index,
            self.expiry(ttl),
        )

    def remove_quote_token(
        self, signer, bucket_index: int, max_amount: int = MAX_UINT256
    ) -> Transaction:
        """
        Withdraws up to `max_amount` of quote token from a bucket; everything the
        lender can claim when no amount is given.
        """
        validate_index(bucket_index)
        return self.transaction(signer, "removeQuoteToken", max_amount, bucket_index)

    def multicall(self, signer, calls: Sequence[Tuple[str, Sequence]]) -> Transaction:
        """
        Batches pool method calls, given as `(method_name, args)` pairs, into a single transaction
        """
        return create_multicall(self.contract, signer, calls, web3=self._web3)

    def update_interest(self, signer) -> Transaction:
        return self.transaction(signer, "updateInterest")

    def kick(self, signer, borrower: str) -> Transaction:
        return self.transaction(signer, "kick", borrower)

    def kick_with_deposit(self, signer, bucket_index: int) -> Transaction:
        validate_index(bucket_index)
        return self.transaction(signer, "kickWithDeposit", bucket_index)

    def take(
        self,
        signer,
        borrower: str,
        max_amount: int = MAX_UINT256,
        callee: Optional[str] = None,
        data: bytes = b"",
    ) -> Transaction:
        """
        Buys collateral from the liquidation auction of `borrower`. Collateral goes to
        `callee`, the signer when not given.
        """
        callee = callee if callee is not None else signer.address
        return self.transaction(signer, "take", borrower, max_amount, callee, data)

    def arb_take(self, signer, borrower: str, bucket_index: int) -> Transaction:
        validate_index(bucket_index)
        return self.transaction(signer, "bucketTake", borrower, False, bucket_index)

    def deposit_take(self, signer, borrower: str, bucket_index: int) -> Transaction:
        validate_index(bucket_index)
        return self.transaction(signer, "bucketTake", borrower, True, bucket_index)

    def settle(
        self, signer, borrower: str, max_depth: int = MAX_SETTLE_BUCKETS
    ) -> Transaction:
        return self.transaction(signer, "settle", borrower, max_depth)

    def kick_reserve_auction(self, signer) -> Transaction:
        return self.transaction(signer, "kickReserveAuction")

    def take_reserves(self, signer, max_amount: int = MAX_UINT256) -> Transaction:
        return self.transaction(signer, "takeReserves", max_amount)

    def lender_info(self, lender: str, bucket_index: int) -> LenderInfo:
        validate_index(bucket_index)
        lp_balance, deposit_time = self.contract.lenderInfo(bucket_index, lender)
        return LenderInfo(lp_balance, deposit_time)

    def debt_info(self) -> DebtInfo:
        pending_debt, accrued_debt, debt_in_auction = self.contract.debtInfo()
        return DebtInfo(pending_debt, accrued_debt, debt_in_auction)

    def loans_info(self) -> LoansInfo:
        max_borrower, max_threshold_price, no_of_loans = self.contract.loansInfo()
        return LoansInfo(max_borrower, max_threshold_price, no_of_loans)

    def deposit_index(self, debt: int) -> int:
        """
        Returns the index of the bucket where `debt` would be fully utilized, i.e. the LUP
        index for that amount of debt.
        """
        return self.contract.depositIndex(debt)

    def get_prices(self) -> PoolPrices:
        hpb, hpb_index, htp, htp_index, lup, lup_index = self.pool_utils.poolPricesInfo(
            self.address
        )
        return PoolPrices(hpb, hpb_index, htp, htp_index, lup, lup_index)

    def get_stats(self) -> PoolStats:
        pool_size, loans_count, _, _, _ = self.pool_utils.poolLoansInfo(self.address)
        (
            min_debt_amount,
            collateralization,
            actual_utilization,
            target_utilization,
        ) = self.pool_utils.poolUtilizationInfo(self.address)
        (
            reserves,
            claimable_reserves,
            claimable_reserves_remaining,
            _,
            _,
        ) = self.pool_utils.poolReservesInfo(self.address)
        borrow_rate, _ = self.contract.interestRateInfo()

        return PoolStats(
            pool_size=pool_size,
            debt=self.debt_info().pending_debt,
            loans_count=loans_count,
            min_debt_amount=min_debt_amount,
            collateralization=collateralization,
            actual_utilization=actual_utilization,
            target_utilization=target_utilization,
            reserves=reserves,
            claimable_reserves=claimable_reserves,
            claimable_reserves_remaining=claimable_reserves_remaining,
            borrow_rate=borrow_rate,
        )

    def get_bucket_by_index(self, bucket_index: int) -> Bucket:
        return Bucket(self, bucket_index)

    def get_bucket_by_price(self, price: int) -> Bucket:
        """
        Returns the bucket `price` resolves to on the pool's price curve.

        Raises:
            RangeError: the price is outside the range of bucket prices
        """
        return Bucket(self, price_to_index(price))

    def get_position(
        self, lender: str, bucket_index: int, withdrawal_amount: int = 0
    ) -> Position:
        """
        Returns the position of `lender` in a bucket.

        `insufficient_liquidity_for_withdraw` is set when withdrawing `withdrawal_amount`
        would push the LUP below the HTP. `penalty_time_remaining` is the timestamp until
        which removing the deposit is penalized.
        """
        info = self.lender_info(lender, bucket_index)
        lup_index_after_withdrawal = self.deposit_index(
            self.debt_info().pending_debt + withdrawal_amount
        )

        deposit_redeemable = self.pool_utils.lpToQuoteTokens(
            self.address, info.lp_balance, bucket_index
        )
        collateral_redeemable = self.pool_utils.lpToCollateral(
            self.address, info.lp_balance, bucket_index
        )

        return Position(
            bucket_index=bucket_index,
            lp_balance=info.lp_balance,
            deposit_time=info.deposit_time,
            deposit_redeemable=deposit_redeemable,
            collateral_redeemable=collateral_redeemable,
            insufficient_liquidity_for_withdraw=lup_index_after_withdrawal
            > self.get_prices().htp_index,
            penalty_time_remaining=info.deposit_time + DEPOSIT_PENALTY_PERIOD,
        )

    def get_loan(self, borrower: str) -> Loan:
        debt, collateral, t0_neutral_price = self.pool_utils.borrowerInfo(
            self.address, borrower
        )
        threshold_price = wdiv(debt, collateral) if collateral else 0

        return Loan(debt, collateral, threshold_price, t0_neutral_price)

    def is_kickable(self, borrower: str) -> bool:
        """
        True when the loan of `borrower` has a threshold price above the current LUP
        """
        loan = self.get_loan(borrower)
        if loan.debt == 0:
            return False

        return loan.threshold_price > self.get_prices().lup


class SharedPoolOperations:
    """
    Capabilities common to both pool variants, forwarded to `self.operations`
    """

    operations: PoolOperations

    def quote_approve(self, signer, allowance: int) -> Transaction:
        return self.operations.quote_approve(signer, allowance)

    def ajna_approve(self, signer, allowance: int) -> Transaction:
        return self.operations.ajna_approve(signer, allowance)

    def add_quote_token(
        self, signer, bucket_index: int, amount: int, ttl: int = DEFAULT_TTL
    ) -> Transaction:
        return self.operations.add_quote_token(signer, bucket_index, amount, ttl)

    def move_quote_token(
        self,
        signer,
        from_index: int,
        to_index: int,
        max_amount: int = MAX_UINT256,
        ttl: int = DEFAULT_TTL,
    ) -> Transaction:
        return self.operations.move_quote_token(
            signer, from_index, to_index, max_amount, ttl
        )

    def remove_quote_token(
        self, signer, bucket_index: int, max_amount: int = MAX_UINT256
    ) -> Transaction:
        return self.operations.remove_quote_token(signer, bucket_index, max_amount)

    def multicall(self, signer, calls: Sequence[Tuple[str, Sequence]]) -> Transaction:
        return self.operations.multicall(signer, calls)

    def update_interest(self, signer) -> Transaction:
        return self.operations.update_interest(signer)

    def kick(self, signer, borrower: str) -> Transaction:
        return self.operations.kick(signer, borrower)

    def kick_with_deposit(self, signer, bucket_index: int) -> Transaction:
        return self.operations.kick_with_deposit(signer, bucket_index)

    def take(
        self,
        signer,
        borrower: str,
        max_amount: int = MAX_UINT256,
        callee: Optional[str] = None,
        data: bytes = b"",
    ) -> Transaction:
        return self.operations.take(signer, borrower, max_amount, callee, data)

    def arb_take(self, signer, borrower: str, bucket_index: int) -> Transaction:
        return self.operations.arb_take(signer, borrower, bucket_index)

    def deposit_take(self, signer, borrower: str, bucket_index: int) -> Transaction:
        return self.operations.deposit_take(signer, borrower, bucket_index)

    def settle(
        self, signer, borrower: str, max_depth: int = MAX_SETTLE_BUCKETS
    ) -> Transaction:
        return self.operations.settle(signer, borrower, max_depth)

    def kick_reserve_auction(self, signer) -> Transaction:
        return self.operations.kick_reserve_auction(signer)

    def take_reserves(self, signer, max_amount: int = MAX_UINT256) -> Transaction:
        return self.operations.take_reserves(signer, max_amount)

    def lender_info(self, lender: str, bucket_index: int) -> LenderInfo:
        return self.operations.lender_info(lender, bucket_index)

    def debt_info(self) -> DebtInfo:
        return self.operations.debt_info()

    def loans_info(self) -> LoansInfo:
        return self.operations.loans_info()

    def deposit_index(self, debt: int) -> int:
        return self.operations.deposit_index(debt)

    def get_prices(self) -> PoolPrices:
        return self.operations.get_prices()

    def get_stats(self) -> PoolStats:
        return self.operations.get_stats()

    def get_bucket_by_index(self, bucket_index: int) -> Bucket:
        return self.operations.get_bucket_by_index(bucket_index)

    def get_bucket_by_price(self, price: int) -> Bucket:
        return self.operations.get_bucket_by_price(price)

    def get_position(
        self, lender: str, bucket_index: int, withdrawal_amount: int = 0
    ) -> Position:
        return self.operations.get_position(lender, bucket_index, withdrawal_amount)

    def get_loan(self, borrower: str) -> Loan:
        return self.operations.get_loan(borrower)

    def is_kickable(self, borrower: str) -> bool:
        return self.operations.is_kickable(borrower)


class FungiblePool(SharedPoolOperations):
    """
    Pool with ERC20 collateral
    """

    def __init__(self, operations: PoolOperations) -> None:
        self.operations = operations
        self.address = operations.address
        self.quote_address = operations.quote_token.address
        self.collateral_address = operations.collateral_token.address

    def __repr__(self) -> str:
        return f"<FungiblePool {self.address}>"

    def collateral_approve(self, signer, allowance: int) -> Transaction:
        return self.operations.token_transaction(
            self.operations.collateral_token, signer, "approve", self.address, allowance
        )

    def add_collateral(
        self, signer, bucket_index: int, amount: int, ttl: int = DEFAULT_TTL
    ) -> Transaction:
        validate_index(bucket_index)
        return self.operations.transaction(
            signer, "addCollateral", amount, bucket_index, self.operations.expiry(ttl)
        )

    def remove_collateral(
        self, signer, bucket_index: int, max_amount: int = MAX_UINT256
    ) -> Transaction:
        validate_index(bucket_index)
        return self.operations.transaction(
            signer, "removeCollateral", max_amount, bucket_index
        )

    def draw_debt(
        self,
        signer,
        amount_to_borrow: int,
        collateral_to_pledge: int,
        limit_index: int = MAX_FENWICK_INDEX,
    ) -> Transaction:
        """
        Pledges collateral and borrows quote token against it.

        Args:
            signer: borrower account
            amount_to_borrow: WAD amount of quote token to borrow, may be 0
            collateral_to_pledge: WAD amount of collateral to pledge, may be 0
            limit_index: revert if the LUP would fall below the price of this bucket
        """
        validate_index(limit_index)
        return self.operations.transaction(
            signer,
            "drawDebt",
            signer.address,
            amount_to_borrow,
            limit_index,
            collateral_to_pledge,
        )

    def repay_debt(
        self,
        signer,
        max_quote_to_repay: int,
        collateral_to_pull: int,
        limit_index: int = MAX_FENWICK_INDEX,
        recipient: Optional[str] = None,
    ) -> Transaction:
        validate_index(limit_index)
        recipient = recipient if recipient is not None else signer.address
        return self.operations.transaction(
            signer,
            "repayDebt",
            signer.address,
            max_quote_to_repay,
            collateral_to_pull,
            recipient,
            limit_index,
        )


class NonfungiblePool(SharedPoolOperations):
    """
    Pool with ERC721 collateral. Collateral is pledged and added by token id and
    pulled or removed by number of tokens.
    """

    def __init__(self, operations: PoolOperations) -> None:
        self.operations = operations
        self.address = operations.address
        self.quote_address = operations.quote_token.address
        self.collateral_address = operations.collateral_token.address

    def __repr__(self) -> str:
        return f"<NonfungiblePool {self.address}>"

    def collateral_approve(self, signer, token_id: int) -> Transaction:
        return self.operations.token_transaction(
            self.operations.collateral_token, signer, "approve", self.address, token_id
        )

    def add_collateral(
        self, signer, bucket_index: int, token_ids: List[int], ttl: int = DEFAULT_TTL
    ) -> Transaction:
        validate_index(bucket_index)
        return self.operations.transaction(
            signer,
            "addCollateral",
            list(token_ids),
            bucket_index,
            self.operations.expiry(ttl),
        )

    def remove_collateral(
        self, signer, bucket_index: int, no_of_nfts: int = 1
    ) -> Transaction:
        validate_index(bucket_index)
        return self.operations.transaction(
            signer, "removeCollateral", no_of_nfts, bucket_index
        )

    def draw_debt(
        self,
        signer,
        amount_to_borrow: int,
        token_ids_to_pledge: List[int],
        limit_index: int = MAX_FENWICK_INDEX,
    ) -> Transaction:
        validate_index(limit_index)
        return self.operations.transaction(
            signer,
            "drawDebt",
            signer.address,
            amount_to_borrow,
            limit_index,
            list(token_ids_to_pledge),
        )

    def repay_debt(
        self,
        signer,
        max_quote_to_repay: int,
        no_of_nfts_to_pull: int,
        limit_index: int = MAX_FENWICK_INDEX,
        recipient: Optional[str] = None,
    ) -> Transaction:
        validate_index(limit_index)
        recipient = recipient if recipient is not None else signer.address
        return self.operations.transaction(
            signer,
            "repayDebt",
            signer.address,
            max_quote_to_repay,
            no_of_nfts_to_pull,
            recipient,
            limit_index,
        )
