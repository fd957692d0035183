"""
Transaction envelope wrapping every contract-mutating call.

A `Transaction` moves through PREPARED -> ESTIMATED -> SUBMITTED -> CONFIRMED,
or to FAILED from any of them. It is owned by the caller that created it and
is not safe to share. Two envelopes sent concurrently from the same signer
can collide on nonces; callers must wait for one `verify_and_submit()` before
issuing the next.

Waiting for confirmation has no timeout. A caller that gives up waiting has
an unknown outcome, not a failure: the transaction may still be mined.
"""
from enum import Enum
from typing import Any, Optional, Protocol

from .constants import GAS_LIMIT_MAX, GAS_MULTIPLIER
from .exceptions import (
    CallReverted,
    ConfirmationError,
    SubmissionError,
    TransactionStateError,
)
from .logging import logger
from .revert_decoder import RevertDecoder


class TransactionState(Enum):
    PREPARED = "prepared"
    ESTIMATED = "estimated"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class PendingTransaction(Protocol):
    txid: str

    def wait(self, confirmations: int) -> Any:
        ...


class ContractCall(Protocol):
    """
    A contract method bound to its arguments and signer, not yet sent.

    `estimate_gas` raises `CallReverted` with the raw revert data when the call
    would revert, and `NetworkError` on transport failures. `send` submits the
    call with the given gas limit and returns without waiting for it to be mined.
    """

    description: str

    def estimate_gas(self) -> int:
        ...

    def send(self, gas_limit: int) -> PendingTransaction:
        ...


def gas_limit_for(estimated_gas: int) -> int:
    return min(estimated_gas * GAS_MULTIPLIER, GAS_LIMIT_MAX)


class Transaction:
    """
    Verify-then-submit lifecycle around a `ContractCall`.

    Args:
        call: the prepared contract call
        decoder: resolves revert data against the contract ABI
        gas_limit: explicit gas limit, replaces the estimate based limit on submission
    """

    def __init__(
        self,
        call: ContractCall,
        decoder: Optional[RevertDecoder] = None,
        gas_limit: Optional[int] = None,
    ) -> None:
        self._call = call
        self._decoder = decoder if decoder is not None else RevertDecoder()
        self._gas_limit_override = gas_limit

        self.state = TransactionState.PREPARED
        self.estimated_gas: Optional[int] = None
        self.pending: Optional[PendingTransaction] = None
        self.receipt = None
        self.error: Optional[Exception] = None

    def __repr__(self) -> str:
        return f"<Transaction {self._call.description} state={self.state.value}>"

    @property
    def call(self) -> ContractCall:
        return self._call

    @property
    def gas_limit(self) -> Optional[int]:
        """
        The gas limit used on submission: the explicit override, or the capped
        estimate once the call has been estimated.
        """
        if self._gas_limit_override is not None:
            return self._gas_limit_override
        if self.estimated_gas is None:
            return None
        return gas_limit_for(self.estimated_gas)

    def _require_state(self, operation: str, *states: TransactionState) -> None:
        if self.state not in states:
            raise TransactionStateError(
                f"cannot {operation} {self._call.description} in state {self.state.value}"
            )

    def _fail(self, error: Exception) -> None:
        self.state = TransactionState.FAILED
        self.error = error
        logger.warning(f"{self._call.description} failed: {error}")

    def verify(self) -> int:
        """
        Estimates gas against the current chain state and returns the estimate.

        Raises:
            RevertError: the call would revert with a known error
            OpaqueRevertError: the call would revert with an unknown selector
            NetworkError: the node could not be reached
        """
        self._require_state(
            "verify", TransactionState.PREPARED, TransactionState.ESTIMATED
        )

        try:
            estimated_gas = self._call.estimate_gas()
        except CallReverted as exc:
            error = self._decoder.decode(exc.data)
            self._fail(error)
            raise error from None
        except Exception as exc:
            self._fail(exc)
            raise

        self.estimated_gas = estimated_gas
        self.state = TransactionState.ESTIMATED
        logger.debug(f"{self._call.description} estimated at {estimated_gas} gas")

        return estimated_gas

    def submit(self) -> PendingTransaction:
        """
        Sends the transaction without waiting for it to be mined.

        Without a gas limit override, a transaction that was not verified is
        estimated first, and reverts surface exactly as from `verify()`.

        Raises:
            SubmissionError: the node did not accept the transaction
        """
        self._require_state(
            "submit", TransactionState.PREPARED, TransactionState.ESTIMATED
        )

        if self.gas_limit is None:
            self.verify()

        gas_limit = self.gas_limit
        try:
            pending = self._call.send(gas_limit)
        except Exception as exc:
            error = SubmissionError(
                f"{self._call.description} was not submitted: {exc}"
            )
            self._fail(error)
            raise error from exc

        self.pending = pending
        self.state = TransactionState.SUBMITTED
        logger.info(
            f"{self._call.description} submitted as {pending.txid} with gas limit {gas_limit}"
        )

        return pending

    def wait(self, confirmations: int = 1):
        """
        Blocks until the submitted transaction has `confirmations` confirmations and
        returns its receipt.

        Raises:
            ConfirmationError: waiting failed or the transaction was mined and reverted.
                The transaction may still be outstanding in the first case.
        """
        self._require_state("wait for", TransactionState.SUBMITTED)

        txid = self.pending.txid
        try:
            receipt = self.pending.wait(confirmations)
        except Exception as exc:
            error = ConfirmationError(
                f"{self._call.description} submitted as {txid} but not confirmed: {exc}",
                txid,
            )
            self._fail(error)
            raise error from exc

        if getattr(receipt, "status", 1) != 1:
            error = ConfirmationError(
                f"{self._call.description} mined as {txid} but reverted",
                txid,
                receipt,
            )
            self._fail(error)
            raise error

        self.receipt = receipt
        self.state = TransactionState.CONFIRMED
        logger.info(f"{self._call.description} confirmed in {txid}")

        return receipt

    def verify_and_submit_response(self) -> PendingTransaction:
        """
        Verifies and submits the transaction, returning without waiting for it to be mined
        """
        self.verify()
        return self.submit()

    def verify_and_submit(self, confirmations: int = 1):
        """
        Verifies, submits and waits for the transaction to be mined. A failed
        verification means nothing was sent and no gas was spent.
        """
        self.verify_and_submit_response()
        return self.wait(confirmations)

