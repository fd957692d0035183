from typing import Optional, Tuple


class SdkError(Exception):
    """
    Base exception for everything raised by the SDK.

    Exceptions raised by brownie, web3 or the Python runtime are not wrapped unless
    noted, so calling code should catch `SdkError` subclasses before general exceptions.
    """


class RangeError(SdkError, ValueError):
    """
    Raised when a bucket index or price is outside the domain of the pricing curve.
    Always raised locally, before anything is sent to the network.
    """


class TransactionStateError(SdkError):
    """
    Raised when a transaction lifecycle method is called from a state that does not allow it
    """


class CallReverted(SdkError):
    """
    Raised by a contract call when the node reports that the call would revert.

    Carries the raw revert data; the transaction envelope decodes it into a
    `RevertError` or `OpaqueRevertError` before it reaches the caller.
    """

    def __init__(self, data: bytes, message: Optional[str] = None) -> None:
        self.data = bytes(data)
        super().__init__(message or f"call reverted with data 0x{self.data.hex()}")


class RevertError(SdkError):
    """
    A revert decoded against the contract ABI.

    Attributes:
        name: custom error name, `Error` for revert strings or `Panic` for panic codes
        args_decoded: decoded error arguments
        selector: 4-byte error selector as a 0x-prefixed hex string
    """

    def __init__(
        self,
        name: Optional[str],
        args: Tuple = (),
        selector: str = "",
        message: Optional[str] = None,
    ) -> None:
        self.name = name
        self.args_decoded = tuple(args)
        self.selector = selector
        super().__init__(
            message
            or f"{name}({', '.join(str(arg) for arg in self.args_decoded)})"
        )


class OpaqueRevertError(RevertError):
    """
    A revert whose selector is not defined in any known ABI. `data` holds the raw revert bytes.
    """

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        selector = "0x" + self.data[:4].hex() if self.data else ""
        super().__init__(
            None,
            selector=selector,
            message=f"unrecognized revert selector {selector}"
            if selector
            else "execution reverted without data",
        )


class NetworkError(SdkError):
    """
    RPC or transport failure while estimating, submitting or waiting for a transaction
    """


class SubmissionError(NetworkError):
    """
    The transaction was never accepted by the node. Nothing is outstanding on-chain.
    """


class ConfirmationError(NetworkError):
    """
    The transaction was submitted but was not confirmed, or was mined and reverted.

    Attributes:
        txid: hash of the submitted transaction
        receipt: receipt of the mined transaction, if one was obtained
    """

    def __init__(self, message: str, txid: str, receipt=None) -> None:
        self.txid = txid
        self.receipt = receipt
        super().__init__(message)
