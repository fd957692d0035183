import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from brownie import Contract
from brownie import web3 as brownie_web3
from brownie.network.account import Account
from brownie.network.transaction import TransactionReceipt
from hexbytes import HexBytes
from web3.exceptions import ContractLogicError

from .constants import DEFAULT_TTL
from .exceptions import CallReverted, NetworkError
from .revert_decoder import RevertDecoder
from .transaction import Transaction

ABI_PATH = Path(__file__).parent / "abis"


@lru_cache(maxsize=None)
def load_abi(name: str) -> List[Dict]:
    """
    Returns the ABI shipped with the SDK for contract `name`, e.g. `ERC20Pool`
    """
    with (ABI_PATH / f"{name}.json").open() as abi_file:
        return json.load(abi_file)


def load_contract(name: str, address: str) -> Contract:
    return Contract.from_abi(name, address, load_abi(name))


def get_expiry(ttl: int = DEFAULT_TTL, web3=None) -> int:
    """
    Returns a transaction deadline `ttl` seconds after the latest block
    """
    web3 = web3 if web3 is not None else brownie_web3
    return web3.eth.get_block("latest")["timestamp"] + ttl


def get_block_number(web3=None) -> int:
    web3 = web3 if web3 is not None else brownie_web3
    return web3.eth.block_number


def _revert_data(exc: Exception) -> Optional[bytes]:
    data = getattr(exc, "data", None)
    if data is None and exc.args and isinstance(exc.args[0], dict):
        data = exc.args[0].get("data")

    # ganache reports {"<txhash>": {"return": "0x..."}}, other nodes {"data": "0x..."}
    if isinstance(data, dict):
        if "data" in data:
            data = data["data"]
        else:
            data = next(
                (v.get("return") for v in data.values() if isinstance(v, dict)), None
            )

    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str) and data.startswith("0x"):
        return bytes(HexBytes(data))
    return None


class BrownieTransactionHandle:
    def __init__(self, receipt: TransactionReceipt) -> None:
        self.receipt = receipt
        self.txid = receipt.txid

    def wait(self, confirmations: int) -> TransactionReceipt:
        self.receipt.wait(confirmations)
        return self.receipt


class BrownieContractCall:
    """
    A brownie contract method bound to its arguments and signer.

    Estimation goes straight to the node with the encoded calldata so that the
    raw revert data is preserved; submission goes through the brownie method with
    an explicit gas limit and without waiting for confirmations.
    """

    def __init__(
        self,
        contract: Contract,
        signer: Account,
        method_name: str,
        args: Sequence = (),
        web3=None,
    ) -> None:
        self.contract = contract
        self.signer = signer
        self.method_name = method_name
        self.args = tuple(args)
        self._web3 = web3 if web3 is not None else brownie_web3

        self.description = f"{method_name} on {contract.address}"

    @property
    def calldata(self) -> str:
        return getattr(self.contract, self.method_name).encode_input(*self.args)

    def estimate_gas(self) -> int:
        tx = {
            "from": self.signer.address,
            "to": self.contract.address,
            "data": self.calldata,
        }
        try:
            return self._web3.eth.estimate_gas(tx)
        except ContractLogicError as exc:
            raise CallReverted(_revert_data(exc) or b"") from exc
        except ValueError as exc:
            data = _revert_data(exc)
            if data is None:
                raise NetworkError(
                    f"gas estimation for {self.description} failed: {exc}"
                ) from exc
            raise CallReverted(data) from exc
        except OSError as exc:
            raise NetworkError(
                f"gas estimation for {self.description} failed: {exc}"
            ) from exc

    def send(self, gas_limit: int) -> BrownieTransactionHandle:
        method = getattr(self.contract, self.method_name)
        receipt = method(
            *self.args,
            {"from": self.signer, "gas_limit": gas_limit, "required_confs": 0},
        )
        return BrownieTransactionHandle(receipt)


def create_transaction(
    contract: Contract,
    signer: Account,
    method_name: str,
    args: Sequence = (),
    *,
    gas_limit: Optional[int] = None,
    web3=None,
) -> Transaction:
    """
    Wraps `contract.method_name(*args)` sent by `signer` in a `Transaction`.
    Reverts are decoded against the custom errors of the contract ABI.
    """
    call = BrownieContractCall(contract, signer, method_name, args, web3=web3)
    return Transaction(call, RevertDecoder(contract.abi), gas_limit=gas_limit)


def create_multicall(
    contract: Contract,
    signer: Account,
    calls: Sequence[Tuple[str, Sequence]],
    *,
    gas_limit: Optional[int] = None,
    web3=None,
) -> Transaction:
    """
    Batches `(method_name, args)` pairs into a single `multicall(bytes[])` on `contract`.
    """
    if not calls:
        raise ValueError("multicall needs at least one call")

    encoded = [
        getattr(contract, method_name).encode_input(*args)
        for method_name, args in calls
    ]
    call = BrownieContractCall(contract, signer, "multicall", (encoded,), web3=web3)
    call.description = (
        f"multicall({', '.join(name for name, _ in calls)}) on {contract.address}"
    )
    return Transaction(call, RevertDecoder(contract.abi), gas_limit=gas_limit)
