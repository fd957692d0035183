from typing import Dict, Iterable, List, Union

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector
from hexbytes import HexBytes

from .exceptions import OpaqueRevertError, RevertError

ERROR_STRING_SELECTOR = "0x08c379a0"
PANIC_SELECTOR = "0x4e487b71"

_BUILTIN_ERRORS = {
    ERROR_STRING_SELECTOR: {
        "name": "Error",
        "type": "error",
        "inputs": [{"name": "reason", "type": "string"}],
    },
    PANIC_SELECTOR: {
        "name": "Panic",
        "type": "error",
        "inputs": [{"name": "code", "type": "uint256"}],
    },
}


def _canonical_type(param: Dict) -> str:
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        components = ",".join(_canonical_type(c) for c in param["components"])
        return f"({components}){abi_type[len('tuple'):]}"
    return abi_type


def error_signature(error_abi: Dict) -> str:
    """
    Returns the canonical signature of an ABI error entry, e.g. `PoolAlreadyExists(address)`
    """
    types = ",".join(_canonical_type(i) for i in error_abi.get("inputs", []))
    return f"{error_abi['name']}({types})"


def error_selector(error_abi: Dict) -> str:
    return "0x" + function_signature_to_4byte_selector(error_signature(error_abi)).hex()


class RevertDecoder:
    """
    Maps revert data returned by a node to readable errors, using the custom
    error definitions of one or more contract ABIs.
    """

    def __init__(self, *abis: List[Dict]) -> None:
        self._errors: Dict[str, Dict] = dict(_BUILTIN_ERRORS)
        for abi in abis:
            self.add_abi(abi)

    def add_abi(self, abi: Iterable[Dict]) -> None:
        for item in abi:
            if item.get("type") == "error":
                self._errors.setdefault(error_selector(item), item)

    @property
    def selectors(self) -> Dict[str, str]:
        return {
            selector: error_signature(item) for selector, item in self._errors.items()
        }

    def decode(self, data: Union[bytes, str]) -> RevertError:
        """
        Returns the error described by `data`.

        Unknown selectors and undecodable payloads produce an `OpaqueRevertError`
        carrying the raw bytes; this method never raises.
        """
        data = bytes(HexBytes(data)) if data else b""
        if len(data) < 4:
            return OpaqueRevertError(data)

        selector = "0x" + data[:4].hex()
        error_abi = self._errors.get(selector)
        if error_abi is None:
            return OpaqueRevertError(data)

        types = [_canonical_type(i) for i in error_abi.get("inputs", [])]
        try:
            args = decode(types, data[4:]) if types else ()
        except DecodingError:
            return OpaqueRevertError(data)

        return RevertError(error_abi["name"], args, selector)
