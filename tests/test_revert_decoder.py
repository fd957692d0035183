from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector

from ajna_sdk.contracts import load_abi
from ajna_sdk.exceptions import OpaqueRevertError, RevertError
from ajna_sdk.revert_decoder import (
    ERROR_STRING_SELECTOR,
    PANIC_SELECTOR,
    RevertDecoder,
    error_signature,
)

POOL_ADDRESS = "0x1b1d5bef0ef2d9bcb0fb4f01c1a2c1d2db0a4f11"


def revert_data(signature: str, types=(), values=()) -> bytes:
    return function_signature_to_4byte_selector(signature) + encode(list(types), list(values))


def test_decode_custom_error_without_arguments():
    decoder = RevertDecoder(load_abi("ERC20Pool"))

    error = decoder.decode(revert_data("NoClaim()"))

    assert type(error) is RevertError
    assert error.name == "NoClaim"
    assert error.args_decoded == ()
    assert str(error) == "NoClaim()"


def test_decode_custom_error_with_arguments():
    decoder = RevertDecoder(load_abi("ERC20PoolFactory"))

    error = decoder.decode(revert_data("PoolAlreadyExists(address)", ["address"], [POOL_ADDRESS]))

    assert error.name == "PoolAlreadyExists"
    assert error.args_decoded == (POOL_ADDRESS,)
    assert str(error) == f"PoolAlreadyExists({POOL_ADDRESS})"


def test_decode_hex_string():
    decoder = RevertDecoder(load_abi("ERC20Pool"))

    error = decoder.decode("0x" + revert_data("TransactionExpired()").hex())

    assert error.name == "TransactionExpired"


def test_decode_revert_string_and_panic():
    decoder = RevertDecoder()

    error = decoder.decode(revert_data("Error(string)", ["string"], ["not enough allowance"]))
    assert error.name == "Error"
    assert error.selector == ERROR_STRING_SELECTOR
    assert error.args_decoded == ("not enough allowance",)

    panic = decoder.decode(revert_data("Panic(uint256)", ["uint256"], [0x11]))
    assert panic.name == "Panic"
    assert panic.selector == PANIC_SELECTOR
    assert panic.args_decoded == (0x11,)


def test_unknown_selector_is_opaque():
    decoder = RevertDecoder(load_abi("ERC20Pool"))
    data = bytes.fromhex("03119322") + bytes(32)

    error = decoder.decode(data)

    assert isinstance(error, OpaqueRevertError)
    assert isinstance(error, RevertError)
    assert error.name is None
    assert error.selector == "0x03119322"
    assert error.data == data
    assert "0x03119322" in str(error)


def test_empty_and_short_data_is_opaque():
    decoder = RevertDecoder(load_abi("ERC20Pool"))

    for data in (b"", None, b"\x01\x02"):
        error = decoder.decode(data)
        assert isinstance(error, OpaqueRevertError)

    assert str(decoder.decode(b"")) == "execution reverted without data"


def test_undecodable_arguments_are_opaque():
    decoder = RevertDecoder(load_abi("ERC20PoolFactory"))
    data = function_signature_to_4byte_selector("PoolAlreadyExists(address)") + b"\x01"

    assert isinstance(decoder.decode(data), OpaqueRevertError)


def test_selectors_cover_every_abi():
    decoder = RevertDecoder(load_abi("ERC20Pool"), load_abi("ERC20PoolFactory"))
    signatures = set(decoder.selectors.values())

    assert "NoClaim()" in signatures
    assert "PoolAlreadyExists(address)" in signatures
    assert "Error(string)" in signatures


def test_error_signature_of_tuple():
    error_abi = {
        "name": "Wrong",
        "type": "error",
        "inputs": [
            {
                "name": "params",
                "type": "tuple[]",
                "components": [{"type": "uint256"}, {"type": "address"}],
            }
        ],
    }

    assert error_signature(error_abi) == "Wrong((uint256,address)[])"
