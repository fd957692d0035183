import pytest
from eth_abi import encode
from eth_utils import keccak

from ajna_sdk import get_subset_hash, to_wad
from ajna_sdk.constants import ERC20_NON_SUBSET_HASH, ERC721_NON_SUBSET_HASH
from ajna_sdk.exceptions import SdkError

from conftest import (
    COLLATERAL_ADDRESS,
    ERC20_FACTORY_ADDRESS,
    ERC721_FACTORY_ADDRESS,
    NFT_POOL_ADDRESS,
    POOL_ADDRESS,
    QUOTE_ADDRESS,
)


def test_non_subset_hashes():
    assert len(ERC20_NON_SUBSET_HASH) == 32
    assert ERC20_NON_SUBSET_HASH != ERC721_NON_SUBSET_HASH
    assert get_subset_hash() == ERC721_NON_SUBSET_HASH
    assert get_subset_hash([]) == keccak(text="ERC721_NON_SUBSET_HASH")


def test_subset_hash_sorts_token_ids():
    expected = keccak(encode(["uint256[]"], [[1, 5, 9]]))

    assert get_subset_hash([9, 1, 5]) == expected
    assert get_subset_hash((1, 5, 9)) == expected
    assert get_subset_hash([1, 5]) != expected


def test_subset_hash_rejects_duplicates():
    with pytest.raises(SdkError):
        get_subset_hash([3, 1, 3])


def test_get_pool(ajna, contracts):
    pool = ajna.factory.get_pool(COLLATERAL_ADDRESS, QUOTE_ADDRESS)

    assert pool.address == POOL_ADDRESS
    assert contracts[ERC20_FACTORY_ADDRESS].calls == [
        ("deployedPools", (ERC20_NON_SUBSET_HASH, COLLATERAL_ADDRESS, QUOTE_ADDRESS))
    ]


def test_get_pool_for_unknown_pair(ajna):
    with pytest.raises(SdkError, match="No pool deployed"):
        ajna.factory.get_pool(QUOTE_ADDRESS, COLLATERAL_ADDRESS)


def test_deploy_pool(ajna, lender):
    tx = ajna.factory.deploy_pool(
        lender, COLLATERAL_ADDRESS, QUOTE_ADDRESS, to_wad("0.05")
    )

    assert tx.call.contract.address == ERC20_FACTORY_ADDRESS
    assert tx.call.method_name == "deployPool"
    assert tx.call.args == (COLLATERAL_ADDRESS, QUOTE_ADDRESS, to_wad("0.05"))


def test_deploy_pool_round_trip(ajna, lender, contracts):
    ajna.factory.deploy_pool(
        lender, COLLATERAL_ADDRESS, QUOTE_ADDRESS, to_wad("0.05")
    ).verify_and_submit()

    (method_name, args, tx_dict), = contracts[ERC20_FACTORY_ADDRESS].sent
    assert method_name == "deployPool"
    assert tx_dict["from"] is lender
    assert tx_dict["gas_limit"] == 300_000


def test_get_nonfungible_pool(ajna, contracts):
    pool = ajna.nonfungible_factory.get_pool(COLLATERAL_ADDRESS, QUOTE_ADDRESS)

    assert pool.address == NFT_POOL_ADDRESS
    assert contracts[ERC721_FACTORY_ADDRESS].calls == [
        ("deployedPools", (ERC721_NON_SUBSET_HASH, COLLATERAL_ADDRESS, QUOTE_ADDRESS))
    ]


def test_get_nonfungible_subset_pool(ajna, contracts):
    ajna.nonfungible_factory.get_pool(COLLATERAL_ADDRESS, QUOTE_ADDRESS, [7, 2])

    _, (subset_hash, _, _) = contracts[ERC721_FACTORY_ADDRESS].calls[-1]
    assert subset_hash == get_subset_hash([2, 7])


def test_deploy_nonfungible_pool_sorts_token_ids(ajna, lender):
    tx = ajna.nonfungible_factory.deploy_pool(
        lender, COLLATERAL_ADDRESS, QUOTE_ADDRESS, [7, 2, 4], to_wad("0.05")
    )

    assert tx.call.contract.address == ERC721_FACTORY_ADDRESS
    assert tx.call.args == (
        COLLATERAL_ADDRESS,
        QUOTE_ADDRESS,
        [2, 4, 7],
        to_wad("0.05"),
    )
