from typing import Callable, Iterable, List

from eth_abi import encode
from eth_utils import keccak

from .config import Config
from .constants import ERC20_NON_SUBSET_HASH, ERC721_NON_SUBSET_HASH
from .contracts import create_transaction, load_contract
from .exceptions import SdkError
from .logging import logger
from .pool import FungiblePool, NonfungiblePool, PoolOperations
from .transaction import Transaction

ContractLoader = Callable[[str, str], object]


def get_subset_hash(token_ids: Iterable[int] = ()) -> bytes:
    """
    Returns the subset hash identifying an ERC721 pool: the collection hash when no token
    ids are given, otherwise the hash of the ABI-encoded ascending token ids.

    Raises:
        SdkError: a token id is repeated
    """
    token_ids = sorted(token_ids)
    if not token_ids:
        return ERC721_NON_SUBSET_HASH
    if len(set(token_ids)) != len(token_ids):
        raise SdkError(f"token ids of a subset must be unique, got {token_ids}")

    return keccak(encode(["uint256[]"], [token_ids]))


def _is_zero_address(address: str) -> bool:
    return int(address, 16) == 0


class _FactoryContracts:
    def __init__(
        self, config: Config, contract_name: str, factory_address: str, contract_loader, web3
    ) -> None:
        self.load = contract_loader
        self.web3 = web3
        self.factory = contract_loader(contract_name, factory_address)
        self.pool_utils = contract_loader("PoolInfoUtils", config.pool_utils)
        self.ajna_token = contract_loader("ERC20", config.ajna_token)

    def find_pool(self, subset_hash: bytes, collateral: str, quote: str) -> str:
        address = self.factory.deployedPools(subset_hash, collateral, quote)
        if _is_zero_address(address):
            raise SdkError(
                f"No pool deployed for collateral {collateral} and quote token {quote}"
            )
        return address

    def pool_operations(
        self, pool_name: str, collateral_name: str, address: str
    ) -> PoolOperations:
        contract = self.load(pool_name, address)

        return PoolOperations(
            contract,
            quote_token=self.load("ERC20", contract.quoteTokenAddress()),
            collateral_token=self.load(collateral_name, contract.collateralAddress()),
            ajna_token=self.ajna_token,
            pool_utils=self.pool_utils,
            web3=self.web3,
        )


class Erc20PoolFactory:
    """
    Deploys and looks up pools with ERC20 collateral.

    Args:
        config: addresses of the Ajna deployment
        contract_loader: builds a contract from an ABI name and an address
        web3: web3 instance used by transactions, brownie's by default
    """

    def __init__(
        self, config: Config, contract_loader: ContractLoader = load_contract, web3=None
    ) -> None:
        self._contracts = _FactoryContracts(
            config,
            "ERC20PoolFactory",
            config.erc20_pool_factory,
            contract_loader,
            web3,
        )
        self.contract = self._contracts.factory

    def deploy_pool(
        self, signer, collateral: str, quote: str, interest_rate: int
    ) -> Transaction:
        """
        Creates a transaction deploying a pool for the token pair.

        Args:
            signer: deployer account
            collateral: address of the collateral ERC20 token
            quote: address of the quote ERC20 token
            interest_rate: initial WAD interest rate, between 1% and 10%
        """
        logger.debug(f"Preparing ERC20 pool deployment for {collateral}/{quote}")
        return create_transaction(
            self.contract,
            signer,
            "deployPool",
            (collateral, quote, interest_rate),
            web3=self._contracts.web3,
        )

    def get_pool_address(self, collateral: str, quote: str) -> str:
        return self._contracts.find_pool(ERC20_NON_SUBSET_HASH, collateral, quote)

    def get_pool(self, collateral: str, quote: str) -> FungiblePool:
        """
        Returns the pool for the token pair.

        Raises:
            SdkError: no pool is deployed for the pair
        """
        address = self.get_pool_address(collateral, quote)
        return FungiblePool(
            self._contracts.pool_operations("ERC20Pool", "ERC20", address)
        )


class Erc721PoolFactory:
    """
    Deploys and looks up pools with ERC721 collateral, either for a whole collection
    or for a subset of its token ids.
    """

    def __init__(
        self, config: Config, contract_loader: ContractLoader = load_contract, web3=None
    ) -> None:
        self._contracts = _FactoryContracts(
            config,
            "ERC721PoolFactory",
            config.erc721_pool_factory,
            contract_loader,
            web3,
        )
        self.contract = self._contracts.factory

    def deploy_pool(
        self,
        signer,
        collateral: str,
        quote: str,
        token_ids: List[int],
        interest_rate: int,
    ) -> Transaction:
        logger.debug(f"Preparing ERC721 pool deployment for {collateral}/{quote}")
        return create_transaction(
            self.contract,
            signer,
            "deployPool",
            (collateral, quote, sorted(token_ids), interest_rate),
            web3=self._contracts.web3,
        )

    def get_pool_address(
        self, collateral: str, quote: str, token_ids: Iterable[int] = ()
    ) -> str:
        return self._contracts.find_pool(get_subset_hash(token_ids), collateral, quote)

    def get_pool(
        self, collateral: str, quote: str, token_ids: Iterable[int] = ()
    ) -> NonfungiblePool:
        address = self.get_pool_address(collateral, quote, token_ids)
        return NonfungiblePool(
            self._contracts.pool_operations("ERC721Pool", "ERC721", address)
        )
