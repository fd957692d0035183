from .config import Config
from .contracts import create_transaction, load_contract
from .transaction import Transaction


class PositionManager:
    """
    Mints and burns the NFTs representing lender positions in Ajna pools
    """

    def __init__(self, config: Config, contract_loader=load_contract, web3=None) -> None:
        self.contract = contract_loader("PositionManager", config.position_manager)
        self._web3 = web3

    def mint(
        self, signer, recipient: str, pool: str, pool_subset_hash: bytes
    ) -> Transaction:
        """
        Creates a transaction minting a position NFT for `pool` to `recipient`.

        Args:
            pool_subset_hash: `ERC20_NON_SUBSET_HASH` for fungible pools, or the subset
                hash of a non-fungible pool
        """
        return create_transaction(
            self.contract,
            signer,
            "mint",
            ((recipient, pool, pool_subset_hash),),
            web3=self._web3,
        )

    def burn(self, signer, token_id: int, pool: str) -> Transaction:
        return create_transaction(
            self.contract, signer, "burn", ((token_id, pool),), web3=self._web3
        )

    def token_uri(self, token_id: int) -> str:
        return self.contract.tokenURI(token_id)
