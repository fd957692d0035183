from .config import Config
from .contracts import load_contract
from .grant_fund import GrantFund
from .pool_factory import Erc20PoolFactory, Erc721PoolFactory
from .position_manager import PositionManager


class AjnaSDK:
    """
    Entry point to an Ajna deployment.

    Args:
        config: addresses of the deployment
        contract_loader: builds a contract from an ABI name and an address
        web3: web3 instance used for estimation and block reads, brownie's by default
    """

    def __init__(self, config: Config, contract_loader=load_contract, web3=None) -> None:
        self.config = config

        self.factory = Erc20PoolFactory(config, contract_loader, web3)
        self.nonfungible_factory = Erc721PoolFactory(config, contract_loader, web3)
        self.position_manager = PositionManager(config, contract_loader, web3)
        self.grant_fund = GrantFund(config, contract_loader, web3)
