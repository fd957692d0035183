import pytest

from ajna_sdk import AjnaSDK, Config
from ajna_sdk.contracts import load_abi

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

ERC20_FACTORY_ADDRESS = "0xD86c4A8b172170Da0d5C0C1F12455bA80Eaa42AD"
ERC721_FACTORY_ADDRESS = "0x9617ABE221F9A9c492D5348be56aef4Db75A692d"
POOL_UTILS_ADDRESS = "0x4f05DA51eAAB00e5812c54e370fB95D4C9c51F21"
POSITION_MANAGER_ADDRESS = "0x6c5c7fD98415168ada1930d44447790959097482"
AJNA_TOKEN_ADDRESS = "0x25Af17eF4E2E6A4A2CE586C9D25dF87FD84D4a7d"
GRANT_FUND_ADDRESS = "0xE340B87CEd1af1AbE1CE8D617c84B7f168e3b18b"

COLLATERAL_ADDRESS = "0x97112a824376a2672a61c63c1c20cb4ee5855bc7"
QUOTE_ADDRESS = "0xc91261159593173b5d82e1024c3e3529e945dc28"
POOL_ADDRESS = "0x1B1D5bEf0Ef2D9Bcb0fB4F01c1A2C1d2DB0a4F11"
NFT_POOL_ADDRESS = "0x2C2e6cFf1Fe3E0Cdc1Fc5A12d2B3D2e3EC1b5A22"

LENDER_ADDRESS = "0xbC33716Bb8Dc2943C0dFFdE1F0A1d2D66F33Bf80"
BORROWER_ADDRESS = "0xD293C11Ac5F8d9Ec3cF8d4B0d0e5A0Ab2c3e4F91"

BLOCK_TIMESTAMP = 1_680_000_000
BLOCK_NUMBER = 9_000_000


class FakeAccount:
    def __init__(self, address: str) -> None:
        self.address = address

    def __str__(self) -> str:
        return self.address


class FakeReceipt:
    def __init__(self, txid: str, status: int = 1) -> None:
        self.txid = txid
        self.status = status
        self.confirmations = 0

    def wait(self, required_confs: int) -> None:
        self.confirmations = required_confs


class FakeMethod:
    """
    Stands in for a brownie ContractCall/ContractTx. Calls ending with a transaction
    dict are recorded as sends; other calls return the configured value.
    """

    def __init__(self, contract: "FakeContract", name: str) -> None:
        self.contract = contract
        self.name = name

    def __call__(self, *args):
        if args and isinstance(args[-1], dict) and "from" in args[-1]:
            self.contract.sent.append((self.name, args[:-1], args[-1]))
            if self.contract.send_error is not None:
                raise self.contract.send_error
            return FakeReceipt(f"0x{len(self.contract.sent):064x}")

        self.contract.calls.append((self.name, args))
        result = self.contract.returns[self.name]
        return result(*args) if callable(result) else result

    def encode_input(self, *args) -> str:
        return f"{self.name}{args!r}"


class FakeContract:
    def __init__(self, address: str, abi=(), **returns) -> None:
        self.address = address
        self.abi = list(abi)
        self.returns = dict(returns)
        self.calls = []
        self.sent = []
        self.send_error = None

    def __getattr__(self, name: str) -> FakeMethod:
        if name.startswith("_"):
            raise AttributeError(name)
        return FakeMethod(self, name)


class FakeContracts:
    """
    Contract loader backed by fake contracts, created on first load with the ABI
    shipped in the SDK.
    """

    def __init__(self) -> None:
        self.by_address = {}

    def add(self, name: str, address: str, **returns) -> FakeContract:
        contract = FakeContract(address, load_abi(name), **returns)
        self.by_address[address] = contract
        return contract

    def load(self, name: str, address: str) -> FakeContract:
        if address not in self.by_address:
            self.add(name, address)
        return self.by_address[address]

    def __getitem__(self, address: str) -> FakeContract:
        return self.by_address[address]


class FakeEth:
    def __init__(self) -> None:
        self.gas = 150_000
        self.error = None
        self.estimates = []
        self.block_number = BLOCK_NUMBER

    def estimate_gas(self, tx) -> int:
        self.estimates.append(tx)
        if self.error is not None:
            raise self.error
        return self.gas

    def get_block(self, block_identifier):
        return {"number": self.block_number, "timestamp": BLOCK_TIMESTAMP}


class FakeWeb3:
    def __init__(self) -> None:
        self.eth = FakeEth()


@pytest.fixture
def config() -> Config:
    return Config(
        erc20_pool_factory=ERC20_FACTORY_ADDRESS,
        erc721_pool_factory=ERC721_FACTORY_ADDRESS,
        pool_utils=POOL_UTILS_ADDRESS,
        position_manager=POSITION_MANAGER_ADDRESS,
        ajna_token=AJNA_TOKEN_ADDRESS,
        grant_fund=GRANT_FUND_ADDRESS,
    )


@pytest.fixture
def web3() -> FakeWeb3:
    return FakeWeb3()


@pytest.fixture
def contracts() -> FakeContracts:
    contracts = FakeContracts()
    contracts.add(
        "ERC20PoolFactory",
        ERC20_FACTORY_ADDRESS,
        deployedPools=lambda subset_hash, collateral, quote: POOL_ADDRESS
        if (collateral, quote) == (COLLATERAL_ADDRESS, QUOTE_ADDRESS)
        else ZERO_ADDRESS,
    )
    contracts.add(
        "ERC721PoolFactory",
        ERC721_FACTORY_ADDRESS,
        deployedPools=lambda subset_hash, collateral, quote: NFT_POOL_ADDRESS
        if (collateral, quote) == (COLLATERAL_ADDRESS, QUOTE_ADDRESS)
        else ZERO_ADDRESS,
    )
    contracts.add(
        "ERC20Pool",
        POOL_ADDRESS,
        quoteTokenAddress=QUOTE_ADDRESS,
        collateralAddress=COLLATERAL_ADDRESS,
    )
    contracts.add(
        "ERC721Pool",
        NFT_POOL_ADDRESS,
        quoteTokenAddress=QUOTE_ADDRESS,
        collateralAddress=COLLATERAL_ADDRESS,
    )
    return contracts


@pytest.fixture
def ajna(config, contracts, web3) -> AjnaSDK:
    return AjnaSDK(config, contract_loader=contracts.load, web3=web3)


@pytest.fixture
def lender() -> FakeAccount:
    return FakeAccount(LENDER_ADDRESS)


@pytest.fixture
def borrower() -> FakeAccount:
    return FakeAccount(BORROWER_ADDRESS)


@pytest.fixture
def pool(ajna):
    return ajna.factory.get_pool(COLLATERAL_ADDRESS, QUOTE_ADDRESS)


@pytest.fixture
def nft_pool(ajna):
    return ajna.nonfungible_factory.get_pool(COLLATERAL_ADDRESS, QUOTE_ADDRESS)
