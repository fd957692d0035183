import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    """
    Contract addresses of an Ajna deployment on a single chain.

    Build one per process (or per test) and pass it to `AjnaSDK`; instances are immutable.
    """

    erc20_pool_factory: str
    erc721_pool_factory: str
    pool_utils: str
    position_manager: str
    ajna_token: str
    grant_fund: str = ""

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """
        Reads addresses from the `AJNA_*` environment variables. When `environ` is not
        given, a `.env` file in the working directory is loaded first.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        return cls(
            erc20_pool_factory=environ.get("AJNA_CONTRACT_ERC20_POOL_FACTORY", ""),
            erc721_pool_factory=environ.get("AJNA_CONTRACT_ERC721_POOL_FACTORY", ""),
            pool_utils=environ.get("AJNA_POOL_UTILS", ""),
            position_manager=environ.get("AJNA_POSITION_MANAGER", ""),
            ajna_token=environ.get("AJNA_TOKEN_ADDRESS", ""),
            grant_fund=environ.get("AJNA_GRANT_FUND", ""),
        )
