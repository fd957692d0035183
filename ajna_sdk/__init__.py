from typing import Optional

from .bucket import Bucket, BucketInfo
from .config import Config
from .exceptions import (
    ConfirmationError,
    NetworkError,
    OpaqueRevertError,
    RangeError,
    RevertError,
    SdkError,
    SubmissionError,
    TransactionStateError,
)
from .grant_fund import GrantFund, Proposal, ProposalState
from .numeric import from_wad, to_wad
from .pool import FungiblePool, NonfungiblePool, Pool, PoolOperations
from .pool_factory import Erc20PoolFactory, Erc721PoolFactory, get_subset_hash
from .position_manager import PositionManager
from .pricing import index_to_price, price_to_index, price_to_index_safe
from .sdk import AjnaSDK
from .transaction import Transaction, TransactionState


def create_sdk(config: Optional[Config] = None) -> AjnaSDK:
    """
    Returns an SDK for the deployment described by `AJNA_*` environment variables,
    unless an explicit `config` is given.
    """
    return AjnaSDK(config if config is not None else Config.from_environment())
