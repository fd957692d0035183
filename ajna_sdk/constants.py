from eth_utils import keccak

# transaction management
GAS_MULTIPLIER = 2
GAS_LIMIT_MAX = 1_500_000

# fixed point
WAD = 10**18
ONE_HALF_WAD = 5 * 10**17
MAX_UINT256 = 2**256 - 1

# pool interactions
ERC20_NON_SUBSET_HASH = keccak(text="ERC20_NON_SUBSET_HASH")
ERC721_NON_SUBSET_HASH = keccak(text="ERC721_NON_SUBSET_HASH")
MIN_FENWICK_INDEX = 1
MAX_FENWICK_INDEX = 7388
DEFAULT_TTL = 600
MAX_SETTLE_BUCKETS = 10
DEPOSIT_PENALTY_PERIOD = 24 * 3600
