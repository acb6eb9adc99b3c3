"""Protocol constants for the concentrated-liquidity pools.

Centralizes tick bounds, sqrt price bounds and routing parameters.
"""

# Tick index bounds (price = 1.0001^tick)
MAX_TICK_INDEX = 443636
MIN_TICK_INDEX = -443636
TICK_BOUND = 443636

# Sqrt price bounds in Q64.64, equal to the sqrt prices of the tick bounds
MAX_SQRT_PRICE = 79226673515401279992447579055
MIN_SQRT_PRICE = 4295048016

# Sqrt price limits passed to the swap computation so a dry run never stops
# on a price limit before the input is exhausted
LOW_LIMIT_SQRT_PRICE = 4295048017
HIGH_LIMIT_SQRT_PRICE = 79226673515401279992447579050

TICK_ARRAY_SIZE = 64

# Fee rates are expressed in millionths (e.g., 3000 = 0.3%)
FEE_RATE_DENOMINATOR = 1_000_000

# Q64.64 fixed-point one
Q_64 = 2**64

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1

# Number of ranked candidate paths that are actually dry-run
DRY_RUN_PATH_LEN = 5

SECONDS_PER_DAY = 86400
DAYS_PER_YEAR = 365

SUI_COIN_TYPE = "0x2::sui::SUI"
SUI_COIN_TYPE_LONG = "0x0000000000000000000000000000000000000000000000000000000000000002::sui::SUI"
