"""
Fixed-point precision and on-chain integer bounds.

Ratios, fees and reserves are carried as integer strings at an implied
power-of-ten scale. With 6 decimals, "62500" means 0.0625.
"""

DEFAULT_DECIMALS = 6
FIXED_POINT_SCALE = 10 ** DEFAULT_DECIMALS

DEFAULT_FUNDING_PERIOD = 3_600  # 1 hour in seconds

# Reserves are Uint128 token amounts; k = quote * base must fit in 256 bits
MAX_UINT128 = 2 ** 128 - 1
MAX_UINT256 = 2 ** 256 - 1
