"""Protocol constants for the zapper.

Centralizes well-known addresses and UniswapV2 protocol parameters.
"""

from zapper.models.types import ZERO_ADDRESS, is_valid_address


def _validate_address(name: str, address: str) -> str:
    """Validate a hard-coded address at import time.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# UniswapV2 Router02 on mainnet (lowercase for consistency)
UNISWAP_V2_ROUTER = _validate_address("router", "0x7a250d5630b4cf539739df2c5dacb4c659f2488d")

# UniswapV2 factory on mainnet
UNISWAP_V2_FACTORY = _validate_address("factory", "0x5c69bee701ef814a2b6a3edd4b1652cb9cc5aa6f")

# LP tokens permanently locked on the first mint of every pair
MINIMUM_LIQUIDITY = 1000

# Standard UniswapV2 fee: 0.3% taken from the input, i.e. 997/1000 is swapped
DEFAULT_FEE_NUMERATOR = 997
DEFAULT_FEE_DENOMINATOR = 1000

# Basis-point scale for slippage settings
BPS = 10_000

__all__ = [
    "ZERO_ADDRESS",
    "UNISWAP_V2_ROUTER",
    "UNISWAP_V2_FACTORY",
    "MINIMUM_LIQUIDITY",
    "DEFAULT_FEE_NUMERATOR",
    "DEFAULT_FEE_DENOMINATOR",
    "BPS",
]
