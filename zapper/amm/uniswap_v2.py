"""UniswapV2 library math.

UniswapV2 uses the constant product formula: x * y = k, with the LP fee
taken from swap inputs. These functions reproduce UniswapV2Library exactly,
including its reverts, because the split calculation and the simulated pair
both have to agree with the router down to the last wei.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from zapper.amm.fees import UNISWAP_V2_FEE, FeeModel
from zapper.errors import (
    IdenticalAddresses,
    InsufficientAmount,
    InsufficientInputAmount,
    InsufficientLiquidity,
)
from zapper.models.types import ZERO_ADDRESS, normalize_address
from zapper.safe_int import S


@dataclass
class UniswapV2Pool:
    """Snapshot of a UniswapV2 pair's reserves."""

    address: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int
    fee: FeeModel = field(default_factory=lambda: UNISWAP_V2_FEE)

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == normalize_address(self.token0):
            return self.reserve0, self.reserve1
        elif token_in_norm == normalize_address(self.token1):
            return self.reserve1, self.reserve0
        else:
            raise ValueError(f"Token {token_in} not in pool")

    def get_token_out(self, token_in: str) -> str:
        """Get the output token for a given input token."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == normalize_address(self.token0):
            return self.token1
        elif token_in_norm == normalize_address(self.token1):
            return self.token0
        else:
            raise ValueError(f"Token {token_in} not in pool")

    def has_token(self, token: str) -> bool:
        token_norm = normalize_address(token)
        return token_norm in (normalize_address(self.token0), normalize_address(self.token1))


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Return the pair's canonical (token0, token1) ordering.

    Raises:
        IdenticalAddresses: If both tokens are the same
        ValueError: If either token is the zero address
    """
    a = normalize_address(token_a)
    b = normalize_address(token_b)
    if a == b:
        raise IdenticalAddresses()
    token0, token1 = (a, b) if bytes.fromhex(a[2:]) < bytes.fromhex(b[2:]) else (b, a)
    if token0 == ZERO_ADDRESS:
        raise ValueError("UniswapV2Library: ZERO_ADDRESS")
    return token0, token1


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Equivalent amount of B for amount_a at the current reserve ratio.

    Raises:
        InsufficientAmount: If amount_a is zero
        InsufficientLiquidity: If either reserve is zero
    """
    if amount_a <= 0:
        raise InsufficientAmount()
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidity()
    return S(amount_a).mul_div(reserve_b, reserve_a).value


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee: FeeModel = UNISWAP_V2_FEE,
) -> int:
    """Calculate output amount using constant product formula.

    Formula: amount_out = (in * n * res_out) / (res_in * d + in * n)
    where n/d is the fee multiplier (997/1000 for standard pools).

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        fee: Pool fee model

    Returns:
        Output token amount, rounded down

    Raises:
        InsufficientInputAmount: If amount_in is zero
        InsufficientLiquidity: If either reserve is zero
    """
    if amount_in <= 0:
        raise InsufficientInputAmount()
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity()

    amount_in_with_fee = S(amount_in) * S(fee.numerator)
    numerator = amount_in_with_fee * S(reserve_out)
    denominator = S(reserve_in) * S(fee.denominator) + amount_in_with_fee

    return (numerator // denominator).value


def liquidity_for_deposit(
    amount_0: int,
    amount_1: int,
    reserve_0: int,
    reserve_1: int,
    total_supply: int,
) -> int:
    """LP tokens minted for an existing pool, before the zero check.

    Mirrors UniswapV2Pair.mint: min(a0 * supply / r0, a1 * supply / r1).
    Only valid for a pool with non-zero supply; first mints are priced by
    the pair itself.
    """
    if total_supply <= 0:
        raise InsufficientLiquidity()
    liquidity_0 = S(amount_0).mul_div(total_supply, reserve_0)
    liquidity_1 = S(amount_1).mul_div(total_supply, reserve_1)
    return liquidity_0.min(liquidity_1).value


__all__ = [
    "UniswapV2Pool",
    "sort_tokens",
    "quote",
    "get_amount_out",
    "liquidity_for_deposit",
]
