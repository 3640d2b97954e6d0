"""Optimal single-sided deposit split for constant product pools.

Depositing one asset into a two-asset pool means swapping part of it first.
Swapping s of a total a moves the pool to (R + s, R_out - out), and the
remainder only fits the pool with zero dust when

    (a - s) / out = (R + s) / (R_out - out)

Because out / (R_out - out) = g * s / R for a fee multiplier g = n/d, this
reduces to a quadratic in s that does not depend on R_out:

    n * s^2 + R * (n + d) * s - a * R * d = 0

whose positive root is

    s = (sqrt(R * (R * (n + d)^2 + 4 * n * d * a)) - R * (n + d)) / (2 * n)

For the standard 997/1000 fee this is the familiar
(sqrt(R * (R * 3988009 + a * 3988000)) - R * 1997) / 1994.

All arithmetic is integer; the root and the final division round down, so
the swap is never larger than optimal and the input token is the side left
holding any dust.
"""

from __future__ import annotations

from dataclasses import dataclass

from zapper.amm.fees import UNISWAP_V2_FEE, FeeModel
from zapper.amm.uniswap_v2 import get_amount_out, liquidity_for_deposit, quote
from zapper.errors import InvalidSplitInput
from zapper.safe_int import S


@dataclass(frozen=True)
class SplitResult:
    """How a single-sided input is divided.

    Attributes:
        swap_amount: Portion of the input converted to the paired token
        keep_amount: Portion deposited as-is (amount_in - swap_amount)
        expected_out: Paired token received for swap_amount at current reserves
    """

    swap_amount: int
    keep_amount: int
    expected_out: int

    @property
    def amount_in(self) -> int:
        return self.swap_amount + self.keep_amount


@dataclass(frozen=True)
class ZapQuote:
    """Expected result of a full zap against a reserve snapshot."""

    split: SplitResult
    amount_in_deposited: int
    amount_out_deposited: int
    liquidity: int

    @property
    def dust(self) -> int:
        """Input token left undeposited, returned to the caller."""
        return self.split.keep_amount - self.amount_in_deposited


class OptimalSplitCalculator:
    """Closed-form split calculation matching UniswapV2 rounding."""

    def swap_amount(self, reserve_in: int, total_in: int, fee: FeeModel = UNISWAP_V2_FEE) -> int:
        """Portion of total_in to swap, rounded down.

        May be 0 when total_in is tiny relative to the reserve; the router
        then rejects the swap with its insufficient-input error.
        """
        n = fee.numerator
        d = fee.denominator
        r = S(reserve_in)
        linear = r * (n + d)
        discriminant = r * (r * ((n + d) ** 2) + S(total_in) * (4 * n * d))
        # isqrt(disc) >= R * (n + d) since disc >= (R * (n + d))^2
        return ((discriminant.isqrt() - linear) // (2 * n)).value

    def compute_split(
        self,
        reserve_in: int,
        reserve_out: int,
        fee: FeeModel,
        total_in: int,
    ) -> SplitResult:
        """Split total_in into a swap leg and a deposit leg.

        Args:
            reserve_in: Pool reserve of the input token
            reserve_out: Pool reserve of the paired token
            fee: Pool fee model
            total_in: Total input amount

        Returns:
            SplitResult with swap_amount in [0, total_in)

        Raises:
            InvalidSplitInput: If a reserve or total_in is not positive
            SafeIntError: If an intermediate value overflows uint256
        """
        if reserve_in <= 0 or reserve_out <= 0 or total_in <= 0:
            raise InvalidSplitInput()

        swap = self.swap_amount(reserve_in, total_in, fee)
        expected_out = get_amount_out(swap, reserve_in, reserve_out, fee) if swap > 0 else 0
        return SplitResult(
            swap_amount=swap,
            keep_amount=(S(total_in) - S(swap)).value,
            expected_out=expected_out,
        )

    def quote_zap(
        self,
        reserve_in: int,
        reserve_out: int,
        fee: FeeModel,
        total_in: int,
        total_supply: int,
    ) -> ZapQuote:
        """Predict the deposit and LP tokens minted for a zap.

        Replays the router: swap the split, then add liquidity at the
        post-swap reserves using its optimal-amount rule.

        Raises:
            InsufficientInputAmount: If the swap leg rounds to zero
        """
        split = self.compute_split(reserve_in, reserve_out, fee, total_in)
        out = get_amount_out(split.swap_amount, reserve_in, reserve_out, fee)

        new_reserve_in = (S(reserve_in) + split.swap_amount).value
        new_reserve_out = (S(reserve_out) - out).value

        amount_out_optimal = quote(split.keep_amount, new_reserve_in, new_reserve_out)
        if amount_out_optimal <= out:
            deposited_in, deposited_out = split.keep_amount, amount_out_optimal
        else:
            deposited_in = quote(out, new_reserve_out, new_reserve_in)
            deposited_out = out

        liquidity = liquidity_for_deposit(
            deposited_in, deposited_out, new_reserve_in, new_reserve_out, total_supply
        )
        return ZapQuote(
            split=split,
            amount_in_deposited=deposited_in,
            amount_out_deposited=deposited_out,
            liquidity=liquidity,
        )


# Singleton instance
optimal_split = OptimalSplitCalculator()


__all__ = [
    "SplitResult",
    "ZapQuote",
    "OptimalSplitCalculator",
    "optimal_split",
]
