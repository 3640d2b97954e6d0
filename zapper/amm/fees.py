"""Pool fee schedule as a rational multiplier on swap inputs."""

from __future__ import annotations

from dataclasses import dataclass

from zapper.constants import BPS, DEFAULT_FEE_DENOMINATOR, DEFAULT_FEE_NUMERATOR
from zapper.safe_int import S


@dataclass(frozen=True)
class FeeModel:
    """Fraction of a swap input that reaches the curve after the LP fee.

    UniswapV2 charges 0.3%, so 997 of every 1000 input units are swapped.
    Forks with other fee tiers are expressed the same way; 25 bps becomes
    ``FeeModel(9975, 10000)``.

    Attributes:
        numerator: Share of input kept after the fee
        denominator: Scale of the fraction
    """

    numerator: int = DEFAULT_FEE_NUMERATOR
    denominator: int = DEFAULT_FEE_DENOMINATOR

    def __post_init__(self) -> None:
        if self.denominator <= 0:
            raise ValueError(f"Fee denominator must be positive: {self.denominator}")
        if not 0 < self.numerator <= self.denominator:
            raise ValueError(
                f"Fee numerator must be in (0, {self.denominator}]: {self.numerator}"
            )

    @classmethod
    def from_bps(cls, fee_bps: int) -> FeeModel:
        """Build a fee model from a fee in basis points (30 = 0.3%)."""
        if not 0 <= fee_bps < BPS:
            raise ValueError(f"Fee must be in [0, {BPS}) bps: {fee_bps}")
        return cls(numerator=BPS - fee_bps, denominator=BPS)

    def apply(self, gross_amount: int) -> int:
        """Net input after fee: floor(gross * numerator / denominator)."""
        return S(gross_amount).mul_div(self.numerator, self.denominator).value


UNISWAP_V2_FEE = FeeModel()
