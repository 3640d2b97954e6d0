"""Capability interfaces the zap needs from the AMM and the token service."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from zapper.amm.fees import FeeModel


@dataclass(frozen=True)
class SwapResult:
    """Result of executing a swap through the AMM."""

    amount_in: int
    amount_out: int
    pair_address: str
    token_in: str
    token_out: str


@dataclass(frozen=True)
class DepositResult:
    """Result of a balanced deposit.

    amount_a / amount_b follow the token order passed to deposit(), not the
    pair's canonical order.
    """

    amount_a: int
    amount_b: int
    liquidity: int


@runtime_checkable
class AmmGateway(Protocol):
    """The three AMM operations a zap is built from.

    Implementations must reproduce the AMM's rounding exactly; the split is
    only dust-free if swap() returns what get_amount_out() predicts.
    """

    def pair_tokens(self, pair: str) -> tuple[str, str]:
        """Return the pair's (token0, token1)."""
        ...

    def fee_of(self, pair: str) -> FeeModel:
        """Fee model the pair applies to swap inputs."""
        ...

    def reserves_of(self, pair: str, token_in: str) -> tuple[int, int]:
        """Return (reserve_in, reserve_out) oriented to token_in.

        Raises:
            PairNotFound: If pair is not a known pair
            TokenNotInPair: If token_in is not one of the pair's tokens
        """
        ...

    def swap(
        self,
        pair: str,
        token_in: str,
        amount_in: int,
        min_amount_out: int,
        recipient: str,
        deadline: int,
    ) -> SwapResult:
        """Swap an exact input through a single pair."""
        ...

    def deposit(
        self,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: str,
        deadline: int,
    ) -> DepositResult:
        """Add liquidity at the current ratio, minting LP tokens to recipient."""
        ...


@runtime_checkable
class AssetGateway(Protocol):
    """Token movements the zap performs on its own behalf."""

    def pull(self, token: str, owner: str, amount: int) -> None:
        """Move amount from owner into the zap's custody using its allowance."""
        ...

    def push(self, token: str, to: str, amount: int) -> None:
        """Send amount from the zap's custody to ``to``."""
        ...

    def authorize(self, token: str, spender: str, amount: int) -> None:
        """Allow spender to move up to amount of the zap's balance."""
        ...

    def balance_of(self, token: str, account: str) -> int:
        ...
