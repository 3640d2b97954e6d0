"""UniswapV2 Router02 on the in-memory ledger.

Implements the subset of the router the zap relies on: adding liquidity at
the current ratio and exact-input swaps. Amounts, rounding and revert
strings follow the deployed contract.
"""

from __future__ import annotations

import structlog

from zapper.amm.uniswap_v2 import get_amount_out, quote, sort_tokens
from zapper.chain.erc20 import ERC20
from zapper.chain.factory import UniswapV2Factory
from zapper.chain.ledger import Contract, Ledger
from zapper.chain.pair import UniswapV2Pair
from zapper.errors import (
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientOutputAmount,
    PairNotFound,
    RouterExpired,
)
from zapper.models.types import ZERO_ADDRESS, normalize_address

logger = structlog.get_logger()


class UniswapV2Router(Contract):
    """Periphery router over a factory's pairs. Holds no state of its own."""

    def __init__(
        self,
        ledger: Ledger,
        factory: UniswapV2Factory,
        address: str | None = None,
    ) -> None:
        super().__init__(ledger, address)
        self.factory = factory

    def _ensure(self, deadline: int) -> None:
        if deadline < self.ledger.now:
            raise RouterExpired()

    def _token(self, address: str) -> ERC20:
        return self.ledger.contract(address, ERC20)

    def pair_for(self, token_a: str, token_b: str) -> UniswapV2Pair:
        """The pair for two tokens.

        Raises:
            PairNotFound: If the factory has no such pair
        """
        address = self.factory.get_pair(token_a, token_b)
        if address == ZERO_ADDRESS:
            raise PairNotFound()
        return self.factory.pair(address)

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        """Reserves ordered as (reserve_a, reserve_b)."""
        token0, _ = sort_tokens(token_a, token_b)
        reserve0, reserve1 = self.pair_for(token_a, token_b).get_reserves()
        if normalize_address(token_a) == token0:
            return reserve0, reserve1
        return reserve1, reserve0

    def get_amounts_out(self, amount_in: int, path: list[str]) -> list[int]:
        """Chained get_amount_out along path.

        Raises:
            ValueError: If path has fewer than two tokens
            InsufficientInputAmount: If any hop input is zero
        """
        if len(path) < 2:
            raise ValueError("UniswapV2Library: INVALID_PATH")
        amounts = [amount_in]
        for token_in, token_out in zip(path, path[1:], strict=False):
            pair = self.pair_for(token_in, token_out)
            reserve_in, reserve_out = self.get_reserves(token_in, token_out)
            amounts.append(get_amount_out(amounts[-1], reserve_in, reserve_out, pair.fee))
        return amounts

    # --- Liquidity ---

    def _add_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
    ) -> tuple[int, int]:
        if self.factory.get_pair(token_a, token_b) == ZERO_ADDRESS:
            self.factory.create_pair(token_a, token_b)

        reserve_a, reserve_b = self.get_reserves(token_a, token_b)
        if reserve_a == 0 and reserve_b == 0:
            return amount_a_desired, amount_b_desired

        amount_b_optimal = quote(amount_a_desired, reserve_a, reserve_b)
        if amount_b_optimal <= amount_b_desired:
            if amount_b_optimal < amount_b_min:
                raise InsufficientBAmount()
            return amount_a_desired, amount_b_optimal

        amount_a_optimal = quote(amount_b_desired, reserve_b, reserve_a)
        # amount_a_optimal <= amount_a_desired holds whenever b_optimal overshot
        if amount_a_optimal < amount_a_min:
            raise InsufficientAAmount()
        return amount_a_optimal, amount_b_desired

    def add_liquidity(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int, int]:
        """Deposit both tokens at the pair's current ratio.

        Only the ratio-matched amounts are pulled from sender; any excess of
        the desired amounts stays with sender.

        Returns:
            Tuple of (amount_a, amount_b, liquidity)

        Raises:
            RouterExpired: If deadline has passed
            InsufficientAAmount / InsufficientBAmount: If the ratio-matched
                amount falls below its minimum
        """
        self._ensure(deadline)
        amount_a, amount_b = self._add_liquidity(
            token_a, token_b, amount_a_desired, amount_b_desired, amount_a_min, amount_b_min
        )
        pair = self.pair_for(token_a, token_b)
        self._token(token_a).transfer_from(self.address, sender, pair.address, amount_a)
        self._token(token_b).transfer_from(self.address, sender, pair.address, amount_b)
        liquidity = pair.mint(to)

        logger.debug(
            "router_add_liquidity",
            pair=pair.address,
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity=liquidity,
        )
        return amount_a, amount_b, liquidity

    # --- Swaps ---

    def swap_exact_tokens_for_tokens(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Swap an exact input along path.

        Returns:
            Amounts at each hop, starting with amount_in

        Raises:
            RouterExpired: If deadline has passed
            InsufficientInputAmount: If amount_in is zero
            InsufficientOutputAmount: If the final amount is below amount_out_min
        """
        self._ensure(deadline)
        amounts = self.get_amounts_out(amount_in, path)
        if amounts[-1] < amount_out_min:
            raise InsufficientOutputAmount()

        first_pair = self.pair_for(path[0], path[1])
        self._token(path[0]).transfer_from(self.address, sender, first_pair.address, amounts[0])

        for i, (token_in, token_out) in enumerate(zip(path, path[1:], strict=False)):
            token0, _ = sort_tokens(token_in, token_out)
            amount_out = amounts[i + 1]
            amount0_out, amount1_out = (
                (0, amount_out) if normalize_address(token_in) == token0 else (amount_out, 0)
            )
            hop_to = self.pair_for(token_out, path[i + 2]).address if i < len(path) - 2 else to
            self.pair_for(token_in, token_out).swap(amount0_out, amount1_out, hop_to)

        return amounts
