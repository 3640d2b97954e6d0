"""UniswapV2 pair: reserves plus the LP (receipt) token.

Like the on-chain pair, mint() and swap() work from the difference between
the pair's token balances and its recorded reserves, so callers transfer
tokens in first and then call the pair.
"""

from __future__ import annotations

from typing import ClassVar

import structlog

from zapper.amm.fees import UNISWAP_V2_FEE, FeeModel
from zapper.amm.uniswap_v2 import UniswapV2Pool
from zapper.chain.erc20 import ERC20
from zapper.chain.ledger import Ledger
from zapper.constants import MINIMUM_LIQUIDITY
from zapper.errors import (
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InvariantViolation,
)
from zapper.models.types import ZERO_ADDRESS, normalize_address
from zapper.safe_int import S

logger = structlog.get_logger()


class UniswapV2Pair(ERC20):
    """Constant product pair of token0/token1 issuing LP tokens."""

    _state_fields: ClassVar[tuple[str, ...]] = ERC20._state_fields + ("reserve0", "reserve1")

    def __init__(
        self,
        ledger: Ledger,
        token0: str,
        token1: str,
        fee: FeeModel = UNISWAP_V2_FEE,
        address: str | None = None,
    ) -> None:
        super().__init__(ledger, "Uniswap V2", "UNI-V2", 18, address=address)
        self.token0 = normalize_address(token0)
        self.token1 = normalize_address(token1)
        self.fee = fee
        self.reserve0 = 0
        self.reserve1 = 0

    def __repr__(self) -> str:
        return f"UniswapV2Pair({self.address}, {self.token0}/{self.token1})"

    def _token(self, address: str) -> ERC20:
        return self.ledger.contract(address, ERC20)

    def get_reserves(self) -> tuple[int, int]:
        return self.reserve0, self.reserve1

    def snapshot(self) -> UniswapV2Pool:
        """Immutable view of the current reserves."""
        return UniswapV2Pool(
            address=self.address,
            token0=self.token0,
            token1=self.token1,
            reserve0=self.reserve0,
            reserve1=self.reserve1,
            fee=self.fee,
        )

    def _update(self, balance0: int, balance1: int) -> None:
        self.reserve0 = balance0
        self.reserve1 = balance1
        self.emit("Sync", reserve0=balance0, reserve1=balance1)

    def _token_balances(self) -> tuple[int, int]:
        return (
            self._token(self.token0).balance_of(self.address),
            self._token(self.token1).balance_of(self.address),
        )

    def mint(self, to: str) -> int:
        """Mint LP tokens for tokens transferred in since the last update.

        Returns:
            Liquidity minted to ``to``

        Raises:
            InsufficientLiquidityMinted: If the deposit is worth zero LP tokens
        """
        balance0, balance1 = self._token_balances()
        amount0 = (S(balance0) - self.reserve0).value
        amount1 = (S(balance1) - self.reserve1).value

        if self.total_supply == 0:
            root = (S(amount0) * amount1).isqrt()
            if root <= MINIMUM_LIQUIDITY:
                raise InsufficientLiquidityMinted()
            liquidity = (root - MINIMUM_LIQUIDITY).value
            self._mint(ZERO_ADDRESS, MINIMUM_LIQUIDITY)
        else:
            liquidity = (
                S(amount0)
                .mul_div(self.total_supply, self.reserve0)
                .min(S(amount1).mul_div(self.total_supply, self.reserve1))
                .value
            )

        if liquidity <= 0:
            raise InsufficientLiquidityMinted()

        self._mint(to, liquidity)
        self._update(balance0, balance1)
        self.emit("Mint", to=to, amount0=amount0, amount1=amount1)
        return liquidity

    def swap(self, amount0_out: int, amount1_out: int, to: str) -> None:
        """Send out the requested amounts, checking the fee-adjusted invariant.

        Raises:
            InsufficientOutputAmount: If both outputs are zero
            InsufficientLiquidity: If an output drains a reserve
            InsufficientInputAmount: If nothing was transferred in
            InvariantViolation: If the fee-adjusted constant product decreases
        """
        if amount0_out <= 0 and amount1_out <= 0:
            raise InsufficientOutputAmount("UniswapV2: INSUFFICIENT_OUTPUT_AMOUNT")
        if amount0_out >= self.reserve0 or amount1_out >= self.reserve1:
            raise InsufficientLiquidity("UniswapV2: INSUFFICIENT_LIQUIDITY")

        to = normalize_address(to)
        if amount0_out > 0:
            self._token(self.token0).transfer(self.address, to, amount0_out)
        if amount1_out > 0:
            self._token(self.token1).transfer(self.address, to, amount1_out)

        balance0, balance1 = self._token_balances()
        amount0_in = max(balance0 - (self.reserve0 - amount0_out), 0)
        amount1_in = max(balance1 - (self.reserve1 - amount1_out), 0)
        if amount0_in <= 0 and amount1_in <= 0:
            raise InsufficientInputAmount("UniswapV2: INSUFFICIENT_INPUT_AMOUNT")

        d = self.fee.denominator
        fee_part = d - self.fee.numerator
        adjusted0 = S(balance0) * d - S(amount0_in) * fee_part
        adjusted1 = S(balance1) * d - S(amount1_in) * fee_part
        if adjusted0 * adjusted1 < S(self.reserve0) * self.reserve1 * (d * d):
            raise InvariantViolation()

        self._update(balance0, balance1)
        self.emit(
            "Swap",
            amount0_in=amount0_in,
            amount1_in=amount1_in,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
            to=to,
        )
        logger.debug(
            "pair_swap",
            pair=self.address,
            amount0_in=amount0_in,
            amount1_in=amount1_in,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
        )
