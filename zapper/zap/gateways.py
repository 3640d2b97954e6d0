"""Adapters from the zap's capability interfaces to ledger contracts."""

from __future__ import annotations

from zapper.amm.base import DepositResult, SwapResult
from zapper.amm.fees import FeeModel
from zapper.chain.erc20 import ERC20
from zapper.chain.ledger import Ledger
from zapper.chain.pair import UniswapV2Pair
from zapper.chain.router import UniswapV2Router
from zapper.errors import PairNotFound, TokenNotInPair
from zapper.models.types import normalize_address


class LedgerAssetGateway:
    """AssetGateway acting for ``holder`` against ERC20 contracts on a ledger."""

    def __init__(self, ledger: Ledger, holder: str) -> None:
        self.ledger = ledger
        self.holder = normalize_address(holder)

    def _token(self, token: str) -> ERC20:
        return self.ledger.contract(token, ERC20)

    def pull(self, token: str, owner: str, amount: int) -> None:
        """transferFrom owner to holder.

        Raises:
            InsufficientAllowance: If owner has not approved holder for amount
            InsufficientBalance: If owner holds less than amount
        """
        self._token(token).transfer_from(self.holder, owner, self.holder, amount)

    def push(self, token: str, to: str, amount: int) -> None:
        self._token(token).transfer(self.holder, to, amount)

    def authorize(self, token: str, spender: str, amount: int) -> None:
        self._token(token).approve(self.holder, spender, amount)

    def balance_of(self, token: str, account: str) -> int:
        return self._token(token).balance_of(account)


class RouterAmmGateway:
    """AmmGateway that trades through a UniswapV2 router on behalf of ``caller``."""

    def __init__(self, router: UniswapV2Router, caller: str) -> None:
        self.router = router
        self.caller = normalize_address(caller)

    def _pair(self, pair: str) -> UniswapV2Pair:
        try:
            return self.router.factory.pair(pair)
        except LookupError as err:
            raise PairNotFound() from err

    def pair_tokens(self, pair: str) -> tuple[str, str]:
        p = self._pair(pair)
        return p.token0, p.token1

    def reserves_of(self, pair: str, token_in: str) -> tuple[int, int]:
        """Reserves of pair oriented as (reserve_in, reserve_out).

        Raises:
            PairNotFound: If no pair is deployed at ``pair``
            TokenNotInPair: If token_in is not one of its tokens
        """
        snapshot = self._pair(pair).snapshot()
        if not snapshot.has_token(token_in):
            raise TokenNotInPair()
        return snapshot.get_reserves(token_in)

    def fee_of(self, pair: str) -> FeeModel:
        return self._pair(pair).fee

    def swap(
        self,
        pair: str,
        token_in: str,
        amount_in: int,
        min_amount_out: int,
        recipient: str,
        deadline: int,
    ) -> SwapResult:
        snapshot = self._pair(pair).snapshot()
        token_out = snapshot.get_token_out(token_in)
        amounts = self.router.swap_exact_tokens_for_tokens(
            self.caller,
            amount_in,
            min_amount_out,
            [normalize_address(token_in), token_out],
            recipient,
            deadline,
        )
        return SwapResult(
            amount_in=amounts[0],
            amount_out=amounts[-1],
            pair_address=snapshot.address,
            token_in=normalize_address(token_in),
            token_out=token_out,
        )

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
        amount_a, amount_b, liquidity = self.router.add_liquidity(
            self.caller,
            token_a,
            token_b,
            amount_a_desired,
            amount_b_desired,
            amount_a_min,
            amount_b_min,
            recipient,
            deadline,
        )
        return DepositResult(amount_a=amount_a, amount_b=amount_b, liquidity=liquidity)
