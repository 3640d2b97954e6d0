"""Single-token liquidity deposits ("zap in").

The orchestrator takes one token from the caller, swaps the optimal share of
it into the pair's other token, deposits both sides and sends the LP tokens
to the recipient. The whole sequence runs inside ``Ledger.atomic()``: any
failure leaves every balance, allowance and reserve exactly as it was.

Stages of a request:

    VALIDATING -> FUNDS_PULLED -> RESERVES_READ -> SPLIT -> SWAPPED
        -> DEPOSITED -> COMPLETED

with FAILED absorbing any error. Validation runs before anything touches the
ledger.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

import structlog

from zapper.amm.base import AmmGateway, AssetGateway
from zapper.amm.split import OptimalSplitCalculator, optimal_split
from zapper.chain.ledger import Contract, Ledger
from zapper.chain.router import UniswapV2Router
from zapper.config import DEFAULT_ZAP_CONFIG, ZapConfig, apply_slippage
from zapper.errors import (
    Expired,
    InvalidAmount,
    InvalidInitialization,
    InvalidPairAddress,
    InvalidRouterAddress,
    InvalidToAddress,
    InvalidTokenAddress,
    NotInitialized,
)
from zapper.models.types import is_valid_address, is_zero_address, normalize_address
from zapper.models.zap import ZapOutcome, ZapRequest, ZapState
from zapper.safe_int import S
from zapper.zap.gateways import LedgerAssetGateway, RouterAmmGateway

logger = structlog.get_logger()


class InitState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


def _is_identity(address: str | None) -> bool:
    """A usable, non-zero address."""
    if not isinstance(address, str) or is_zero_address(address):
        return False
    return is_valid_address(normalize_address(address))


def check_fields(pair: str | None, token: str | None, amount: int, to: str | None) -> None:
    """Reject null identities and a zero amount, in the helper's order.

    Raises:
        InvalidPairAddress, InvalidTokenAddress, InvalidAmount, InvalidToAddress
    """
    if not _is_identity(pair):
        raise InvalidPairAddress()
    if not _is_identity(token):
        raise InvalidTokenAddress()
    if amount <= 0:
        raise InvalidAmount()
    if not _is_identity(to):
        raise InvalidToAddress()


class ZapOrchestrator(Contract):
    """Deposits a single token into a UniswapV2 pair as balanced liquidity.

    Constructed in two phases, like an upgradeable proxy: the constructor
    deploys, initialize() sets the router exactly once.

    Args:
        ledger: Ledger the orchestrator is deployed on
        config: Slippage and settlement settings
        amm: AMM capability override. Defaults to the initialized router.
        assets: Token capability override. Defaults to the ledger's ERC20s.
        calculator: Split calculator
        address: Fixed deployment address
    """

    # Initialization is not rolled back by a failed zap
    _state_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        ledger: Ledger,
        config: ZapConfig = DEFAULT_ZAP_CONFIG,
        amm: AmmGateway | None = None,
        assets: AssetGateway | None = None,
        calculator: OptimalSplitCalculator = optimal_split,
        address: str | None = None,
    ) -> None:
        super().__init__(ledger, address)
        self.config = config
        self.calculator = calculator
        self._amm_override = amm
        self._assets = assets or LedgerAssetGateway(ledger, self.address)
        self._init_state = InitState.UNINITIALIZED
        self._router: str | None = None

    # --- Lifecycle ---

    @property
    def initialized(self) -> bool:
        return self._init_state is InitState.INITIALIZED

    @property
    def uniswap_v2_router(self) -> str:
        """Router address set by initialize().

        Raises:
            NotInitialized: Before initialize() has succeeded
        """
        if self._router is None:
            raise NotInitialized()
        return self._router

    def initialize(self, router: str) -> None:
        """Set the router. Succeeds once per instance.

        Raises:
            InvalidInitialization: If already initialized
            InvalidRouterAddress: If router is null or malformed
        """
        if self._init_state is InitState.INITIALIZED:
            raise InvalidInitialization()
        if not _is_identity(router):
            raise InvalidRouterAddress()

        self._router = normalize_address(router)
        self._init_state = InitState.INITIALIZED
        logger.info("zapper_initialized", zapper=self.address, router=self._router)

    def _amm(self) -> AmmGateway:
        if self._amm_override is not None:
            return self._amm_override
        router = self.ledger.contract(self.uniswap_v2_router, UniswapV2Router)
        return RouterAmmGateway(router, self.address)

    # --- Zap ---

    def validate(
        self,
        pair: str | None,
        token: str | None,
        amount: int,
        to: str | None,
        deadline: int,
    ) -> ZapRequest:
        """Check a request before any funds move.

        Raises:
            InvalidPairAddress, InvalidTokenAddress, InvalidAmount,
            InvalidToAddress, Expired: One per rejected field, checked in
                that order
        """
        check_fields(pair, token, amount, to)
        if deadline <= self.ledger.now:
            raise Expired()
        return ZapRequest(pair=pair, token=token, amount=amount, to=to, deadline=deadline)

    def single_token_add_liquidity(
        self,
        sender: str,
        pair: str | None,
        token: str | None,
        amount: int,
        to: str | None,
        deadline: int,
    ) -> int:
        """Zap ``amount`` of ``token`` into ``pair`` for ``to``.

        Returns:
            LP tokens minted to ``to`` (also emitted in the ZapIn event)
        """
        return self.zap(sender, pair, token, amount, to, deadline).liquidity

    def zap(
        self,
        sender: str,
        pair: str | None,
        token: str | None,
        amount: int,
        to: str | None,
        deadline: int,
    ) -> ZapOutcome:
        """Run a zap and return its full outcome.

        Args:
            sender: Caller; must have approved this contract for ``amount``
            pair: Pair address
            token: Input token, one of the pair's two tokens
            amount: Input amount
            to: Recipient of the LP tokens
            deadline: Last timestamp at which the zap may execute (exclusive)

        Raises:
            InvalidRequest: On a rejected field, before any funds move
            NotInitialized: If initialize() has not been called
            AmmError / TokenError: Propagated from the router or tokens
            SafeIntError: On arithmetic overflow
        """
        states = [ZapState.VALIDATING]
        try:
            request = self.validate(pair, token, amount, to, deadline)
            router = self.uniswap_v2_router
            logger.info(
                "zap_started",
                sender=sender,
                pair=request.pair,
                token=request.token,
                amount=request.amount,
                to=request.to,
            )
            with self.ledger.atomic():
                outcome = self._execute(normalize_address(sender), router, request, states)
        except Exception as exc:
            states.append(ZapState.FAILED)
            logger.warning(
                "zap_failed",
                sender=sender,
                pair=pair,
                stage=states[-2].value,
                error=type(exc).__name__,
                reason=str(exc),
            )
            raise

        logger.info(
            "zap_completed",
            sender=outcome.sender,
            to=outcome.to,
            pair=outcome.pair,
            liquidity=outcome.liquidity,
            refunded_in=outcome.refunded_in,
            refunded_out=outcome.refunded_out,
        )
        return outcome

    def _advance(self, states: list[ZapState], state: ZapState, **context: object) -> None:
        states.append(state)
        logger.debug("zap_state", zapper=self.address, state=state.value, **context)

    def _execute(
        self,
        sender: str,
        router: str,
        request: ZapRequest,
        states: list[ZapState],
    ) -> ZapOutcome:
        amm = self._amm()
        assets = self._assets

        assets.pull(request.token, sender, request.amount)
        assets.authorize(request.token, router, request.amount)
        self._advance(states, ZapState.FUNDS_PULLED, amount=request.amount)

        reserve_in, reserve_out = amm.reserves_of(request.pair, request.token)
        token0, token1 = amm.pair_tokens(request.pair)
        token_out = token1 if request.token == token0 else token0
        self._advance(
            states, ZapState.RESERVES_READ, reserve_in=reserve_in, reserve_out=reserve_out
        )

        split = self.calculator.compute_split(
            reserve_in, reserve_out, amm.fee_of(request.pair), request.amount
        )
        self._advance(
            states,
            ZapState.SPLIT,
            swap_amount=split.swap_amount,
            keep_amount=split.keep_amount,
            expected_out=split.expected_out,
        )

        swap = amm.swap(
            request.pair,
            request.token,
            split.swap_amount,
            apply_slippage(split.expected_out, self.config.swap_slippage_bps),
            self.address,
            request.deadline,
        )
        self._advance(states, ZapState.SWAPPED, amount_out=swap.amount_out)

        deposit_slippage = self.config.deposit_slippage_bps
        assets.authorize(token_out, router, swap.amount_out)
        deposit = amm.deposit(
            request.token,
            token_out,
            split.keep_amount,
            swap.amount_out,
            apply_slippage(split.keep_amount, deposit_slippage),
            apply_slippage(swap.amount_out, deposit_slippage),
            request.to,
            request.deadline,
        )
        self._advance(
            states,
            ZapState.DEPOSITED,
            amount_in=deposit.amount_a,
            amount_out=deposit.amount_b,
            liquidity=deposit.liquidity,
        )

        refunded_in = (S(split.keep_amount) - deposit.amount_a).value
        refunded_out = (S(swap.amount_out) - deposit.amount_b).value
        if refunded_in > 0:
            assets.push(request.token, sender, refunded_in)
        if refunded_out > 0:
            assets.push(token_out, sender, refunded_out)
        if self.config.reset_allowance:
            assets.authorize(request.token, router, 0)
            assets.authorize(token_out, router, 0)

        self.emit(
            "ZapIn",
            sender=sender,
            to=request.to,
            pair=request.pair,
            liquidity=deposit.liquidity,
        )
        self._advance(states, ZapState.COMPLETED)

        return ZapOutcome(
            sender=sender,
            to=request.to,
            pair=request.pair,
            liquidity=deposit.liquidity,
            token_in=request.token,
            token_out=token_out,
            amount_in=request.amount,
            swap_amount=split.swap_amount,
            swap_out=swap.amount_out,
            deposited_in=deposit.amount_a,
            deposited_out=deposit.amount_b,
            refunded_in=refunded_in,
            refunded_out=refunded_out,
            states=tuple(states),
        )


def deploy_zapper(
    ledger: Ledger,
    router: str,
    config: ZapConfig = DEFAULT_ZAP_CONFIG,
    **kwargs: object,
) -> ZapOrchestrator:
    """Deploy and initialize in one step, as a proxy deployment does.

    A failed initialize() undoes the deployment.

    Raises:
        InvalidRouterAddress: If router is null
    """
    with ledger.atomic():
        zapper = ZapOrchestrator(ledger, config, **kwargs)  # type: ignore[arg-type]
        zapper.initialize(router)
    return zapper
