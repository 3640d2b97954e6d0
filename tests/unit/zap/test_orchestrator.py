"""Unit tests for the zap orchestrator."""

import pytest
from structlog.testing import capture_logs

from zapper.config import ZapConfig
from zapper.errors import (
    Expired,
    InsufficientAllowance,
    InvalidAmount,
    InvalidInitialization,
    InvalidPairAddress,
    InvalidRouterAddress,
    InvalidToAddress,
    InvalidTokenAddress,
    NotInitialized,
    PairNotFound,
    TokenNotInPair,
)
from zapper.models.types import ZERO_ADDRESS
from zapper.models.zap import ZapState
from zapper.zap import InitState, RouterAmmGateway, ZapOrchestrator, deploy_zapper
from tests.helpers import ETHER, ONE_HOUR, OTHER, OWNER, RECIPIENT, ZAPPER_ADDRESS, make_token


class RecordingAmm:
    """AmmGateway double that forwards to the router and records calls.

    Usage:
        # Forward everything
        amm = RecordingAmm(router)

        # Raise from one operation after recording it
        amm = RecordingAmm(router, fail_on="deposit")
    """

    def __init__(self, router, fail_on: str | None = None) -> None:
        self.inner = RouterAmmGateway(router, ZAPPER_ADDRESS)
        self.fail_on = fail_on
        self.calls: list[tuple[str, tuple]] = []  # Track calls for assertions

    def _record(self, name: str, *args):
        self.calls.append((name, args))
        if name == self.fail_on:
            raise RuntimeError(f"{name} failed")

    def pair_tokens(self, pair):
        return self.inner.pair_tokens(pair)

    def fee_of(self, pair):
        return self.inner.fee_of(pair)

    def reserves_of(self, pair, token_in):
        self._record("reserves_of", pair, token_in)
        return self.inner.reserves_of(pair, token_in)

    def swap(self, *args):
        self._record("swap", *args)
        return self.inner.swap(*args)

    def deposit(self, *args):
        self._record("deposit", *args)
        return self.inner.deposit(*args)


def _zapper_with(ledger, router, amm, config=None) -> ZapOrchestrator:
    kwargs = {"amm": amm, "address": ZAPPER_ADDRESS}
    if config is not None:
        kwargs["config"] = config
    return deploy_zapper(ledger, router.address, **kwargs)


def _deadline(ledger) -> int:
    return ledger.now + ONE_HOUR


class TestInitialization:
    """Tests for the two-phase lifecycle."""

    def test_uninitialized(self, ledger):
        zapper = ZapOrchestrator(ledger)
        assert not zapper.initialized
        with pytest.raises(NotInitialized):
            _ = zapper.uniswap_v2_router

    def test_zap_requires_initialization(self, ledger, pair, token_a):
        zapper = ZapOrchestrator(ledger)
        with pytest.raises(NotInitialized):
            zapper.zap(OWNER, pair.address, token_a.address, ETHER, OWNER, _deadline(ledger))

    def test_field_errors_reported_before_initialization(self, ledger, token_a):
        """An uninitialized instance still reports the rejected field."""
        zapper = ZapOrchestrator(ledger)
        with pytest.raises(InvalidPairAddress):
            zapper.zap(OWNER, ZERO_ADDRESS, token_a.address, ETHER, OWNER, _deadline(ledger))

    def test_initialize_sets_router(self, ledger, router):
        zapper = ZapOrchestrator(ledger)
        zapper.initialize(router.address.upper().replace("0X", "0x"))
        assert zapper.initialized
        assert zapper.uniswap_v2_router == router.address

    @pytest.mark.parametrize("router_address", [ZERO_ADDRESS, None, "", "0x1234"])
    def test_invalid_router(self, ledger, router_address):
        zapper = ZapOrchestrator(ledger)
        with pytest.raises(InvalidRouterAddress):
            zapper.initialize(router_address)
        assert zapper._init_state is InitState.UNINITIALIZED

    def test_initialize_once(self, ledger, router, zapper):
        with pytest.raises(InvalidInitialization) as exc_info:
            zapper.initialize(OTHER)
        assert exc_info.value.reason == "already initialized"
        assert zapper.uniswap_v2_router == router.address

    def test_reinitialize_checked_before_router(self, zapper):
        """A second initialize fails as such even with a null router."""
        with pytest.raises(InvalidInitialization):
            zapper.initialize(ZERO_ADDRESS)

    def test_failed_deploy_is_undone(self, ledger):
        with pytest.raises(InvalidRouterAddress):
            deploy_zapper(ledger, ZERO_ADDRESS, address=ZAPPER_ADDRESS)
        assert not ledger.has_contract(ZAPPER_ADDRESS)


class TestValidation:
    """Tests for request checks that run before any funds move."""

    @pytest.mark.parametrize(
        "field,value,error",
        [
            ("pair", ZERO_ADDRESS, InvalidPairAddress),
            ("pair", None, InvalidPairAddress),
            ("pair", "0xnot-an-address", InvalidPairAddress),
            ("token", 5, InvalidTokenAddress),
            ("token", ZERO_ADDRESS, InvalidTokenAddress),
            ("amount", 0, InvalidAmount),
            ("to", ZERO_ADDRESS, InvalidToAddress),
        ],
    )
    def test_rejected_field(self, ledger, zapper, pair, token_a, field, value, error):
        args = {
            "pair": pair.address,
            "token": token_a.address,
            "amount": ETHER,
            "to": OWNER,
            "deadline": _deadline(ledger),
        }
        args[field] = value
        events_before = len(ledger.events)

        with pytest.raises(error):
            zapper.zap(OWNER, **args)
        assert len(ledger.events) == events_before

    def test_order_of_checks(self, ledger, zapper):
        """With everything null the pair is reported first."""
        with pytest.raises(InvalidPairAddress):
            zapper.zap(OWNER, ZERO_ADDRESS, ZERO_ADDRESS, 0, ZERO_ADDRESS, 0)

    def test_amount_checked_before_to(self, ledger, zapper, pair, token_a):
        with pytest.raises(InvalidAmount):
            zapper.zap(OWNER, pair.address, token_a.address, 0, ZERO_ADDRESS, 0)

    @pytest.mark.parametrize("offset", [0, -1])
    def test_deadline_must_be_in_future(self, ledger, zapper, pair, token_a, offset):
        with pytest.raises(Expired) as exc_info:
            zapper.zap(OWNER, pair.address, token_a.address, ETHER, OWNER, ledger.now + offset)
        assert exc_info.value.reason == "EXPIRED"

    def test_validate_returns_request(self, ledger, zapper, pair, token_a):
        request = zapper.validate(pair.address, token_a.address, ETHER, OWNER, _deadline(ledger))
        assert request.pair == pair.address
        assert request.amount == ETHER


class TestExecution:
    """Tests for the zap sequence against the router."""

    def test_state_sequence(self, ledger, zapper, pair, token_a):
        token_a.approve(OWNER, zapper.address, ETHER)
        outcome = zapper.zap(OWNER, pair.address, token_a.address, ETHER, OWNER, _deadline(ledger))
        assert outcome.states == (
            ZapState.VALIDATING,
            ZapState.FUNDS_PULLED,
            ZapState.RESERVES_READ,
            ZapState.SPLIT,
            ZapState.SWAPPED,
            ZapState.DEPOSITED,
            ZapState.COMPLETED,
        )

    def test_amm_call_order(self, ledger, router, pair, token_a, token_b):
        amm = RecordingAmm(router)
        zapper = _zapper_with(ledger, router, amm)
        token_a.approve(OWNER, zapper.address, ETHER)

        outcome = zapper.zap(OWNER, pair.address, token_a.address, ETHER, OWNER, _deadline(ledger))

        assert [name for name, _ in amm.calls] == ["reserves_of", "swap", "deposit"]
        _, swap_args = amm.calls[1]
        # (pair, token_in, amount_in, min_amount_out, recipient, deadline)
        assert swap_args[2] == outcome.swap_amount
        assert swap_args[3] == outcome.swap_out
        assert swap_args[4] == zapper.address
        _, deposit_args = amm.calls[2]
        assert deposit_args[:2] == (token_a.address, token_b.address)
        assert deposit_args[6] == OWNER

    def test_failure_rolls_back_everything(self, ledger, router, pair, token_a, token_b):
        """A failing deposit undoes the pull and the swap."""
        amm = RecordingAmm(router, fail_on="deposit")
        zapper = _zapper_with(ledger, router, amm)
        token_a.approve(OWNER, zapper.address, ETHER)

        balance_a = token_a.balance_of(OWNER)
        balance_b = token_b.balance_of(OWNER)
        reserves = pair.get_reserves()
        events_before = len(ledger.events)

        with pytest.raises(RuntimeError, match="deposit failed"):
            zapper.zap(OWNER, pair.address, token_a.address, ETHER, OWNER, _deadline(ledger))

        assert token_a.balance_of(OWNER) == balance_a
        assert token_b.balance_of(OWNER) == balance_b
        assert token_a.balance_of(zapper.address) == 0
        assert token_b.balance_of(zapper.address) == 0
        assert pair.get_reserves() == reserves
        assert token_a.allowance(OWNER, zapper.address) == ETHER
        assert len(ledger.events) == events_before

    def test_failure_is_logged_with_stage(self, ledger, router, pair, token_a):
        amm = RecordingAmm(router, fail_on="swap")
        zapper = _zapper_with(ledger, router, amm)
        token_a.approve(OWNER, zapper.address, ETHER)

        with capture_logs() as logs:
            with pytest.raises(RuntimeError):
                zapper.zap(OWNER, pair.address, token_a.address, ETHER, OWNER, _deadline(ledger))

        failed = [log for log in logs if log["event"] == "zap_failed"]
        assert len(failed) == 1
        assert failed[0]["stage"] == ZapState.SPLIT.value
        assert failed[0]["error"] == "RuntimeError"

    def test_missing_allowance(self, ledger, zapper, pair, token_a):
        with pytest.raises(InsufficientAllowance):
            zapper.zap(OWNER, pair.address, token_a.address, ETHER, OWNER, _deadline(ledger))

    def test_token_not_in_pair(self, ledger, zapper, pair):
        token_c = make_token(ledger, "MCT")
        token_c.approve(OWNER, zapper.address, ETHER)
        balance = token_c.balance_of(OWNER)

        with pytest.raises(TokenNotInPair):
            zapper.zap(OWNER, pair.address, token_c.address, ETHER, OWNER, _deadline(ledger))
        assert token_c.balance_of(OWNER) == balance

    def test_not_a_pair(self, ledger, zapper, pair, token_a):
        token_a.approve(OWNER, zapper.address, ETHER)
        with pytest.raises(PairNotFound):
            zapper.zap(OWNER, token_a.address, token_a.address, ETHER, OWNER, _deadline(ledger))

    def test_allowances_reset(self, ledger, router, zapper, pair, token_a, token_b):
        token_a.approve(OWNER, zapper.address, ETHER)
        zapper.zap(OWNER, pair.address, token_a.address, ETHER, RECIPIENT, _deadline(ledger))
        assert token_a.allowance(zapper.address, router.address) == 0
        assert token_b.allowance(zapper.address, router.address) == 0

    def test_allowance_kept_when_configured(self, ledger, router, pair, token_a, token_b):
        zapper = deploy_zapper(ledger, router.address, ZapConfig(reset_allowance=False))
        token_a.approve(OWNER, zapper.address, ETHER)
        outcome = zapper.zap(
            OWNER, pair.address, token_a.address, ETHER, RECIPIENT, _deadline(ledger)
        )
        # Whatever the router did not spend is still approved
        assert token_a.allowance(zapper.address, router.address) == outcome.refunded_in
        assert token_b.allowance(zapper.address, router.address) == outcome.refunded_out

    def test_single_token_add_liquidity_returns_liquidity(self, ledger, zapper, pair, token_a):
        token_a.approve(OWNER, zapper.address, ETHER)
        liquidity = zapper.single_token_add_liquidity(
            OWNER, pair.address, token_a.address, ETHER, RECIPIENT, _deadline(ledger)
        )
        assert liquidity > 0
        assert pair.balance_of(RECIPIENT) == liquidity
