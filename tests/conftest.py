"""Pytest configuration and fixtures."""

import pytest

from zapper.chain import ERC20, Ledger, UniswapV2Pair, UniswapV2Router, deploy_uniswap_v2
from zapper.constants import UNISWAP_V2_FACTORY, UNISWAP_V2_ROUTER
from zapper.zap import ZapOrchestrator, deploy_zapper
from tests.helpers import POOL_RESERVE, START_TIME, make_token, seed_pool


@pytest.fixture
def ledger() -> Ledger:
    """Fresh ledger with the clock at START_TIME."""
    return Ledger(timestamp=START_TIME)


@pytest.fixture
def token_a(ledger: Ledger) -> ERC20:
    """Input token of the deposit tests. Deployed first, so it is token0."""
    return make_token(ledger, "MAT")


@pytest.fixture
def token_b(ledger: Ledger) -> ERC20:
    return make_token(ledger, "MBT")


@pytest.fixture
def router(ledger: Ledger) -> UniswapV2Router:
    """UniswapV2 factory and router at their mainnet addresses."""
    return deploy_uniswap_v2(
        ledger, router_address=UNISWAP_V2_ROUTER, factory_address=UNISWAP_V2_FACTORY
    )


@pytest.fixture
def pair(router: UniswapV2Router, token_a: ERC20, token_b: ERC20) -> UniswapV2Pair:
    """MAT/MBT pair seeded with POOL_RESERVE of each token by OWNER."""
    address = seed_pool(router, token_a, token_b, POOL_RESERVE, POOL_RESERVE)
    return router.factory.pair(address)


@pytest.fixture
def zapper(ledger: Ledger, router: UniswapV2Router) -> ZapOrchestrator:
    """Orchestrator deployed and initialized with the router."""
    return deploy_zapper(ledger, router.address)
