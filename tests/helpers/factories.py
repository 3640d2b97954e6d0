"""Factory functions for building ledger state in tests.

Usage:
    from tests.helpers import make_token, seed_pool

    token_a = make_token(ledger, "MAT")
    pair_address = seed_pool(router, token_a, token_b, 1000 * ETHER, 1000 * ETHER)
"""

from zapper.chain import ERC20, Ledger, UniswapV2Router
from tests.helpers.constants import ONE_HOUR, OWNER, TOKEN_SUPPLY


def make_token(
    ledger: Ledger,
    symbol: str,
    supply: int = TOKEN_SUPPLY,
    holder: str = OWNER,
) -> ERC20:
    """Deploy an 18-decimal token with its whole supply minted to holder."""
    return ERC20(ledger, f"Mock {symbol}", symbol, initial_supply=supply, holder=holder)


def seed_pool(
    router: UniswapV2Router,
    token_a: ERC20,
    token_b: ERC20,
    amount_a: int,
    amount_b: int,
    provider: str = OWNER,
) -> str:
    """Create a pair through the router and add its first liquidity.

    Returns:
        Pair address
    """
    token_a.approve(provider, router.address, amount_a)
    token_b.approve(provider, router.address, amount_b)
    router.add_liquidity(
        provider,
        token_a.address,
        token_b.address,
        amount_a,
        amount_b,
        0,
        0,
        provider,
        router.ledger.now + ONE_HOUR,
    )
    return router.factory.get_pair(token_a.address, token_b.address)


__all__ = ["make_token", "seed_pool"]
