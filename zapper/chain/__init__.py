"""In-memory ledger with ERC20 tokens and a UniswapV2 deployment.

These are the external collaborators of the zap: a sequential ledger with
atomic blocks, the token service and the AMM. They reproduce the on-chain
contracts' integer rounding so zap results can be checked to the wei.
"""

from zapper.amm.fees import UNISWAP_V2_FEE, FeeModel
from zapper.chain.erc20 import ERC20
from zapper.chain.factory import UniswapV2Factory
from zapper.chain.ledger import Contract, Event, Ledger
from zapper.chain.pair import UniswapV2Pair
from zapper.chain.router import UniswapV2Router


def deploy_uniswap_v2(
    ledger: Ledger,
    fee: FeeModel = UNISWAP_V2_FEE,
    router_address: str | None = None,
    factory_address: str | None = None,
) -> UniswapV2Router:
    """Deploy a factory and a router bound to it."""
    factory = UniswapV2Factory(ledger, fee=fee, address=factory_address)
    return UniswapV2Router(ledger, factory, address=router_address)


__all__ = [
    "Contract",
    "Event",
    "Ledger",
    "ERC20",
    "UniswapV2Pair",
    "UniswapV2Factory",
    "UniswapV2Router",
    "deploy_uniswap_v2",
]
