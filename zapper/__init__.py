"""Zapper - single-token liquidity deposits for UniswapV2 pairs."""

from zapper.amm.split import OptimalSplitCalculator, optimal_split
from zapper.config import ZapConfig
from zapper.zap import ZapOrchestrator, deploy_zapper

__version__ = "0.1.0"
__all__ = [
    "OptimalSplitCalculator",
    "optimal_split",
    "ZapConfig",
    "ZapOrchestrator",
    "deploy_zapper",
    "__version__",
]
