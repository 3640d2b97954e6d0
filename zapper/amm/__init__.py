"""Constant product AMM math and the capability interfaces the zap uses."""

from zapper.amm.base import AmmGateway, AssetGateway, DepositResult, SwapResult
from zapper.amm.fees import UNISWAP_V2_FEE, FeeModel
from zapper.amm.split import OptimalSplitCalculator, SplitResult, ZapQuote, optimal_split
from zapper.amm.uniswap_v2 import (
    UniswapV2Pool,
    get_amount_out,
    liquidity_for_deposit,
    quote,
    sort_tokens,
)

__all__ = [
    # Interfaces
    "AmmGateway",
    "AssetGateway",
    "SwapResult",
    "DepositResult",
    # Fees
    "FeeModel",
    "UNISWAP_V2_FEE",
    # UniswapV2 math
    "UniswapV2Pool",
    "get_amount_out",
    "quote",
    "sort_tokens",
    "liquidity_for_deposit",
    # Split
    "OptimalSplitCalculator",
    "SplitResult",
    "ZapQuote",
    "optimal_split",
]
