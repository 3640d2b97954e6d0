"""Single-token liquidity deposits."""

from zapper.zap.gateways import LedgerAssetGateway, RouterAmmGateway
from zapper.zap.orchestrator import InitState, ZapOrchestrator, deploy_zapper

__all__ = [
    "ZapOrchestrator",
    "deploy_zapper",
    "InitState",
    "LedgerAssetGateway",
    "RouterAmmGateway",
]
