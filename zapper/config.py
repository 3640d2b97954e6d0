"""Zap configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from zapper.constants import BPS


@dataclass(frozen=True)
class ZapConfig:
    """Slippage and settlement behavior for the orchestrator.

    Attributes:
        swap_slippage_bps: Tolerance below the expected swap output. The
            swap executes in the same atomic unit as the reserve read, so
            the default of 0 demands the exact predicted amount.
        deposit_slippage_bps: Tolerance below the desired deposit amounts
            passed to the router as its minimums (default 50 = 0.5%).
        reset_allowance: Revoke the router's leftover allowance after the
            deposit.
    """

    swap_slippage_bps: int = 0
    deposit_slippage_bps: int = 50
    reset_allowance: bool = True

    def __post_init__(self) -> None:
        for name in ("swap_slippage_bps", "deposit_slippage_bps"):
            value = getattr(self, name)
            if not 0 <= value < BPS:
                raise ValueError(f"{name} must be in [0, {BPS}): {value}")

    @classmethod
    def from_env(cls) -> ZapConfig:
        """Read overrides from ZAPPER_* environment variables."""
        default = cls()
        return cls(
            swap_slippage_bps=int(
                os.environ.get("ZAPPER_SWAP_SLIPPAGE_BPS", default.swap_slippage_bps)
            ),
            deposit_slippage_bps=int(
                os.environ.get("ZAPPER_DEPOSIT_SLIPPAGE_BPS", default.deposit_slippage_bps)
            ),
            reset_allowance=_env_flag("ZAPPER_RESET_ALLOWANCE", default.reset_allowance),
        )


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.lower() in ("true", "1", "yes")


def apply_slippage(amount: int, slippage_bps: int) -> int:
    """Minimum acceptable amount: floor(amount * (BPS - slippage) / BPS)."""
    return amount * (BPS - slippage_bps) // BPS


# Default configuration instance
DEFAULT_ZAP_CONFIG = ZapConfig()
