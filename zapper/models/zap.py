"""Zap request and outcome models."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from zapper.models.types import ZERO_ADDRESS, Address, Uint256


class ZapRequest(BaseModel):
    """A single-token deposit request.

    The zero address and a zero amount are representable here on purpose:
    the orchestrator rejects them with their own distinct errors.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pair: Address = Field(default=ZERO_ADDRESS, description="Pair to deposit into")
    token: Address = Field(default=ZERO_ADDRESS, description="Input token, one of the pair's")
    amount: Uint256 = Field(default=0, description="Input amount in token units")
    to: Address = Field(default=ZERO_ADDRESS, description="Recipient of the LP tokens")
    deadline: Uint256 = Field(default=0, description="Unix timestamp after which the zap fails")


class ZapState(str, Enum):
    """Stages of a zap. FAILED absorbs any error."""

    VALIDATING = "validating"
    FUNDS_PULLED = "funds_pulled"
    RESERVES_READ = "reserves_read"
    SPLIT = "split"
    SWAPPED = "swapped"
    DEPOSITED = "deposited"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ZapOutcome:
    """Result of a completed zap.

    sender, to, pair and liquidity are the fields of the ZapIn event; the
    rest describes how the input was used.
    """

    sender: str
    to: str
    pair: str
    liquidity: int
    token_in: str
    token_out: str
    amount_in: int
    swap_amount: int
    swap_out: int
    deposited_in: int
    deposited_out: int
    refunded_in: int
    refunded_out: int
    states: tuple[ZapState, ...] = ()
