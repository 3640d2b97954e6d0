"""Request/response bodies for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field

from zapper.models.types import Address, Bytes, Uint256
from zapper.models.zap import ZapRequest


class QuoteRequest(BaseModel):
    """Reserves snapshot and input for a stateless zap quote."""

    model_config = ConfigDict(populate_by_name=True)

    reserve_in: Uint256 = Field(alias="reserveIn", description="Reserve of the input token")
    reserve_out: Uint256 = Field(alias="reserveOut", description="Reserve of the paired token")
    amount_in: Uint256 = Field(alias="amountIn", description="Single-sided input amount")
    total_supply: Uint256 | None = Field(
        default=None,
        alias="totalSupply",
        description="LP token supply; when given the response includes expected liquidity",
    )
    fee_bps: int = Field(default=30, ge=0, lt=10_000, alias="feeBps")


class QuoteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    swap_amount: Uint256 = Field(alias="swapAmount")
    keep_amount: Uint256 = Field(alias="keepAmount")
    expected_out: Uint256 = Field(alias="expectedOut")
    deposited_in: Uint256 | None = Field(default=None, alias="depositedIn")
    deposited_out: Uint256 | None = Field(default=None, alias="depositedOut")
    dust: Uint256 | None = None
    liquidity: Uint256 | None = None


class EncodeResponse(BaseModel):
    """Transaction target and calldata for the on-chain helper."""

    to: Address
    data: Bytes


class EncodeRequest(ZapRequest):
    """Zap call arguments plus the helper contract that will execute them."""

    helper: Address = Field(description="Deployed zap helper contract")
