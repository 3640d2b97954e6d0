"""API endpoints for zap quotes and calldata."""

import time

import structlog
from fastapi import APIRouter

from zapper.amm.fees import FeeModel
from zapper.amm.split import optimal_split
from zapper.encoding import encode_single_token_add_liquidity
from zapper.errors import Expired
from zapper.models.api import EncodeRequest, EncodeResponse, QuoteRequest, QuoteResponse
from zapper.models.zap import ZapRequest
from zapper.zap.orchestrator import check_fields

logger = structlog.get_logger()

router = APIRouter()


@router.post("/quote", response_model_exclude_none=True)
async def quote(body: QuoteRequest) -> QuoteResponse:
    """Split a single-sided input against a reserves snapshot.

    With ``totalSupply`` the router deposit is replayed as well and the
    response carries the deposited amounts, the refunded dust and the LP
    tokens the zap would mint.

    Error Handling:
        - Zero reserves or input: 400 with the AMM revert string
        - Invalid request schema: 422 (Pydantic)
    """
    fee = FeeModel.from_bps(body.fee_bps)
    split = optimal_split.compute_split(body.reserve_in, body.reserve_out, fee, body.amount_in)
    response = QuoteResponse(
        swap_amount=split.swap_amount,
        keep_amount=split.keep_amount,
        expected_out=split.expected_out,
    )

    if body.total_supply is not None:
        zap_quote = optimal_split.quote_zap(
            body.reserve_in, body.reserve_out, fee, body.amount_in, body.total_supply
        )
        response = response.model_copy(
            update={
                "deposited_in": zap_quote.amount_in_deposited,
                "deposited_out": zap_quote.amount_out_deposited,
                "dust": zap_quote.dust,
                "liquidity": zap_quote.liquidity,
            }
        )

    logger.info(
        "quote_computed",
        amount_in=body.amount_in,
        swap_amount=split.swap_amount,
        fee_bps=body.fee_bps,
    )
    return response


@router.post("/encode")
async def encode(body: EncodeRequest) -> EncodeResponse:
    """Build the helper transaction for a zap.

    Fields are checked in the order the helper checks them, so a request
    that would revert on-chain is rejected here with the same reason.
    """
    check_fields(body.pair, body.token, body.amount, body.to)
    if body.deadline <= int(time.time()):
        raise Expired()

    request = ZapRequest.model_validate(body.model_dump(exclude={"helper"}))
    data = encode_single_token_add_liquidity(request)
    logger.info("calldata_encoded", helper=body.helper, pair=body.pair, amount=body.amount)
    return EncodeResponse(to=body.helper, data=data)
