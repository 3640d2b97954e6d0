"""Pydantic models and shared types for zap requests and results."""

from zapper.models.api import EncodeRequest, EncodeResponse, QuoteRequest, QuoteResponse
from zapper.models.types import (
    ZERO_ADDRESS,
    Address,
    Bytes,
    Uint256,
    is_valid_address,
    is_zero_address,
    normalize_address,
)
from zapper.models.zap import ZapOutcome, ZapRequest, ZapState

__all__ = [
    # Types
    "Address",
    "Bytes",
    "Uint256",
    "ZERO_ADDRESS",
    "normalize_address",
    "is_valid_address",
    "is_zero_address",
    # Zap
    "ZapRequest",
    "ZapState",
    "ZapOutcome",
    # API bodies
    "QuoteRequest",
    "QuoteResponse",
    "EncodeRequest",
    "EncodeResponse",
]
