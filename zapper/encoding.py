"""ABI encoding for the on-chain zap helper.

Builds calldata for ``singleTokenAddLiquidity`` so a quote computed here can
be submitted as a transaction, and encodes/decodes the ``ZapIn`` log.
"""

from __future__ import annotations

from eth_abi import decode, encode  # type: ignore[attr-defined]
from eth_utils import event_signature_to_log_topic, function_signature_to_4byte_selector

from zapper.models.types import is_valid_address, normalize_address
from zapper.models.zap import ZapOutcome, ZapRequest

SINGLE_TOKEN_ADD_LIQUIDITY_SIGNATURE = (
    "singleTokenAddLiquidity(address,address,uint256,address,uint256)"
)
ZAP_IN_SIGNATURE = "ZapIn(address,address,address,uint256)"

SINGLE_TOKEN_ADD_LIQUIDITY_SELECTOR = (
    "0x" + function_signature_to_4byte_selector(SINGLE_TOKEN_ADD_LIQUIDITY_SIGNATURE).hex()
)
ZAP_IN_TOPIC = "0x" + event_signature_to_log_topic(ZAP_IN_SIGNATURE).hex()


def _address_bytes(address: str, field: str) -> bytes:
    if not is_valid_address(address):
        raise ValueError(f"Invalid {field} address: {address}")
    return bytes.fromhex(address[2:])


def _topic(address: str) -> str:
    return "0x" + "00" * 12 + normalize_address(address)[2:]


def encode_single_token_add_liquidity(request: ZapRequest) -> str:
    """Encode a zap request as calldata for the helper contract.

    Args:
        request: Validated zap request

    Returns:
        0x-prefixed calldata

    Raises:
        ValueError: If an address is malformed
    """
    encoded_args = encode(
        ["address", "address", "uint256", "address", "uint256"],
        [
            _address_bytes(request.pair, "pair"),
            _address_bytes(request.token, "token"),
            request.amount,
            _address_bytes(request.to, "to"),
            request.deadline,
        ],
    )
    return SINGLE_TOKEN_ADD_LIQUIDITY_SELECTOR + encoded_args.hex()


def encode_zap_in_log(outcome: ZapOutcome) -> tuple[list[str], str]:
    """Topics and data of the ZapIn log for an outcome.

    sender, to and pair are indexed; liquidity is the only data word.
    """
    topics = [ZAP_IN_TOPIC, _topic(outcome.sender), _topic(outcome.to), _topic(outcome.pair)]
    data = "0x" + encode(["uint256"], [outcome.liquidity]).hex()
    return topics, data


def decode_zap_in_log(topics: list[str], data: str) -> dict[str, str | int]:
    """Decode a ZapIn log into its named fields.

    Raises:
        ValueError: If the log is not a ZapIn log
    """
    if len(topics) != 4 or topics[0].lower() != ZAP_IN_TOPIC:
        raise ValueError("Not a ZapIn log")
    (liquidity,) = decode(["uint256"], bytes.fromhex(data.removeprefix("0x")))
    sender, to, pair = ("0x" + t.lower().removeprefix("0x")[-40:] for t in topics[1:])
    return {"sender": sender, "to": to, "pair": pair, "liquidity": liquidity}


__all__ = [
    "SINGLE_TOKEN_ADD_LIQUIDITY_SIGNATURE",
    "SINGLE_TOKEN_ADD_LIQUIDITY_SELECTOR",
    "ZAP_IN_SIGNATURE",
    "ZAP_IN_TOPIC",
    "encode_single_token_add_liquidity",
    "encode_zap_in_log",
    "decode_zap_in_log",
]
