"""Shared type definitions for zap models.

Addresses are plain lowercase hex strings. The zero address stands in for
a null identity, the way the on-chain helper sees an unset argument.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer

from zapper.safe_int import UINT256_MAX

ZERO_ADDRESS = "0x" + "00" * 20


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256, accepting ints and decimal strings.

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


def validate_address(value: Any) -> str:
    """Normalize and validate an address field."""
    if not isinstance(value, str):
        raise ValueError(f"Address must be a string, got {type(value).__name__}")
    return normalize_address(value, validate=True)


# Ethereum address (40 hex chars after 0x prefix), normalized to lowercase
Address = Annotated[
    str,
    BeforeValidator(validate_address),
    Field(description="Address (lowercase, 0x-prefixed)"),
]

# 256-bit unsigned integer; decimal strings on the wire so JSON clients keep precision
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    PlainSerializer(str, return_type=str, when_used="json"),
    Field(description="256-bit unsigned integer"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase.

    Args:
        address: An Ethereum address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid Ethereum address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def is_zero_address(address: str | None) -> bool:
    """True for None, empty string or the zero address."""
    if not address:
        return True
    return normalize_address(address) == ZERO_ADDRESS


# Arbitrary hex bytes
Bytes = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]*$")]
