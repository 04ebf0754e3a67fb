"""
Shared primitive types for SupplyWatch.

Addresses are carried as EIP-55 checksum strings; supplies and thresholds
are plain Python ints constrained to the uint256 range.
"""

from __future__ import annotations

from typing import Any

from eth_utils import is_address, to_checksum_address

from core.exceptions import MalformedInputError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
UINT256_MAX = 2**256 - 1


def normalize_address(value: Any, field_name: str = "address") -> str:
    """Return the checksum form of ``value`` or raise MalformedInputError."""
    if isinstance(value, (bytes, bytearray)) and len(value) == 20:
        value = "0x" + bytes(value).hex()
    if not isinstance(value, str) or not is_address(value):
        raise MalformedInputError(
            f"{field_name} is not a 20-byte address",
            context={field_name: value},
        )
    return to_checksum_address(value)


def is_null_address(value: str) -> bool:
    return int(value, 16) == 0


def require_uint256(value: Any, field_name: str = "value") -> int:
    """Validate that ``value`` is an int in [0, 2**256 - 1]."""
    # bool is an int subclass but never a meaningful supply
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedInputError(
            f"{field_name} must be an integer",
            context={field_name: value},
        )
    if value < 0 or value > UINT256_MAX:
        raise MalformedInputError(
            f"{field_name} is outside the uint256 range",
            context={field_name: value},
        )
    return value
