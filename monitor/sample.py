"""
Supply samples and alert payloads.

Both entities are ordered triples encoded with the Ethereum ABI as
``(address, uint256, uint256)``: three 32-byte words, 96 bytes in total.
Independently written samplers and evaluators agree on this layout
byte-for-byte.

Usage:
    from monitor.sample import SupplySample, AlertPayload

    sample = SupplySample(token, observed_supply=1_000, threshold=100)
    data = sample.encode()
    assert SupplySample.decode(data) == sample
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError

from core.exceptions import MalformedInputError
from core.types import ZERO_ADDRESS, is_null_address, normalize_address, require_uint256

TRIPLE_TYPES = ["address", "uint256", "uint256"]
ENCODED_SIZE = 96


def _encode_triple(address: str, first: int, second: int) -> bytes:
    return encode(TRIPLE_TYPES, [address, first, second])


def _decode_triple(data: Any, kind: str) -> Tuple[str, int, int]:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedInputError(
            f"{kind} must be bytes",
            context={"type": type(data).__name__},
        )
    raw = bytes(data)
    if len(raw) != ENCODED_SIZE:
        raise MalformedInputError(
            f"{kind} must be exactly {ENCODED_SIZE} bytes",
            context={"length": len(raw)},
        )
    try:
        address, first, second = decode(TRIPLE_TYPES, raw)
    except DecodingError as e:
        raise MalformedInputError(f"{kind} is not valid ABI data", cause=e) from e
    return normalize_address(address), first, second


@dataclass(frozen=True)
class SupplySample:
    """A single observation of a token's total supply.

    ``threshold`` is the max-allowed-increase in effect when the sample was
    taken, so evaluation never needs to read live configuration.
    """

    token: str
    observed_supply: int
    threshold: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "token", normalize_address(self.token, "token"))
        require_uint256(self.observed_supply, "observed_supply")
        require_uint256(self.threshold, "threshold")

    @classmethod
    def inert(cls, threshold: int = 0) -> "SupplySample":
        """Sample produced when no target token is configured."""
        return cls(ZERO_ADDRESS, 0, threshold)

    @property
    def has_target(self) -> bool:
        return not is_null_address(self.token)

    @property
    def is_active(self) -> bool:
        """True when this sample is able to trigger an alert."""
        return self.threshold != 0 and self.has_target

    def encode(self) -> bytes:
        return _encode_triple(self.token, self.observed_supply, self.threshold)

    def hex(self) -> str:
        return "0x" + self.encode().hex()

    @classmethod
    def decode(cls, data: Any) -> "SupplySample":
        token, supply, threshold = _decode_triple(data, "sample")
        return cls(token, supply, threshold)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        # uint256 values overflow JSON number precision in most consumers
        d["observed_supply"] = str(self.observed_supply)
        d["threshold"] = str(self.threshold)
        return d


@dataclass(frozen=True)
class AlertPayload:
    """Alert raised when supply grew faster than the captured threshold."""

    token: str
    old_supply: int
    new_supply: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "token", normalize_address(self.token, "token"))
        require_uint256(self.old_supply, "old_supply")
        require_uint256(self.new_supply, "new_supply")

    @property
    def increase(self) -> int:
        return max(self.new_supply - self.old_supply, 0)

    def encode(self) -> bytes:
        return _encode_triple(self.token, self.old_supply, self.new_supply)

    def hex(self) -> str:
        return "0x" + self.encode().hex()

    @classmethod
    def decode(cls, data: Any) -> "AlertPayload":
        token, old_supply, new_supply = _decode_triple(data, "alert payload")
        return cls(token, old_supply, new_supply)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "old_supply": str(self.old_supply),
            "new_supply": str(self.new_supply),
            "increase": str(self.increase),
        }


def parse_hex(value: str) -> bytes:
    """Decode a ``0x``-prefixed (or bare) hex string into bytes."""
    text = value.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise MalformedInputError("not a hex string", context={"value": value}, cause=e) from e
