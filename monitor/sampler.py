"""
Supply Sampler.

Produces one SupplySample per call from the current configuration and a
token supply reader. No caching: every call reads the latest configuration
and performs a fresh read.

Usage:
    from monitor.sampler import Sampler

    sampler = Sampler(store, Web3SupplyReader(rpc_url))
    data = sampler.capture_encoded()   # 96 bytes, hand to the scheduler's window
"""

from __future__ import annotations

import logging
from typing import Protocol

from core.exceptions import MalformedInputError, ReadFailureError
from core.types import is_null_address, require_uint256
from monitor.config_store import ConfigurationSnapshot, ConfigurationStore
from monitor.sample import SupplySample

logger = logging.getLogger(__name__)


class TokenSupplyReader(Protocol):
    """Capability to read the current total supply of a token."""

    def total_supply(self, token: str) -> int:
        ...


def capture(config: ConfigurationSnapshot, reader: TokenSupplyReader) -> SupplySample:
    """
    Capture a single supply observation.

    An unconfigured (null) target yields the inert sample without touching
    the reader. For a configured target any reader failure is raised as
    ReadFailureError; zero is never substituted.

    Args:
        config: Configuration in effect right now
        reader: Token supply capability

    Returns:
        SupplySample carrying the live supply and the current threshold

    Raises:
        ReadFailureError: If the reader fails or returns a non-uint256 value
    """
    if is_null_address(config.target_token):
        logger.debug("No target token configured, producing inert sample")
        return SupplySample.inert(config.max_allowed_increase)

    token = config.target_token
    try:
        supply = reader.total_supply(token)
    except ReadFailureError:
        raise
    except Exception as e:
        logger.error(f"totalSupply read failed for {token}: {e}")
        raise ReadFailureError(
            "token supply read failed",
            context={"token": token},
            cause=e,
        ) from e

    try:
        supply = require_uint256(supply, "total_supply")
    except MalformedInputError as e:
        logger.error(f"totalSupply for {token} returned an invalid value: {supply!r}")
        raise ReadFailureError(
            "token supply read returned an invalid value",
            context={"token": token, "value": supply},
            cause=e,
        ) from e

    return SupplySample(token, supply, config.max_allowed_increase)


class Sampler:
    """Binds a configuration store to a reader."""

    def __init__(self, store: ConfigurationStore, reader: TokenSupplyReader):
        self.store = store
        self.reader = reader

    def capture(self) -> SupplySample:
        return capture(self.store.snapshot(), self.reader)

    def capture_encoded(self) -> bytes:
        return self.capture().encode()
