"""
Owner-gated configuration for the supply monitor.

Holds the monitored token and the maximum allowed increase. Only the owner
may change either value; anyone may read a snapshot. Partial configurations
(null target or zero threshold) are valid states, they simply produce
samples that can never trigger.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.exceptions import MalformedInputError, MissingConfigError, UnauthorizedError
from core.structured_log import jlog
from core.types import ZERO_ADDRESS, is_null_address, normalize_address, require_uint256

logger = logging.getLogger(__name__)


class ConfigStatus(Enum):
    UNCONFIGURED = "unconfigured"
    PARTIALLY_CONFIGURED = "partially_configured"
    ACTIVE = "active"


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """Point-in-time copy of the monitor configuration."""

    target_token: str = ZERO_ADDRESS
    max_allowed_increase: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "target_token", normalize_address(self.target_token, "target_token"))
        require_uint256(self.max_allowed_increase, "max_allowed_increase")

    @property
    def status(self) -> ConfigStatus:
        has_target = not is_null_address(self.target_token)
        has_threshold = self.max_allowed_increase != 0
        if has_target and has_threshold:
            return ConfigStatus.ACTIVE
        if has_target or has_threshold:
            return ConfigStatus.PARTIALLY_CONFIGURED
        return ConfigStatus.UNCONFIGURED


class ConfigurationStore:
    """
    Access-controlled holder of the monitor settings.

    Example:
        store = ConfigurationStore(owner=operator)
        store.set_target(operator, token)
        store.set_threshold(operator, 10**24)
        snap = store.snapshot()
    """

    def __init__(
        self,
        owner: str,
        target_token: str = ZERO_ADDRESS,
        max_allowed_increase: int = 0,
    ):
        owner = normalize_address(owner, "owner")
        if is_null_address(owner):
            raise MalformedInputError("owner must not be the zero address")
        self._owner = owner
        self._snapshot = ConfigurationSnapshot(
            normalize_address(target_token, "target_token"),
            require_uint256(max_allowed_increase, "max_allowed_increase"),
        )
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Any) -> "ConfigurationStore":
        """Build a store from validated settings (config.settings_schema)."""
        mon = settings.monitor
        if is_null_address(mon.owner):
            raise MissingConfigError("monitor.owner is not configured")
        return cls(
            owner=mon.owner,
            target_token=mon.target_token,
            max_allowed_increase=mon.max_allowed_increase,
        )

    @property
    def owner(self) -> str:
        return self._owner

    def snapshot(self) -> ConfigurationSnapshot:
        return self._snapshot

    def _require_owner(self, caller: Any, action: str) -> None:
        try:
            is_owner = normalize_address(caller, "caller") == self._owner
        except MalformedInputError:
            is_owner = False
        if not is_owner:
            logger.warning(f"Rejected {action} from non-owner {caller}")
            jlog("config_change_rejected", level="WARNING", action=action, caller=str(caller))
            raise UnauthorizedError(
                f"only the owner may {action}",
                context={"caller": caller},
            )

    def set_target(self, caller: str, identity: str) -> ConfigurationSnapshot:
        """Set the monitored token. The zero address disables monitoring."""
        with self._lock:
            self._require_owner(caller, "set_target")
            token = normalize_address(identity, "identity")
            self._snapshot = ConfigurationSnapshot(token, self._snapshot.max_allowed_increase)
            snap = self._snapshot
        jlog("config_target_set", target_token=token, status=snap.status.value)
        return snap

    def set_threshold(self, caller: str, value: int) -> ConfigurationSnapshot:
        """Set the max allowed increase. No upper bound beyond uint256."""
        with self._lock:
            self._require_owner(caller, "set_threshold")
            value = require_uint256(value, "value")
            self._snapshot = ConfigurationSnapshot(self._snapshot.target_token, value)
            snap = self._snapshot
        jlog("config_threshold_set", max_allowed_increase=str(value), status=snap.status.value)
        return snap

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._lock:
            self._require_owner(caller, "transfer_ownership")
            new_owner = normalize_address(new_owner, "new_owner")
            if is_null_address(new_owner):
                raise MalformedInputError("new owner must not be the zero address")
            previous = self._owner
            self._owner = new_owner
        jlog("config_owner_transferred", previous_owner=previous, new_owner=new_owner)

    def __repr__(self) -> str:
        snap = self._snapshot
        return (
            f"ConfigurationStore(owner={self._owner}, target_token={snap.target_token}, "
            f"max_allowed_increase={snap.max_allowed_increase})"
        )
