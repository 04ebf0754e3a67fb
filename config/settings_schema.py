"""
Typed Settings Schema (Pydantic)
================================

Provides typed, validated configuration for SupplyWatch.

Usage:
    from config.settings_schema import load_validated_settings

    settings = load_validated_settings()

    token = settings.monitor.target_token
    threshold = settings.monitor.max_allowed_increase
    window = settings.scheduler.window_size   # consumed by the external scheduler

Environment overrides (applied before validation):
    SUPPLYWATCH_RPC_URL               -> rpc.url
    SUPPLYWATCH_TARGET_TOKEN          -> monitor.target_token
    SUPPLYWATCH_MAX_ALLOWED_INCREASE  -> monitor.max_allowed_increase
    SUPPLYWATCH_OWNER                 -> monitor.owner
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config.settings_loader import get_config_path, read_yaml
from core.exceptions import MalformedInputError, SettingsValidationError
from core.types import ZERO_ADDRESS, normalize_address, require_uint256

logger = logging.getLogger(__name__)

ENV_OVERRIDES = {
    "SUPPLYWATCH_RPC_URL": ("rpc", "url"),
    "SUPPLYWATCH_TARGET_TOKEN": ("monitor", "target_token"),
    "SUPPLYWATCH_MAX_ALLOWED_INCREASE": ("monitor", "max_allowed_increase"),
    "SUPPLYWATCH_OWNER": ("monitor", "owner"),
}


# ============================================================================
# Schema Definitions
# ============================================================================

class SystemConfig(BaseModel):
    """System-level configuration."""
    name: str = Field(default="SupplyWatch", description="System name")
    version: str = Field(default="1.0.0", description="System version")


class MonitorConfig(BaseModel):
    """Initial contents of the configuration store."""
    owner: str = Field(default=ZERO_ADDRESS, description="Address allowed to change settings")
    target_token: str = Field(default=ZERO_ADDRESS, description="Monitored token, zero disables")
    max_allowed_increase: int = Field(
        default=0,
        description="Max supply increase per window in base units, 0 disables",
    )

    @field_validator("owner", "target_token", mode="before")
    @classmethod
    def _check_address(cls, v: Any) -> str:
        try:
            return normalize_address(v)
        except MalformedInputError as e:
            raise ValueError(e.message) from e

    @field_validator("max_allowed_increase", mode="before")
    @classmethod
    def _check_uint256(cls, v: Union[int, str]) -> int:
        # Large thresholds are usually quoted in YAML / env
        if isinstance(v, str):
            try:
                v = int(v.replace("_", ""), 0)
            except ValueError as e:
                raise ValueError(f"not an integer: {v!r}") from e
        try:
            return require_uint256(v, "max_allowed_increase")
        except MalformedInputError as e:
            raise ValueError(e.message) from e


class RpcConfig(BaseModel):
    """JSON-RPC endpoint used to read totalSupply()."""
    url: Optional[str] = None
    timeout_seconds: float = Field(default=15, gt=0, le=300)


class SchedulerConfig(BaseModel):
    """Parameters for the external scheduler. Not interpreted by the core."""
    window_size: int = Field(default=10, ge=2, description="Samples per evaluation window")
    poll_interval_seconds: float = Field(default=12, gt=0)
    cooldown_windows: int = Field(default=0, ge=0, description="Windows to skip after an alert")


class AlertsConfig(BaseModel):
    """Alert delivery configuration."""
    sink: Literal["log", "memory", "telegram"] = "log"


class Settings(BaseModel):
    """Complete settings schema."""
    model_config = ConfigDict(extra="allow")

    system: SystemConfig = Field(default_factory=SystemConfig)
    monitor: MonitorConfig = Field(default_factory=MonitorConfig)
    rpc: RpcConfig = Field(default_factory=RpcConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    alerts: AlertsConfig = Field(default_factory=AlertsConfig)


# ============================================================================
# Loading
# ============================================================================

def _load_yaml_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load raw YAML configuration."""
    path = path or get_config_path()
    if not path.exists():
        logger.warning(f"Config file not found: {path}")
        return {}
    return read_yaml(path)


def apply_env_overrides(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``raw`` with SUPPLYWATCH_* environment values applied."""
    # An empty YAML section ("monitor:") loads as None
    merged = {k: ({} if v is None else dict(v) if isinstance(v, dict) else v) for k, v in raw.items()}
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            merged.setdefault(section, {})[key] = value
    return merged


def load_validated_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load and validate settings from base.yaml (or ``path``).

    Returns:
        Validated Settings object

    Raises:
        SettingsValidationError: If settings are invalid
    """
    raw = apply_env_overrides(_load_yaml_config(Path(path) if path else None))
    try:
        return Settings(**raw)
    except ValidationError as e:
        logger.error(f"Settings validation failed: {e}")
        raise SettingsValidationError(
            "settings failed validation",
            context={"errors": [err["msg"] for err in e.errors()]},
            cause=e,
        ) from e
