"""
Supply monitor for bridged tokens.

Components:
- sample: SupplySample / AlertPayload and their ABI encoding
- sampler: Captures one sample from configuration + a supply reader
- evaluator: Pure newest-vs-oldest spike check over a window
- config_store: Owner-gated target/threshold configuration
- web3_reader: ERC-20 totalSupply() reader (imported lazily)
"""
from __future__ import annotations

from .sample import AlertPayload, SupplySample
from .sampler import Sampler, TokenSupplyReader, capture
from .evaluator import EvaluationResult, evaluate, evaluate_samples
from .config_store import ConfigStatus, ConfigurationSnapshot, ConfigurationStore


def __getattr__(name: str):
    """Lazy import for the web3-backed reader."""
    if name in ("Web3SupplyReader", "ERC20_TOTAL_SUPPLY_ABI"):
        from . import web3_reader
        return getattr(web3_reader, name)
    raise AttributeError(f"module 'monitor' has no attribute '{name}'")


__all__ = [
    "AlertPayload",
    "SupplySample",
    "Sampler",
    "TokenSupplyReader",
    "capture",
    "EvaluationResult",
    "evaluate",
    "evaluate_samples",
    "ConfigStatus",
    "ConfigurationSnapshot",
    "ConfigurationStore",
    "Web3SupplyReader",
    "ERC20_TOTAL_SUPPLY_ABI",
]
