"""
Unified Exception Hierarchy for SupplyWatch.

All exceptions inherit from SupplyWatchError, enabling consistent error
handling across the sampler, evaluator, configuration store and CLI.

Usage:
    from core.exceptions import SupplyWatchError, ReadFailureError, UnauthorizedError

    try:
        sample = sampler.capture()
    except ReadFailureError as e:
        # External token unreachable; the scheduler decides whether to retry
        log_and_retry(e)
    except SupplyWatchError as e:
        # Catch-all for system errors
        log_error(e)

Note that "too few samples", "monitoring inactive", "supply did not
increase" and "delta within threshold" are normal evaluation outcomes,
not errors.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class SupplyWatchError(Exception):
    """
    Base exception for all SupplyWatch errors.

    Attributes:
        error_code: Unique identifier for this error type
        is_recoverable: Whether a caller can reasonably retry
        context: Additional context about the error
        timestamp: When the error occurred
    """
    error_code: str = "SYSTEM_ERROR"
    is_recoverable: bool = True

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(message)

    def __str__(self) -> str:
        base = f"[{self.error_code}] {self.message}"
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "is_recoverable": self.is_recoverable,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# ACCESS CONTROL
# =============================================================================

class UnauthorizedError(SupplyWatchError):
    """
    Raised when a non-owner attempts a configuration mutation.

    The configuration is left untouched.
    """
    error_code = "UNAUTHORIZED"
    is_recoverable = False


# =============================================================================
# DATA ERRORS
# =============================================================================

class ReadFailureError(SupplyWatchError):
    """
    Raised when the external token supply reader fails.

    This can occur when:
    - The RPC endpoint is unreachable or times out
    - The target is not an ERC-20 contract
    - The returned value is not a valid uint256

    A configured token is never given a substitute supply of zero.
    """
    error_code = "READ_FAILURE"


class MalformedInputError(SupplyWatchError):
    """
    Raised when sample or payload bytes (or field values) cannot be decoded.

    Evaluation fails closed: it never proceeds with partial data.
    """
    error_code = "MALFORMED_INPUT"
    is_recoverable = False


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(SupplyWatchError):
    """
    Base class for configuration-related errors.
    """
    error_code = "CONFIG_ERROR"


class SettingsValidationError(ConfigurationError):
    """
    Raised when settings fail schema validation.

    Uses Pydantic validation under the hood.
    """
    error_code = "SETTINGS_INVALID"


class MissingConfigError(ConfigurationError):
    """
    Raised when required configuration is missing.
    """
    error_code = "CONFIG_MISSING"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def is_safety_critical(error: Exception) -> bool:
    """
    Check if an error is non-recoverable.

    Args:
        error: The exception to check

    Returns:
        True if retrying the failed operation cannot succeed
    """
    if isinstance(error, SupplyWatchError):
        return not error.is_recoverable
    return False


def get_error_code(error: Exception) -> str:
    """
    Get the error code for an exception.

    Args:
        error: The exception to get the code for

    Returns:
        Error code string, or "UNKNOWN" for foreign exceptions
    """
    if isinstance(error, SupplyWatchError):
        return error.error_code
    return "UNKNOWN"
