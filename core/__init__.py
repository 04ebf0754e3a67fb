"""
Core Infrastructure
====================

Foundational components for SupplyWatch.

Components:
- exceptions: Unified exception hierarchy
- structured_log: JSON event logging
- types: Address and uint256 primitives
"""

from .exceptions import (
    SupplyWatchError,
    UnauthorizedError,
    ReadFailureError,
    MalformedInputError,
    ConfigurationError,
)
from .structured_log import jlog, read_recent_logs

__all__ = [
    # Exceptions
    'SupplyWatchError',
    'UnauthorizedError',
    'ReadFailureError',
    'MalformedInputError',
    'ConfigurationError',
    # Structured Logging
    'jlog',
    'read_recent_logs',
]
