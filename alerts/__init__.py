"""
SupplyWatch Alerts Module.

Delivers supply spike alerts produced by the evaluator:
- Structured event log (default)
- In-memory collection (dry runs)
- Telegram push notifications
"""

from .sink import AlertSink, LogAlertSink, MemoryAlertSink, build_sink, dispatch

__all__ = [
    'AlertSink',
    'LogAlertSink',
    'MemoryAlertSink',
    'build_sink',
    'dispatch',
]
