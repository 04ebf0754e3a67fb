"""
Alert sinks for supply spike alerts.

The evaluator only produces an encoded payload; a sink makes it externally
observable. The default sink appends a structured event to the JSONL event
log, which external tooling can tail or query.

Usage:
    from alerts.sink import LogAlertSink, dispatch

    result = evaluate(window)
    dispatch(result, LogAlertSink())
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from core.structured_log import jlog
from monitor.evaluator import EvaluationResult
from monitor.sample import AlertPayload

logger = logging.getLogger(__name__)

ALERT_EVENT = "supply_spike_detected"


class AlertSink(Protocol):
    def emit(self, payload: AlertPayload) -> None:
        ...


class LogAlertSink:
    """Append each alert to the structured event log."""

    def __init__(self, event: str = ALERT_EVENT):
        self.event = event

    def emit(self, payload: AlertPayload) -> None:
        jlog(
            self.event,
            level="CRITICAL",
            encoded=payload.hex(),
            **payload.to_dict(),
        )


class MemoryAlertSink:
    """Collect alerts in memory (dry runs and tests)."""

    def __init__(self) -> None:
        self.alerts: List[AlertPayload] = []

    def emit(self, payload: AlertPayload) -> None:
        self.alerts.append(payload)

    def __len__(self) -> int:
        return len(self.alerts)


def dispatch(result: EvaluationResult, sink: AlertSink) -> Optional[AlertPayload]:
    """
    Forward a triggered evaluation result to ``sink``.

    Returns:
        The decoded payload that was emitted, or None when not triggered
    """
    alert = result.alert
    if alert is None:
        return None
    logger.warning(
        f"Supply spike on {alert.token}: {alert.old_supply} -> {alert.new_supply}"
    )
    sink.emit(alert)
    return alert


def build_sink(kind: str) -> AlertSink:
    """Create a sink from the ``alerts.sink`` setting."""
    if kind == "log":
        return LogAlertSink()
    if kind == "memory":
        return MemoryAlertSink()
    if kind == "telegram":
        from alerts.telegram_alerter import TelegramAlertSink
        return TelegramAlertSink()
    raise ValueError(f"Unknown alert sink: {kind}")
