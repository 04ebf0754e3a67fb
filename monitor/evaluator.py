"""
Supply Spike Evaluator.

Pure function over a window of encoded samples, newest first. Only the
newest and the oldest sample are compared; intermediate samples are never
decoded. The threshold used is the one captured in the newest sample, so
the result depends on the input sequence alone.

Outcomes:
    - fewer than two samples             -> not triggered
    - newest sample inactive              -> not triggered
      (zero threshold or null token)
    - supply did not increase             -> not triggered
    - increase <= threshold               -> not triggered
    - increase >  threshold               -> triggered, payload = ABI(token, old, new)

Undecodable newest/oldest bytes raise MalformedInputError.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Optional, Sequence

from monitor.sample import AlertPayload, SupplySample

logger = logging.getLogger(__name__)


class EvaluationResult(NamedTuple):
    triggered: bool
    payload: Optional[bytes] = None

    @property
    def alert(self) -> Optional[AlertPayload]:
        """Decoded payload, or None when not triggered."""
        if self.payload is None:
            return None
        return AlertPayload.decode(self.payload)


NOT_TRIGGERED = EvaluationResult(False, None)


def evaluate_samples(samples: Sequence[SupplySample]) -> EvaluationResult:
    """Evaluate already-decoded samples (newest first)."""
    if len(samples) < 2:
        return NOT_TRIGGERED
    return _compare(samples[0], samples[-1])


def evaluate(samples: Sequence[bytes]) -> EvaluationResult:
    """
    Evaluate a window of encoded samples.

    Args:
        samples: Encoded SupplySample bytes, index 0 is the most recent

    Returns:
        EvaluationResult(triggered, payload)

    Raises:
        MalformedInputError: If the newest or oldest element cannot be decoded
    """
    if len(samples) < 2:
        logger.debug(f"Window has {len(samples)} sample(s), nothing to compare")
        return NOT_TRIGGERED

    latest = SupplySample.decode(samples[0])
    oldest = SupplySample.decode(samples[-1])
    return _compare(latest, oldest)


def _compare(latest: SupplySample, oldest: SupplySample) -> EvaluationResult:
    if not latest.is_active:
        logger.debug("Latest sample is inactive (zero threshold or null token)")
        return NOT_TRIGGERED

    # Guarded subtraction: no increase means no anomaly
    if latest.observed_supply <= oldest.observed_supply:
        return NOT_TRIGGERED

    delta = latest.observed_supply - oldest.observed_supply
    if delta <= latest.threshold:
        return NOT_TRIGGERED

    payload = AlertPayload(latest.token, oldest.observed_supply, latest.observed_supply)
    return EvaluationResult(True, payload.encode())
