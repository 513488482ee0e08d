# ABOUTME: Maps one answered question's behavioral features to a hidden motivation state.
# ABOUTME: Implements the ordered rule set and rejects malformed telemetry.

from __future__ import annotations

import math
from numbers import Integral, Real

from .config import ClassifierThresholds
from .schemas import MalformedObservationError, MotivationState, Observation

DEFAULT_THRESHOLDS = ClassifierThresholds()


def infer_state(observation: Observation, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS) -> MotivationState:
    """
    Classify a single observation; the first matching rule wins.

    1. incorrect and (slow or hinted) -> Low
    2. very slow -> Low
    3. correct, fast and unassisted -> High
    4. anything else -> Medium

    Comparisons are strict, so answers exactly on a cut-off fall through.
    """

    correct, time_on_task, hints = validate_features(observation)

    if not correct and (time_on_task > thresholds.incorrect_slow_seconds or hints > 0):
        return MotivationState.LOW
    if time_on_task > thresholds.disengaged_seconds:
        return MotivationState.LOW
    if correct and time_on_task < thresholds.fluent_seconds and hints == 0:
        return MotivationState.HIGH
    return MotivationState.MEDIUM


def validate_features(observation: Observation):
    """Return (correct, time_on_task, hints) or raise MalformedObservationError."""

    correct = getattr(observation, "correct", None)
    time_on_task = getattr(observation, "time_on_task", None)
    hints = getattr(observation, "hints_requested", None)

    # bool is an int subclass; 0/1 flags from raw logs are accepted as well.
    if isinstance(correct, bool):
        pass
    elif isinstance(correct, Integral) and correct in (0, 1):
        correct = bool(correct)
    else:
        raise MalformedObservationError(f"Correctness must be boolean, got {correct!r}.")

    if isinstance(time_on_task, bool) or not isinstance(time_on_task, Real) or math.isnan(float(time_on_task)):
        raise MalformedObservationError(f"Time on task must be numeric, got {time_on_task!r}.")

    if isinstance(hints, bool) or not isinstance(hints, Integral):
        raise MalformedObservationError(f"Hint count must be an integer, got {hints!r}.")
    if hints < 0:
        raise MalformedObservationError(f"Hint count must be non-negative, got {hints}.")

    return correct, float(time_on_task), int(hints)


def state_to_number(state: MotivationState) -> int:
    """Numeric encoding used for averaging and correlation (Low=1, Medium=2, High=3)."""
    return MotivationState.parse(state).numeric
