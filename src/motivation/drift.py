# ABOUTME: Detects within-session motivation drift by comparing early and late inferred states.
# ABOUTME: Classifies each attempt's trend and aggregates drift patterns into advice and counts.

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Sequence

from .classifier import DEFAULT_THRESHOLDS, infer_state
from .config import ClassifierThresholds, DriftThresholds
from .schemas import Attempt, AttemptDrift, DriftLabel, DriftResult

DEFAULT_DRIFT_THRESHOLDS = DriftThresholds()

DRIFT_INSIGHTS: Dict[DriftLabel, str] = {
    DriftLabel.SIGNIFICANT_DRIFT: "Motivation dropped noticeably. Consider reviewing the second half of the material.",
    DriftLabel.MINOR_DRIFT: "Slight decrease in engagement. Check for difficult questions towards the end.",
    DriftLabel.IMPROVED: "Student became more engaged over time. Positive reinforcement may be effective.",
    DriftLabel.STABLE: "Engagement levels remained consistent throughout the assessment.",
    DriftLabel.NOT_ENOUGH_DATA: "Student has not completed enough of an assessment for analysis.",
}

DRIFT_ADVICE: Dict[str, str] = {
    "significant": (
        "It looks like your motivation sometimes drops during longer tests. To stay engaged, try breaking up "
        "your study sessions with short breaks, and remind yourself of your learning goals before you start."
    ),
    "minor": (
        "We've noticed a slight dip in motivation in some sessions. Remember to use the 'Pomodoro Technique', "
        "it can be a great way to maintain focus and energy."
    ),
    "consistent": (
        "Your motivation has been very consistent. This is a key factor in successful learning, so fantastic "
        "job on staying focused!"
    ),
}


def analyze_drift(
    attempt: Attempt,
    thresholds: DriftThresholds = DEFAULT_DRIFT_THRESHOLDS,
    classifier: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> DriftResult:
    """
    Compare mean numeric state of the first ceil(n/2) answers with the rest.

    drift = second_half_mean - first_half_mean
    """

    observations = attempt.observations
    if len(observations) < thresholds.min_observations:
        return _result(DriftLabel.NOT_ENOUGH_DATA)

    values = [infer_state(observation, classifier).numeric for observation in observations]
    split = math.ceil(len(values) / 2)
    first_mean = sum(values[:split]) / split
    second_mean = sum(values[split:]) / (len(values) - split)
    drift = second_mean - first_mean

    return _result(classify_drift(drift, thresholds), drift, first_mean, second_mean)


def classify_drift(drift: float, thresholds: DriftThresholds = DEFAULT_DRIFT_THRESHOLDS) -> DriftLabel:
    if drift < thresholds.significant_drop:
        return DriftLabel.SIGNIFICANT_DRIFT
    if drift < thresholds.minor_drop:
        return DriftLabel.MINOR_DRIFT
    if drift > thresholds.improvement:
        return DriftLabel.IMPROVED
    return DriftLabel.STABLE


def analyze_attempts(
    attempts: Iterable[Attempt],
    thresholds: DriftThresholds = DEFAULT_DRIFT_THRESHOLDS,
    classifier: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> List[AttemptDrift]:
    return [
        AttemptDrift(
            attempt_id=attempt.attempt_id,
            learner_id=attempt.learner_id,
            result=analyze_drift(attempt, thresholds, classifier),
        )
        for attempt in attempts
    ]


def drift_frequencies(results: Sequence[AttemptDrift]) -> Dict[str, int]:
    """Counts per drift label; every label is present even when zero."""

    counts = {label.value: 0 for label in DriftLabel}
    for item in results:
        counts[item.result.label.value] += 1
    return counts


def drift_percentages(results: Sequence[AttemptDrift]) -> Dict[str, float]:
    counts = drift_frequencies(results)
    total = len(results)
    return {label: (count / total * 100.0 if total else 0.0) for label, count in counts.items()}


def drift_advice(results: Sequence[AttemptDrift]) -> Optional[str]:
    """Learner-facing advice driven by the worst drift seen across their attempts."""

    if not results:
        return None
    labels = {item.result.label for item in results}
    if DriftLabel.SIGNIFICANT_DRIFT in labels:
        return DRIFT_ADVICE["significant"]
    if DriftLabel.MINOR_DRIFT in labels:
        return DRIFT_ADVICE["minor"]
    return DRIFT_ADVICE["consistent"]


def _result(
    label: DriftLabel,
    drift: Optional[float] = None,
    first_mean: Optional[float] = None,
    second_mean: Optional[float] = None,
) -> DriftResult:
    return DriftResult(
        label=label,
        insight=DRIFT_INSIGHTS[label],
        drift=drift,
        first_half_mean=first_mean,
        second_half_mean=second_mean,
    )
