# ABOUTME: Summarizes cohorts of attempts for instructor and learner views.
# ABOUTME: Provides feature statistics, state mix, per-task trends, and a representative timeline.

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pandas as pd

from .classifier import DEFAULT_THRESHOLDS, infer_state
from .config import ClassifierThresholds
from .schemas import Attempt, LabeledObservation, STATE_ORDER
from .sequence import expand_attempts, observations_frame


def feature_statistics(labeled: Sequence[LabeledObservation]) -> Optional[Dict[str, float]]:
    """Aggregate behavioral features over every expanded observation; None when empty."""

    if not labeled:
        return None

    df = observations_frame(labeled)
    return {
        "total_interactions": int(len(df)),
        "avg_time_on_task": float(df["time_on_task"].mean()),
        "correctness_rate": float(df["correct"].mean()),
        "total_hints": int(df["hints_requested"].sum()),
    }


def state_distribution(
    attempts: Sequence[Attempt],
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> Dict[str, float]:
    """Percentage of observations inferred as each state across a cohort of attempts."""

    counts = {state: 0 for state in STATE_ORDER}
    for attempt in attempts:
        for observation in attempt.observations:
            counts[infer_state(observation, thresholds)] += 1

    total = sum(counts.values())
    return {state.value: (counts[state] / total * 100.0 if total else 0.0) for state in STATE_ORDER}


def task_trend(
    attempts: Sequence[Attempt],
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> pd.DataFrame:
    """Mean numeric inferred state per 1-based task position, ordered by position."""

    df = observations_frame(expand_attempts(attempts, thresholds))
    if df.empty:
        return pd.DataFrame(columns=["position", "task", "avg_inferred_value", "count"])

    grouped = (
        df.groupby("position")
        .agg(avg_inferred_value=("inferred_value", "mean"), count=("inferred_value", "count"))
        .reset_index()
        .sort_values("position", kind="mergesort")
    )
    grouped["avg_inferred_value"] = grouped["avg_inferred_value"].astype(float)
    grouped.insert(1, "task", grouped["position"].map(lambda p: f"Q {p}"))
    return grouped.reset_index(drop=True)


def representative_timeline(
    attempts: Sequence[Attempt],
    min_observations: int = 5,
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> Optional[Dict[str, object]]:
    """
    Pick the longest attempt with more than ``min_observations`` answers and
    render it as per-question points; the earliest attempt wins ties.
    """

    candidates = [a for a in attempts if len(a.observations) > min_observations]
    if not candidates:
        return None

    chosen = max(candidates, key=lambda a: len(a.observations))
    points: List[Dict[str, object]] = []
    for index, observation in enumerate(chosen.observations):
        state = infer_state(observation, thresholds)
        points.append(
            {
                "name": f"Q{index + 1}",
                "inferred_state": state.value,
                "motivation_value": state.numeric,
                "correct": bool(observation.correct),
                "time_on_task": float(observation.time_on_task),
                "hints_requested": int(observation.hints_requested),
            }
        )
    return {"attempt_id": chosen.attempt_id, "learner_id": chosen.learner_id, "points": points}
