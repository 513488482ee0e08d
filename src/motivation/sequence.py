# ABOUTME: Expands attempts into a flat, ordered list of labeled observations.
# ABOUTME: Joins self-reported survey points by index and offers a tabular view.

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .classifier import DEFAULT_THRESHOLDS, infer_state
from .config import ClassifierThresholds
from .schemas import Attempt, LabeledObservation

FRAME_COLUMNS = [
    "attempt_id",
    "learner_id",
    "assessment_id",
    "position",
    "correct",
    "time_on_task",
    "hints_requested",
    "inferred_state",
    "inferred_value",
    "ground_truth",
]


def expand_attempts(
    attempts: Iterable[Attempt],
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> List[LabeledObservation]:
    """
    Infer a state for every observation, keeping input attempt order and
    in-attempt answer order. Ground truth comes from the survey pinned to the
    observation's 0-based index only.
    """

    labeled: List[LabeledObservation] = []
    for attempt in attempts:
        labeled.extend(expand_attempt(attempt, thresholds))
    return labeled


def expand_attempt(attempt: Attempt, thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS) -> List[LabeledObservation]:
    return [
        LabeledObservation(
            attempt_id=attempt.attempt_id,
            position=index + 1,
            observation=observation,
            inferred_state=infer_state(observation, thresholds),
            ground_truth=attempt.ground_truth_at(index),
        )
        for index, observation in enumerate(attempt.observations)
    ]


def with_ground_truth(labeled: Sequence[LabeledObservation]) -> List[LabeledObservation]:
    return [row for row in labeled if row.ground_truth is not None]


def observations_frame(
    labeled: Sequence[LabeledObservation],
    attempts: Optional[Sequence[Attempt]] = None,
) -> pd.DataFrame:
    """Tabular view of the expanded sequence; learner/assessment ids are filled when attempts are given."""

    if not labeled:
        return pd.DataFrame(columns=FRAME_COLUMNS)

    owners = {a.attempt_id: (a.learner_id, a.assessment_id) for a in attempts or ()}
    rows = []
    for row in labeled:
        learner_id, assessment_id = owners.get(row.attempt_id, (None, None))
        rows.append(
            {
                "attempt_id": row.attempt_id,
                "learner_id": learner_id,
                "assessment_id": assessment_id,
                "position": row.position,
                "correct": bool(row.observation.correct),
                "time_on_task": float(row.observation.time_on_task),
                "hints_requested": int(row.observation.hints_requested),
                "inferred_state": row.inferred_state.value,
                "inferred_value": row.inferred_state.numeric,
                "ground_truth": None if row.ground_truth is None else row.ground_truth.value,
            }
        )
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    # Missing ids and labels stay None rather than NaN.
    for column in ("learner_id", "assessment_id", "ground_truth"):
        df[column] = df[column].astype(object).where(df[column].notna(), None)
    return df
