# ABOUTME: Defines canonical value objects shared by every motivation engine stage.
# ABOUTME: Centralizes observation, attempt, matrix, drift, and metric schema definitions.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


class MalformedObservationError(ValueError):
    """Raised when an observation is missing or carries invalid behavioral features."""


class MotivationState(str, Enum):
    """Hidden motivational state, ordered Low < Medium < High."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def numeric(self) -> int:
        return _STATE_SCORES[self]

    @property
    def label(self) -> str:
        return _STATE_LABELS[self]

    @classmethod
    def parse(cls, raw: object) -> "MotivationState":
        """Accept short names ("Low") and the platform survey labels ("Low Motivation")."""
        if isinstance(raw, MotivationState):
            return raw
        if isinstance(raw, str):
            key = raw.strip().lower()
            for state, aliases in _STATE_ALIASES.items():
                if key in aliases:
                    return state
        raise ValueError(f"Unsupported motivation state '{raw}'.")


_STATE_SCORES = {MotivationState.LOW: 1, MotivationState.MEDIUM: 2, MotivationState.HIGH: 3}
_STATE_LABELS = {
    MotivationState.LOW: "Low Motivation",
    MotivationState.MEDIUM: "Moderately Motivated",
    MotivationState.HIGH: "Highly Motivated",
}
_STATE_ALIASES = {
    MotivationState.LOW: {"low", "low motivation"},
    MotivationState.MEDIUM: {"medium", "moderately motivated", "moderate"},
    MotivationState.HIGH: {"high", "highly motivated"},
}

# Row/column order used by every 3x3 matrix.
STATE_ORDER: Tuple[MotivationState, ...] = (MotivationState.LOW, MotivationState.MEDIUM, MotivationState.HIGH)


@dataclass(frozen=True)
class Observation:
    """One answered question with the behavioral features used for inference."""

    position: int
    correct: bool
    time_on_task: float
    hints_requested: int
    question_id: Optional[str] = None
    pause_time: Optional[float] = None


@dataclass(frozen=True)
class SurveyPoint:
    """Self-reported motivation pinned to a 0-based observation index."""

    question_index: int
    level: MotivationState


@dataclass(frozen=True)
class Attempt:
    """A learner's closed pass through one assessment."""

    attempt_id: str
    learner_id: str
    assessment_id: str
    observations: Tuple[Observation, ...] = ()
    surveys: Tuple[SurveyPoint, ...] = ()
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def ground_truth_at(self, index: int) -> Optional[MotivationState]:
        # Direct index match; the first survey recorded for an index wins.
        for survey in self.surveys:
            if survey.question_index == index:
                return survey.level
        return None


@dataclass(frozen=True)
class LabeledObservation:
    """Observation joined with its inferred state and optional ground truth."""

    attempt_id: str
    position: int
    observation: Observation
    inferred_state: MotivationState
    ground_truth: Optional[MotivationState] = None


@dataclass(frozen=True)
class InsufficientData:
    """Result variant returned when there is not enough data to compute a stage."""

    reason: str


@dataclass(frozen=True)
class ConfusionMatrix:
    """Counts keyed by (true state, predicted state)."""

    counts: Mapping[MotivationState, Mapping[MotivationState, int]]

    @classmethod
    def empty(cls) -> "ConfusionMatrix":
        return cls(counts={true: {pred: 0 for pred in STATE_ORDER} for true in STATE_ORDER})

    def cell(self, true_state: MotivationState, predicted: MotivationState) -> int:
        return self.counts[true_state][predicted]

    @property
    def total(self) -> int:
        return sum(sum(row.values()) for row in self.counts.values())

    @property
    def trace(self) -> int:
        return sum(self.counts[state][state] for state in STATE_ORDER)

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        return {t.value: {p.value: int(self.counts[t][p]) for p in STATE_ORDER} for t in STATE_ORDER}


@dataclass(frozen=True)
class TransitionMatrix:
    """Empirical Markov transition probabilities between consecutive inferred states."""

    probabilities: Mapping[MotivationState, Mapping[MotivationState, float]]
    counts: Mapping[MotivationState, Mapping[MotivationState, int]]

    def probability(self, from_state: MotivationState, to_state: MotivationState) -> float:
        return self.probabilities[from_state][to_state]

    def row_total(self, from_state: MotivationState) -> int:
        return sum(self.counts[from_state].values())

    @property
    def total_transitions(self) -> int:
        return sum(self.row_total(state) for state in STATE_ORDER)

    @property
    def is_empty(self) -> bool:
        return self.total_transitions == 0

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {f.value: {t.value: float(self.probabilities[f][t]) for t in STATE_ORDER} for f in STATE_ORDER}


class DriftLabel(str, Enum):
    SIGNIFICANT_DRIFT = "Significant Drift"
    MINOR_DRIFT = "Minor Drift"
    STABLE = "Stable Motivation"
    IMPROVED = "Improved Engagement"
    NOT_ENOUGH_DATA = "Not Enough Data"


@dataclass(frozen=True)
class DriftResult:
    label: DriftLabel
    insight: str
    drift: Optional[float] = None
    first_half_mean: Optional[float] = None
    second_half_mean: Optional[float] = None


@dataclass(frozen=True)
class AttemptDrift:
    attempt_id: str
    learner_id: str
    result: DriftResult


@dataclass(frozen=True)
class BaselineProfile:
    """Static reference metrics for a comparison model."""

    name: str
    discrimination: float
    f1: float
    accuracy: float
    calibration: float
    false_alarm_rate: float
    detection_delay: Optional[float] = None


@dataclass(frozen=True)
class DerivedScores:
    """Bounded pseudo-metrics synthesized from the F1 score."""

    discrimination: float
    detection_delay: float
    calibration: float
    generalization_drop: float
    generalization_score: float


@dataclass(frozen=True)
class EvaluationMetrics:
    """Classifier performance against self-reported ground truth."""

    confusion_matrix: ConfusionMatrix
    support: int
    accuracy: float
    precision: float
    recall: float
    f1: float
    specificity: float
    false_alarm_rate: float
    correlation: float
    derived: DerivedScores

    @property
    def discrimination(self) -> float:
        return self.derived.discrimination

    @property
    def detection_delay(self) -> float:
        return self.derived.detection_delay

    @property
    def calibration(self) -> float:
        return self.derived.calibration

    @property
    def generalization_drop(self) -> float:
        return self.derived.generalization_drop

    @property
    def generalization_score(self) -> float:
        return self.derived.generalization_score
