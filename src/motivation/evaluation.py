# ABOUTME: Scores inferred motivation states against self-reported ground truth.
# ABOUTME: Builds the confusion matrix and derives accuracy, Low-class P/R/F1, specificity, and r.

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np
from sklearn.metrics import confusion_matrix as sk_confusion_matrix

from .classifier import DEFAULT_THRESHOLDS
from .config import ClassifierThresholds
from .schemas import (
    Attempt,
    ConfusionMatrix,
    EvaluationMetrics,
    InsufficientData,
    LabeledObservation,
    MotivationState,
    STATE_ORDER,
)
from .sequence import expand_attempts, with_ground_truth
from .synthesis import synthesize_scores

POSITIVE_STATE = MotivationState.LOW
NO_GROUND_TRUTH = "No observations carry a self-reported motivation level."


def evaluate(
    attempts: Iterable[Attempt],
    rng: Optional[np.random.Generator] = None,
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> Union[EvaluationMetrics, InsufficientData]:
    """Expand attempts and evaluate every observation that has ground truth."""

    return evaluate_labeled(expand_attempts(attempts, thresholds), rng=rng)


def evaluate_labeled(
    labeled: Sequence[LabeledObservation],
    rng: Optional[np.random.Generator] = None,
) -> Union[EvaluationMetrics, InsufficientData]:
    relevant = with_ground_truth(labeled)
    if len(relevant) < 1:
        return InsufficientData(reason=NO_GROUND_TRUTH)

    matrix = build_confusion_matrix(relevant)
    total = matrix.total
    accuracy = _ratio(matrix.trace, total)

    tp, fp, fn, tn = binary_counts(matrix, POSITIVE_STATE)
    precision = _ratio(tp, tp + fp)
    recall = _ratio(tp, tp + fn)
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) > 0 else 0.0
    specificity = _ratio(tn, tn + fp)

    inferred = [row.inferred_state.numeric for row in relevant]
    truth = [row.ground_truth.numeric for row in relevant]

    return EvaluationMetrics(
        confusion_matrix=matrix,
        support=total,
        accuracy=accuracy,
        precision=precision,
        recall=recall,
        f1=f1,
        specificity=specificity,
        false_alarm_rate=(1.0 - specificity) * 100.0,
        correlation=pearson_correlation(inferred, truth),
        derived=synthesize_scores(f1, rng),
    )


def build_confusion_matrix(labeled: Sequence[LabeledObservation]) -> ConfusionMatrix:
    """Rows are self-reported states, columns are inferred states; rows without ground truth are skipped."""

    relevant = with_ground_truth(labeled)
    if not relevant:
        return ConfusionMatrix.empty()

    labels = [state.value for state in STATE_ORDER]
    counts = sk_confusion_matrix(
        [row.ground_truth.value for row in relevant],
        [row.inferred_state.value for row in relevant],
        labels=labels,
    )
    return ConfusionMatrix(
        counts={
            true_state: {pred: int(counts[i, j]) for j, pred in enumerate(STATE_ORDER)}
            for i, true_state in enumerate(STATE_ORDER)
        }
    )


def binary_counts(matrix: ConfusionMatrix, positive: MotivationState) -> Tuple[int, int, int, int]:
    """Collapse the 3x3 matrix into (TP, FP, FN, TN) for one positive state."""

    negatives = [state for state in STATE_ORDER if state != positive]
    tp = matrix.cell(positive, positive)
    fp = sum(matrix.cell(state, positive) for state in negatives)
    fn = sum(matrix.cell(positive, state) for state in negatives)
    tn = matrix.total - tp - fp - fn
    return tp, fp, fn, tn


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson r; 0.0 when either series is empty or has zero variance."""

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    if xs.size == 0 or xs.size != ys.size:
        return 0.0
    dx = xs - xs.mean()
    dy = ys - ys.mean()
    denom = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))
    if denom == 0:
        return 0.0
    return float(np.sum(dx * dy) / denom)


def _ratio(numerator: float, denominator: float) -> float:
    return float(numerator) / denominator if denominator > 0 else 0.0
