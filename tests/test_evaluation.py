# ABOUTME: Tests the confusion matrix and classification metrics against self-reports.
# ABOUTME: Checks Low-class precision/recall/F1, specificity, correlation, and insufficient data.

import numpy as np
import pytest

from src.motivation.evaluation import (
    binary_counts,
    build_confusion_matrix,
    evaluate,
    pearson_correlation,
)
from src.motivation.schemas import (
    Attempt,
    EvaluationMetrics,
    InsufficientData,
    MotivationState,
    Observation,
    STATE_ORDER,
    SurveyPoint,
)
from src.motivation.sequence import expand_attempts

LOW, MEDIUM, HIGH = MotivationState.LOW, MotivationState.MEDIUM, MotivationState.HIGH


def _attempt(answers, surveys=(), attempt_id="a1"):
    return Attempt(
        attempt_id=attempt_id,
        learner_id="u1",
        assessment_id="quiz",
        observations=tuple(
            Observation(position=i + 1, correct=c, time_on_task=t, hints_requested=h)
            for i, (c, t, h) in enumerate(answers)
        ),
        surveys=tuple(SurveyPoint(i, level) for i, level in surveys),
    )


def test_perfect_low_detection_scenario():
    attempt = _attempt(
        [(True, 6, 0), (False, 16, 1), (True, 5, 0)],
        surveys=[(0, HIGH), (1, LOW)],
    )

    metrics = evaluate([attempt], rng=np.random.default_rng(0))

    assert isinstance(metrics, EvaluationMetrics)
    matrix = metrics.confusion_matrix
    assert matrix.cell(HIGH, HIGH) == 1
    assert matrix.cell(LOW, LOW) == 1
    assert matrix.total == 2
    assert metrics.accuracy == 1.0
    assert metrics.precision == 1.0
    assert metrics.recall == 1.0
    assert metrics.f1 == 1.0
    assert metrics.correlation == pytest.approx(1.0)


def test_seven_second_answer_is_medium_in_the_scenario():
    attempt = _attempt(
        [(True, 7, 0), (False, 16, 1), (True, 5, 0)],
        surveys=[(0, HIGH), (1, LOW)],
    )

    metrics = evaluate([attempt], rng=np.random.default_rng(0))

    assert [row.inferred_state for row in expand_attempts([attempt])] == [MEDIUM, LOW, HIGH]
    assert metrics.confusion_matrix.cell(HIGH, MEDIUM) == 1
    assert metrics.accuracy == 0.5
    # Low detection is unaffected by the High/Medium confusion.
    assert metrics.f1 == 1.0


def test_metrics_from_mixed_outcomes():
    attempt = _attempt(
        [(False, 16, 0), (False, 16, 0), (True, 5, 0), (True, 5, 0), (True, 10, 0)],
        surveys=[(0, LOW), (1, MEDIUM), (2, LOW), (3, HIGH), (4, MEDIUM)],
    )

    metrics = evaluate([attempt], rng=np.random.default_rng(1))

    assert binary_counts(metrics.confusion_matrix, LOW) == (1, 1, 1, 2)
    assert metrics.accuracy == pytest.approx(0.6)
    assert metrics.precision == pytest.approx(0.5)
    assert metrics.recall == pytest.approx(0.5)
    assert metrics.f1 == pytest.approx(0.5)
    assert metrics.specificity == pytest.approx(2 / 3)
    assert metrics.false_alarm_rate == pytest.approx(100 / 3)
    expected_r = np.corrcoef([1, 1, 3, 3, 2], [1, 2, 1, 3, 2])[0, 1]
    assert metrics.correlation == pytest.approx(expected_r)


def test_confusion_matrix_cells_sum_to_labeled_count():
    attempts = [
        _attempt([(True, 5, 0), (False, 30, 2), (True, 12, 0)], surveys=[(0, HIGH), (2, LOW)], attempt_id="a"),
        _attempt([(False, 3, 0), (True, 22, 0)], surveys=[(1, MEDIUM)], attempt_id="b"),
        _attempt([(True, 1, 0)], attempt_id="c"),
    ]

    matrix = build_confusion_matrix(expand_attempts(attempts))

    assert matrix.total == 3
    assert set(matrix.counts) == set(STATE_ORDER)
    assert all(set(row) == set(STATE_ORDER) for row in matrix.counts.values())


def test_empty_collection_is_insufficient_data():
    result = evaluate([])
    assert isinstance(result, InsufficientData)
    assert result.reason


def test_attempts_without_surveys_are_insufficient_data():
    result = evaluate([_attempt([(True, 5, 0), (False, 20, 1)])])
    assert isinstance(result, InsufficientData)


def test_no_low_states_default_ratios_to_zero():
    attempt = _attempt([(True, 5, 0), (True, 10, 0)], surveys=[(0, HIGH), (1, MEDIUM)])

    metrics = evaluate([attempt], rng=np.random.default_rng(2))

    assert metrics.precision == 0.0
    assert metrics.recall == 0.0
    assert metrics.f1 == 0.0
    assert metrics.specificity == 1.0
    assert metrics.false_alarm_rate == 0.0


def test_zero_variance_series_has_zero_correlation():
    assert pearson_correlation([3, 3, 3], [1, 2, 3]) == 0.0
    assert pearson_correlation([1, 2, 3], [2, 2, 2]) == 0.0
    assert pearson_correlation([], []) == 0.0


def test_seeded_rng_makes_derived_scores_reproducible():
    attempt = _attempt([(False, 16, 1), (True, 5, 0)], surveys=[(0, LOW), (1, HIGH)])

    first = evaluate([attempt], rng=np.random.default_rng(42))
    second = evaluate([attempt], rng=np.random.default_rng(42))

    assert first == second
