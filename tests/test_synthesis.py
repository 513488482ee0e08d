# ABOUTME: Tests the bounded proxy score synthesizer and static baseline tables.
# ABOUTME: Uses seeded generators so the noisy scores are reproducible.

import numpy as np
import pytest

from src.motivation.synthesis import (
    BASELINE_PROFILES,
    CALIBRATION_CURVE,
    baseline_by_name,
    baseline_table,
    make_rng,
    synthesize_scores,
)


@pytest.mark.parametrize("f1", [0.0, 0.25, 0.5, 0.8, 1.0])
@pytest.mark.parametrize("seed", [0, 1, 7, 42])
def test_scores_stay_within_noise_bounds(f1, seed):
    scores = synthesize_scores(f1, np.random.default_rng(seed))

    center = 0.73 + 0.15 * f1
    assert center - 0.025 <= scores.discrimination <= center + 0.025
    assert scores.detection_delay >= 0.5
    assert scores.detection_delay <= max(0.5, 2.8 - 1.5 * f1 + 0.2)
    assert scores.calibration >= 0.05
    assert scores.calibration <= max(0.05, 0.18 - 0.1 * f1 + 0.015)
    assert 0.04 <= scores.generalization_drop < 0.06
    assert scores.generalization_score == pytest.approx(
        scores.discrimination * (1 - scores.generalization_drop)
    )


def test_same_seed_gives_same_scores():
    assert synthesize_scores(0.6, make_rng(3)) == synthesize_scores(0.6, make_rng(3))


def test_perfect_f1_dominates_zero_f1():
    best = synthesize_scores(1.0, make_rng(5))
    worst = synthesize_scores(0.0, make_rng(5))

    assert best.discrimination > worst.discrimination
    assert best.detection_delay < worst.detection_delay
    assert best.calibration < worst.calibration


def test_baseline_lookup_and_table():
    assert baseline_by_name("Light LSTM").detection_delay == 3.5
    with pytest.raises(ValueError):
        baseline_by_name("SVM")

    table = baseline_table()
    assert [row["model"] for row in table] == [p.name for p in BASELINE_PROFILES]
    assert table[0]["false_alarm_rate"] == 25.0


def test_calibration_curve_has_perfect_reference():
    for point in CALIBRATION_CURVE:
        assert point["Perfect"] == point["predicted"]
