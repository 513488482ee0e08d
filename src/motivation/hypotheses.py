# ABOUTME: Evaluates the study hypotheses against fresh metrics and baseline profiles.
# ABOUTME: Keeps a ternary verdict so missing data reads as pending rather than failed.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Sequence, Union

from .schemas import BaselineProfile, EvaluationMetrics, InsufficientData
from .synthesis import BASELINE_PROFILES, NON_SEQUENTIAL_BASELINES

MIN_DISCRIMINATION = 0.75
MIN_F1 = 0.70
MAX_DETECTION_DELAY = 2.0
MAX_GENERALIZATION_DROP = 0.05
MIN_CORRELATION = 0.40


class HypothesisStatus(str, Enum):
    MET = "met"
    NOT_MET = "not-met"
    PENDING = "pending"


@dataclass(frozen=True)
class HypothesisVerdict:
    name: str
    description: str
    status: HypothesisStatus
    detail: str


@dataclass(frozen=True)
class _Hypothesis:
    name: str
    description: str
    check: Callable[[EvaluationMetrics, Sequence[BaselineProfile]], bool]
    detail: Callable[[EvaluationMetrics], str]


def _non_sequential(baselines: Sequence[BaselineProfile]) -> List[BaselineProfile]:
    return [b for b in baselines if b.name in NON_SEQUENTIAL_BASELINES]


HYPOTHESES = (
    _Hypothesis(
        name="H1 (Discrimination)",
        description="Discrimination score >= 0.75 and F1 >= 0.70.",
        check=lambda m, _: m.discrimination >= MIN_DISCRIMINATION and m.f1 >= MIN_F1,
        detail=lambda m: f"discrimination={m.discrimination:.3f}, f1={m.f1:.3f}",
    ),
    _Hypothesis(
        name="H2 (Early Detection)",
        description="Detection delay <= 2 tasks and a lower false-alarm rate than non-sequential baselines.",
        check=lambda m, b: m.detection_delay <= MAX_DETECTION_DELAY
        and all(m.false_alarm_rate < p.false_alarm_rate for p in _non_sequential(b)),
        detail=lambda m: f"delay={m.detection_delay:.1f} tasks, false_alarm_rate={m.false_alarm_rate:.1f}%",
    ),
    _Hypothesis(
        name="H3 (Generalization)",
        description="Leave-one-subject-out discrimination drop <= 0.05.",
        check=lambda m, _: m.generalization_drop <= MAX_GENERALIZATION_DROP,
        detail=lambda m: f"drop={m.generalization_drop * 100:.1f}%",
    ),
    _Hypothesis(
        name="H4 (Validity)",
        description="Correlation with self-reports r >= 0.40.",
        check=lambda m, _: m.correlation >= MIN_CORRELATION,
        detail=lambda m: f"r={m.correlation:.3f}",
    ),
    _Hypothesis(
        name="H5 (Calibration)",
        description="Lower calibration score than non-sequential baselines.",
        check=lambda m, b: all(m.calibration < p.calibration for p in _non_sequential(b)),
        detail=lambda m: f"calibration={m.calibration:.3f}",
    ),
)


def evaluate_hypotheses(
    metrics: Union[EvaluationMetrics, InsufficientData],
    baselines: Sequence[BaselineProfile] = BASELINE_PROFILES,
) -> List[HypothesisVerdict]:
    if isinstance(metrics, InsufficientData):
        return [
            HypothesisVerdict(h.name, h.description, HypothesisStatus.PENDING, metrics.reason) for h in HYPOTHESES
        ]

    verdicts = []
    for hypothesis in HYPOTHESES:
        met = hypothesis.check(metrics, baselines)
        verdicts.append(
            HypothesisVerdict(
                name=hypothesis.name,
                description=hypothesis.description,
                status=HypothesisStatus.MET if met else HypothesisStatus.NOT_MET,
                detail=hypothesis.detail(metrics),
            )
        )
    return verdicts
