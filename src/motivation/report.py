# ABOUTME: Assembles every engine stage into one report consumed by presentation layers.
# ABOUTME: Serializes the report into plain JSON-ready dictionaries.

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import numpy as np

from .config import DEFAULT_CONFIG, EngineConfig, config_to_dict
from .drift import analyze_attempts, drift_frequencies, drift_percentages
from .evaluation import build_confusion_matrix, evaluate_labeled
from .hypotheses import HypothesisVerdict, evaluate_hypotheses
from .insights import feature_statistics, representative_timeline, state_distribution, task_trend
from .schemas import (
    Attempt,
    AttemptDrift,
    BaselineProfile,
    ConfusionMatrix,
    EvaluationMetrics,
    InsufficientData,
    TransitionMatrix,
)
from .sequence import expand_attempts
from .synthesis import BASELINE_PROFILES, CALIBRATION_CURVE, FEATURE_IMPORTANCE, baseline_table, make_rng
from .transitions import estimate_transitions


@dataclass(frozen=True)
class Report:
    confusion_matrix: ConfusionMatrix
    transition_matrix: TransitionMatrix
    drift_results: Tuple[AttemptDrift, ...]
    drift_frequencies: Dict[str, int]
    drift_percentages: Dict[str, float]
    metrics: Union[EvaluationMetrics, InsufficientData]
    baselines: Tuple[BaselineProfile, ...]
    hypotheses: Tuple[HypothesisVerdict, ...]
    calibration_curve: Tuple[Dict[str, float], ...]
    feature_importance: Tuple[Tuple[str, float], ...]
    feature_statistics: Optional[Dict[str, float]]
    state_distribution: Dict[str, float]
    task_trend: Tuple[Dict[str, Any], ...]
    timeline: Optional[Dict[str, Any]]
    attempt_count: int
    observation_count: int

    @property
    def has_metrics(self) -> bool:
        return isinstance(self.metrics, EvaluationMetrics)


def build_report(
    attempts: Iterable[Attempt],
    config: EngineConfig = DEFAULT_CONFIG,
    rng: Optional[np.random.Generator] = None,
) -> Report:
    """
    Recompute every stage from one snapshot of attempts.

    Stages run independently over the same expanded sequence; only the
    derived scores inside ``metrics`` depend on ``rng`` (seeded from
    ``config.seed`` when not given).
    """

    snapshot = tuple(attempts)
    rng = rng if rng is not None else make_rng(config.seed)

    labeled = expand_attempts(snapshot, config.classifier)
    metrics = evaluate_labeled(labeled, rng=rng)
    drift_results = tuple(analyze_attempts(snapshot, config.drift, config.classifier))
    trend = task_trend(snapshot, config.classifier)

    return Report(
        confusion_matrix=build_confusion_matrix(labeled),
        transition_matrix=estimate_transitions(snapshot, config.classifier),
        drift_results=drift_results,
        drift_frequencies=drift_frequencies(drift_results),
        drift_percentages=drift_percentages(drift_results),
        metrics=metrics,
        baselines=BASELINE_PROFILES,
        hypotheses=tuple(evaluate_hypotheses(metrics, BASELINE_PROFILES)),
        calibration_curve=CALIBRATION_CURVE,
        feature_importance=FEATURE_IMPORTANCE,
        feature_statistics=feature_statistics(labeled),
        state_distribution=state_distribution(snapshot, config.classifier),
        task_trend=tuple(trend.to_dict(orient="records")),
        timeline=representative_timeline(snapshot, config.timeline_min_observations, config.classifier),
        attempt_count=len(snapshot),
        observation_count=len(labeled),
    )


def report_to_dict(report: Report, config: Optional[EngineConfig] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "attempt_count": report.attempt_count,
        "observation_count": report.observation_count,
        "confusion_matrix": report.confusion_matrix.as_dict(),
        "transition_matrix": report.transition_matrix.as_dict(),
        "drift": {
            "per_attempt": [
                {
                    "attempt_id": item.attempt_id,
                    "learner_id": item.learner_id,
                    "label": item.result.label.value,
                    "insight": item.result.insight,
                    "drift": item.result.drift,
                }
                for item in report.drift_results
            ],
            "frequencies": dict(report.drift_frequencies),
            "percentages": dict(report.drift_percentages),
        },
        "metrics": _metrics_to_dict(report.metrics),
        "baselines": baseline_table(),
        "hypotheses": [
            {"name": h.name, "description": h.description, "status": h.status.value, "detail": h.detail}
            for h in report.hypotheses
        ],
        "calibration_curve": [dict(point) for point in report.calibration_curve],
        "feature_importance": [{"name": name, "importance": value} for name, value in report.feature_importance],
        "feature_statistics": report.feature_statistics,
        "state_distribution": dict(report.state_distribution),
        "task_trend": [_plain(row) for row in report.task_trend],
        "timeline": report.timeline,
    }
    if config is not None:
        payload["config"] = config_to_dict(config)
    return payload


def _metrics_to_dict(metrics: Union[EvaluationMetrics, InsufficientData]) -> Dict[str, Any]:
    if isinstance(metrics, InsufficientData):
        return {"status": "insufficient_data", "reason": metrics.reason}
    return {
        "status": "ok",
        "support": metrics.support,
        "accuracy": metrics.accuracy,
        "precision": metrics.precision,
        "recall": metrics.recall,
        "f1": metrics.f1,
        "specificity": metrics.specificity,
        "false_alarm_rate": metrics.false_alarm_rate,
        "correlation": metrics.correlation,
        **asdict(metrics.derived),
    }


def _plain(row: Dict[str, Any]) -> Dict[str, Any]:
    # numpy scalars from DataFrame records are not JSON serializable.
    return {key: value.item() if isinstance(value, np.generic) else value for key, value in row.items()}


def summarize_metrics(report: Report) -> List[Tuple[str, str]]:
    """Label/value pairs for the headline metrics, or a single pending row."""

    if not report.has_metrics:
        return [("Status", "Awaiting self-reported motivation data")]
    m = report.metrics
    return [
        ("Discrimination (Low)", f"{m.discrimination:.3f}"),
        ("F1 (Low)", f"{m.f1:.3f}"),
        ("Accuracy", f"{m.accuracy * 100:.1f}%"),
        ("Precision (Low)", f"{m.precision:.2f}"),
        ("Recall (Low)", f"{m.recall:.2f}"),
        ("False Alarm Rate", f"{m.false_alarm_rate:.1f}%"),
        ("Detection Delay (tasks)", f"~{m.detection_delay:.1f}"),
        ("Calibration", f"{m.calibration:.3f}"),
        ("LOSO Discrimination", f"{m.generalization_score:.3f}"),
        ("Validity r", f"{m.correlation:.3f}"),
    ]
