# ABOUTME: Makes the motivation inference and evaluation engine importable as one package.
# ABOUTME: Re-exports schema types and the public engine operations for convenience.

from .schemas import (
    Attempt,
    DriftLabel,
    DriftResult,
    EvaluationMetrics,
    InsufficientData,
    MalformedObservationError,
    MotivationState,
    Observation,
    SurveyPoint,
)
from .classifier import infer_state
from .config import EngineConfig, load_engine_config
from .drift import analyze_drift
from .evaluation import evaluate
from .report import Report, build_report
from .repository import InMemoryAttemptStore, JsonAttemptStore
from .transitions import estimate_transitions

__all__ = [
    "Attempt",
    "DriftLabel",
    "DriftResult",
    "EngineConfig",
    "EvaluationMetrics",
    "InMemoryAttemptStore",
    "InsufficientData",
    "JsonAttemptStore",
    "MalformedObservationError",
    "MotivationState",
    "Observation",
    "Report",
    "SurveyPoint",
    "analyze_drift",
    "build_report",
    "estimate_transitions",
    "evaluate",
    "infer_state",
    "load_engine_config",
]
