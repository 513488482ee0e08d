# ABOUTME: Declares the named thresholds and engine configuration dataclasses.
# ABOUTME: Loads optional YAML overrides so runs stay auditable and reproducible.

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from numbers import Integral, Real
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


@dataclass(frozen=True)
class ClassifierThresholds:
    """Time-on-task cut-offs (seconds) used by the rule-based state classifier."""

    # Incorrect answers slower than this (or with any hint) are Low.
    incorrect_slow_seconds: float = 15.0
    # Any answer slower than this is Low.
    disengaged_seconds: float = 20.0
    # Correct, unassisted answers faster than this are High.
    fluent_seconds: float = 7.0

    def __post_init__(self) -> None:
        for f in fields(self):
            _require_number(getattr(self, f.name), f"classifier.{f.name}")


@dataclass(frozen=True)
class DriftThresholds:
    """Boundaries on (second-half mean - first-half mean) of numeric states."""

    significant_drop: float = -0.75
    minor_drop: float = -0.3
    improvement: float = 0.5
    # Both halves need at least one answer.
    min_observations: int = 3

    def __post_init__(self) -> None:
        for name in ("significant_drop", "minor_drop", "improvement"):
            _require_number(getattr(self, name), f"drift.{name}")
        _require_int(self.min_observations, "drift.min_observations", minimum=2)


@dataclass(frozen=True)
class EngineConfig:
    classifier: ClassifierThresholds = field(default_factory=ClassifierThresholds)
    drift: DriftThresholds = field(default_factory=DriftThresholds)
    seed: Optional[int] = None
    timeline_min_observations: int = 5

    def __post_init__(self) -> None:
        if self.seed is not None:
            _require_int(self.seed, "seed", minimum=0)
        _require_int(self.timeline_min_observations, "timeline_min_observations", minimum=0)


def load_engine_config(config_path: Path) -> EngineConfig:
    """Build an EngineConfig from a YAML file; missing sections keep their defaults."""

    with open(config_path) as f:
        cfg = yaml.safe_load(f) or {}
    return engine_config_from_mapping(cfg)


def engine_config_from_mapping(cfg: Mapping[str, Any]) -> EngineConfig:
    """Invalid values raise ValueError, from the dataclass checks above."""

    _reject_unknown(cfg, EngineConfig, "engine")
    classifier_cfg = cfg.get("classifier") or {}
    drift_cfg = cfg.get("drift") or {}
    _reject_unknown(classifier_cfg, ClassifierThresholds, "classifier")
    _reject_unknown(drift_cfg, DriftThresholds, "drift")

    return EngineConfig(
        classifier=ClassifierThresholds(**classifier_cfg),
        drift=DriftThresholds(**drift_cfg),
        seed=cfg.get("seed"),
        timeline_min_observations=cfg.get("timeline_min_observations", 5),
    )


def _reject_unknown(section: Mapping[str, Any], schema: type, name: str) -> None:
    if not isinstance(section, Mapping):
        raise ValueError(f"Config section '{name}' must be a mapping.")
    allowed = {f.name for f in fields(schema)}
    unknown = sorted(set(section) - allowed)
    if unknown:
        raise ValueError(f"Unsupported keys in '{name}' config: {', '.join(unknown)}.")


def _require_number(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, Real) or math.isnan(float(value)):
        raise ValueError(f"Config value '{name}' must be a number, got {value!r}.")


def _require_int(value: Any, name: str, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ValueError(f"Config value '{name}' must be an integer, got {value!r}.")
    if value < minimum:
        raise ValueError(f"Config value '{name}' must be at least {minimum}, got {value}.")


DEFAULT_CONFIG = EngineConfig()


def config_to_dict(config: EngineConfig) -> Dict[str, Any]:
    return {
        "classifier": {f.name: getattr(config.classifier, f.name) for f in fields(ClassifierThresholds)},
        "drift": {f.name: getattr(config.drift, f.name) for f in fields(DriftThresholds)},
        "seed": config.seed,
        "timeline_min_observations": config.timeline_min_observations,
    }
