# ABOUTME: Supplies immutable attempt snapshots to the engine through a small store interface.
# ABOUTME: Parses platform attempt records (camelCase or snake_case) from JSON files.

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

import pandas as pd

from .classifier import validate_features
from .schemas import Attempt, MalformedObservationError, MotivationState, Observation, SurveyPoint


class AttemptStore(Protocol):
    def snapshot(self) -> Tuple[Attempt, ...]:
        ...


class InMemoryAttemptStore:
    """Append-only attempt collection; callers always receive a tuple snapshot."""

    def __init__(self, attempts: Iterable[Attempt] = ()) -> None:
        self._attempts: List[Attempt] = list(attempts)

    def add(self, attempt: Attempt) -> None:
        self._attempts.append(attempt)

    def snapshot(self) -> Tuple[Attempt, ...]:
        return tuple(self._attempts)

    def __len__(self) -> int:
        return len(self._attempts)


class JsonAttemptStore:
    """Reads a JSON array (or {"attempts": [...]}) of attempt records on every snapshot."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def snapshot(self) -> Tuple[Attempt, ...]:
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if isinstance(payload, Mapping):
            payload = payload.get("attempts", [])
        if not isinstance(payload, list):
            raise ValueError(f"Expected a list of attempts in {self.path}.")
        return tuple(parse_attempt(record) for record in payload)


def parse_attempt(record: Mapping[str, Any]) -> Attempt:
    """Build an Attempt from a platform record; malformed answers raise MalformedObservationError."""

    if not isinstance(record, Mapping):
        raise ValueError(f"Attempt record must be a mapping, got {record!r}.")

    attempt_id = _pick(record, "id", "attempt_id")
    if attempt_id is None:
        raise ValueError("Attempt record is missing 'id'.")

    answers = _pick(record, "answers", "observations") or []
    surveys = _pick(record, "motivationSurveys", "motivation_surveys", "surveys") or []
    if not isinstance(answers, (list, tuple)) or not isinstance(surveys, (list, tuple)):
        raise ValueError(f"Attempt {attempt_id} must list its answers and surveys.")

    observations = tuple(_parse_answer(answer, index) for index, answer in enumerate(answers))
    survey_points = tuple(_parse_survey(survey) for survey in surveys)

    return Attempt(
        attempt_id=str(attempt_id),
        learner_id=str(_pick(record, "studentId", "learner_id", "student_id") or ""),
        assessment_id=str(_pick(record, "assessmentId", "assessment_id") or ""),
        observations=observations,
        surveys=survey_points,
        started_at=_parse_timestamp(_pick(record, "startTime", "started_at")),
        finished_at=_parse_timestamp(_pick(record, "endTime", "finished_at")),
    )


def attempt_to_record(attempt: Attempt) -> Dict[str, Any]:
    return {
        "id": attempt.attempt_id,
        "studentId": attempt.learner_id,
        "assessmentId": attempt.assessment_id,
        "startTime": attempt.started_at.isoformat() if attempt.started_at else None,
        "endTime": attempt.finished_at.isoformat() if attempt.finished_at else None,
        "answers": [
            {
                "questionId": o.question_id,
                "isCorrect": bool(o.correct),
                "timeOnTask": o.time_on_task,
                "hintsRequested": o.hints_requested,
                "pauseTime": o.pause_time,
            }
            for o in attempt.observations
        ],
        "motivationSurveys": [
            {"questionIndex": s.question_index, "level": s.level.label} for s in attempt.surveys
        ],
    }


def _parse_answer(answer: Mapping[str, Any], index: int) -> Observation:
    if not isinstance(answer, Mapping):
        raise MalformedObservationError(f"Answer {index} is not a mapping.")

    missing = [
        name
        for name, value in (
            ("isCorrect", _pick(answer, "isCorrect", "correct")),
            ("timeOnTask", _pick(answer, "timeOnTask", "time_on_task")),
            ("hintsRequested", _pick(answer, "hintsRequested", "hints_requested")),
        )
        if value is None
    ]
    if missing:
        raise MalformedObservationError(f"Answer {index} is missing {', '.join(missing)}.")

    hints = _pick(answer, "hintsRequested", "hints_requested")
    if isinstance(hints, float) and hints.is_integer():
        hints = int(hints)

    question_id = _pick(answer, "questionId", "question_id")
    observation = Observation(
        position=index + 1,
        correct=_pick(answer, "isCorrect", "correct"),
        time_on_task=_pick(answer, "timeOnTask", "time_on_task"),
        hints_requested=hints,
        question_id=None if question_id is None else str(question_id),
        pause_time=_pick(answer, "pauseTime", "pause_time"),
    )
    try:
        validate_features(observation)
    except MalformedObservationError as exc:
        raise MalformedObservationError(f"Answer {index}: {exc}") from exc
    return observation


def _parse_survey(survey: Mapping[str, Any]) -> SurveyPoint:
    if not isinstance(survey, Mapping):
        raise ValueError(f"Survey point must be a mapping, got {survey!r}.")
    index = _pick(survey, "questionIndex", "question_index")
    level = _pick(survey, "level")
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise ValueError(f"Survey point has an invalid question index: {index!r}.")
    return SurveyPoint(question_index=index, level=MotivationState.parse(level))


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _pick(mapping: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in mapping and mapping[key] is not None:
            return mapping[key]
    return None
