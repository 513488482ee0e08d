# ABOUTME: Validates parsing of platform attempt records and the attempt stores.
# ABOUTME: Ensures camelCase JSON loads, malformed answers fail loudly, and snapshots are immutable.

import json
import tempfile
import unittest
from pathlib import Path

from src.motivation.repository import (
    InMemoryAttemptStore,
    JsonAttemptStore,
    attempt_to_record,
    parse_attempt,
)
from src.motivation.schemas import MalformedObservationError, MotivationState

RECORD = {
    "id": "att-1",
    "studentId": "stu-7",
    "assessmentId": "algebra-1",
    "startTime": "2024-03-01T10:00:00Z",
    "endTime": "2024-03-01T10:05:00Z",
    "answers": [
        {"questionId": "q1", "isCorrect": True, "timeOnTask": 5.2, "hintsRequested": 0},
        {"questionId": "q2", "isCorrect": False, "timeOnTask": 17, "hintsRequested": 1.0, "pauseTime": 2.5},
    ],
    "motivationSurveys": [{"questionIndex": 1, "level": "Low Motivation"}],
}


class AttemptRepositoryTest(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def _write(self, name: str, payload) -> Path:
        path = self.root / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_parse_camel_case_record(self) -> None:
        attempt = parse_attempt(RECORD)

        self.assertEqual(attempt.attempt_id, "att-1")
        self.assertEqual(attempt.learner_id, "stu-7")
        self.assertEqual(attempt.assessment_id, "algebra-1")
        self.assertEqual([o.position for o in attempt.observations], [1, 2])
        self.assertEqual(attempt.observations[1].hints_requested, 1)
        self.assertIsInstance(attempt.observations[1].hints_requested, int)
        self.assertEqual(attempt.observations[1].pause_time, 2.5)
        self.assertEqual(attempt.ground_truth_at(1), MotivationState.LOW)
        self.assertEqual((attempt.finished_at - attempt.started_at).total_seconds(), 300)

    def test_parse_snake_case_record(self) -> None:
        attempt = parse_attempt(
            {
                "attempt_id": 12,
                "learner_id": "s",
                "observations": [{"correct": 1, "time_on_task": 3, "hints_requested": 0}],
                "surveys": [{"question_index": 0, "level": "High"}],
            }
        )

        self.assertEqual(attempt.attempt_id, "12")
        self.assertEqual(attempt.ground_truth_at(0), MotivationState.HIGH)
        self.assertIsNone(attempt.started_at)

    def test_missing_answer_field_raises(self) -> None:
        record = dict(RECORD, answers=[{"isCorrect": True, "hintsRequested": 0}])
        with self.assertRaises(MalformedObservationError) as ctx:
            parse_attempt(record)
        self.assertIn("timeOnTask", str(ctx.exception))

    def test_negative_hints_raise(self) -> None:
        record = dict(RECORD, answers=[{"isCorrect": True, "timeOnTask": 4, "hintsRequested": -2}])
        with self.assertRaises(MalformedObservationError):
            parse_attempt(record)

    def test_bad_survey_raises(self) -> None:
        with self.assertRaises(ValueError):
            parse_attempt(dict(RECORD, motivationSurveys=[{"questionIndex": -1, "level": "High"}]))
        with self.assertRaises(ValueError):
            parse_attempt(dict(RECORD, motivationSurveys=[{"questionIndex": 0, "level": "Sleepy"}]))

    def test_non_mapping_record_or_survey_raises(self) -> None:
        with self.assertRaises(ValueError):
            parse_attempt(7)
        with self.assertRaises(ValueError):
            parse_attempt(dict(RECORD, motivationSurveys=[3]))
        with self.assertRaises(ValueError):
            parse_attempt(dict(RECORD, answers=5))

    def test_json_store_rejects_scalar_records(self) -> None:
        with self.assertRaises(ValueError):
            JsonAttemptStore(self._write("scalars.json", [1, 2])).snapshot()

    def test_missing_id_raises(self) -> None:
        record = {key: value for key, value in RECORD.items() if key != "id"}
        with self.assertRaises(ValueError):
            parse_attempt(record)

    def test_json_store_accepts_list_or_wrapped_payload(self) -> None:
        listed = JsonAttemptStore(self._write("list.json", [RECORD])).snapshot()
        wrapped = JsonAttemptStore(self._write("wrapped.json", {"attempts": [RECORD]})).snapshot()

        self.assertEqual(listed, wrapped)
        self.assertIsInstance(listed, tuple)
        self.assertEqual(len(listed), 1)

    def test_json_store_rejects_scalar_payload(self) -> None:
        with self.assertRaises(ValueError):
            JsonAttemptStore(self._write("bad.json", 7)).snapshot()

    def test_record_round_trip(self) -> None:
        attempt = parse_attempt(RECORD)
        self.assertEqual(parse_attempt(attempt_to_record(attempt)), attempt)

    def test_in_memory_snapshot_is_isolated(self) -> None:
        store = InMemoryAttemptStore()
        store.add(parse_attempt(RECORD))
        snapshot = store.snapshot()
        store.add(parse_attempt(dict(RECORD, id="att-2")))

        self.assertEqual(len(snapshot), 1)
        self.assertEqual(len(store), 2)


if __name__ == "__main__":
    unittest.main()
