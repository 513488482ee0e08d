# ABOUTME: Estimates an empirical Markov transition matrix over inferred motivation states.
# ABOUTME: Counts consecutive-state pairs inside each attempt and row-normalizes them.

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from .classifier import DEFAULT_THRESHOLDS, infer_state
from .config import ClassifierThresholds
from .schemas import Attempt, MotivationState, STATE_ORDER, TransitionMatrix

MIN_SEQUENCE_LENGTH = 2

_STATE_INDEX = {state: i for i, state in enumerate(STATE_ORDER)}


def estimate_transitions(
    attempts: Iterable[Attempt],
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> TransitionMatrix:
    """
    Build P(state at i+1 | state at i) from every attempt with at least two answers.

    Pairs never span two attempts. A row whose state never appears as a
    "from" state stays all zero.
    """

    sequences = [
        [infer_state(observation, thresholds) for observation in attempt.observations]
        for attempt in attempts
        if len(attempt.observations) >= MIN_SEQUENCE_LENGTH
    ]
    return transitions_from_sequences(sequences)


def transitions_from_sequences(sequences: Iterable[Sequence[MotivationState]]) -> TransitionMatrix:
    counts = np.zeros((len(STATE_ORDER), len(STATE_ORDER)), dtype=np.int64)
    for states in sequences:
        if len(states) < MIN_SEQUENCE_LENGTH:
            continue
        for from_state, to_state in zip(states[:-1], states[1:]):
            counts[_STATE_INDEX[from_state], _STATE_INDEX[to_state]] += 1

    totals = counts.sum(axis=1, keepdims=True)
    probabilities = np.divide(
        counts,
        totals,
        out=np.zeros(counts.shape, dtype=float),
        where=totals > 0,
    )

    return TransitionMatrix(
        probabilities=_to_mapping(probabilities, float),
        counts=_to_mapping(counts, int),
    )


def _to_mapping(values: np.ndarray, cast) -> dict:
    return {
        from_state: {to_state: cast(values[i, j]) for j, to_state in enumerate(STATE_ORDER)}
        for i, from_state in enumerate(STATE_ORDER)
    }

