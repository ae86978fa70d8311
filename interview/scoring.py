"""Scoring aggregation: running average and tiered weighted final score."""
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel

from config.app_config import ScoringPolicy

from .state import InterviewState, ScoreEntry
from .transition import Transition, applied, noop, working_copy


class WeightedEntry(BaseModel):
    difficulty: Optional[str] = None
    score: Optional[int] = None


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def average_score(scores: Iterable[int]) -> int:
    values = list(scores)
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def record_score(state: InterviewState, score: int, question_id: Optional[str] = None) -> Transition:
    """Add a score to the running set and recompute the average.

    A second score for the same question replaces the first instead of
    counting twice.
    """

    if not 0 <= score <= 100:
        return noop(state, "score_out_of_range")
    nxt = working_copy(state)
    entry = ScoreEntry(score=score, question_id=question_id)
    if question_id is not None:
        for index, existing in enumerate(nxt.scores):
            if existing.question_id == question_id:
                nxt.scores[index] = entry
                break
        else:
            nxt.scores.append(entry)
    else:
        nxt.scores.append(entry)
    nxt.current_score = score
    nxt.average_score = average_score(e.score for e in nxt.scores)
    return applied(nxt)


def weighted_final_score(entries: Sequence[WeightedEntry], policy: Optional[ScoringPolicy] = None) -> int:
    """Percentage of available difficulty points earned.

    Each entry earns ``weight * fraction`` where the fraction comes from the
    first tier whose threshold the raw score meets. Unanswered entries earn
    nothing but their weight still counts toward the maximum.
    """

    policy = policy or ScoringPolicy()
    earned = 0.0
    maximum = 0.0
    for entry in entries:
        weight = policy.weight_for(entry.difficulty)
        if weight is None:
            raise ValueError(f"no weight configured for difficulty {entry.difficulty!r}")
        maximum += weight
        earned += weight * policy.fraction_for(entry.score)
    if maximum <= 0:
        return 0
    return round_half_up(100 * earned / maximum)


def is_weighted(state: InterviewState, policy: ScoringPolicy) -> bool:
    return bool(state.questions) and all(policy.weight_for(q.difficulty) is not None for q in state.questions)


def planned_average(state: InterviewState) -> int:
    """Mean over the planned question count; unasked or unscored questions count as 0."""

    planned = max(state.config.total_questions, len(state.questions), len(state.scores))
    return round_half_up(sum(e.score for e in state.scores) / planned)


def final_score(state: InterviewState, policy: Optional[ScoringPolicy] = None) -> int:
    """Weighted score when every question has a weighed difficulty, else ``planned_average``."""

    policy = policy or ScoringPolicy()
    if is_weighted(state, policy):
        entries: List[WeightedEntry] = [WeightedEntry(difficulty=q.difficulty, score=q.score) for q in state.questions]
        return weighted_final_score(entries, policy)
    return planned_average(state)


__all__ = [
    "WeightedEntry",
    "average_score",
    "final_score",
    "is_weighted",
    "planned_average",
    "record_score",
    "round_half_up",
    "weighted_final_score",
]
