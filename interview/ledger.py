"""Ordered question/answer ledger.

Positions are 1-based and follow insertion order; nothing here reorders.
"""
from __future__ import annotations

from typing import Iterable, Optional, Union

from .state import InterviewState, Question, QuestionDraft, QuestionDifficulty
from .transition import Transition, applied, noop, working_copy

DraftLike = Union[str, QuestionDraft, dict]


def _as_draft(item: DraftLike) -> QuestionDraft:
    if isinstance(item, QuestionDraft):
        return item
    if isinstance(item, str):
        return QuestionDraft(text=item)
    return QuestionDraft.model_validate(item)


def load_questions(state: InterviewState, items: Iterable[DraftLike]) -> Transition:
    """Replace the whole ledger. Each entry gets a fresh id."""

    nxt = working_copy(state)
    nxt.questions = [
        Question(text=draft.text, difficulty=draft.difficulty, time_limit_seconds=draft.time_limit_seconds)
        for draft in map(_as_draft, items)
    ]
    nxt.current_index = 1 if nxt.questions else None
    nxt.draft_answer = ""
    return applied(nxt, position=nxt.current_index)


def append_question(
    state: InterviewState,
    text: str,
    *,
    difficulty: Optional[QuestionDifficulty] = None,
    time_limit_seconds: Optional[int] = None,
) -> Transition:
    """Append one question; ``Transition.position`` is its 1-based slot."""

    nxt = working_copy(state)
    nxt.questions.append(Question(text=text, difficulty=difficulty, time_limit_seconds=time_limit_seconds))
    return applied(nxt, position=len(nxt.questions))


def position_of(state: InterviewState, question_id: str) -> Optional[int]:
    for index, question in enumerate(state.questions, start=1):
        if question.id == question_id:
            return index
    return None


def record_answer(
    state: InterviewState,
    question_id: str,
    answer_text: str,
    score: Optional[int] = None,
) -> Transition:
    """Set or overwrite the answer (and score) for ``question_id``.

    Writing the same answer again leaves the ledger unchanged, so repeated
    identical calls are idempotent. A changed answer bumps ``revision`` and
    drops any score that belonged to the previous text.
    """

    position = position_of(state, question_id)
    if position is None:
        return noop(state, "unknown_question")
    current = state.questions[position - 1]
    same_text = current.answer == answer_text
    if same_text and (score is None or score == current.score):
        return applied(state, position=position)

    nxt = working_copy(state)
    question = nxt.questions[position - 1]
    if not same_text:
        question.answer = answer_text
        question.revision += 1
        question.score = None
        question.feedback = None
    if score is not None:
        question.score = score
    return applied(nxt, position=position)


def navigate(state: InterviewState, to_index: int) -> Transition:
    """Move the current pointer; indices outside ``[1, len]`` are rejected."""

    if not 1 <= to_index <= len(state.questions):
        return noop(state, "index_out_of_range")
    nxt = working_copy(state)
    nxt.current_index = to_index
    return applied(nxt, position=to_index)


__all__ = ["append_question", "load_questions", "navigate", "position_of", "record_answer"]
