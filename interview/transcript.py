"""Append-only chat transcript of AI/user exchanges."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from .state import InterviewState, Message, Role, utcnow
from .transition import Transition, applied, noop, working_copy


def append(
    state: InterviewState,
    role: Role,
    content: str,
    question_number: Optional[int] = None,
    score: Optional[int] = None,
    *,
    now: Optional[datetime] = None,
) -> Transition:
    nxt = working_copy(state)
    nxt.messages.append(
        Message(
            role=role,
            content=content,
            timestamp=now or utcnow(),
            question_number=question_number,
            score=score,
        )
    )
    return applied(nxt, position=question_number)


def _latest_answer_index(messages: List[Message], question_number: int) -> Optional[int]:
    for index in range(len(messages) - 1, -1, -1):
        message = messages[index]
        if message.role == "user" and message.question_number == question_number:
            return index
    return None


def replace_answer_for(
    state: InterviewState,
    question_number: int,
    new_content: str,
    *,
    now: Optional[datetime] = None,
) -> Transition:
    """Rewrite the most recent user entry for ``question_number`` in place."""

    index = _latest_answer_index(state.messages, question_number)
    if index is None:
        return noop(state, "no_answer_to_replace")
    nxt = working_copy(state)
    message = nxt.messages[index]
    message.content = new_content
    message.timestamp = now or utcnow()
    return applied(nxt, position=question_number)


def upsert_answer(
    state: InterviewState,
    question_number: int,
    content: str,
    *,
    now: Optional[datetime] = None,
) -> Transition:
    """Edit the existing answer entry, or append one if none exists yet."""

    replaced = replace_answer_for(state, question_number, content, now=now)
    if replaced.applied:
        return replaced
    return append(state, "user", content, question_number, now=now)


def tag_score(state: InterviewState, question_number: int, score: int) -> Transition:
    index = _latest_answer_index(state.messages, question_number)
    if index is None:
        return noop(state, "no_answer_to_score")
    nxt = working_copy(state)
    nxt.messages[index].score = score
    return applied(nxt, position=question_number)


def filter_by_question(messages: List[Message], question_number: int) -> List[Message]:
    """Entries tagged with ``question_number``; untagged entries always show."""

    return [m for m in messages if m.question_number is None or m.question_number == question_number]


__all__ = ["append", "filter_by_question", "replace_answer_for", "tag_score", "upsert_answer"]
