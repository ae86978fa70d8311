"""Oracle-backed end-of-session summary."""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from agents.fallbacks import fallback_summary
from agents.oracle import ask
from agents.prompts import build_summary_prompt
from agents.types import SummaryResult
from interview.state import Message

logger = logging.getLogger(__name__)

_OVERALL = re.compile(r"Overall Score:\s*(\d+)", re.IGNORECASE)
_SUMMARY = re.compile(r"Summary:\s*(.*?)(?=\n\s*Strengths:|$)", re.IGNORECASE | re.DOTALL)
_STRENGTHS = re.compile(r"Strengths:\s*(.*?)(?=\n\s*Improvements:|$)", re.IGNORECASE | re.DOTALL)
_IMPROVEMENTS = re.compile(r"Improvements:\s*(.*?)(?=\n\s*Recommendation:|$)", re.IGNORECASE | re.DOTALL)
_RECOMMENDATION = re.compile(r"Recommendation:\s*(.*)", re.IGNORECASE | re.DOTALL)


def _bullets(block: Optional[str]) -> List[str]:
    if not block:
        return []
    items = []
    for line in block.splitlines():
        item = line.strip().lstrip("-*• ").strip()
        if item:
            items.append(item)
    return items


def _group(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1).strip() if match else None


def pair_transcript(messages: Sequence[Message]) -> List[Tuple[str, str, Optional[int]]]:
    """(question, answer, score) per question number, in order.

    The first ai entry tagged with a number is the question; the latest user
    entry with the same tag is the answer.
    """

    questions: Dict[int, str] = {}
    answers: Dict[int, Tuple[str, Optional[int]]] = {}
    for message in messages:
        number = message.question_number
        if number is None:
            continue
        if message.role == "ai":
            questions.setdefault(number, message.content)
        else:
            answers[number] = (message.content, message.score)
    return [
        (questions[n], answers.get(n, ("", None))[0], answers.get(n, ("", None))[1])
        for n in sorted(questions)
    ]


def parse_summary(text: str, scores: Sequence[int]) -> SummaryResult:
    """Pull the labelled sections out of a free-text summary reply."""

    fallback = fallback_summary(scores)
    overall = _group(_OVERALL, text)
    return SummaryResult(
        overall_score=max(0, min(100, int(overall))) if overall else fallback.overall_score,
        summary=_group(_SUMMARY, text) or text.strip()[:500],
        strengths=_bullets(_group(_STRENGTHS, text)) or fallback.strengths,
        improvements=_bullets(_group(_IMPROVEMENTS, text)) or fallback.improvements,
        recommendation=_group(_RECOMMENDATION, text) or fallback.recommendation,
    )


def generate_summary(
    messages: Sequence[Message],
    *,
    candidate_name: Optional[str] = None,
    interview_type: str = "technical",
    difficulty: str = "mid",
) -> SummaryResult:
    """Summarise a finished transcript; failures fall back to a canned report."""

    pairs = pair_transcript(messages)
    scores = [score for _, _, score in pairs if score is not None]
    prompt = build_summary_prompt(
        candidate_name or "the candidate",
        interview_type,
        difficulty,
        [q for q, _, _ in pairs],
        [a for _, a, _ in pairs],
        scores,
    )
    try:
        reply = ask(prompt, temperature=0.4, max_tokens=1024)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Summary generation failed, using fallback: %s", exc)
        return fallback_summary(scores)
    return parse_summary(reply, scores)


__all__ = ["generate_summary", "pair_transcript", "parse_summary"]
