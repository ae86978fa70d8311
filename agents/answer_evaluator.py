"""Oracle-backed answer scoring with local fallbacks."""
from __future__ import annotations

import logging
import re
from typing import List

from pydantic import ValidationError

from agents.fallbacks import empty_answer_evaluation, fallback_evaluation
from agents.oracle import ask
from agents.prompts import build_evaluation_prompt
from agents.types import EvalResult, RawEvaluation
from llm_gateway import parse_structured

logger = logging.getLogger(__name__)

_SCORE_PATTERN = re.compile(r"[\"']?score[\"']?\s*:\s*(\d+)", re.IGNORECASE)


def _bounded(value: float) -> int:
    return int(max(0, min(100, round(value))))


def _list_or(items, default: List[str]) -> List[str]:
    if isinstance(items, list):
        return [str(item) for item in items]
    return default


def evaluate_answer(question: str, answer: str, question_number: int) -> EvalResult:
    """Score ``answer`` from 0 to 100.

    Blank answers score 0 without a call. Unreachable oracle: neutral 50.
    Non-JSON reply: the first ``score: N`` found in the text, else 50.
    """

    if not answer.strip():
        return empty_answer_evaluation()

    try:
        reply = ask(build_evaluation_prompt(question, answer, question_number), temperature=0.2, max_tokens=600)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Answer evaluation failed, using fallback: %s", exc)
        return fallback_evaluation()

    try:
        raw = parse_structured(RawEvaluation, reply)
    except (ValueError, ValidationError) as exc:
        logger.warning("Evaluation reply was not JSON, scanning for a score: %s", exc)
        match = _SCORE_PATTERN.search(reply)
        return EvalResult(
            score=_bounded(int(match.group(1))) if match else 50,
            feedback="Answer evaluated. Please see suggestions for improvement.",
            strengths=["Attempted the question"],
            suggestions=["Provide more specific examples", "Explain concepts more clearly"],
            source="parsed",
        )

    return EvalResult(
        score=_bounded(raw.score),
        feedback=raw.feedback or "Answer evaluated.",
        strengths=_list_or(raw.strengths, ["Shows some understanding"]),
        suggestions=_list_or(raw.suggestions, ["Provide more detail"]),
    )


__all__ = ["evaluate_answer"]
