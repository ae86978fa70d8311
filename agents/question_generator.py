"""Oracle-backed interview question generation."""
from __future__ import annotations

import logging
import random
import re
from typing import List, Optional

from agents.fallbacks import fallback_question
from agents.oracle import ask
from agents.prompts import build_question_prompt
from agents.types import GeneratedQuestion, QuestionContext
from config.app_config import ScoringPolicy

logger = logging.getLogger(__name__)

_LABEL = re.compile(r"^\s*(?:question\s*(?:#?\d+)?\s*[:.-]\s*)", re.IGNORECASE)


def _clean(text: str) -> str:
    cleaned = _LABEL.sub("", text.strip())
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1]
    return cleaned.strip()


def generate_question(ctx: QuestionContext, *, rng: Optional[random.Random] = None) -> GeneratedQuestion:
    """Ask the oracle for one question; any failure yields a canned one."""

    try:
        text = _clean(ask(build_question_prompt(ctx), temperature=1.0, max_tokens=512))
        if not text:
            raise ValueError("question text empty after cleanup")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Question generation failed, using fallback: %s", exc)
        return GeneratedQuestion(
            text=fallback_question(ctx.job_description, ctx.interview_type, ctx.previous_questions, rng=rng),
            difficulty=ctx.level,
            confidence=0.5,
            source="fallback",
        )
    return GeneratedQuestion(text=text, difficulty=ctx.level, confidence=0.9)


def generate_question_set(
    ctx: QuestionContext,
    policy: Optional[ScoringPolicy] = None,
    *,
    shuffle: bool = False,
    rng: Optional[random.Random] = None,
) -> List[GeneratedQuestion]:
    """Pre-generate the fixed difficulty distribution (4 easy, 4 medium, 2 hard by default).

    Questions come back easy to hard unless ``shuffle`` is set; either way the
    order is final once the ledger is loaded.
    """

    policy = policy or ScoringPolicy()
    rng = rng or random.Random()
    previous = list(ctx.previous_questions)
    generated: List[GeneratedQuestion] = []
    for level, count in policy.distribution.items():
        for _ in range(count):
            step = ctx.model_copy(
                update={
                    "level": level,
                    "previous_questions": list(previous),
                    "question_number": len(generated) + 1,
                }
            )
            question = generate_question(step, rng=rng)
            generated.append(question)
            previous.append(question.text)
    if shuffle:
        rng.shuffle(generated)
    return generated


__all__ = ["generate_question", "generate_question_set"]
