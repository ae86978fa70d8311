"""Candidate field extraction from resume text."""
from __future__ import annotations

import logging
import re
from typing import Optional

from pydantic import BaseModel

from agents.oracle import ask
from agents.prompts import build_resume_prompt
from agents.types import ResumeFields
from config.settings import settings
from llm_gateway import parse_structured

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
_PHONE = re.compile(r"(\+?\d[\d \t().-]{8,}\d)")
_AGE = re.compile(r"\bage\s*[:\-]?\s*(\d{2})\b", re.IGNORECASE)
_GENDER = re.compile(r"\b(male|female|non-binary)\b", re.IGNORECASE)
_NAME_LABEL = re.compile(r"^\s*name\s*[:\-]\s*(.+)$", re.IGNORECASE | re.MULTILINE)

DEFAULT_SUMMARY = "Professional with experience in various domains."


class _OracleFields(BaseModel):
    name: str = ""
    age: str = ""
    gender: str = ""
    phone: str = ""
    email: str = ""
    summary: str = ""


def _first_line_name(text: str) -> Optional[str]:
    for line in text.splitlines():
        candidate = line.strip()
        if not candidate:
            continue
        if _EMAIL.search(candidate) or any(ch.isdigit() for ch in candidate):
            return None
        words = candidate.split()
        if 1 < len(words) <= 4 and all(w[:1].isupper() for w in words):
            return candidate
        return None
    return None


def _match(pattern: re.Pattern, text: str) -> Optional[str]:
    found = pattern.search(text)
    if not found:
        return None
    return (found.group(1) if found.groups() else found.group(0)).strip()


def regex_fields(text: str) -> ResumeFields:
    """Best-effort local extraction used when the oracle is unavailable."""

    gender = _match(_GENDER, text)
    return ResumeFields(
        name=_match(_NAME_LABEL, text) or _first_line_name(text),
        email=_match(_EMAIL, text),
        phone=_match(_PHONE, text),
        age=_match(_AGE, text),
        gender=gender.capitalize() if gender else None,
        summary=DEFAULT_SUMMARY,
        raw_text=text,
    )


def extract_fields(resume_text: str) -> ResumeFields:
    text = resume_text.strip()[: settings.RESUME_MAX_CHARS]
    try:
        reply = ask(build_resume_prompt(text), temperature=0.1, max_tokens=1000)
        parsed = parse_structured(_OracleFields, reply)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Resume extraction failed, using regex extraction: %s", exc)
        return regex_fields(text)
    return ResumeFields(
        **{key: (value.strip() or None) for key, value in parsed.model_dump().items()},
        raw_text=text,
    )


__all__ = ["DEFAULT_SUMMARY", "extract_fields", "regex_fields"]
