"""Persistence helpers for the current candidate profile."""
from __future__ import annotations

import datetime as dt
from typing import Optional, Tuple

from interview.state import CandidateInfo

from .sqlite import get_conn


def save_candidate(candidate: CandidateInfo, resume_text: Optional[str] = None) -> None:
    """Replace the stored profile; there is only ever one."""

    updated_at = dt.datetime.now(dt.timezone.utc).isoformat()
    with get_conn() as conn:
        conn.execute(
            """INSERT OR REPLACE INTO candidate_profile
               (id, name, email, phone, age, gender, summary, resume_text, updated_at)
               VALUES (1, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                candidate.name,
                candidate.email,
                candidate.phone,
                candidate.age,
                candidate.gender,
                candidate.summary,
                resume_text,
                updated_at,
            ),
        )


def load_candidate() -> Tuple[Optional[CandidateInfo], Optional[str]]:
    """Return ``(profile, resume_text)``, or ``(None, None)`` when nothing is stored."""

    with get_conn() as conn:
        row = conn.execute("SELECT * FROM candidate_profile WHERE id = 1").fetchone()
    if row is None:
        return None, None
    data = dict(row)
    resume_text = data.pop("resume_text")
    data.pop("id")
    data.pop("updated_at")
    return CandidateInfo(**data), resume_text


__all__ = ["load_candidate", "save_candidate"]
