"""Persistence helpers for completed interview sessions."""
from __future__ import annotations

import datetime as dt
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from interview.state import Question, Session, SessionReport

from .sqlite import get_conn


class HistoryRecord(BaseModel):
    """A finished session together with its question ledger."""

    session: Session
    questions: List[Question] = Field(default_factory=list)
    saved_at: Optional[str] = None


def save_session(session: Session, questions: List[Question]) -> str:
    """Upsert a completed session and return its id."""

    saved_at = dt.datetime.now(dt.timezone.utc).isoformat()
    with get_conn() as conn:
        conn.execute(
            """INSERT OR REPLACE INTO session_history
               (id, candidate_name, interview_type, difficulty, status, start_time, end_time,
                final_score, summary, report_json, questions_json, saved_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                session.id,
                session.candidate_name,
                session.interview_type,
                session.difficulty,
                session.status,
                session.start_time.isoformat(),
                session.end_time.isoformat() if session.end_time else None,
                session.final_score,
                session.summary,
                session.report.model_dump_json() if session.report else None,
                json.dumps([q.model_dump(mode="json") for q in questions]),
                saved_at,
            ),
        )
    return session.id


def _record(row: Any) -> HistoryRecord:
    data: Dict[str, Any] = dict(row)
    report = data.pop("report_json")
    questions = json.loads(data.pop("questions_json") or "[]")
    saved_at = data.pop("saved_at")
    session = Session(
        **data,
        report=SessionReport.model_validate_json(report) if report else None,
    )
    return HistoryRecord(
        session=session,
        questions=[Question.model_validate(q) for q in questions],
        saved_at=saved_at,
    )


def list_sessions(limit: int = 50) -> List[Session]:
    """Most recently finished sessions first."""

    with get_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM session_history ORDER BY end_time DESC, saved_at DESC LIMIT ?",
            (limit,),
        ).fetchall()
    return [_record(row).session for row in rows]


def get_session(session_id: str) -> Optional[HistoryRecord]:
    with get_conn() as conn:
        row = conn.execute("SELECT * FROM session_history WHERE id = ?", (session_id,)).fetchone()
    return _record(row) if row else None


__all__ = ["HistoryRecord", "get_session", "list_sessions", "save_session"]
