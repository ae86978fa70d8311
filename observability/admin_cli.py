"""Lightweight CLI helpers for inspecting finished interview sessions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from session_reports import generate_session_report_pdf
from storage.history import get_session, list_sessions


def tail_sessions(limit: int = 20) -> None:
    for session in list_sessions(limit):
        ended = session.end_time.isoformat() if session.end_time else "-"
        print(
            f"[{ended}] {session.id} {session.candidate_name or 'anonymous'} "
            f"{session.interview_type}/{session.difficulty} -> {session.status} score={session.final_score}"
        )


def show_session(session_id: str) -> bool:
    record = get_session(session_id)
    if record is None:
        print(f"no session {session_id}")
        return False
    session = record.session
    print(f"{session.id} status={session.status} score={session.final_score}")
    if session.summary:
        print(session.summary)
    for number, question in enumerate(record.questions, start=1):
        answer = question.answer if question.answer is not None else "(skipped)"
        print(f"Q{number} [{question.difficulty or '-'}] score={question.score}: {question.text}")
        print(f"   A: {answer}")
    return True


def export_report(session_id: str, out: Path) -> bool:
    record = get_session(session_id)
    if record is None:
        print(f"no session {session_id}")
        return False
    out.write_bytes(generate_session_report_pdf(record))
    print(f"wrote {out}")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tail-sessions", type=int, help="Show the latest finished sessions")
    parser.add_argument("--show", metavar="SESSION_ID", help="Print one session with its questions")
    parser.add_argument("--export", nargs=2, metavar=("SESSION_ID", "OUT"), help="Write a session PDF report")
    args = parser.parse_args(argv)

    ok = True
    if args.tail_sessions:
        tail_sessions(args.tail_sessions)
    if args.show:
        ok = show_session(args.show) and ok
    if args.export:
        ok = export_report(args.export[0], Path(args.export[1])) and ok
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
