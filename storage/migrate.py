"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable, Optional

from config.settings import settings

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS session_history (
  id TEXT PRIMARY KEY,
  candidate_name TEXT,
  interview_type TEXT NOT NULL,
  difficulty TEXT NOT NULL,
  status TEXT NOT NULL,
  start_time TEXT NOT NULL,
  end_time TEXT,
  final_score INTEGER,
  summary TEXT,
  report_json TEXT,
  questions_json TEXT NOT NULL,
  saved_at TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_session_history_end_time
  ON session_history (end_time);
""",
    """
CREATE TABLE IF NOT EXISTS candidate_profile (
  id INTEGER PRIMARY KEY CHECK (id = 1),
  name TEXT,
  email TEXT,
  phone TEXT,
  age TEXT,
  gender TEXT,
  summary TEXT,
  resume_text TEXT,
  updated_at TEXT NOT NULL
);
""",
]


def migrate(db_path: Optional[str] = None) -> None:
    """Apply schema migrations to the SQLite database."""

    path = db_path or settings.DB_PATH
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    migrate()
