import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storage.migrate import migrate
from config.settings import settings
from config.registry import ORACLE_KEY, bind_model, unbind_model


T0 = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


class ScriptedOracle:
    """Answers by prompt shape; records every prompt it was given."""

    def __init__(self, *, question="Tell me about a system you designed.", evaluation='{"score": 80, "feedback": "Solid", "strengths": ["clear"], "suggestions": ["depth"]}', summary=None, resume=None):
        self.prompts = []
        self.question = question
        self.evaluation = evaluation
        self.summary = summary or (
            "Overall Score: 78\n"
            "Summary: Capable candidate with clear explanations.\n"
            "Strengths:\n- Clear communication\n- Practical examples\n"
            "Improvements:\n- More depth on trade-offs\n"
            "Recommendation: Consider for the next round"
        )
        self.resume = resume or '{"name": "Jane Doe", "email": "jane@example.com", "phone": "", "age": "", "gender": "", "summary": "Backend engineer"}'
        self._asked = 0

    def __call__(self, prompt, *, temperature=None, max_tokens=None):
        self.prompts.append(prompt)
        if "Evaluate the following answer" in prompt:
            return self.evaluation
        if "final interview summary" in prompt:
            return self.summary
        if "resume parser" in prompt:
            return self.resume
        self._asked += 1
        return f"{self.question} ({self._asked})"


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture(autouse=True)
def unbound_oracle():
    unbind_model(ORACLE_KEY)
    yield
    unbind_model(ORACLE_KEY)


@pytest.fixture
def oracle():
    scripted = ScriptedOracle()
    bind_model(ORACLE_KEY, scripted)
    return scripted


@pytest.fixture
def clock():
    return FakeClock()
