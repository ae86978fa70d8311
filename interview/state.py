"""Interview session state definitions."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

InterviewType = Literal["technical", "behavioral", "mixed"]
Difficulty = Literal["junior", "mid", "senior"]
QuestionDifficulty = Literal["easy", "medium", "hard", "junior", "mid", "senior"]
SessionStatus = Literal["active", "paused", "completed", "cancelled"]
Phase = Literal["idle", "active", "paused", "completed", "cancelled"]
Role = Literal["user", "ai"]
TimerId = Literal["question", "overall"]
RequestKind = Literal["question", "evaluation", "summary"]
Generation = Literal["incremental", "bulk"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


class InterviewConfig(BaseModel):
    """Options recognised when a session starts."""

    model_config = ConfigDict(extra="forbid")

    interview_type: InterviewType = "technical"
    difficulty: Difficulty = "mid"
    total_questions: int = Field(default=10, ge=1, le=50)
    time_limit_minutes: int = Field(default=30, ge=1, le=240)
    question_time_seconds: Optional[int] = Field(default=None, ge=1, le=3600)
    generation: Generation = "incremental"


class CandidateInfo(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[str] = None
    gender: Optional[str] = None
    summary: Optional[str] = None


class SessionReport(BaseModel):
    """Structured summary returned by the oracle at the end of a session."""

    overall_score: int = Field(ge=0, le=100)
    summary: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    recommendation: str = ""


class Session(BaseModel):
    id: str = Field(default_factory=new_id)
    candidate_name: Optional[str] = None
    start_time: datetime = Field(default_factory=utcnow)
    end_time: Optional[datetime] = None
    status: SessionStatus = "active"
    final_score: Optional[int] = None
    summary: Optional[str] = None
    interview_type: InterviewType = "technical"
    difficulty: Difficulty = "mid"
    report: Optional[SessionReport] = None


class Question(BaseModel):
    id: str = Field(default_factory=new_id)
    text: str
    difficulty: Optional[QuestionDifficulty] = None
    time_limit_seconds: Optional[int] = Field(default=None, ge=1)
    answer: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=0, le=100)
    feedback: Optional[str] = None
    revision: int = 0
    asked_at: Optional[datetime] = None


class QuestionDraft(BaseModel):
    """Question text plus metadata, before it enters the ledger."""

    text: str
    difficulty: Optional[QuestionDifficulty] = None
    time_limit_seconds: Optional[int] = Field(default=None, ge=1)


class Message(BaseModel):
    id: str = Field(default_factory=new_id)
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=utcnow)
    question_number: Optional[int] = None
    score: Optional[int] = None


class Timer(BaseModel):
    limit_seconds: int = Field(default=0, ge=0)
    remaining_seconds: int = Field(default=0, ge=0)
    active: bool = False


class ScoreEntry(BaseModel):
    score: int = Field(ge=0, le=100)
    question_id: Optional[str] = None


class PendingRequest(BaseModel):
    """Tag attached to an outgoing oracle call."""

    request_id: str = Field(default_factory=new_id)
    kind: RequestKind
    session_id: str
    question_id: Optional[str] = None
    question_number: Optional[int] = None
    revision: Optional[int] = None


class Progress(BaseModel):
    questions_asked: int = 0
    total_questions: int = 0
    current_score: int = 0
    average_score: int = 0
    is_completed: bool = False
    time_remaining: Optional[int] = None


class InterviewState(BaseModel):
    """Snapshot of one candidate's interview store."""

    phase: Phase = "idle"
    session: Optional[Session] = None
    config: InterviewConfig = Field(default_factory=InterviewConfig)

    job_description: Optional[str] = None
    resume_text: Optional[str] = None
    resume_confirmed: bool = False
    candidate: CandidateInfo = Field(default_factory=CandidateInfo)

    questions: List[Question] = Field(default_factory=list)
    current_index: Optional[int] = None
    draft_answer: str = ""
    messages: List[Message] = Field(default_factory=list)

    scores: List[ScoreEntry] = Field(default_factory=list)
    average_score: int = 0
    current_score: int = 0

    question_timer: Timer = Field(default_factory=Timer)
    overall_timer: Timer = Field(default_factory=Timer)
    paused_timers: List[TimerId] = Field(default_factory=list)
    last_tick_at: Optional[datetime] = None

    pending: Dict[str, PendingRequest] = Field(default_factory=dict)
    history: List[Session] = Field(default_factory=list)

    events: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def session_id(self) -> Optional[str]:
        return self.session.id if self.session else None

    @property
    def is_typing(self) -> bool:
        return bool(self.pending)

    def current_question(self) -> Optional[Question]:
        if self.current_index is None:
            return None
        if not 1 <= self.current_index <= len(self.questions):
            return None
        return self.questions[self.current_index - 1]

    def timer(self, timer_id: TimerId) -> Timer:
        return self.question_timer if timer_id == "question" else self.overall_timer
