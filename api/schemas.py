"""Pydantic schemas for the interview session API."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from interview.lifecycle import progress
from interview.state import (
    CandidateInfo,
    InterviewConfig,
    InterviewState,
    Message,
    Phase,
    Progress,
    Question,
    QuestionDifficulty,
    Session,
    Timer,
)


class StartReq(BaseModel):
    job_description: Optional[str] = None
    resume_text: Optional[str] = None
    resume_confirmed: bool = False
    candidate: Optional[CandidateInfo] = None
    config: Dict[str, Any] = Field(default_factory=dict)


class AnswerReq(BaseModel):
    answer: str


class DraftReq(BaseModel):
    text: str


class NavigateReq(BaseModel):
    index: int


class QuestionView(BaseModel):
    number: int
    id: str
    text: str
    difficulty: Optional[QuestionDifficulty] = None
    answer: Optional[str] = None
    score: Optional[int] = None
    feedback: Optional[str] = None


class SessionView(BaseModel):
    session: Optional[Session] = None
    phase: Phase
    config: InterviewConfig
    current_index: Optional[int] = None
    current_question: Optional[QuestionView] = None
    questions: List[QuestionView] = Field(default_factory=list)
    messages: List[Message] = Field(default_factory=list)
    draft_answer: str = ""
    question_timer: Timer
    overall_timer: Timer
    progress: Progress
    is_typing: bool = False
    events: List[Dict[str, Any]] = Field(default_factory=list)


class TransitionResp(BaseModel):
    applied: bool
    reason: Optional[str] = None
    view: SessionView


class HistoryDetail(BaseModel):
    session: Session
    questions: List[Question] = Field(default_factory=list)


class CandidateProfile(BaseModel):
    candidate: CandidateInfo
    resume_text: Optional[str] = None


def _question_view(number: int, question: Question) -> QuestionView:
    return QuestionView(number=number, **question.model_dump(include={"id", "text", "difficulty", "answer", "score", "feedback"}))


def view_of(state: InterviewState) -> SessionView:
    """Project an interview snapshot onto the wire shape."""

    questions = [_question_view(i, q) for i, q in enumerate(state.questions, start=1)]
    current = questions[state.current_index - 1] if state.current_question() is not None else None
    return SessionView(
        session=state.session,
        phase=state.phase,
        config=state.config,
        current_index=state.current_index,
        current_question=current,
        questions=questions,
        messages=state.messages,
        draft_answer=state.draft_answer,
        question_timer=state.question_timer,
        overall_timer=state.overall_timer,
        progress=progress(state),
        is_typing=state.is_typing,
        events=state.events,
    )
