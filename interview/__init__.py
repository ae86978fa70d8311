from __future__ import annotations  # Re-export interview state machine public API

from . import ledger, lifecycle, scheduler, scoring, timers, transcript
from .state import (
    CandidateInfo,
    InterviewConfig,
    InterviewState,
    Message,
    PendingRequest,
    Progress,
    Question,
    QuestionDraft,
    Session,
    SessionReport,
    Timer,
)
from .transition import Transition

__all__ = [
    "CandidateInfo",
    "InterviewConfig",
    "InterviewState",
    "Message",
    "PendingRequest",
    "Progress",
    "Question",
    "QuestionDraft",
    "Session",
    "SessionReport",
    "Timer",
    "Transition",
    "ledger",
    "lifecycle",
    "scheduler",
    "scoring",
    "timers",
    "transcript",
]
