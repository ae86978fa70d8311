"""Session lifecycle controller.

Every function here takes an ``InterviewState`` snapshot and returns a
``Transition`` with a new snapshot; the input is never mutated. Calls that
make no sense in the current phase come back with ``applied=False`` and a
reason instead of raising.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from config.app_config import ScoringPolicy

from . import ledger, scoring, timers, transcript
from .state import (
    CandidateInfo,
    InterviewConfig,
    InterviewState,
    PendingRequest,
    Progress,
    RequestKind,
    Session,
    SessionReport,
    Timer,
    TimerId,
    new_id,
    utcnow,
)
from .transition import Transition, applied, noop, working_copy

RUNNING = ("active", "paused")
TIMER_IDS: tuple[TimerId, ...] = ("question", "overall")

JOB_DESCRIPTION_REQUIRED = "Please provide a job description to start the interview"
RESUME_REQUIRED = "Please upload and confirm your resume before starting the interview"
TIME_UP_SUMMARY = "Interview ended when the time limit was reached after {answered} of {total} questions were answered."
QUESTION_TIME_UP = "Time is up for question {number}."


def initial_state() -> InterviewState:
    return InterviewState()


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def configure(state: InterviewState, config: Union[InterviewConfig, dict]) -> Transition:
    if state.phase in RUNNING:
        return noop(state, "session_in_progress")
    nxt = working_copy(state)
    nxt.config = InterviewConfig.model_validate(config)
    return applied(nxt)


def set_job_description(state: InterviewState, text: str) -> Transition:
    nxt = working_copy(state)
    nxt.job_description = text
    return applied(nxt)


def confirm_resume(
    state: InterviewState,
    resume_text: Optional[str],
    candidate: Optional[CandidateInfo] = None,
) -> Transition:
    nxt = working_copy(state)
    nxt.resume_text = resume_text
    nxt.resume_confirmed = True
    if candidate is not None:
        nxt.candidate = candidate
    return applied(nxt)


def start_blockers(state: InterviewState) -> List[str]:
    """User-facing reasons why ``start`` should not be offered yet."""

    blockers: List[str] = []
    if not (state.job_description or "").strip():
        blockers.append(JOB_DESCRIPTION_REQUIRED)
    if not state.resume_confirmed:
        blockers.append(RESUME_REQUIRED)
    return blockers


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def start(
    state: InterviewState,
    config: Union[InterviewConfig, dict, None] = None,
    *,
    session_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Transition:
    """Begin a new session, discarding whatever was in flight."""

    cfg = InterviewConfig.model_validate(config) if config is not None else state.config
    now = now or utcnow()
    nxt = working_copy(state)
    nxt.config = cfg
    nxt.session = Session(
        id=session_id or new_id(),
        candidate_name=state.candidate.name,
        start_time=now,
        status="active",
        interview_type=cfg.interview_type,
        difficulty=cfg.difficulty,
    )
    nxt.phase = "active"
    nxt.questions = []
    nxt.current_index = None
    nxt.draft_answer = ""
    nxt.messages = []
    nxt.scores = []
    nxt.average_score = 0
    nxt.current_score = 0
    nxt.question_timer = Timer()
    nxt.overall_timer = timers.arm(Timer(), cfg.time_limit_minutes * 60)
    nxt.paused_timers = []
    nxt.last_tick_at = now
    nxt.pending = {}
    nxt.events = []
    return applied(nxt)


def pause(state: InterviewState) -> Transition:
    if state.phase != "active":
        return noop(state, "not_active")
    nxt = working_copy(state)
    nxt.paused_timers = [tid for tid in TIMER_IDS if state.timer(tid).active]
    nxt.question_timer = timers.disarm(nxt.question_timer)
    nxt.overall_timer = timers.disarm(nxt.overall_timer)
    nxt.phase = "paused"
    nxt.session.status = "paused"
    nxt.last_tick_at = None
    return applied(nxt)


def resume(state: InterviewState, *, now: Optional[datetime] = None) -> Transition:
    if state.phase != "paused":
        return noop(state, "not_paused")
    nxt = working_copy(state)
    if "question" in state.paused_timers:
        nxt.question_timer = timers.reactivate(nxt.question_timer)
    if "overall" in state.paused_timers:
        nxt.overall_timer = timers.reactivate(nxt.overall_timer)
    nxt.paused_timers = []
    nxt.phase = "active"
    nxt.session.status = "active"
    nxt.last_tick_at = now or utcnow()
    return applied(nxt)


def end(
    state: InterviewState,
    final_score: Optional[int] = None,
    summary: Optional[str] = None,
    *,
    report: Optional[SessionReport] = None,
    now: Optional[datetime] = None,
    policy: Optional[ScoringPolicy] = None,
) -> Transition:
    """Complete the session. Without ``final_score`` the aggregator decides."""

    if state.phase not in RUNNING:
        return noop(state, "not_running")
    score = final_score if final_score is not None else scoring.final_score(state, policy)
    nxt = working_copy(state)
    session = nxt.session
    session.status = "completed"
    session.end_time = now or utcnow()
    session.final_score = score
    session.summary = summary
    session.report = report
    nxt.question_timer = timers.disarm(nxt.question_timer)
    nxt.overall_timer = timers.disarm(nxt.overall_timer)
    nxt.paused_timers = []
    nxt.current_index = None
    nxt.draft_answer = ""
    nxt.phase = "completed"
    nxt.last_tick_at = None
    nxt.pending = {}
    nxt.history.append(session.model_copy(deep=True))
    return applied(nxt)


# ---------------------------------------------------------------------------
# Questions and answers
# ---------------------------------------------------------------------------


def _question_limit(state: InterviewState, position: int) -> Optional[int]:
    question = state.questions[position - 1]
    return question.time_limit_seconds or state.config.question_time_seconds


def _present(state: InterviewState, position: int, *, now: Optional[datetime] = None) -> Transition:
    """Make ``position`` current, announce it once, and set up its timer."""

    moved = ledger.navigate(state, position)
    if not moved.applied:
        return moved
    nxt = moved.state
    question = nxt.questions[position - 1]
    if question.asked_at is None:
        question.asked_at = now or utcnow()
        nxt = transcript.append(nxt, "ai", question.text, position, now=now).state
        question = nxt.questions[position - 1]
    limit = _question_limit(nxt, position)
    if limit and question.answer is None:
        nxt.question_timer = timers.arm(nxt.question_timer, limit)
    else:
        nxt.question_timer = timers.disarm(nxt.question_timer)
    nxt.draft_answer = question.answer or ""
    return applied(nxt, position=position)


def navigate(state: InterviewState, to_index: int, *, now: Optional[datetime] = None) -> Transition:
    if state.phase != "active":
        return noop(state, "not_active")
    if not 1 <= to_index <= len(state.questions):
        return noop(state, "index_out_of_range")
    return _present(state, to_index, now=now)


def advance(state: InterviewState, *, now: Optional[datetime] = None) -> Transition:
    """Present the question after the current one."""

    if state.phase != "active":
        return noop(state, "not_active")
    target = 1 if state.current_index is None else state.current_index + 1
    if target > len(state.questions):
        return noop(state, "no_next_question")
    return _present(state, target, now=now)


def update_draft(state: InterviewState, text: str) -> Transition:
    if state.phase not in RUNNING:
        return noop(state, "not_running")
    nxt = working_copy(state)
    nxt.draft_answer = text
    return applied(nxt)


def submit_answer(state: InterviewState, answer_text: str, *, now: Optional[datetime] = None) -> Transition:
    """Record the answer to the current question and ask for its evaluation.

    Resubmitting changed text edits the existing transcript entry instead of
    adding another one. The returned ``request`` tags the evaluation call.
    """

    if state.phase != "active":
        return noop(state, "not_active")
    question = state.current_question()
    if question is None:
        return noop(state, "no_current_question")
    text = answer_text.strip()
    if not text:
        return noop(state, "empty_answer")
    if question.answer == text and question.score is not None:
        return applied(state, position=state.current_index)

    position = state.current_index
    step = ledger.record_answer(state, question.id, text)
    step = step.then(transcript.upsert_answer(step.state, position, text, now=now))
    nxt = step.state
    nxt.question_timer = timers.disarm(nxt.question_timer)
    nxt.draft_answer = ""
    recorded = nxt.questions[position - 1]
    return step.then(
        begin_request(
            nxt,
            "evaluation",
            question_id=recorded.id,
            question_number=position,
            revision=recorded.revision,
        )
    )


def all_answered(state: InterviewState) -> bool:
    return len(state.questions) >= state.config.total_questions and all(
        q.answer is not None for q in state.questions
    )


# ---------------------------------------------------------------------------
# Oracle requests
# ---------------------------------------------------------------------------


def _same_target(existing: PendingRequest, kind: RequestKind, question_id: Optional[str], question_number: Optional[int]) -> bool:
    if existing.kind != kind:
        return False
    if kind == "evaluation":
        return existing.question_id == question_id
    if kind == "question":
        return existing.question_number == question_number
    return True


def begin_request(
    state: InterviewState,
    kind: RequestKind,
    *,
    question_id: Optional[str] = None,
    question_number: Optional[int] = None,
    revision: Optional[int] = None,
) -> Transition:
    """Register an outgoing oracle call; older calls for the same target are superseded."""

    if state.phase not in RUNNING:
        return noop(state, "not_running")
    nxt = working_copy(state)
    nxt.pending = {
        rid: req
        for rid, req in nxt.pending.items()
        if not _same_target(req, kind, question_id, question_number)
    }
    request = PendingRequest(
        kind=kind,
        session_id=nxt.session.id,
        question_id=question_id,
        question_number=question_number,
        revision=revision,
    )
    nxt.pending[request.request_id] = request
    return applied(nxt, request=request)


def request_next_question(state: InterviewState) -> Transition:
    if len(state.questions) >= state.config.total_questions:
        return noop(state, "ledger_full")
    return begin_request(state, "question", question_number=len(state.questions) + 1)


def request_summary(state: InterviewState) -> Transition:
    return begin_request(state, "summary")


def drop_request(state: InterviewState, tag: PendingRequest) -> Transition:
    if tag.request_id not in state.pending:
        return noop(state, "superseded")
    nxt = working_copy(state)
    nxt.pending.pop(tag.request_id, None)
    return applied(nxt)


def _stale_reason(state: InterviewState, tag: PendingRequest) -> Optional[str]:
    if state.session is None or tag.session_id != state.session.id:
        return "stale_session"
    if state.phase not in RUNNING:
        return "not_running"
    if tag.request_id not in state.pending:
        return "superseded"
    return None


def _discard(state: InterviewState, tag: PendingRequest, reason: str) -> Transition:
    """Drop the pending entry of a response that can no longer be applied."""

    if tag.request_id not in state.pending:
        return noop(state, reason)
    nxt = working_copy(state)
    nxt.pending.pop(tag.request_id, None)
    return Transition(state=nxt, applied=False, reason=reason)


def complete_question(
    state: InterviewState,
    tag: PendingRequest,
    text: str,
    *,
    difficulty: Optional[str] = None,
    time_limit_seconds: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Transition:
    """Apply a generated question if it still fills the slot it was asked for."""

    reason = _stale_reason(state, tag)
    if reason:
        return _discard(state, tag, reason)
    if tag.question_number != len(state.questions) + 1:
        return _discard(state, tag, "stale_position")
    nxt = working_copy(state)
    nxt.pending.pop(tag.request_id, None)
    step = ledger.append_question(nxt, text, difficulty=difficulty, time_limit_seconds=time_limit_seconds)
    if step.state.phase == "active":
        step = step.then(_present(step.state, step.position, now=now))
    return step


def complete_evaluation(
    state: InterviewState,
    tag: PendingRequest,
    score: int,
    feedback: Optional[str] = None,
) -> Transition:
    """Apply an evaluation only if the scored answer is still the current one."""

    reason = _stale_reason(state, tag)
    if reason:
        return _discard(state, tag, reason)
    position = ledger.position_of(state, tag.question_id) if tag.question_id else None
    if position is None:
        return _discard(state, tag, "unknown_question")
    question = state.questions[position - 1]
    if question.revision != tag.revision or question.answer is None:
        return _discard(state, tag, "stale_revision")

    bounded = max(0, min(100, int(score)))
    nxt = working_copy(state)
    nxt.pending.pop(tag.request_id, None)
    step = ledger.record_answer(nxt, question.id, question.answer, bounded)
    step.state.questions[position - 1].feedback = feedback
    step = step.then(scoring.record_score(step.state, bounded, question.id))
    step = step.then(transcript.tag_score(step.state, position, bounded))
    return applied(step.state, position=position)


def complete_summary(
    state: InterviewState,
    tag: PendingRequest,
    report: SessionReport,
    *,
    final_score: Optional[int] = None,
    now: Optional[datetime] = None,
    policy: Optional[ScoringPolicy] = None,
) -> Transition:
    reason = _stale_reason(state, tag)
    if reason:
        return _discard(state, tag, reason)
    return end(state, final_score, report.summary, report=report, now=now, policy=policy)


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


def _expire_question(state: InterviewState, *, now: Optional[datetime]) -> Transition:
    """Auto-submit a non-empty draft, otherwise leave the question unanswered."""

    if state.draft_answer.strip():
        return submit_answer(state, state.draft_answer, now=now)
    position = state.current_index
    if position is None:
        return applied(state)
    return transcript.append(state, "ai", QUESTION_TIME_UP.format(number=position), position, now=now)


def tick(
    state: InterviewState,
    *,
    now: Optional[datetime] = None,
    policy: Optional[ScoringPolicy] = None,
) -> Transition:
    """One second of wall-clock time. Only an active session counts down."""

    if state.phase != "active":
        return noop(state, "not_active")
    nxt = working_copy(state)
    expired: List[TimerId] = []
    nxt.question_timer, question_done = timers.tick(nxt.question_timer)
    nxt.overall_timer, overall_done = timers.tick(nxt.overall_timer)
    if question_done:
        expired.append("question")
    if overall_done:
        expired.append("overall")
    step = applied(nxt, expired=tuple(expired))

    if overall_done:
        answered = sum(1 for q in nxt.questions if q.answer is not None)
        summary = TIME_UP_SUMMARY.format(answered=answered, total=nxt.config.total_questions)
        return step.then(end(nxt, summary=summary, now=now, policy=policy))
    if question_done:
        return step.then(_expire_question(nxt, now=now))
    return step


def progress(state: InterviewState) -> Progress:
    return Progress(
        questions_asked=sum(1 for q in state.questions if q.asked_at is not None),
        total_questions=state.config.total_questions,
        current_score=state.current_score,
        average_score=state.average_score,
        is_completed=state.phase == "completed",
        time_remaining=state.overall_timer.remaining_seconds if state.session else None,
    )


__all__ = [
    "JOB_DESCRIPTION_REQUIRED",
    "RESUME_REQUIRED",
    "advance",
    "all_answered",
    "begin_request",
    "complete_evaluation",
    "complete_question",
    "complete_summary",
    "configure",
    "confirm_resume",
    "drop_request",
    "end",
    "initial_state",
    "navigate",
    "pause",
    "progress",
    "request_next_question",
    "request_summary",
    "resume",
    "set_job_description",
    "start",
    "start_blockers",
    "submit_answer",
    "tick",
    "update_draft",
]
