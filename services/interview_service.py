"""Orchestrates lifecycle transitions and the oracle calls between them."""
from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from agents.answer_evaluator import evaluate_answer
from agents.question_generator import generate_question, generate_question_set
from agents.summary_writer import generate_summary
from agents.types import QuestionContext
from config.app_config import ScoringPolicy
from config.settings import settings
from interview import ledger, lifecycle, scheduler, transcript
from interview.state import (
    CandidateInfo,
    InterviewConfig,
    InterviewState,
    PendingRequest,
    SessionReport,
    utcnow,
)
from interview.transition import Transition, applied
from observability import log_event, span
from services.sessions import SessionManager
from services.store import InterviewStore
from storage.history import save_session

logger = logging.getLogger(__name__)

WELCOME = (
    "Hello{name}! Welcome to your {interview_type} interview. I'll be asking you "
    "{total} questions and you have {minutes} minutes in total. Let's begin!"
)


class StartBlocked(ValueError):
    """Raised when required setup input is missing."""

    def __init__(self, blockers: List[str]) -> None:
        super().__init__("; ".join(blockers))
        self.blockers = blockers


def _record_events(state: InterviewState, entries: List[Dict[str, Any]]) -> Transition:
    return applied(state.model_copy(update={"events": state.events + entries}))


def _welcome(state: InterviewState, *, now: datetime) -> Transition:
    cfg = state.config
    name = f" {state.candidate.name}" if state.candidate.name else ""
    text = WELCOME.format(
        name=name,
        interview_type=cfg.interview_type,
        total=cfg.total_questions,
        minutes=cfg.time_limit_minutes,
    )
    return transcript.append(state, "ai", text, now=now)


class InterviewService:
    def __init__(
        self,
        sessions: Optional[SessionManager] = None,
        *,
        policy: Optional[ScoringPolicy] = None,
        clock: Callable[[], datetime] = utcnow,
        rng: Optional[random.Random] = None,
        persist: bool = True,
    ) -> None:
        self.sessions = sessions or SessionManager()
        self.policy = policy or ScoringPolicy()
        self.clock = clock
        self.rng = rng or random.Random()
        self.persist = persist

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start(
        self,
        *,
        job_description: Optional[str],
        resume_text: Optional[str] = None,
        resume_confirmed: bool = False,
        candidate: Optional[CandidateInfo] = None,
        config: Union[InterviewConfig, dict, None] = None,
    ) -> InterviewStore:
        """Create a store, validate setup, start the session and present question 1.

        Raises ``StartBlocked`` for missing setup input and pydantic's
        ``ValidationError`` for a bad config.
        """

        if isinstance(config, InterviewConfig):
            cfg = config
        else:
            defaults = {
                "total_questions": settings.DEFAULT_TOTAL_QUESTIONS,
                "time_limit_minutes": settings.DEFAULT_TIME_LIMIT_MINUTES,
            }
            cfg = InterviewConfig.model_validate({**defaults, **(config or {})})
        if cfg.generation == "bulk":
            cfg = cfg.model_copy(update={"total_questions": sum(self.policy.distribution.values())})
        store = InterviewStore()
        store.dispatch(lifecycle.set_job_description, job_description or "")
        if resume_confirmed:
            store.dispatch(lifecycle.confirm_resume, resume_text, candidate)
        blockers = lifecycle.start_blockers(store.state)
        if blockers:
            raise StartBlocked(blockers)

        now = self.clock()
        store.dispatch(lifecycle.start, cfg, now=now)
        store.dispatch(_welcome, now=now)
        self.sessions.add(store)

        if cfg.generation == "bulk":
            self._load_bulk(store)
        else:
            self._request_question(store)
        return store

    def get(self, session_id: str) -> InterviewStore:
        return self.sessions.get(session_id)

    def refresh(self, session_id: str) -> InterviewState:
        """Catch the clock up with wall time and react to any expiry."""

        store = self.get(session_id)
        self._catch_up(store)
        return store.state

    def pause(self, session_id: str) -> Transition:
        store = self.get(session_id)
        self._catch_up(store)
        return store.dispatch(lifecycle.pause)

    def resume(self, session_id: str) -> Transition:
        return self.get(session_id).dispatch(lifecycle.resume, now=self.clock())

    def update_draft(self, session_id: str, text: str) -> Transition:
        return self.get(session_id).dispatch(lifecycle.update_draft, text)

    def navigate(self, session_id: str, index: int) -> Transition:
        store = self.get(session_id)
        self._catch_up(store)
        return store.dispatch(lifecycle.navigate, index, now=self.clock())

    def submit(self, session_id: str, answer: str) -> Transition:
        """Record an answer, score it, then move on.

        The answer lands before the clock catches up, so a submit that
        arrives with the question timer already overdue still counts.
        """

        store = self.get(session_id)
        result = store.dispatch(lifecycle.submit_answer, answer, now=self.clock())
        if result.applied and result.request is not None:
            self._evaluate(store, result.request)
            self._catch_up(store)
            self._proceed(store)
        else:
            self._catch_up(store)
        return result

    def finish(self, session_id: str) -> Transition:
        """End the session with an oracle-written summary."""

        store = self.get(session_id)
        return self._finish(store)

    # ------------------------------------------------------------------
    # Oracle round-trips
    # ------------------------------------------------------------------

    def _context(self, state: InterviewState, **overrides: Any) -> QuestionContext:
        fields: Dict[str, Any] = dict(
            resume_text=state.resume_text,
            job_description=state.job_description,
            interview_type=state.config.interview_type,
            difficulty=state.config.difficulty,
            previous_questions=[q.text for q in state.questions],
            question_number=len(state.questions) + 1,
        )
        fields.update(overrides)
        return QuestionContext(**fields)

    def _load_bulk(self, store: InterviewStore) -> None:
        state = store.state
        events: List[Dict[str, Any]] = []
        with span(events, "question_set", session=state.session_id) as entry:
            generated = generate_question_set(self._context(state), self.policy, rng=self.rng)
            entry["count"] = len(generated)
        store.dispatch(_record_events, events)
        store.dispatch(
            ledger.load_questions,
            [{"text": q.text, "difficulty": q.difficulty} for q in generated],
        )
        store.dispatch(lifecycle.navigate, 1, now=self.clock())

    def _request_question(self, store: InterviewStore) -> Transition:
        begun = store.dispatch(lifecycle.request_next_question)
        if not begun.applied or begun.request is None:
            return begun
        tag = begun.request
        events: List[Dict[str, Any]] = []
        with span(events, "question", question=tag.question_number) as entry:
            generated = generate_question(
                self._context(begun.state, question_number=tag.question_number),
                rng=self.rng,
            )
            entry["source"] = generated.source
        store.dispatch(_record_events, events)
        result = store.dispatch(
            lifecycle.complete_question,
            tag,
            generated.text,
            difficulty=generated.difficulty,
            now=self.clock(),
        )
        if not result.applied:
            log_event("discarded", tag.session_id, action="question", reason=result.reason)
        return result

    def _evaluate(self, store: InterviewStore, tag: PendingRequest) -> Transition:
        question = store.state.questions[tag.question_number - 1]
        events: List[Dict[str, Any]] = []
        with span(events, "evaluation", question=tag.question_number) as entry:
            result = evaluate_answer(question.text, question.answer or "", tag.question_number)
            entry["source"] = result.source
            entry["score"] = result.score
        store.dispatch(_record_events, events)
        outcome = store.dispatch(lifecycle.complete_evaluation, tag, result.score, result.feedback)
        if not outcome.applied:
            log_event("discarded", tag.session_id, action="evaluation", reason=outcome.reason)
        return outcome

    def _proceed(self, store: InterviewStore) -> None:
        """After an answer or a skipped question: next question, or the summary."""

        state = store.state
        if state.phase != "active":
            return
        if lifecycle.all_answered(state):
            self._finish(store)
            return
        current = state.current_index or 0
        if current < len(state.questions):
            store.dispatch(lifecycle.advance, now=self.clock())
        elif len(state.questions) < state.config.total_questions:
            self._request_question(store)
        else:
            self._finish(store)

    def _finish(self, store: InterviewStore) -> Transition:
        begun = store.dispatch(lifecycle.request_summary)
        if not begun.applied or begun.request is None:
            return begun
        state = begun.state
        events: List[Dict[str, Any]] = []
        with span(events, "summary") as entry:
            summary = generate_summary(
                state.messages,
                candidate_name=state.candidate.name,
                interview_type=state.config.interview_type,
                difficulty=state.config.difficulty,
            )
            entry["source"] = summary.source
        store.dispatch(_record_events, events)
        report = SessionReport(**summary.model_dump(exclude={"source"}))
        result = store.dispatch(
            lifecycle.complete_summary,
            begun.request,
            report,
            now=self.clock(),
            policy=self.policy,
        )
        if result.applied:
            self._save(store)
        return result

    def _catch_up(self, store: InterviewStore) -> Transition:
        result = store.dispatch(scheduler.advance_clock, self.clock(), policy=self.policy)
        if "overall" in result.expired:
            self._save(store)
            return result
        if "question" in result.expired:
            if result.request is not None and result.request.kind == "evaluation":
                self._evaluate(store, result.request)
            self._proceed(store)
        return result

    def _save(self, store: InterviewStore) -> None:
        """Persist a finished session and release its live store."""

        state = store.state
        if state.session is None:
            return
        if self.persist:
            save_session(state.session, state.questions)
            log_event(
                "persisted",
                state.session_id,
                phase=state.phase,
                score=state.session.final_score,
            )
        if state.phase == "completed":
            self.sessions.retire(state.session.id)


__all__ = ["InterviewService", "StartBlocked", "WELCOME"]
