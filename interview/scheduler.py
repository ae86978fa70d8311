"""Wall-clock driven ticking for the session timers."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from config.app_config import ScoringPolicy

from . import lifecycle
from .state import InterviewState, utcnow
from .transition import Transition, applied, noop


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def due_ticks(state: InterviewState, now: Optional[datetime] = None) -> int:
    """Whole seconds elapsed since the last applied tick while active."""

    if state.phase != "active" or state.last_tick_at is None:
        return 0
    current = _as_utc(now) if now else utcnow()
    elapsed = (current - _as_utc(state.last_tick_at)).total_seconds()
    return max(0, int(elapsed))


def advance_clock(
    state: InterviewState,
    now: Optional[datetime] = None,
    *,
    policy: Optional[ScoringPolicy] = None,
) -> Transition:
    """Apply one ``tick`` per second owed, stopping early if the session ends.

    Time spent paused never accrues because pausing clears the anchor and
    resuming sets a fresh one.
    """

    if state.phase != "active":
        return noop(state, "not_active")
    current = _as_utc(now) if now else utcnow()
    if state.last_tick_at is None:
        return applied(state.model_copy(update={"last_tick_at": current}))
    owed = due_ticks(state, current)
    if owed == 0:
        return noop(state, "no_tick_due")

    anchor = _as_utc(state.last_tick_at)
    combined: Optional[Transition] = None
    working = state
    applied_ticks = 0
    for _ in range(owed):
        applied_ticks += 1
        step = lifecycle.tick(working, now=anchor + timedelta(seconds=applied_ticks), policy=policy)
        combined = step if combined is None else combined.then(step)
        working = step.state
        if working.phase != "active":
            break

    if working.phase == "active":
        working = working.model_copy(update={"last_tick_at": anchor + timedelta(seconds=applied_ticks)})
        combined = combined.then(applied(working))
    return combined


__all__ = ["advance_clock", "due_ticks"]
