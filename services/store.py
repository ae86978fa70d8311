"""Single-writer holder for one interview's state."""
from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from interview.lifecycle import initial_state
from interview.state import InterviewState
from interview.transition import Transition
from observability import log_event


class InterviewStore:
    """Applies transitions one at a time; oracle calls happen outside the lock."""

    def __init__(self, state: Optional[InterviewState] = None) -> None:
        self._state = state or initial_state()
        self._lock = threading.Lock()

    @property
    def state(self) -> InterviewState:
        return self._state

    @property
    def session_id(self) -> Optional[str]:
        return self._state.session_id

    def dispatch(self, action: Callable[..., Transition], *args: Any, **kwargs: Any) -> Transition:
        with self._lock:
            result = action(self._state, *args, **kwargs)
            self._state = result.state
        log_event(
            "transition",
            result.state.session_id,
            action=getattr(action, "__name__", repr(action)),
            phase=result.state.phase,
            applied=result.applied,
            reason=result.reason,
            expired=list(result.expired) or None,
        )
        return result


__all__ = ["InterviewStore"]
