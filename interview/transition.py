"""Result type shared by every state transition."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .state import InterviewState, PendingRequest, TimerId


@dataclass(frozen=True)
class Transition:
    """New snapshot plus what happened while producing it.

    ``applied`` is False for tolerated no-ops; ``reason`` then says why.
    ``expired`` lists timers that reached zero, ``request`` is the oracle call
    the caller should issue, ``position`` the 1-based ledger slot touched.
    """

    state: InterviewState
    applied: bool = True
    reason: Optional[str] = None
    expired: Tuple[TimerId, ...] = ()
    request: Optional[PendingRequest] = None
    position: Optional[int] = None

    def then(self, nxt: "Transition") -> "Transition":
        """Combine with a follow-up transition applied to ``self.state``."""

        return replace(
            nxt,
            applied=self.applied or nxt.applied,
            reason=nxt.reason if nxt.reason is not None else self.reason,
            expired=self.expired + tuple(t for t in nxt.expired if t not in self.expired),
            request=nxt.request or self.request,
            position=nxt.position if nxt.position is not None else self.position,
        )


def working_copy(state: InterviewState) -> InterviewState:
    return state.model_copy(deep=True)


def applied(state: InterviewState, **fields) -> Transition:
    return Transition(state=state, applied=True, **fields)


def noop(state: InterviewState, reason: str) -> Transition:
    return Transition(state=state, applied=False, reason=reason)


__all__ = ["Transition", "applied", "noop", "working_copy"]
