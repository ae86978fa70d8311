"""Countdown timers for the question and the overall session.

The engine is passive: it never schedules anything itself. Callers invoke
``tick`` once per elapsed second (see ``interview.scheduler``).
"""
from __future__ import annotations

from typing import Tuple

from .state import Timer


def arm(timer: Timer, limit_seconds: int) -> Timer:
    """Reset ``remaining`` to ``limit_seconds`` and start counting."""

    if limit_seconds < 1:
        raise ValueError(f"timer limit must be at least one second, got {limit_seconds}")
    return timer.model_copy(update={"limit_seconds": limit_seconds, "remaining_seconds": limit_seconds, "active": True})


def disarm(timer: Timer) -> Timer:
    """Stop counting without touching ``remaining``."""

    return timer.model_copy(update={"active": False})


def reactivate(timer: Timer) -> Timer:
    """Resume counting from the frozen value; a spent timer stays inactive."""

    return timer.model_copy(update={"active": timer.remaining_seconds > 0})


def tick(timer: Timer) -> Tuple[Timer, bool]:
    """Advance one second. Returns the new timer and whether it just expired."""

    if not timer.active or timer.remaining_seconds <= 0:
        return timer, False
    remaining = timer.remaining_seconds - 1
    if remaining == 0:
        return timer.model_copy(update={"remaining_seconds": 0, "active": False}), True
    return timer.model_copy(update={"remaining_seconds": remaining}), False


__all__ = ["arm", "disarm", "reactivate", "tick"]
