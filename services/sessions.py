"""In-memory registry of live interview stores."""
from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Dict, List, Optional

from config.settings import settings
from services.store import InterviewStore


class SessionManager:
    """Live stores by session id, plus a small cache of recently finished ones.

    ``retire`` moves a finished store out of the live map; only the
    ``retain_finished`` most recently retired stores stay readable.
    """

    def __init__(self, retain_finished: Optional[int] = None) -> None:
        self._stores: Dict[str, InterviewStore] = {}
        self._finished: "OrderedDict[str, InterviewStore]" = OrderedDict()
        self._retain = settings.FINISHED_SESSIONS_RETAINED if retain_finished is None else retain_finished
        self._lock = threading.Lock()

    def add(self, store: InterviewStore) -> str:
        session_id = store.session_id
        if session_id is None:
            raise ValueError("store has no session yet")
        with self._lock:
            self._stores[session_id] = store
        return session_id

    def get(self, session_id: str) -> InterviewStore:
        """Return the store for ``session_id``; raises ``KeyError`` when unknown."""

        with self._lock:
            store = self._stores.get(session_id)
            if store is None:
                store = self._finished[session_id]
            return store

    def retire(self, session_id: str) -> None:
        with self._lock:
            store = self._stores.pop(session_id, None)
            if store is None:
                return
            self._finished[session_id] = store
            while len(self._finished) > self._retain:
                self._finished.popitem(last=False)

    def remove(self, session_id: str) -> None:
        with self._lock:
            self._stores.pop(session_id, None)
            self._finished.pop(session_id, None)

    def ids(self) -> List[str]:
        """Ids of sessions that are still running or paused."""

        with self._lock:
            return list(self._stores)

    def finished_ids(self) -> List[str]:
        with self._lock:
            return list(self._finished)


__all__ = ["SessionManager"]
