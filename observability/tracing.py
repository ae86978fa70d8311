"""Span helper for recording oracle call timings."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List


@contextmanager
def span(events: List[Dict[str, Any]], name: str, **fields: Any) -> Iterator[Dict[str, Any]]:
    """Append ``{"span": name, "ms": elapsed}`` to ``events`` when the block exits.

    The yielded dict is the entry itself, so callers can attach an outcome.
    """

    entry: Dict[str, Any] = {"span": name, **fields}
    start = time.perf_counter()
    try:
        yield entry
    finally:
        entry["ms"] = int((time.perf_counter() - start) * 1000)
        events.append(entry)


__all__ = ["span"]
