"""MapReduce application with slow reduce tasks, to catch workers that exit early."""

from __future__ import annotations

import time

from distlab.mr.worker import KeyValue

_SLOW_MARKERS = ("sherlock", "tom")
_SLOW_SECONDS = 3


def map_fn(filename: str, contents: str) -> list[KeyValue]:
    """Emit a single ``(filename, "1")`` pair per file."""
    return [KeyValue(filename, "1")]


def reduce_fn(key: str, values: list[str]) -> str:
    """Return the number of values, sleeping first for some keys."""
    if any(marker in key for marker in _SLOW_MARKERS):
        time.sleep(_SLOW_SECONDS)
    return str(len(values))