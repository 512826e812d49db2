"""MapReduce application that sometimes crashes and sometimes stalls.

Used to check that a MapReduce implementation recovers from failed and
slow workers.
"""

from __future__ import annotations

import os
import secrets
import time

from distlab.mr.worker import KeyValue

_CRASH_BELOW = 330
_DELAY_BELOW = 660
_MAX_DELAY_MS = 10 * 1000


def maybe_crash() -> None:
    """Exit the process a third of the time; stall up to ten seconds another third."""
    roll = secrets.randbelow(1000)
    if roll < _CRASH_BELOW:
        os._exit(1)
    elif roll < _DELAY_BELOW:
        time.sleep(secrets.randbelow(_MAX_DELAY_MS) / 1000)


def map_fn(filename: str, contents: str) -> list[KeyValue]:
    maybe_crash()
    return [
        KeyValue("a", filename),
        KeyValue("b", str(len(filename.encode("utf-8")))),
        KeyValue("c", str(len(contents.encode("utf-8")))),
        KeyValue("d", "xyzzy"),
    ]


def reduce_fn(key: str, values: list[str]) -> str:
    maybe_crash()
    # sorted for deterministic output
    return " ".join(sorted(values))