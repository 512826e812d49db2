"""The crash application without the crashes, for a failure-free baseline."""

from __future__ import annotations

import os
import secrets

from distlab.mr.worker import KeyValue

# never reached: this variant keeps the crash roll but never acts on it
_CRASH_BELOW = 0


def maybe_crash() -> None:
    """Roll for a crash as the crash application does, but never crash."""
    if secrets.randbelow(1000) < _CRASH_BELOW:
        os._exit(1)


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