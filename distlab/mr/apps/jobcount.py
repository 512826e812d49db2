"""MapReduce application that counts how many times map tasks are run.

Each map call leaves a marker file in the working directory; the reduce
function counts the markers. This shows whether tasks are handed out more
than once even when nothing fails.
"""

from __future__ import annotations

import itertools
import os
import random
import time
from pathlib import Path

from distlab.mr.worker import KeyValue

MARKER_PREFIX = "mr-worker-jobcount"

_calls = itertools.count()


def map_fn(filename: str, contents: str) -> list[KeyValue]:
    """Leave a marker file, pause for two to five seconds and emit ``("a", "x")``."""
    marker = Path(f"{MARKER_PREFIX}-{os.getpid()}-{next(_calls)}")
    marker.write_text("x")
    time.sleep((2000 + random.randrange(3000)) / 1000)
    return [KeyValue("a", "x")]


def reduce_fn(key: str, values: list[str]) -> str:
    """Return the number of marker files in the working directory."""
    invocations = sum(
        1 for entry in os.scandir(".") if entry.name.startswith(MARKER_PREFIX)
    )
    return str(invocations)