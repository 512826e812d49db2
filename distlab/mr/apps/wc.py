"""Word-count application for MapReduce."""

from __future__ import annotations

import itertools
from typing import Iterator

from distlab.mr.worker import KeyValue


def _words(text: str) -> Iterator[str]:
    for is_letter, chars in itertools.groupby(text, str.isalpha):
        if is_letter:
            yield "".join(chars)


def map_fn(filename: str, contents: str) -> list[KeyValue]:
    """Emit ``(word, "1")`` for every word in ``contents``; the file name is ignored."""
    return [KeyValue(word, "1") for word in _words(contents)]


def reduce_fn(key: str, values: list[str]) -> str:
    """Return the number of occurrences of ``key``."""
    return str(len(values))