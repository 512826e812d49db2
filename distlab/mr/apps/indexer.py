"""Inverted-index application for MapReduce."""

from __future__ import annotations

import itertools
from typing import Iterator

from distlab.mr.worker import KeyValue


def _words(text: str) -> Iterator[str]:
    for is_letter, chars in itertools.groupby(text, str.isalpha):
        if is_letter:
            yield "".join(chars)


def map_fn(document: str, value: str) -> list[KeyValue]:
    """Emit ``(word, document)`` once for each distinct word in ``value``."""
    return [KeyValue(word, document) for word in dict.fromkeys(_words(value))]


def reduce_fn(key: str, values: list[str]) -> str:
    """Return the number of documents and their sorted, comma-separated names."""
    documents = sorted(values)
    return f"{len(documents)} {','.join(documents)}"