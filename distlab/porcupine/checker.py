"""Linearizability checking of concurrent histories against a sequential model.

Each partition of a history is searched on its own thread. The search walks
a linked list of call and return entries, tentatively linearizing calls and
backtracking when a return is reached that has not been explained. A cache
of (linearized set, state) pairs prunes states that were already explored.
"""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from distlab.porcupine.bitset import Bitset
from distlab.porcupine.model import CheckResult, Event, EventKind, Model, Operation


@dataclass(frozen=True)
class _Entry:
    kind: EventKind
    value: Any
    id: int
    time: int
    client_id: int


@dataclass
class LinearizationInfo:
    """Per partition: the entries checked and the longest partial linearizations found."""

    history: list[list[_Entry]] = field(default_factory=list)
    partial_linearizations: list[list[list[int]]] = field(default_factory=list)


class _Node:
    __slots__ = ("value", "match", "id", "next", "prev")

    def __init__(self, value: Any, id: int, match: Optional[_Node] = None) -> None:
        self.value = value
        self.match = match  # a call node points at its return; a return node has None
        self.id = id
        self.next: Optional[_Node] = None
        self.prev: Optional[_Node] = None


def _make_entries(history: list[Operation]) -> list[_Entry]:
    entries: list[_Entry] = []
    for op_id, op in enumerate(history):
        entries.append(_Entry(EventKind.CALL, op.input, op_id, op.call_time, op.client_id))
        entries.append(_Entry(EventKind.RETURN, op.output, op_id, op.return_time, op.client_id))
    entries.sort(key=lambda e: e.time)
    return entries


def _renumber(events: list[Event]) -> list[Event]:
    mapping: dict[int, int] = {}
    renumbered = []
    for event in events:
        new_id = mapping.setdefault(event.id, len(mapping))
        renumbered.append(Event(event.kind, event.value, new_id, event.client_id))
    return renumbered


def _convert_entries(events: list[Event]) -> list[_Entry]:
    # the position in the list serves as the time
    return [
        _Entry(event.kind, event.value, event.id, index, event.client_id)
        for index, event in enumerate(events)
    ]


def _insert_before(node: _Node, mark: Optional[_Node]) -> _Node:
    if mark is not None:
        before = mark.prev
        mark.prev = node
        node.next = mark
        if before is not None:
            node.prev = before
            before.next = node
    return node


def _length(node: Optional[_Node]) -> int:
    count = 0
    while node is not None:
        node = node.next
        count += 1
    return count


def _make_linked_entries(entries: list[_Entry]) -> Optional[_Node]:
    root: Optional[_Node] = None
    returns: dict[int, _Node] = {}
    for entry in reversed(entries):
        if entry.kind is EventKind.RETURN:
            node = _Node(entry.value, entry.id)
            returns[entry.id] = node
        else:
            node = _Node(entry.value, entry.id, returns.get(entry.id))
        _insert_before(node, root)
        root = node
    return root


def _lift(entry: _Node) -> None:
    entry.prev.next = entry.next
    entry.next.prev = entry.prev
    match = entry.match
    match.prev.next = match.next
    if match.next is not None:
        match.next.prev = match.prev


def _unlift(entry: _Node) -> None:
    match = entry.match
    match.prev.next = match
    if match.next is not None:
        match.next.prev = match
    entry.prev.next = entry
    entry.next.prev = entry


def _cache_contains(
    model: Model, cache: dict[int, list[tuple[Bitset, Any]]], linearized: Bitset, state: Any
) -> bool:
    return any(
        linearized == seen and model.equal(state, seen_state)
        for seen, seen_state in cache.get(linearized.hash_value(), [])
    )


def _check_single(
    model: Model, history: list[_Entry], compute_partial: bool, kill: threading.Event
) -> tuple[bool, list[Optional[list[int]]]]:
    entry = _make_linked_entries(history)
    n = _length(entry) // 2
    linearized = Bitset(n)
    cache: dict[int, list[tuple[Bitset, Any]]] = {}
    calls: list[tuple[_Node, Any]] = []
    longest: list[Optional[list[int]]] = [None] * n

    state = model.init()
    head = _insert_before(_Node(None, -1), entry)
    while head.next is not None:
        if kill.is_set():
            return False, longest
        if entry.match is not None:
            ok, new_state = model.step(state, entry.value, entry.match.value)
            if ok:
                new_linearized = linearized.clone().set(entry.id)
                if not _cache_contains(model, cache, new_linearized, new_state):
                    cache.setdefault(new_linearized.hash_value(), []).append(
                        (new_linearized, new_state)
                    )
                    calls.append((entry, state))
                    state = new_state
                    linearized.set(entry.id)
                    _lift(entry)
                    entry = head.next
                    continue
            entry = entry.next
        else:
            if not calls:
                return False, longest
            if compute_partial:
                seq: Optional[list[int]] = None
                for node, _ in calls:
                    prior = longest[node.id]
                    if prior is None or len(calls) > len(prior):
                        if seq is None:
                            seq = [c.id for c, _ in calls]
                        longest[node.id] = seq
            node, state = calls.pop()
            linearized.clear(node.id)
            _unlift(node)
            entry = node.next

    seq = [node.id for node, _ in calls]
    return True, [seq] * n


def _check_parallel(
    model: Model, history: list[list[_Entry]], compute_info: bool, timeout: Optional[float]
) -> tuple[CheckResult, LinearizationInfo]:
    kill = threading.Event()
    results: queue.Queue = queue.Queue()
    longest: list[Optional[list[Optional[list[int]]]]] = [None] * len(history)

    def run(index: int, subhistory: list[_Entry]) -> None:
        try:
            ok, found = _check_single(model, subhistory, compute_info, kill)
        except BaseException as exc:  # handed back to the checking thread
            results.put((False, exc))
            return
        longest[index] = found
        results.put((ok, None))

    for index, subhistory in enumerate(history):
        threading.Thread(target=run, args=(index, subhistory), daemon=True).start()

    deadline = time.monotonic() + timeout if timeout else None
    ok = True
    timed_out = False
    count = 0
    while count < len(history):
        remaining = None if deadline is None else max(deadline - time.monotonic(), 0.0)
        try:
            result, error = results.get(timeout=remaining)
        except queue.Empty:
            # a timeout may give a false positive
            timed_out = True
            kill.set()
            break
        count += 1
        if error is not None:
            kill.set()
            raise error
        ok = ok and result
        if not ok and not compute_info:
            kill.set()
            break

    info = LinearizationInfo()
    if compute_info:
        while count < len(history):
            results.get()
            count += 1
        partials = []
        for found in longest:
            unique = {id(seq): seq for seq in (found or []) if seq is not None}
            partials.append([list(seq) for seq in unique.values()])
        info = LinearizationInfo(history=history, partial_linearizations=partials)

    if not ok:
        result_kind = CheckResult.ILLEGAL
    elif timed_out:
        result_kind = CheckResult.UNKNOWN
    else:
        result_kind = CheckResult.OK
    return result_kind, info


def run_events(
    model: Model, history: list[Event], verbose: bool = False, timeout: Optional[float] = 0
) -> tuple[CheckResult, LinearizationInfo]:
    """Check an event history; ``timeout`` is in seconds, 0 or None for none."""
    partitions = model.partition_event(list(history))
    entries = [_convert_entries(_renumber(part)) for part in partitions]
    return _check_parallel(model, entries, verbose, timeout)


def run_operations(
    model: Model, history: list[Operation], verbose: bool = False, timeout: Optional[float] = 0
) -> tuple[CheckResult, LinearizationInfo]:
    """Check an operation history; ``timeout`` is in seconds, 0 or None for none."""
    partitions = model.partition(list(history))
    entries = [_make_entries(part) for part in partitions]
    return _check_parallel(model, entries, verbose, timeout)