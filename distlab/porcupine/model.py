"""Histories, events and the model description used by the linearizability checker."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class Operation:
    """A completed operation: its input, output and invocation and response times."""

    input: Any
    call_time: int
    output: Any
    return_time: int
    client_id: int = 0


class EventKind(enum.Enum):
    CALL = False
    RETURN = True


@dataclass(frozen=True)
class Event:
    """A call or return event; a call and its return share an ``id``."""

    kind: EventKind
    value: Any
    id: int
    client_id: int = 0


def no_partition(history: list[Operation]) -> list[list[Operation]]:
    """Treat the whole history as a single partition."""
    return [list(history)]


def no_partition_event(history: list[Event]) -> list[list[Event]]:
    """Treat the whole event history as a single partition."""
    return [list(history)]


def shallow_equal(state1: Any, state2: Any) -> bool:
    return state1 == state2


def default_describe_operation(input: Any, output: Any) -> str:
    return f"{input} -> {output}"


def default_describe_state(state: Any) -> str:
    return f"{state}"


@dataclass
class Model:
    """A sequential specification of a system.

    ``step(state, input, output)`` returns whether the step is allowed and
    the new state; it must not mutate ``state``. Optional parts left as
    ``None`` fall back to the defaults above.
    """

    init: Callable[[], Any]
    step: Callable[[Any, Any, Any], tuple[bool, Any]]
    partition: Optional[Callable[[list[Operation]], list[list[Operation]]]] = no_partition
    partition_event: Optional[Callable[[list[Event]], list[list[Event]]]] = no_partition_event
    equal: Optional[Callable[[Any, Any], bool]] = shallow_equal
    describe_operation: Optional[Callable[[Any, Any], str]] = default_describe_operation
    describe_state: Optional[Callable[[Any], str]] = default_describe_state

    def __post_init__(self) -> None:
        if self.partition is None:
            self.partition = no_partition
        if self.partition_event is None:
            self.partition_event = no_partition_event
        if self.equal is None:
            self.equal = shallow_equal
        if self.describe_operation is None:
            self.describe_operation = default_describe_operation
        if self.describe_state is None:
            self.describe_state = default_describe_state


class CheckResult(str, enum.Enum):
    UNKNOWN = "Unknown"
    OK = "Ok"
    ILLEGAL = "Illegal"