"""Entry points for checking histories for linearizability.

A timeout is given in seconds; 0 or None means no timeout. When a check
times out the result is ``CheckResult.UNKNOWN``, and a false positive is
possible.
"""

from __future__ import annotations

from typing import Optional

from distlab.porcupine.checker import LinearizationInfo, run_events, run_operations
from distlab.porcupine.model import CheckResult, Event, Model, Operation


def check_operations(model: Model, history: list[Operation]) -> bool:
    """Return whether the operation history is linearizable."""
    result, _ = run_operations(model, history, False, 0)
    return result is CheckResult.OK


def check_operations_timeout(
    model: Model, history: list[Operation], timeout: Optional[float]
) -> CheckResult:
    result, _ = run_operations(model, history, False, timeout)
    return result


def check_operations_verbose(
    model: Model, history: list[Operation], timeout: Optional[float]
) -> tuple[CheckResult, LinearizationInfo]:
    return run_operations(model, history, True, timeout)


def check_events(model: Model, history: list[Event]) -> bool:
    """Return whether the event history is linearizable."""
    result, _ = run_events(model, history, False, 0)
    return result is CheckResult.OK


def check_events_timeout(
    model: Model, history: list[Event], timeout: Optional[float]
) -> CheckResult:
    result, _ = run_events(model, history, False, timeout)
    return result


def check_events_verbose(
    model: Model, history: list[Event], timeout: Optional[float]
) -> tuple[CheckResult, LinearizationInfo]:
    return run_events(model, history, True, timeout)