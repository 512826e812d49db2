import dataclasses

import pytest

from distlab.porcupine.model import (
    CheckResult,
    Event,
    EventKind,
    Model,
    Operation,
    default_describe_operation,
    default_describe_state,
    no_partition,
    no_partition_event,
    shallow_equal,
)


def _ops():
    return [
        Operation(input="a", call_time=0, output="b", return_time=1),
        Operation(input="c", call_time=2, output="d", return_time=3, client_id=1),
    ]


def test_no_partition_single_partition():
    history = _ops()
    parts = no_partition(history)
    assert len(parts) == 1
    assert parts[0] == history


def test_no_partition_event_single_partition():
    events = [Event(EventKind.CALL, "x", 0), Event(EventKind.RETURN, "y", 0)]
    parts = no_partition_event(events)
    assert parts == [events]


def test_shallow_equal():
    assert shallow_equal("abc", "abc")
    assert shallow_equal(1, 2) is False


def test_default_describe_operation_format():
    assert default_describe_operation("a", 1) == "a -> 1"


def test_default_describe_state():
    assert default_describe_state(42) == str(42)


def test_model_fills_defaults():
    model = Model(init=lambda: 0, step=lambda s, i, o: (True, s))
    assert model.partition is no_partition
    assert model.partition_event is no_partition_event
    assert model.equal is shallow_equal
    assert model.describe_operation is default_describe_operation
    assert model.describe_state is default_describe_state


def test_model_replaces_none_with_defaults():
    model = Model(
        init=lambda: 0,
        step=lambda s, i, o: (True, s),
        partition=None,
        equal=None,
        describe_state=None,
    )
    assert model.partition is no_partition
    assert model.equal is shallow_equal
    assert model.describe_state is default_describe_state


def test_model_keeps_custom_functions():
    def custom_equal(a, b):
        return True

    model = Model(init=lambda: 0, step=lambda s, i, o: (True, s), equal=custom_equal)
    assert model.equal is custom_equal


def test_operation_is_immutable():
    op = _ops()[0]
    with pytest.raises(dataclasses.FrozenInstanceError):
        op.call_time = 5
    assert op.call_time == 0
    assert op.return_time == 1


def test_event_default_client():
    ev = Event(EventKind.RETURN, "v", 3)
    assert ev.client_id == 0
    assert ev.kind is EventKind(True)


def test_check_result_lookup():
    assert CheckResult("Illegal") is CheckResult.ILLEGAL
    assert CheckResult.OK == "Ok"