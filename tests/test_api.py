from distlab.models import KV_MODEL, KvInput, KvOp, KvOutput
from distlab.porcupine.api import (
    check_events,
    check_events_timeout,
    check_events_verbose,
    check_operations,
    check_operations_timeout,
    check_operations_verbose,
)
from distlab.porcupine.model import CheckResult, Event, EventKind, Operation


def put(key, value, start, end):
    return Operation(KvInput(KvOp.PUT, key, value), start, KvOutput(), end)


def append(key, value, start, end):
    return Operation(KvInput(KvOp.APPEND, key, value), start, KvOutput(), end)


def get(key, value, start, end):
    return Operation(KvInput(KvOp.GET, key), start, KvOutput(value), end)


GOOD = [put("k", "a", 0, 10), append("k", "b", 20, 30), get("k", "ab", 40, 50)]
BAD = [put("k", "a", 0, 10), append("k", "b", 20, 30), get("k", "a", 40, 50)]


def events_for(history):
    events = []
    for op_id, op in enumerate(history):
        events.append(Event(EventKind.CALL, op.input, op_id))
        events.append(Event(EventKind.RETURN, op.output, op_id))
    return events


def test_check_operations():
    assert check_operations(KV_MODEL, GOOD) is True
    assert check_operations(KV_MODEL, BAD) is False


def test_check_operations_timeout():
    assert check_operations_timeout(KV_MODEL, GOOD, 0) is CheckResult.OK
    assert check_operations_timeout(KV_MODEL, BAD, 5.0) is CheckResult.ILLEGAL


def test_check_operations_verbose():
    result, info = check_operations_verbose(KV_MODEL, GOOD, 0)
    assert result is CheckResult.OK
    assert [0, 1, 2] in info.partial_linearizations[0]


def test_check_events():
    assert check_events(KV_MODEL, events_for(GOOD)) is True
    assert check_events(KV_MODEL, events_for(BAD)) is False


def test_check_events_timeout():
    assert check_events_timeout(KV_MODEL, events_for(GOOD), None) is CheckResult.OK
    assert check_events_timeout(KV_MODEL, events_for(BAD), 5.0) is CheckResult.ILLEGAL


def test_check_events_verbose():
    result, info = check_events_verbose(KV_MODEL, events_for(BAD), 0)
    assert result is CheckResult.ILLEGAL
    assert len(info.history[0]) == 2 * len(BAD)
    longest = max(info.partial_linearizations[0], key=len)
    assert longest == [0, 1]