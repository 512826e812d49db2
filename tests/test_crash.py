from unittest import mock

import pytest

from distlab.mr.apps.crash import map_fn, maybe_crash, reduce_fn
from distlab.mr.worker import KeyValue


@mock.patch("secrets.randbelow", return_value=900)
def test_map_output(_randbelow):
    assert map_fn("pg.txt", "abc") == [
        KeyValue("a", "pg.txt"),
        KeyValue("b", "6"),
        KeyValue("c", "3"),
        KeyValue("d", "xyzzy"),
    ]


@mock.patch("secrets.randbelow", return_value=900)
def test_map_lengths_are_in_bytes(_randbelow):
    result = map_fn("é", "")
    assert result[1] == KeyValue("b", "2")


@mock.patch("secrets.randbelow", return_value=900)
def test_reduce_sorts_values(_randbelow):
    assert reduce_fn("k", ["b", "c", "a"]) == "a b c"


@mock.patch("os._exit", side_effect=SystemExit(1))
@mock.patch("secrets.randbelow", return_value=100)
def test_maybe_crash_exits(_randbelow, exit_mock):
    with pytest.raises(SystemExit):
        maybe_crash()
    exit_mock.assert_called_once_with(1)


@mock.patch("time.sleep")
@mock.patch("secrets.randbelow", side_effect=[500, 2500])
def test_delay_then_map_still_returns_pairs(_randbelow, sleep_mock):
    result = map_fn("f", "xy")
    assert result == [
        KeyValue("a", "f"),
        KeyValue("b", "1"),
        KeyValue("c", "2"),
        KeyValue("d", "xyzzy"),
    ]
    sleep_mock.assert_called_once()
    assert sleep_mock.call_args.args[0] * 1000 == pytest.approx(2500)


@mock.patch("time.sleep")
@mock.patch("secrets.randbelow", return_value=700)
def test_maybe_crash_proceeds(_randbelow, sleep_mock):
    assert reduce_fn("k", ["x"]) == "x"
    sleep_mock.assert_not_called()