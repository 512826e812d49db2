"""MapReduce worker side: key/value pairs, partition hashing and RPC calls."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Any, Callable

from distlab.labgob import LabDecoder, LabEncoder
from distlab.mr.rpc import ExampleArgs, coordinator_sock

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193


class CallError(Exception):
    """Raised when the coordinator reports an error for a call."""


@dataclass(frozen=True)
class KeyValue:
    """One pair emitted by a map function."""

    key: str
    value: str


MapFunc = Callable[[str, str], "list[KeyValue]"]
ReduceFunc = Callable[[str, "list[str]"], str]


def ihash(key: str) -> int:
    """Return a non-negative 31-bit FNV-1a hash of ``key``.

    Use ``ihash(key) % n_reduce`` to choose the reduce task for a pair.
    """
    h = _FNV_OFFSET
    for byte in key.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return h & 0x7FFFFFFF


def worker(mapf: MapFunc, reducef: ReduceFunc) -> None:
    """Run a worker with the given application functions.

    The coordinator hands out no tasks, so there is nothing to run and the
    worker returns at once.
    """
    if not callable(mapf):
        raise TypeError("map function must be callable")
    if not callable(reducef):
        raise TypeError("reduce function must be callable")


def call(rpcname: str, args: Any) -> Any:
    """Send an RPC such as ``"Coordinator.Example"`` and return its reply.

    Raises :class:`OSError` if the coordinator cannot be reached and
    :class:`CallError` if it reports an error.
    """
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as conn:
        conn.connect(coordinator_sock())
        with conn.makefile("wb") as out:
            LabEncoder(out).encode([rpcname, args])
        conn.shutdown(socket.SHUT_WR)
        with conn.makefile("rb") as inp:
            response = LabDecoder(inp).decode(dict)
    error = response.get("error")
    if error:
        raise CallError(error)
    return response.get("reply")


def call_example() -> int:
    """Send the example RPC, print the reply and return its value."""
    reply = call("Coordinator.Example", ExampleArgs(x=99))
    print(f"reply.Y {reply.y}")
    return reply.y