"""Message types exchanged between MapReduce workers and the coordinator."""

from __future__ import annotations

import os
from dataclasses import dataclass

from distlab.labgob import register

_SOCKET_PREFIX = "/var/tmp/824-mr-"


@dataclass
class ExampleArgs:
    """Arguments of the example RPC."""

    x: int = 0


@dataclass
class ExampleReply:
    """Reply of the example RPC."""

    y: int = 0


register(ExampleArgs)
register(ExampleReply)


def coordinator_sock() -> str:
    """Return a per-user UNIX-domain socket name for the coordinator.

    The socket lives in /var/tmp because network file systems often do not
    support UNIX-domain sockets.
    """
    uid = os.getuid() if hasattr(os, "getuid") else 0
    return f"{_SOCKET_PREFIX}{uid}"