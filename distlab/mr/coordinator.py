"""MapReduce coordinator: serves RPCs from workers over a UNIX-domain socket."""

from __future__ import annotations

import contextlib
import socket
import sys
import threading
import time
from typing import Any, Optional

from distlab.labgob import LabDecoder, LabEncoder, LabgobError
from distlab.mr.rpc import ExampleArgs, ExampleReply, coordinator_sock

_SERVICE = "Coordinator"
_RPC_METHODS = {"Example": "example"}


class Coordinator:
    """Hands out work to workers and tracks when the job is finished."""

    def __init__(self, files: list[str], n_reduce: int) -> None:
        self.files = list(files)
        self.n_reduce = n_reduce
        self._listener: Optional[socket.socket] = None

    def example(self, args: ExampleArgs) -> ExampleReply:
        """Example RPC handler: reply with one more than the argument."""
        return ExampleReply(y=args.x + 1)

    def serve(self) -> None:
        """Start listening for worker RPCs on a background thread."""
        sockname = coordinator_sock()
        with contextlib.suppress(FileNotFoundError):
            import os

            os.remove(sockname)
        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            listener.bind(sockname)
            listener.listen()
        except OSError:
            listener.close()
            raise
        self._listener = listener
        threading.Thread(target=self._accept_loop, args=(listener,), daemon=True).start()

    def done(self) -> bool:
        """Return whether the entire job has finished."""
        return False

    def _accept_loop(self, listener: socket.socket) -> None:
        while True:
            try:
                conn, _ = listener.accept()
            except OSError:
                return
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn:
            try:
                with conn.makefile("rb") as inp:
                    rpcname, args = LabDecoder(inp).decode(list)
            except (LabgobError, EOFError, ValueError, OSError):
                return
            try:
                response = {"reply": self._dispatch(rpcname, args), "error": None}
            except Exception as exc:  # reported back to the caller
                response = {"reply": None, "error": str(exc) or type(exc).__name__}
            with contextlib.suppress(OSError), conn.makefile("wb") as out:
                LabEncoder(out).encode(response)

    def _dispatch(self, rpcname: Any, args: Any) -> Any:
        service, dot, method = str(rpcname).rpartition(".")
        if not dot or service != _SERVICE or method not in _RPC_METHODS:
            raise LookupError(f"rpc: can't find method {rpcname}")
        return getattr(self, _RPC_METHODS[method])(args)


def make_coordinator(files: list[str], n_reduce: int) -> Coordinator:
    """Create a coordinator for ``files`` with ``n_reduce`` reduce tasks and start serving."""
    coordinator = Coordinator(files, n_reduce)
    coordinator.serve()
    return coordinator


def main(argv: Optional[list[str]] = None) -> int:
    """Run a coordinator over the input files until the job is done."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Usage: mrcoordinator inputfiles...", file=sys.stderr)
        return 1
    coordinator = make_coordinator(args, 10)
    while not coordinator.done():
        time.sleep(1)
    time.sleep(1)
    return 0