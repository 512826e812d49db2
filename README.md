# distlab

A toolkit for experimenting with distributed systems in plain Python.
There are no third-party runtime dependencies.

## What is inside

- **`distlab.labgob`**: an encoder and a decoder, `LabEncoder` and `LabDecoder`, for values sent between processes or kept in snapshots.
  - Values are written to a binary stream as length-prefixed JSON records. Supported are `None`, booleans, numbers, strings, bytes, lists, tuples, sets, frozensets, dicts, enums and dataclasses.
  - Dataclass and enum types are looked up by name when decoding. `register(value)` and `register_name(name, value)` register a type explicitly; unregistered types are registered under their module-qualified name the first time they are encoded.
  - Dataclass fields whose names start with an underscore are never transmitted, and a warning is logged once per type when such a field is seen.
  - `decode(target)` accepts either a type (or type hint) or an existing object. Lists, dicts, sets and dataclass instances given as target are filled in place. Decoding into an object that already holds non-default values logs a warning.
  - `error_count()` reports how many warnings have been counted so far.
  - Malformed or unencodable data raises `LabgobError`; reading past the last record raises `EOFError`.
- **`distlab.porcupine`**: a linearizability checker for histories of concurrent operations.
  - `distlab.porcupine.model` holds `Operation`, `Event`, `EventKind`, `Model` and `CheckResult`, together with the defaults `no_partition`, `no_partition_event`, `shallow_equal`, `default_describe_operation` and `default_describe_state`.
  - `distlab.porcupine.bitset` holds `Bitset`, the fixed-size bit set used by the search.
  - `distlab.porcupine.api` holds the checks: `check_operations`, `check_events` and their `_timeout` and `_verbose` variants. Timeouts are in seconds; `0` or `None` means no timeout. A check that times out returns `CheckResult.UNKNOWN`. The `_verbose` variants also return a `LinearizationInfo` with the longest partial linearizations found for each partition.
  - Partitions of a history are checked on separate threads.
- **`distlab.models`**: a ready-made key/value model for the checker.
  - Inputs and outputs are `KvInput`, `KvOutput` and the operation codes in `KvOp` (`GET`, `PUT`, `APPEND`).
  - The model functions are `kv_partition`, `kv_init`, `kv_step` and `kv_describe_operation`, and `KV_MODEL` puts them together.
- **`distlab.mr`**: MapReduce building blocks.
  - `distlab.mr.worker`: `KeyValue`, `ihash` (a 31-bit FNV-1a hash), `call` for sending an RPC to the coordinator, `call_example`, and `worker`.
  - `distlab.mr.coordinator`: `Coordinator`, which listens on a UNIX-domain socket named by `coordinator_sock()` and answers the `Coordinator.Example` RPC; `make_coordinator` creates one and starts serving.
  - `distlab.mr.rpc`: the `ExampleArgs` and `ExampleReply` messages and `coordinator_sock()`.
  - Sample applications under `distlab.mr.apps`: `wc`, `indexer`, `crash`, `nocrash`, `early_exit` and `jobcount`.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Checking a history

```python
from distlab.models import KV_MODEL, KvInput, KvOp, KvOutput
from distlab.porcupine.api import check_operations
from distlab.porcupine.model import Operation

history = [
    Operation(KvInput(KvOp.PUT, "x", "a"), 0, KvOutput(), 10, client_id=0),
    Operation(KvInput(KvOp.GET, "x"), 20, KvOutput("a"), 30, client_id=1),
]
check_operations(KV_MODEL, history)  # True
```

## Using the applications directly

Every application module has a `map_fn` and a `reduce_fn`.

```python
from distlab.mr.apps import wc

pairs = wc.map_fn("input.txt", "the cat and the hat")
# one KeyValue per word, each with value "1"

wc.reduce_fn("the", ["1", "1"])
# "2"
```

Use `ihash(key) % n_reduce` from `distlab.mr.worker` to choose the reduce task for a key.

Note that `crash.map_fn` and `crash.reduce_fn` end the calling process about a third of the time, and `jobcount.map_fn` writes marker files into the current directory.

## Command-line tool

Start a coordinator over a set of input files:

```
mrcoordinator pg-*.txt
```

It serves RPCs on its UNIX-domain socket and polls `done()` once a second.

## What it does not do

- The coordinator hands out no map or reduce tasks, and its `done()` always returns `False`, so `mrcoordinator` runs until it is stopped.
- `worker()` checks that it was given callables and returns at once; it does not fetch or run tasks.
- There is no command for starting a worker and no sequential MapReduce runner.
- There is no simulated in-process network for RPCs; `call` talks to a real coordinator over a UNIX-domain socket, so it needs a POSIX system.
- The checker produces no visualization of a history.