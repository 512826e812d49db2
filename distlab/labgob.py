"""Self-describing value encoding for RPC messages and persisted state.

Values are written as length-prefixed JSON records. Dataclass fields whose
names start with an underscore are private and are never transmitted; the
encoder and decoder warn about them, because silently losing such a field
tends to break replicated state in confusing ways. Decoding into an object
that already holds non-default values also draws a warning.
"""

from __future__ import annotations

import base64
import dataclasses
import enum
import json
import logging
import struct
import threading
import typing
from typing import Any, BinaryIO

logger = logging.getLogger(__name__)

_HEADER = struct.Struct(">I")
_NATIVE_CONTAINERS = (int, float, str, bool, bytes, list, dict, tuple, set, frozenset)
_NATIVE_BY_NAME = {cls.__name__: cls for cls in _NATIVE_CONTAINERS}

_lock = threading.Lock()
_error_count = 0
_checked: set[Any] = set()
_types_by_name: dict[str, type] = {}
_names_by_type: dict[type, str] = {}


class LabgobError(ValueError):
    """Raised when a value cannot be encoded or a record cannot be decoded."""


def error_count() -> int:
    """Return how many warnings have been raised so far."""
    with _lock:
        return _error_count


def _is_type_like(obj: Any) -> bool:
    return isinstance(obj, type) or typing.get_origin(obj) is not None


def _as_type(value: Any) -> Any:
    return value if _is_type_like(value) else type(value)


def _default_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def register(value: Any) -> None:
    """Register the type of ``value`` (or ``value`` itself, if a type) under its default name."""
    cls = _as_type(value)
    register_name(_default_name(cls), cls)


def register_name(name: str, value: Any) -> None:
    """Register the type of ``value`` under ``name``."""
    cls = _as_type(value)
    _check_type(cls)
    with _lock:
        existing = _types_by_name.get(name)
        if existing is not None and existing is not cls:
            raise LabgobError(f"name {name!r} is already registered for {existing!r}")
        prior = _names_by_type.get(cls)
        if prior is not None and prior != name:
            raise LabgobError(f"type {cls!r} is already registered as {prior!r}")
        _types_by_name[name] = cls
        _names_by_type[cls] = name


def _name_for(cls: type) -> str:
    with _lock:
        name = _names_by_type.get(cls)
    if name is None:
        name = _default_name(cls)
        register_name(name, cls)
    return name


def _lookup(name: str) -> type:
    with _lock:
        cls = _types_by_name.get(name)
    if cls is None:
        raise LabgobError(f"type {name!r} is not registered")
    return cls


def _check_type(t: Any) -> None:
    """Warn once per type about private dataclass fields, recursing into field types."""
    global _error_count
    if isinstance(t, str):
        return
    try:
        with _lock:
            if t in _checked:
                return
            _checked.add(t)
    except TypeError:
        return

    if isinstance(t, type) and dataclasses.is_dataclass(t):
        for f in dataclasses.fields(t):
            if f.name.startswith("_"):
                logger.warning(
                    "labgob error: private field %s of %s in RPC or persist/snapshot "
                    "will not be transmitted",
                    f.name,
                    t.__name__,
                )
                with _lock:
                    _error_count += 1
            _check_type(f.type)
        return

    for arg in typing.get_args(t):
        if arg is not Ellipsis:
            _check_type(arg)


def _check_default(value: Any, depth: int = 2, name: str = "") -> None:
    """Warn if ``value`` holds non-default primitive fields."""
    global _error_count
    if depth > 3 or value is None:
        return
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        for f in dataclasses.fields(value):
            qualified = f"{name}.{f.name}" if name else f.name
            _check_default(getattr(value, f.name), depth + 1, qualified)
        return
    primitive = value.value if isinstance(value, enum.Enum) else value
    if isinstance(primitive, (bool, int, float, str)) and primitive:
        with _lock:
            if _error_count < 1:
                logger.warning(
                    "labgob warning: Decoding into a non-default variable/field %s may not work",
                    name or type(value).__name__,
                )
            _error_count += 1


def _public_fields(obj: Any) -> list[dataclasses.Field]:
    return [f for f in dataclasses.fields(obj) if not f.name.startswith("_")]


def _to_wire(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        cls = type(value)
        _check_type(cls)
        return {"e": _name_for(cls), "v": _to_wire(value.value)}
    if value is None or isinstance(value, (bool, str)):
        return value if type(value) in (bool, str, type(None)) else str(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, (bytes, bytearray)):
        return {"b": base64.b64encode(bytes(value)).decode("ascii")}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        cls = type(value)
        _check_type(cls)
        fields = {f.name: _to_wire(getattr(value, f.name)) for f in _public_fields(value)}
        return {"c": _name_for(cls), "v": fields}
    if isinstance(value, list):
        return {"l": [_to_wire(item) for item in value]}
    if isinstance(value, tuple):
        return {"t": [_to_wire(item) for item in value]}
    if isinstance(value, frozenset):
        return {"f": [_to_wire(item) for item in value]}
    if isinstance(value, set):
        return {"s": [_to_wire(item) for item in value]}
    if isinstance(value, dict):
        return {"d": [[_to_wire(k), _to_wire(v)] for k, v in value.items()]}
    raise LabgobError(f"cannot encode value of type {type(value).__name__}")


def _zero(hint: Any) -> Any:
    if isinstance(hint, str):
        base = hint.split("[", 1)[0].strip()
        origin = _NATIVE_BY_NAME.get(base)
        return origin() if origin is not None else None
    origin = typing.get_origin(hint) or hint
    if origin in _NATIVE_CONTAINERS:
        return origin()
    return None


def _build(cls: type, encoded: dict[str, Any]) -> Any:
    if not dataclasses.is_dataclass(cls):
        raise LabgobError(f"{cls!r} is not a record type")
    obj = cls.__new__(cls)
    for f in dataclasses.fields(cls):
        if f.name in encoded and not f.name.startswith("_"):
            val = _from_wire(encoded[f.name])
        elif f.default is not dataclasses.MISSING:
            val = f.default
        elif f.default_factory is not dataclasses.MISSING:
            val = f.default_factory()
        else:
            val = _zero(f.type)
        object.__setattr__(obj, f.name, val)
    return obj


def _from_wire(node: Any) -> Any:
    if node is None or isinstance(node, (bool, int, float, str)):
        return node
    if isinstance(node, dict):
        try:
            if "l" in node:
                return [_from_wire(item) for item in node["l"]]
            if "t" in node:
                return tuple(_from_wire(item) for item in node["t"])
            if "s" in node:
                return {_from_wire(item) for item in node["s"]}
            if "f" in node:
                return frozenset(_from_wire(item) for item in node["f"])
            if "d" in node:
                return {_from_wire(k): _from_wire(v) for k, v in node["d"]}
            if "b" in node:
                return base64.b64decode(node["b"])
            if "c" in node:
                return _build(_lookup(node["c"]), node["v"])
            if "e" in node:
                return _lookup(node["e"])(_from_wire(node["v"]))
        except (TypeError, ValueError, KeyError) as exc:
            if isinstance(exc, LabgobError):
                raise
            raise LabgobError(f"malformed record: {exc}") from exc
    raise LabgobError("malformed record")


class LabEncoder:
    """Writes encoded values to a binary stream, one record per value."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def encode(self, value: Any) -> None:
        """Encode ``value`` and write it to the stream."""
        _check_type(type(value))
        payload = json.dumps(_to_wire(value), separators=(",", ":")).encode("utf-8")
        self._stream.write(_HEADER.pack(len(payload)) + payload)


class LabDecoder:
    """Reads values written by :class:`LabEncoder` from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def _read(self) -> Any:
        header = self._stream.read(_HEADER.size)
        if not header:
            raise EOFError("no more records")
        if len(header) < _HEADER.size:
            raise LabgobError("truncated record header")
        (size,) = _HEADER.unpack(header)
        payload = self._stream.read(size)
        if len(payload) < size:
            raise LabgobError("truncated record")
        try:
            return json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LabgobError(f"malformed record: {exc}") from exc

    def decode(self, target: Any) -> Any:
        """Read the next value.

        ``target`` is either a type (or type hint) describing what is
        expected, or an existing object to be filled in. Lists, dicts, sets
        and dataclass instances given as target are updated in place and
        returned; otherwise the decoded value is returned.
        """
        is_template = _is_type_like(target)
        template = target if is_template else type(target)
        _check_type(template)
        if not is_template:
            _check_default(target)

        value = _from_wire(self._read())

        expected = typing.get_origin(template) or template
        if isinstance(expected, type) and expected not in (object, type(None)):
            if expected is float and isinstance(value, int) and not isinstance(value, bool):
                value = float(value)
            elif not isinstance(value, expected):
                raise LabgobError(
                    f"cannot decode {type(value).__name__} into {expected.__name__}"
                )

        if is_template:
            return value
        if isinstance(target, list):
            target[:] = value
            return target
        if isinstance(target, dict):
            target.clear()
            target.update(value)
            return target
        if isinstance(target, set):
            target.clear()
            target.update(value)
            return target
        if dataclasses.is_dataclass(target):
            for f in _public_fields(target):
                object.__setattr__(target, f.name, getattr(value, f.name))
            return target
        return value