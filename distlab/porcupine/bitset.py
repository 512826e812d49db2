"""Fixed-size bit set used to track which operations are linearized."""

from __future__ import annotations

_CHUNK = 64


class Bitset:
    """A fixed number of bits stored in 64-bit chunks."""

    __slots__ = ("_chunks",)

    def __init__(self, bits: int) -> None:
        if bits < 0:
            raise ValueError("bit count must not be negative")
        self._chunks = [0] * (-(-bits // _CHUNK))

    def clone(self) -> Bitset:
        """Return an independent copy."""
        copy = Bitset(0)
        copy._chunks = list(self._chunks)
        return copy

    def _locate(self, pos: int) -> tuple[int, int]:
        if pos < 0:
            raise IndexError(f"bit position {pos} is negative")
        major, minor = divmod(pos, _CHUNK)
        if major >= len(self._chunks):
            raise IndexError(f"bit position {pos} is out of range")
        return major, minor

    def set(self, pos: int) -> Bitset:
        """Set bit ``pos`` and return this bitset."""
        major, minor = self._locate(pos)
        self._chunks[major] |= 1 << minor
        return self

    def clear(self, pos: int) -> Bitset:
        """Clear bit ``pos`` and return this bitset."""
        major, minor = self._locate(pos)
        self._chunks[major] &= ~(1 << minor)
        return self

    def get(self, pos: int) -> bool:
        """Return whether bit ``pos`` is set."""
        major, minor = self._locate(pos)
        return bool(self._chunks[major] >> minor & 1)

    def popcount(self) -> int:
        """Return the number of set bits."""
        return sum(chunk.bit_count() for chunk in self._chunks)

    def hash_value(self) -> int:
        """Return a hash that is equal for equal bitsets."""
        result = self.popcount()
        for chunk in self._chunks:
            result ^= chunk
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitset):
            return NotImplemented
        return self._chunks == other._chunks

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Bitset({[hex(c) for c in self._chunks]})"