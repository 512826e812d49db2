import pytest

from distlab.porcupine.bitset import Bitset


def test_fresh_bitset_is_clear():
    b = Bitset(100)
    assert b.popcount() == 0
    assert not any(b.get(i) for i in range(100))


def test_set_get_clear():
    b = Bitset(10)
    assert b.set(3) is b
    assert b.get(3)
    assert not b.get(4)
    assert b.clear(3) is b
    assert not b.get(3)


def test_bits_across_chunks():
    positions = [0, 63, 64, 127]
    b = Bitset(128)
    for p in positions:
        b.set(p)
    assert all(b.get(p) for p in positions)
    assert b.popcount() == len(positions)


def test_popcount_counts_distinct_bits():
    positions = [1, 5, 5, 9, 70]
    b = Bitset(80)
    for p in positions:
        b.set(p)
    assert b.popcount() == len(set(positions))


def test_clone_is_independent():
    b = Bitset(64).set(2)
    c = b.clone()
    c.set(5)
    assert c.get(5)
    assert not b.get(5)
    assert c.get(2)


def test_equality_depends_on_chunk_count():
    assert Bitset(64) == Bitset(1)
    assert (Bitset(65) == Bitset(64)) is False
    assert Bitset(10).set(1) == Bitset(10).set(1)
    assert (Bitset(10).set(1) == Bitset(10).set(2)) is False


def test_equal_bitsets_hash_equal():
    a = Bitset(200).set(3).set(150)
    b = Bitset(200).set(150).set(3)
    assert a == b
    assert a.hash_value() == b.hash_value()


def test_hash_returns_after_clear():
    a = Bitset(64)
    empty_hash = a.hash_value()
    a.set(10).clear(10)
    assert a.hash_value() == empty_hash


def test_out_of_range_raises():
    b = Bitset(64)
    with pytest.raises(IndexError):
        b.set(64)
    with pytest.raises(IndexError):
        b.get(-1)


def test_negative_size_raises():
    with pytest.raises(ValueError):
        Bitset(-1)