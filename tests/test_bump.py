import struct

import pytest

from heapsim.bump import BumpArena, OutOfMemory


def test_alloc_returns_address_inside_arena():
    arena = BumpArena()
    addr = arena.allocate(5 * 4)
    assert addr == 0
    assert len(arena) == 20


def test_write_and_read_back():
    arena = BumpArena()
    addr = arena.allocate(5 * 4)
    arena.write(addr, struct.pack("<5i", *(i * 10 for i in range(5))))
    values = struct.unpack("<5i", arena.read(addr, 20))
    assert values[4] == 40
    assert values == (0, 10, 20, 30, 40)


def test_sequential_allocations_are_contiguous():
    arena = BumpArena()
    a = arena.allocate(8)
    b = arena.allocate(16)
    assert b - a == 8
    assert len(arena) == 24


def test_zero_size_returns_current_break():
    arena = BumpArena()
    arena.allocate(12)
    assert arena.allocate(0) == 12
    assert len(arena) == 12


def test_fixed_capacity_exact_fit():
    arena = BumpArena(8192)
    assert arena.allocate(8192) == 0
    with pytest.raises(OutOfMemory):
        arena.allocate(1)


def test_fixed_capacity_overflow_leaves_state_unchanged():
    arena = BumpArena(100)
    arena.allocate(60)
    with pytest.raises(OutOfMemory):
        arena.allocate(41)
    assert len(arena) == 60
    assert arena.allocate(40) == 60


def test_out_of_memory_is_memory_error():
    arena = BumpArena(0)
    with pytest.raises(MemoryError):
        arena.allocate(1)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        BumpArena().allocate(-1)


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        BumpArena(-5)


def test_fresh_memory_is_zeroed():
    arena = BumpArena()
    addr = arena.allocate(16)
    assert arena.read(addr, 16) == bytes(16)


def test_fill_sets_range_only():
    arena = BumpArena()
    addr = arena.allocate(10)
    arena.fill(addr + 2, 4, 0xAB)
    assert arena.read(addr, 10) == b"\x00\x00" + b"\xab" * 4 + b"\x00" * 4


def test_fill_rejects_non_byte_value():
    arena = BumpArena()
    arena.allocate(4)
    with pytest.raises(ValueError):
        arena.fill(0, 4, 256)


def test_read_past_break_raises():
    arena = BumpArena()
    arena.allocate(8)
    with pytest.raises(IndexError):
        arena.read(4, 8)


def test_write_past_break_raises():
    arena = BumpArena()
    arena.allocate(4)
    with pytest.raises(IndexError):
        arena.write(2, b"abcd")
    assert arena.read(0, 4) == bytes(4)


def test_negative_address_raises():
    arena = BumpArena()
    arena.allocate(4)
    with pytest.raises(IndexError):
        arena.read(-1, 2)


@pytest.mark.parametrize("sizes", [[1, 2, 3], [8, 8, 8, 8], [100, 0, 7]])
def test_addresses_follow_cumulative_sizes(sizes):
    arena = BumpArena()
    addresses = [arena.allocate(s) for s in sizes]
    expected = [sum(sizes[:i]) for i in range(len(sizes))]
    assert addresses == expected
    assert len(arena) == sum(sizes)