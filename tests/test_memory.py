"""
Growable memory tests.

Reads and writes past the end must grow the store (zero filled) instead of
failing, and growth must never disturb existing cells.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode.mem.memory import Memory
from intcode.errors import AddressError, IntCodeError


class TestReadWrite:
    def test_initial_contents(self):
        mem = Memory([1, 2, 3])
        assert len(mem) == 3
        assert [mem.read(i) for i in range(3)] == [1, 2, 3]

    def test_write_in_range(self):
        mem = Memory([0, 0])
        mem.write(1, 42)
        assert mem[1] == 42
        assert len(mem) == 2

    def test_item_access(self):
        mem = Memory([5])
        mem[0] = 7
        assert mem[0] == 7

    def test_huge_values(self):
        mem = Memory([0])
        mem[0] = 2 ** 127 - 1
        mem[0] *= 3
        assert mem[0] == (2 ** 127 - 1) * 3


class TestGrowth:
    def test_read_past_end_is_zero(self):
        mem = Memory([1, 2, 3])
        assert mem.read(10) == 0
        assert len(mem) == 11

    def test_write_past_end(self):
        mem = Memory([1, 2, 3])
        mem.write(1000, 9)
        assert mem[1000] == 9
        assert len(mem) == 1001
        assert all(mem[i] == 0 for i in range(3, 1000))

    def test_doubling(self):
        mem = Memory(range(10))
        mem.read(10)
        assert len(mem) == 20

    def test_empty_memory_grows(self):
        mem = Memory()
        mem.write(0, 1)
        assert len(mem) == 1
        assert mem[0] == 1

    def test_growth_preserves_old_cells(self):
        values = [3, -1, 0, 99, 12345678901234567890]
        mem = Memory(values)
        mem.write(4096, 1)
        for addr, value in enumerate(values):
            assert mem.read(addr) == value

    def test_never_shrinks(self):
        mem = Memory([1])
        mem.read(50)
        size = len(mem)
        mem.read(2)
        assert len(mem) == size


class TestNegativeAddress:
    def test_read(self):
        with pytest.raises(AddressError):
            Memory([1, 2]).read(-1)

    def test_write(self):
        with pytest.raises(IntCodeError):
            Memory([1, 2]).write(-5, 0)


class TestSnapshots:
    def test_snapshot_is_a_copy(self):
        mem = Memory([1, 2, 3])
        snap = mem.snapshot()
        mem[0] = 100
        assert snap == [1, 2, 3]

    def test_snapshot_range(self):
        mem = Memory([1, 2, 3, 4])
        assert mem.snapshot(1, 3) == [2, 3]

    def test_copy_is_independent(self):
        mem = Memory([1, 2, 3])
        twin = mem.copy()
        twin[0] = 9
        twin[10] = 1
        assert mem[0] == 1
        assert len(mem) == 3

    def test_load(self):
        mem = Memory()
        mem.load([7, 8], base=2)
        assert mem.snapshot(0, 4) == [0, 0, 7, 8]
