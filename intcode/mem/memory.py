"""
IntCode Machine — Growable Linear Memory

Programs may address cells far past their own length (scratch space,
relative-mode stacks), so the logical address space is unbounded. The
physical store is a flat Python list that grows on demand:

  - Any read or write past the end grows the list to
    max(MEMORY_GROWTH_FACTOR * len, addr + 1) and zero-fills the new
    cells before the access completes.
  - Growth never touches existing cells and the store never shrinks.
  - Doubling keeps growth amortized O(1) per access.

Cells hold Python ints, so puzzle-scale products (well past 64 bits)
never overflow.

Negative addresses are not memory at all and raise AddressError.
"""

import logging
from typing import Iterable, Iterator, List, Optional

from ..config import MEMORY_GROWTH_FACTOR
from ..errors import AddressError

logger = logging.getLogger(__name__)


class Memory:
    """Zero-based integer store addressable beyond its initial size."""

    def __init__(self, initial: Iterable[int] = ()):
        self._cells: List[int] = list(initial)

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        """Read the cell at addr, growing the store first if needed."""
        self._ensure(addr)
        return self._cells[addr]

    def write(self, addr: int, value: int):
        """Write value at addr, growing the store first if needed."""
        self._ensure(addr)
        self._cells[addr] = value

    __getitem__ = read
    __setitem__ = write

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[int]:
        return iter(self._cells)

    def __repr__(self) -> str:
        return f"Memory(len={len(self._cells)})"

    # --- Growth ---

    def _ensure(self, addr: int):
        if addr < 0:
            raise AddressError(f"Negative address {addr}")
        size = len(self._cells)
        if addr < size:
            return
        new_size = max(size * MEMORY_GROWTH_FACTOR, addr + 1)
        logger.debug(f"Memory grow {size} -> {new_size} (access at {addr})")
        self._cells.extend([0] * (new_size - size))

    # --- Bulk load / snapshots ---

    def load(self, values: Iterable[int], base: int = 0):
        """Copy values into memory starting at base."""
        for offset, value in enumerate(values):
            self.write(base + offset, value)

    def snapshot(self, start: int = 0, end: Optional[int] = None) -> List[int]:
        """Copy of cells [start, end). Does not grow the store."""
        if end is None:
            end = len(self._cells)
        return self._cells[start:end]

    def copy(self) -> 'Memory':
        return Memory(self._cells)
