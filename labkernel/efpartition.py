"""Fixed-size block allocator kept inside simulated memory."""

from __future__ import annotations

from dataclasses import dataclass

from .memory import AllocationError, PhysicalMemory

__all__ = ["Slot", "FixedPartition", "total_size"]

_HEADER_SIZE = 12  # block count, block size, first free block


def _aligned(per_size: int) -> int:
    return ((per_size + 3) >> 2) << 2


def total_size(per_size: int, n: int) -> int:
    """Bytes needed for ``n`` blocks of ``per_size`` bytes plus the header."""
    return _aligned(per_size) * n + _HEADER_SIZE


@dataclass(frozen=True)
class Slot:
    """A fixed-size block and the link word stored at its start."""

    start: int
    next_start: int

    def __str__(self) -> str:
        return f"EEB(start=0x{self.start:x}, next=0x{self.next_start:x})"


class FixedPartition:
    """A partition of ``n`` equal blocks handed out from a free list."""

    def __init__(self, memory: PhysicalMemory, start: int, per_size: int, n: int) -> None:
        if per_size <= 0:
            raise ValueError("block size must be positive")
        if n <= 0:
            raise ValueError("block count must be positive")
        self.memory = memory
        self.start = start
        actual = _aligned(per_size)
        first = start + _HEADER_SIZE
        memory.write_word(start, n)
        memory.write_word(start + 4, actual)
        memory.write_word(start + 8, first)
        slots = range(first, first + n * actual, actual)
        for slot in slots:
            following = slot + actual
            memory.write_word(slot, following if following < slots.stop else 0)

    @property
    def total_n(self) -> int:
        return self.memory.read_word(self.start)

    @property
    def per_size(self) -> int:
        return self.memory.read_word(self.start + 4)

    @property
    def first_free(self) -> int:
        return self.memory.read_word(self.start + 8)

    def _slots(self) -> range:
        first = self.start + _HEADER_SIZE
        return range(first, first + self.total_n * self.per_size, self.per_size)

    def alloc(self) -> int:
        """Take a block from the free list and return its address."""
        addr = self.first_free
        if not addr:
            raise AllocationError("all blocks are in use")
        self.memory.write_word(self.start + 8, self.memory.read_word(addr))
        return addr

    def free(self, start: int) -> None:
        """Put the block at ``start`` back at the head of the free list."""
        if start not in self._slots():
            raise ValueError(f"0x{start:x} is not a block of this partition")
        self.memory.write_word(start, self.first_free)
        self.memory.write_word(self.start + 8, start)

    def walk(self) -> list[Slot]:
        """Every block in address order with its link word."""
        return [Slot(addr, self.memory.read_word(addr)) for addr in self._slots()]

    def __str__(self) -> str:
        return (
            f"eFPartition(start=0x{self.start:x}, totalN=0x{self.total_n:x}, "
            f"perSize=0x{self.per_size:x}, firstFree=0x{self.first_free:x})"
        )