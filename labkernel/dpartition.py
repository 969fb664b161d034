"""Variable-size first-fit allocator kept inside simulated memory."""

from __future__ import annotations

from dataclasses import dataclass

from .memory import AllocationError, PhysicalMemory

__all__ = ["Block", "DynamicPartition"]

_HEADER_SIZE = 8  # total size, first free block
_EMB_SIZE = 8  # block size, next free block / user data
_EMB_OVERHEAD = 4  # the size word kept in front of user data
_MINIMUM_SIZE = _HEADER_SIZE + _EMB_SIZE


@dataclass(frozen=True)
class Block:
    """A memory block as laid out in the partition."""

    start: int
    size: int
    next_start: int

    def __str__(self) -> str:
        return (
            f"EMB(start=0x{self.start:x}, size=0x{self.size:x}, "
            f"nextStart=0x{self.next_start:x})"
        )


class DynamicPartition:
    """A partition handing out blocks of any size, first fit by address."""

    def __init__(self, memory: PhysicalMemory, start: int, total_size: int) -> None:
        if total_size < _MINIMUM_SIZE:
            raise ValueError(f"partition size 0x{total_size:x} is too small")
        self.memory = memory
        self.start = start
        first = start + _HEADER_SIZE
        memory.write_word(start, total_size)
        memory.write_word(start + 4, first)
        memory.write_word(first, total_size - _HEADER_SIZE)
        memory.write_word(first + 4, 0)

    @property
    def size(self) -> int:
        return self.memory.read_word(self.start)

    @property
    def first_free(self) -> int:
        return self.memory.read_word(self.start + 4)

    def _size_of(self, block: int) -> int:
        return self.memory.read_word(block)

    def _next_of(self, block: int) -> int:
        return self.memory.read_word(block + 4)

    def _set_size(self, block: int, size: int) -> None:
        self.memory.write_word(block, size)

    def _set_next(self, block: int, target: int) -> None:
        self.memory.write_word(block + 4, target)

    def _link(self, prev: int, target: int) -> None:
        if prev:
            self._set_next(prev, target)
        else:
            self.memory.write_word(self.start + 4, target)

    def alloc(self, size: int) -> int:
        """Allocate ``size`` bytes and return the address of the user data."""
        if size < 0:
            raise ValueError("allocation size must not be negative")
        actual = max((size + _EMB_OVERHEAD + 3) & ~3, _EMB_SIZE)

        prev = 0
        candidate = self.first_free
        while candidate and self._size_of(candidate) < actual:
            prev, candidate = candidate, self._next_of(candidate)
        if not candidate:
            raise AllocationError(f"no free block of 0x{actual:x} bytes")

        following = self._next_of(candidate)
        left = self._size_of(candidate) - actual
        if left >= _EMB_SIZE:
            rear = candidate + actual
            self._set_size(rear, left)
            self._set_next(rear, following)
            following = rear
            self._set_size(candidate, actual)
        self._link(prev, following)
        return candidate + _EMB_OVERHEAD

    def free(self, start: int) -> None:
        """Return the block whose user data begins at ``start``."""
        block = start - _EMB_OVERHEAD
        if block < self.start + _HEADER_SIZE:
            raise ValueError(f"0x{start:x} is not inside the partition")
        end = block + self._size_of(block)
        if end > self.start + self.size:
            raise ValueError(f"block at 0x{start:x} overruns the partition")

        prev = 0
        following = self.first_free
        while following and following <= block:
            if following == block:
                raise ValueError(f"block at 0x{start:x} is already free")
            prev, following = following, self._next_of(following)

        if end == following:
            self._set_size(block, self._size_of(block) + self._size_of(following))
            self._set_next(block, self._next_of(following))
        else:
            self._set_next(block, following)

        if not prev:
            self._link(0, block)
        elif block == prev + self._size_of(prev):
            self._set_size(prev, self._size_of(prev) + self._size_of(block))
            self._set_next(prev, self._next_of(block))
        else:
            self._set_next(prev, block)

    def free_blocks(self) -> list[Block]:
        """The free list, in list order (which is address order)."""
        blocks = []
        block = self.first_free
        while block:
            blocks.append(Block(block, self._size_of(block), self._next_of(block)))
            block = self._next_of(block)
        return blocks

    def walk(self) -> list[Block]:
        """Every block, free or allocated, in address order."""
        blocks = []
        block = self.start + _HEADER_SIZE
        end = self.start + self.size
        while block < end:
            size = self._size_of(block)
            if size == 0:
                raise ValueError(f"corrupt block at 0x{block:x}")
            blocks.append(Block(block, size, self._next_of(block)))
            block += size
        return blocks

    def __str__(self) -> str:
        return (
            f"dPartition(start=0x{self.start:x}, size=0x{self.size:x}, "
            f"firstFreeStart=0x{self.first_free:x})"
        )