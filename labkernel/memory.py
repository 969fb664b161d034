"""Simulated physical memory and the boot-time memory probe."""

from __future__ import annotations

__all__ = [
    "MemoryAccessError",
    "AllocationError",
    "PhysicalMemory",
    "probe_memory",
    "MIN_PROBE_START",
    "MIN_GRAIN_SIZE",
]

MIN_PROBE_START = 0x100000
MIN_GRAIN_SIZE = 0x1000

_TEST_PATTERNS = (0xAA55, 0x55AA)
_WORD_MASK = 0xFFFFFFFF
_HALF_MASK = 0xFFFF


class MemoryAccessError(IndexError):
    """Raised when an address outside the installed memory is touched."""


class AllocationError(MemoryError):
    """Raised when an allocator has no block to hand out."""


class PhysicalMemory:
    """Byte-addressable little-endian memory covering ``[start, start + size)``."""

    def __init__(self, start: int, size: int) -> None:
        if start < 0 or size < 0:
            raise ValueError("memory start and size must not be negative")
        self.start = start
        self.size = size
        self._cells = bytearray(size)

    @property
    def end(self) -> int:
        return self.start + self.size

    def _offset(self, addr: int, width: int) -> int:
        offset = addr - self.start
        if offset < 0 or offset + width > self.size:
            raise MemoryAccessError(f"address 0x{addr:x} is outside installed memory")
        return offset

    def _read(self, addr: int, width: int) -> int:
        offset = self._offset(addr, width)
        return int.from_bytes(self._cells[offset:offset + width], "little")

    def _write(self, addr: int, value: int, width: int, mask: int) -> None:
        offset = self._offset(addr, width)
        self._cells[offset:offset + width] = (value & mask).to_bytes(width, "little")

    def read_word(self, addr: int) -> int:
        """Read an unsigned 32-bit value."""
        return self._read(addr, 4)

    def write_word(self, addr: int, value: int) -> None:
        """Write the low 32 bits of ``value``."""
        self._write(addr, value, 4, _WORD_MASK)

    def read_half(self, addr: int) -> int:
        """Read an unsigned 16-bit value."""
        return self._read(addr, 2)

    def write_half(self, addr: int, value: int) -> None:
        """Write the low 16 bits of ``value``."""
        self._write(addr, value, 2, _HALF_MASK)


def _holds_patterns(memory: PhysicalMemory, addr: int) -> bool:
    try:
        saved = memory.read_half(addr)
        for pattern in _TEST_PATTERNS:
            memory.write_half(addr, pattern)
            if memory.read_half(addr) != pattern:
                return False
        memory.write_half(addr, saved)
    except MemoryAccessError:
        return False
    return True


def probe_memory(memory: PhysicalMemory, start: int, grain_size: int) -> int:
    """Return how many bytes of working memory follow ``start``.

    One half-word per grain is tested with two bit patterns and then
    restored; probing stops at the first grain that fails.
    """
    if start < MIN_PROBE_START:
        raise ValueError("probe start is too small, should be >= 1MB")
    if grain_size < MIN_GRAIN_SIZE:
        raise ValueError("grain size is too small, should be >= 4KB")
    addr = start
    while _holds_patterns(memory, addr):
        addr += grain_size
    return addr - start