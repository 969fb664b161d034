"""The kernel heap: a dynamic partition over all memory above the kernel."""

from __future__ import annotations

from .dpartition import DynamicPartition
from .memory import MIN_GRAIN_SIZE, MIN_PROBE_START, PhysicalMemory, probe_memory

__all__ = ["KernelHeap"]


class KernelHeap:
    """Probes memory from 1MB, skips the kernel image and manages the rest."""

    def __init__(self, memory: PhysicalMemory, kernel_end: int) -> None:
        size = probe_memory(memory, MIN_PROBE_START, MIN_GRAIN_SIZE)
        start = MIN_PROBE_START
        if start <= kernel_end:
            size -= kernel_end - start
            start = kernel_end
        self.start = start
        self.size = size
        self.partition = DynamicPartition(memory, start, size)

    def malloc(self, size: int) -> int:
        """Allocate ``size`` bytes from the heap."""
        return self.partition.alloc(size)

    def free(self, start: int) -> None:
        """Release a block returned by :meth:`malloc`."""
        self.partition.free(start)

    kmalloc = malloc
    kfree = free