"""Memory test commands exercising the heap and both partition allocators."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from .console import Console
from .dpartition import DynamicPartition
from .efpartition import FixedPartition, total_size
from .heap import KernelHeap
from .memory import AllocationError, PhysicalMemory
from .shell import Shell

__all__ = ["MemoryTestCases"]

_WHITE = 0x7
_MAGENTA = 0x5
_CYAN = 0x3
_SMALL_PARTITION = 0x100
_MALLOC_STEP = 0x1000
_DP_MIN_STEP = 0x10

_EF_PER_SIZE = 31
_EF_COUNT = 4

_BLOCKS = (("A", 0x10, 0xAAAAAAAA), ("B", 0x20, 0xBBBBBBBB), ("C", 0x30, 0xCCCCCCCC))
_EF_BLOCKS = (
    ("A", 0xAAAAAAAA),
    ("B", 0xBBBBBBBB),
    ("C", 0xCCCCCCCC),
    ("D", 0xDDDDDDDD),
    ("E", 0xEEEEEEEE),
)


def _store_text(memory: PhysicalMemory, addr: int, text: str) -> None:
    data = text.encode("latin-1")
    for offset in range(0, len(data), 4):
        chunk = data[offset:offset + 4].ljust(4, b"\0")
        memory.write_word(addr + offset, int.from_bytes(chunk, "little"))


def _load_text(memory: PhysicalMemory, addr: int, size: int) -> str:
    data = b"".join(
        memory.read_word(addr + offset).to_bytes(4, "little")
        for offset in range(0, size, 4)
    )
    return data[:size].decode("latin-1").split("\0", 1)[0]


class MemoryTestCases:
    """The shell's memory test commands, run against a kernel heap."""

    def __init__(self, heap: KernelHeap, console: Console) -> None:
        self.heap = heap
        self.console = console

    @property
    def _memory(self) -> PhysicalMemory:
        return self.heap.partition.memory

    def _say(self, color: int, fmt: str, *args: object) -> None:
        self.console.printf(color, fmt, *args)

    # -- malloc ------------------------------------------------------------

    def _two_buffers(self, specs: Sequence[tuple[int, int, str, str]]) -> int:
        buffers = []
        for size, count, fill, label in specs:
            addr = self.heap.malloc(size)
            _store_text(self._memory, addr, fill * count + "\n\0")
            buffers.append((addr, size, label))

        self._say(_MAGENTA, "We allocated 2 buffers.\n")
        for addr, size, label in buffers:
            self._say(_MAGENTA, label, addr)
            self._say(_WHITE, "%s", _load_text(self._memory, addr, size))
        self._say(_WHITE, "\n")

        for addr, _, _ in buffers:
            self.heap.free(addr)
        return 0

    def malloc_case1(self, argv: Sequence[str] = ()) -> int:
        """Allocate, fill and print two buffers, then free them."""
        return self._two_buffers((
            (19, 17, "*", "BUF1(size=19, addr=0x%x) filled with 17(*): "),
            (24, 22, "#", "BUF2(size=24, addr=0x%x) filled with 22(#): "),
        ))

    def malloc_case2(self, argv: Sequence[str] = ()) -> int:
        """Allocate, fill and print two other buffers, then free them."""
        return self._two_buffers((
            (11, 9, "+", "BUF1(size=9, addr=0x%x) filled with 9(+): "),
            (21, 19, ",", "BUF2(size=19, addr=0x%x) filled with 19(,): "),
        ))

    def max_malloc_size_now(self, argv: Sequence[str] = ()) -> int:
        """Find the first multiple of the step that can no longer be allocated."""
        size = _MALLOC_STEP
        while True:
            try:
                addr = self.heap.malloc(size)
            except AllocationError:
                break
            self.heap.free(addr)
            size += _MALLOC_STEP
        self._say(_WHITE, "MAX_MALLOC_SIZE: 0x%x (with step = 0x1000);\n", size)
        return size

    # -- dynamic partition -------------------------------------------------

    def _show_dpartition(self, partition: DynamicPartition) -> None:
        self.console.printk(_MAGENTA, "%s\n", str(partition))
        for block in partition.walk():
            self.console.printk(_CYAN, "%s\n", str(block))

    @contextmanager
    def _small_dpartition(self) -> Iterator[DynamicPartition | None]:
        try:
            base = self.heap.malloc(_SMALL_PARTITION)
        except AllocationError:
            self._say(_WHITE, "MALLOC FAILED, CAN't TEST dPartition\n")
            yield None
            return
        self._say(_WHITE, "We had successfully ")
        self._say(_MAGENTA, "malloc()")
        self._say(
            _WHITE, " a small memBlock (size=0x%x, addr=0x%x);\n", _SMALL_PARTITION, base
        )
        self._say(_WHITE, "It is initialized as a very small dPartition;\n")
        partition = DynamicPartition(self._memory, base, _SMALL_PARTITION)
        self._show_dpartition(partition)
        try:
            yield partition
        finally:
            self.heap.free(base)

    @staticmethod
    def _try_alloc(partition: DynamicPartition, size: int) -> int | None:
        try:
            return partition.alloc(size)
        except AllocationError:
            return None

    def _alloc_and_release(self, partition: DynamicPartition, size: int) -> bool:
        addr = self._try_alloc(partition, size)
        self._say(_WHITE, "Alloc a memBlock with size 0x%x, ", size)
        if addr is None:
            self._say(_MAGENTA, "failed!\n")
            return False
        self._say(_MAGENTA, "success(addr=0x%x)!", addr)
        partition.free(addr)
        self._say(_WHITE, "......Relaesed;\n")
        return True

    def dpartition_case1(self, argv: Sequence[str] = ()) -> int:
        """Allocate and release ever larger blocks, then ever smaller ones."""
        with self._small_dpartition() as partition:
            if partition is None:
                return 0
            size = _DP_MIN_STEP
            while self._alloc_and_release(partition, size):
                size <<= 1
            self._say(_WHITE, "Now, converse the sequence.\n")
            while size >= _DP_MIN_STEP:
                self._alloc_and_release(partition, size)
                size >>= 1
        return 0

    def _three_blocks(self, title: str, releases: Sequence[tuple[str, str]]) -> int:
        with self._small_dpartition() as partition:
            if partition is None:
                return 0
            self._say(_WHITE, title)
            addrs: dict[str, int] = {}
            for label, size, pattern in _BLOCKS:
                addr = self._try_alloc(partition, size)
                self._say(_WHITE, "Alloc memBlock %s with size 0x%x: ", label, size)
                if addr is None:
                    self._say(_MAGENTA, "failed!\n")
                else:
                    self._say(_MAGENTA, "success(addr=0x%x)!\n", addr)
                    self._memory.write_word(addr, pattern)
                    addrs[label] = addr
                self._show_dpartition(partition)
            for label, message in releases:
                self._say(_WHITE, message)
                if label in addrs:
                    partition.free(addrs[label])
                self._show_dpartition(partition)
        return 0

    def dpartition_case2(self, argv: Sequence[str] = ()) -> int:
        """Allocate A, B and C, then release them in allocation order."""
        return self._three_blocks(
            "Now, A:B:C:- ==> -:B:C:- ==> -:C- ==> - .\n",
            (
                ("A", "Now, release A.\n"),
                ("B", "Now, release B.\n"),
                ("C", "At last, release C.\n"),
            ),
        )

    def dpartition_case3(self, argv: Sequence[str] = ()) -> int:
        """Allocate A, B and C, then release them in reverse order."""
        return self._three_blocks(
            "Now, A:B:C:- ==> A:B:- ==> A:- ==> - .\n",
            (
                ("C", "Now, release C.\n"),
                ("B", "Now, release B.\n"),
                ("A", "At last, release A.\n"),
            ),
        )

    # -- fixed partition ---------------------------------------------------

    def _show_efpartition(self, partition: FixedPartition) -> None:
        self.console.printk(_MAGENTA, "%s\n", str(partition))
        for slot in partition.walk():
            self.console.printk(_WHITE, "%s\n", str(slot))

    def efpartition_case(self, argv: Sequence[str] = ()) -> int:
        """Allocate every fixed block and one more, then release four of them.

        The memory taken from the heap for the partition is kept.
        """
        size = total_size(_EF_PER_SIZE, _EF_COUNT)
        try:
            base = self.heap.malloc(size)
        except AllocationError:
            base = 0
        self._say(_WHITE, "X:0x%x:%d \n", base, size)
        if not base:
            self._say(_WHITE, "TSK2: MALLOC FAILED, CAN't TEST eFPartition\n")
            return 0

        self._say(_WHITE, "We had successfully ")
        self._say(_MAGENTA, "malloc()")
        self._say(_WHITE, " a small memBlock (size=0x%x, addr=0x%x);\n", size, base)
        self._say(_WHITE, "It is initialized as a very small ePartition;\n")
        partition = FixedPartition(self._memory, base, _EF_PER_SIZE, _EF_COUNT)
        self._show_efpartition(partition)

        addrs: dict[str, int] = {}
        for label, pattern in _EF_BLOCKS:
            try:
                addr = partition.alloc()
            except AllocationError:
                self._say(_WHITE, "Alloc memBlock %s, failed!\n", label)
            else:
                self._memory.write_word(addr, pattern)
                addrs[label] = addr
                self._say(
                    _WHITE,
                    "Alloc memBlock %s，start = 0x%x: 0x%x \n",
                    label,
                    addr,
                    self._memory.read_word(addr),
                )
            self._show_efpartition(partition)

        for label, _ in _EF_BLOCKS[:4]:
            self._say(_WHITE, "Now, release %s.\n", label)
            if label in addrs:
                partition.free(addrs[label])
            self._show_efpartition(partition)
        return 0

    def register(self, shell: Shell) -> None:
        """Add every memory test to ``shell``."""
        shell.add_command("testMalloc1", self.malloc_case1, None, "Malloc, write and read.")
        shell.add_command("testMalloc2", self.malloc_case2, None, "Malloc, write and read.")
        shell.add_command(
            "maxMallocSizeNow",
            self.max_malloc_size_now,
            None,
            "MAX_MALLOC_SIZE always changes. What's the value Now?",
        )
        shell.add_command(
            "testdP1",
            self.dpartition_case1,
            None,
            "Init a dPatition(size=0x100). [Alloc,Free]* with step = 0x20",
        )
        shell.add_command(
            "testdP2",
            self.dpartition_case2,
            None,
            "Init a dPatition(size=0x100). A:B:C:- ==> -:B:C:- ==> -:C:- ==> - .",
        )
        shell.add_command(
            "testdP3",
            self.dpartition_case3,
            None,
            "Init a dPatition(size=0x100). A:B:C:- ==> A:B:- ==> A:- ==> - .",
        )
        shell.add_command(
            "testeFP",
            self.efpartition_case,
            None,
            "Init a eFPatition. Alloc all and Free all.",
        )