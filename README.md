# labkernel

Pieces of a small teaching kernel, simulated in Python on a byte-addressed
32-bit memory model.

- **Memory** (`labkernel.memory`): `PhysicalMemory`, a little-endian memory
  covering a given address range with word and half-word access, and
  `probe_memory`, which finds how much working memory follows an address.
- **Dynamic partitions** (`labkernel.dpartition`): `DynamicPartition`, a
  first-fit allocator kept inside simulated memory, which splits blocks on
  allocation and merges neighbours on release. `walk()` lists every block,
  `free_blocks()` the free list.
- **Fixed partitions** (`labkernel.efpartition`): `FixedPartition`, `n` equal
  blocks handed out from a free list, and `total_size(per_size, n)` for the
  memory it needs.
- **Kernel heap** (`labkernel.heap`): `KernelHeap` probes memory from 1MB,
  skips the kernel image and offers `malloc` and `free`.
- **Formatting** (`labkernel.formatting`): `sprintf` and `vsprintf`, a
  C-style formatter with 32-bit integer conventions (no floating point).
- **Strings** (`labkernel.strings`): `compare_strings` and `copy_limited`
  for NUL-terminated text.
- **Devices**: `VgaScreen` (`labkernel.vga`), an 80x25 text screen with
  colour attributes, a cursor and scrolling, and `Uart` (`labkernel.uart`),
  a serial line fed from an iterable of characters that records its output.
- **Console** (`labkernel.console`): `Console.printk` and `Console.printf`
  format text and send it to both the screen and the serial line.
- **Time** (`labkernel.wallclock`): `WallClock`, advanced 10 ms per tick, with
  an optional hook run after each tick and a `timestamp()` string.
- **Shell** (`labkernel.shell`): `Shell` with the built-in `cmd` and `help`
  commands, `split_words`, and `MemoryTestCases` (`labkernel.memtests`), which
  registers memory test commands such as `testMalloc1`, `testdP2` and
  `testeFP`.

## Installing

```
pip install .
```

## Examples

```python
from labkernel.memory import PhysicalMemory
from labkernel.dpartition import DynamicPartition

memory = PhysicalMemory(0x100000, 0x1000)
dp = DynamicPartition(memory, 0x100000, 0x100)
a = dp.alloc(0x10)
b = dp.alloc(0x20)
dp.free(a)
dp.free(b)
print(dp)
for block in dp.walk():
    print(block)
```

```python
from labkernel.formatting import sprintf

sprintf("%02d:%02d:%02d", 18, 59, 59)   # '18:59:59'
sprintf("%#x", 255)                      # '0xff'
```

Running shell commands against a heap:

```python
from labkernel.console import Console
from labkernel.heap import KernelHeap
from labkernel.memory import PhysicalMemory
from labkernel.memtests import MemoryTestCases
from labkernel.shell import Shell
from labkernel.uart import Uart
from labkernel.vga import VgaScreen

memory = PhysicalMemory(0x100000, 0x100000)
heap = KernelHeap(memory, 0x100000)
uart = Uart("testdP2\rcmd\r")
console = Console(VgaScreen(), uart)
shell = Shell(console, uart)
MemoryTestCases(heap, console).register(shell)
shell.start()          # returns when the serial input runs out
print(uart.output())
```

## What it does not do

There is no task management or scheduling: the package has no task pool,
ready queues or context switching, and no timer tick that drives them. There
is also no whole-machine boot sequence and no command-line program; the
pieces above are used from Python code.

## Tests

```
pip install .[test]
pytest
```