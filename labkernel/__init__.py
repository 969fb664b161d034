"""A simulated teaching kernel: memory partitions, heap, clock, console and shell."""

__version__ = "0.1.0"