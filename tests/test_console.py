from labkernel.console import Console
from labkernel.uart import Uart
from labkernel.vga import VgaScreen


def _console():
    return Console(VgaScreen(), Uart())


def test_printk_writes_to_screen_and_uart():
    console = _console()
    n = console.printk(0x2, "START MULTITASKING......\n")
    assert n == len("START MULTITASKING......\n")
    assert console.screen.row_text(0) == "START MULTITASKING......"
    assert console.uart.output() == "START MULTITASKING......\r\n"


def test_printf_formats_arguments():
    console = _console()
    console.printf(0x7, "MemStart: %x  \n", 0x100000)
    assert console.screen.row_text(0) == "MemStart: 100000"
    assert console.screen.cell(0, 0) == ("M", 0x7)


def test_return_value_matches_uart_without_carriage_returns():
    console = _console()
    n = console.printf(0x5, "%s and %d\n", "word", 42)
    assert n == len(console.uart.output().replace("\r", ""))


def test_consecutive_prints_continue_at_cursor():
    console = _console()
    console.printf(0x7, "ab")
    console.printk(0x7, "cd")
    assert console.screen.row_text(0) == "abcd"
    assert console.screen.cursor == (0, 4)