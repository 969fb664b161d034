import pytest

from labkernel.console import Console
from labkernel.shell import PROMPT, Shell, split_words
from labkernel.uart import Uart
from labkernel.vga import VgaScreen


def make_shell(text=""):
    uart = Uart(text)
    console = Console(VgaScreen(), uart)
    return Shell(console, uart), uart


def test_split_words_basic():
    assert split_words("help cmd\n", 10) == ["help", "cmd"]


def test_split_words_collapses_separators():
    assert split_words("  a   b  \n", 10) == ["a", "b"]


def test_split_words_empty_and_nul():
    assert split_words("", 10) == []
    assert split_words("a\0b", 10) == ["a"]


def test_split_words_limit_leaves_last_word_unterminated():
    assert split_words("a b c\n", 2) == ["a", "b c\n"]


def test_builtin_commands_registered():
    shell, _ = make_shell()
    assert [c.name for c in shell.commands] == ["help", "cmd"]
    assert shell.find_command("help").description == "help [cmd]"
    assert shell.find_command("nope") is None


def test_add_command_truncates_name_and_description():
    shell, _ = make_shell()
    command = shell.add_command("x" * 30, lambda argv: 0, None, "d" * 150)
    assert command.name == "x" * 20
    assert len(command.description) == 100
    assert shell.find_command("x" * 20) is command


def test_newest_command_found_first():
    shell, _ = make_shell()
    shell.add_command("dup", lambda argv: "old", None, "old")
    shell.add_command("dup", lambda argv: "new", None, "new")
    assert shell.run_line("dup\n") == "new"
    assert [c.name for c in shell.commands][:2] == ["dup", "dup"]


def test_run_line_passes_argv():
    shell, _ = make_shell()
    seen = []
    shell.add_command("echo", lambda argv: seen.append(list(argv)) or 7, None, "echo")
    assert shell.run_line("echo one two\n") == 7
    assert seen == [["echo", "one", "two"]]


def test_run_line_blank_returns_none():
    shell, uart = make_shell()
    assert shell.run_line("   \n") is None
    assert uart.output() == ""


def test_unknown_command_reported():
    shell, uart = make_shell()
    assert shell.run_line("foo\n") is None
    assert "UNKOWN command: foo\r\n" in uart.output()


def test_too_long_message():
    shell, uart = make_shell()
    seen = []
    shell.add_command("w", lambda argv: seen.append(argv), None, "")
    shell.run_line("w " * 11 + "\n")
    assert "cmdline is tooooo long" in uart.output()
    assert len(seen[0]) == 10


def test_help_lists_commands():
    shell, uart = make_shell()
    assert shell.help(["help"]) == 0
    out = uart.output()
    assert "USAGE: help [cmd]" in out
    assert "list all registered commands:" in out
    assert f"{'help':>12}: help [cmd]" in out


def test_help_with_help_func_and_description():
    shell, uart = make_shell()
    calls = []
    shell.add_command("a", lambda argv: 0, lambda: calls.append(1), "desc a")
    shell.add_command("b", lambda argv: 0, None, "desc b")
    assert shell.help(["help", "a"]) == 0
    assert calls == [1]
    assert shell.help(["help", "b"]) == 0
    assert "desc b\r\n" in uart.output()
    assert "desc a" not in uart.output()


def test_help_too_many_arguments():
    shell, _ = make_shell()
    assert shell.help(["help", "a", "b"]) == 1


def test_read_cmdline_echoes_and_appends_newline():
    shell, uart = make_shell("ls -l\rrest")
    assert shell.read_cmdline() == "ls -l\n"
    assert uart.output() == "ls -l\r\n"


def test_read_cmdline_limit():
    shell, _ = make_shell("abcdef")
    assert shell.read_cmdline(3) == "abc"


def test_read_cmdline_eof():
    shell, _ = make_shell("ab")
    with pytest.raises(EOFError):
        shell.read_cmdline()


def test_start_runs_until_input_ends():
    shell, uart = make_shell("help\rfoo\r")
    shell.start()
    out = uart.output()
    assert out.count(PROMPT) == 3
    assert "USAGE: help [cmd]" in out
    assert "UNKOWN command: foo" in out