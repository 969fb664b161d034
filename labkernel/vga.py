"""Text-mode screen: 25 rows of 80 character cells with a hardware cursor."""

from __future__ import annotations

__all__ = ["VgaScreen", "ROWS", "COLS", "SCREEN_ROWS", "DEFAULT_COLOR"]

ROWS = 24  # rows used for scrolling text; the last row is for the system
SCREEN_ROWS = 25
COLS = 80
DEFAULT_COLOR = 0x7

_BLANK = "\0"
_UNKNOWN_INTERRUPT = "Unknown interrupt1"
_UNKNOWN_INTERRUPT_COLOR = 0x4


class VgaScreen:
    """A simulated text-mode frame buffer of ``(character, colour)`` cells."""

    def __init__(self) -> None:
        self._cells = [
            [(_BLANK, DEFAULT_COLOR) for _ in range(COLS)] for _ in range(SCREEN_ROWS)
        ]
        self.cursor = (0, 0)

    @staticmethod
    def _check(row: int, col: int) -> None:
        if not (0 <= row < SCREEN_ROWS and 0 <= col < COLS):
            raise IndexError(f"cell ({row}, {col}) is outside the screen")

    def put_char(self, c: str, color: int, row: int, col: int) -> None:
        """Write one character with its colour attribute."""
        if len(c) != 1:
            raise ValueError("put_char takes a single character")
        self._check(row, col)
        self._cells[row][col] = (c, color & 0xFF)

    def put_chars(self, msg: str, color: int, row: int, col: int) -> int:
        """Write ``msg`` from a position, wrapping lines and the screen.

        Returns the number of characters written.
        """
        msg = msg.split("\0", 1)[0]
        for c in msg:
            if col == COLS:
                col, row = 0, row + 1
            if row == SCREEN_ROWS:
                row = 0
            self.put_char(c, color, row, col)
            col += 1
        return len(msg)

    def clear_char(self, row: int, col: int) -> None:
        """Blank one cell with the default colour."""
        self._check(row, col)
        self._cells[row][col] = (_BLANK, DEFAULT_COLOR)

    def clear_last_row(self) -> None:
        """Blank the last text row."""
        for col in range(COLS):
            self.clear_char(ROWS - 1, col)

    def scroll_one_row(self) -> None:
        """Move the text rows up by one and blank the last text row."""
        self._cells[: ROWS - 1] = [list(r) for r in self._cells[1:ROWS]]
        self.clear_last_row()

    def clear_screen(self) -> None:
        """Blank all text rows and home the cursor."""
        for row in range(ROWS):
            for col in range(COLS):
                self.clear_char(row, col)
        self.cursor = (0, 0)

    def append(self, text: str, color: int) -> None:
        """Write ``text`` at the cursor, scrolling when the text rows fill up."""
        row, col = self.cursor
        for c in text.split("\0", 1)[0]:
            if c != "\n":
                self.put_char(c, color, row, col)
                col += 1
            else:
                col, row = 0, row + 1
            if col >= COLS:
                col, row = 0, row + 1
            if row >= ROWS:
                self.scroll_one_row()
                row = ROWS - 1
        self.cursor = (row, col)

    def cell(self, row: int, col: int) -> tuple[str, int]:
        """The character and colour stored at a position."""
        self._check(row, col)
        return self._cells[row][col]

    def row_text(self, row: int) -> str:
        """The characters of one row, blanks shown as spaces, trailing ones dropped."""
        self._check(row, 0)
        return "".join(" " if c == _BLANK else c for c, _ in self._cells[row]).rstrip()

    def report_unknown_interrupt(self) -> None:
        """Show the unknown-interrupt notice on the system row."""
        self.put_chars(_UNKNOWN_INTERRUPT, _UNKNOWN_INTERRUPT_COLOR, SCREEN_ROWS - 1, 0)