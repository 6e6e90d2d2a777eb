"""
Terminal presenter used by the neo CLI and handed to the error handler.

Plain text goes to stdout; errors and warnings go to stderr so that
command output stays pipeable.
"""

import sys

from ..core.interfaces.presenter import IPresenter

RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
BOLD = "\033[1m"
RESET = "\033[0m"


class ConsolePresenter(IPresenter):
    """
    Writes user-facing output to the terminal.

    Streams default to whatever sys.stdout/sys.stderr are when a message
    is printed, so click's CliRunner captures them. Colour is only used
    when stdout is a TTY.
    """

    def __init__(self, use_color: bool = True, file=None, err_file=None) -> None:
        self._use_color = use_color and sys.stdout.isatty()
        self._out = file
        self._err = err_file

    @property
    def _file(self):
        return self._out or sys.stdout

    @property
    def _err_file(self):
        return self._err or sys.stderr

    def _write(self, text: str, color: str | None = None, *, err: bool = False) -> None:
        if color and self._use_color:
            text = f"{color}{text}{RESET}"
        print(text, file=self._err_file if err else self._file)

    def print(self, message: str) -> None:
        self._write(message)

    def print_error(self, message: str) -> None:
        self._write(f"Error: {message}", RED, err=True)

    def print_warning(self, message: str) -> None:
        self._write(f"Warning: {message}", YELLOW, err=True)

    def print_success(self, message: str) -> None:
        self._write(f"✓ {message}", GREEN)

    def print_table(self, headers: list[str], rows: list[list[str]]) -> None:
        """
        Print left-aligned columns under a bold header and a rule.

        Used by ``neo plugins list`` and ``neo commands``. Nothing is
        printed for an empty table; cells past the last header are
        appended unpadded.
        """
        if not rows:
            return

        widths = [len(str(h)) for h in headers]
        for row in rows:
            for i, cell in enumerate(row[: len(widths)]):
                widths[i] = max(widths[i], len(str(cell)))

        def line(cells) -> str:
            return "  ".join(
                str(cell).ljust(widths[i]) if i < len(widths) else str(cell)
                for i, cell in enumerate(cells)
            )

        header_line = line(headers)
        self._write(header_line, BOLD)
        self._write("-" * len(header_line))
        for row in rows:
            self._write(line(row).rstrip())

    def confirm(self, message: str, default: bool = False) -> bool:
        """Yes/no prompt; Enter picks ``default``, EOF or Ctrl-C means no."""
        suffix = " [Y/n] " if default else " [y/N] "

        try:
            response = input(message + suffix).strip().lower()
        except (EOFError, KeyboardInterrupt):
            self._write("")
            return False
        if not response:
            return default
        return response in ("y", "yes")
