# File: parking_lot/presentation/console.py
"""
Console view: writes command results as plain text lines
"""

import sys
from typing import Optional, TextIO

from ..application.commands import CommandResult


class ConsoleView:
    """Renders command output to a text stream, stdout by default"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.lines_written = 0

    def show_result(self, result: CommandResult) -> None:
        """Write every output line of a result"""
        for line in result.output:
            self.show_message(line)

    def show_message(self, message: str) -> None:
        self.stream.write(message + "\n")
        self.lines_written += 1

    def flush(self) -> None:
        self.stream.flush()
