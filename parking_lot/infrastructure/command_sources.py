# File: parking_lot/infrastructure/command_sources.py
"""
Command Sources

A command source supplies raw input lines, newline stripped, in order.
The file source is what the CLI uses; the in-memory source serves tests
and callers that already hold the commands.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Union
import logging


# ============================================================================
# EXCEPTIONS
# ============================================================================

class CommandSourceError(Exception):
    """Base exception for command source failures"""
    pass


class CommandSourceOpenError(CommandSourceError):
    """The source could not be opened; fatal at startup"""
    pass


class CommandSourceReadError(CommandSourceError):
    """Reading failed part way; earlier lines were already delivered"""
    pass


# ============================================================================
# SOURCE INTERFACE
# ============================================================================

class CommandSource(ABC):
    """Base command source interface"""

    @abstractmethod
    def lines(self) -> Iterator[str]:
        """Yield raw command lines without trailing newlines"""
        pass

    def close(self) -> None:
        """Release any underlying resource"""
        pass

    def __enter__(self) -> 'CommandSource':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[str]:
        return self.lines()


# ============================================================================
# IMPLEMENTATIONS
# ============================================================================

class InMemoryCommandSource(CommandSource):
    """Command source backed by a list of lines"""

    def __init__(self, lines: Iterable[str]):
        self._lines: List[str] = list(lines)

    @classmethod
    def from_text(cls, text: str) -> 'InMemoryCommandSource':
        return cls(text.splitlines())

    def lines(self) -> Iterator[str]:
        for line in self._lines:
            yield line.rstrip("\r\n")


class FileCommandSource(CommandSource):
    """
    Command source reading a text file line by line

    The file is opened on construction so a missing or unreadable file is
    reported before any command runs.

    Lines end only at LF; a stray CR inside a line stays part of it and
    tokenizes as whitespace. Bytes that do not decode become U+FFFD, so a
    bad byte affects only the line it sits on.
    """

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self._logger = logging.getLogger(self.__class__.__name__)
        self._file: Optional[TextIO] = None

        try:
            self._file = open(self.path, 'r', encoding=self.encoding,
                              errors="replace", newline="\n")
        except OSError as e:
            raise CommandSourceOpenError(str(e)) from e

        self._logger.debug(f"Opened command file {self.path}")

    def lines(self) -> Iterator[str]:
        if self._file is None:
            raise CommandSourceReadError(f"{self.path} is closed")

        line_number = 0
        try:
            for line in self._file:
                line_number += 1
                yield line.rstrip("\r\n")
        except OSError as e:
            self._logger.error(f"Read failed after line {line_number} of {self.path}: {e}")
            raise CommandSourceReadError(str(e)) from e

        self._logger.debug(f"Read {line_number} lines from {self.path}")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
