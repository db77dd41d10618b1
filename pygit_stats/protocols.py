"""Protocols for dependency injection."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Protocol


class LogSource(Protocol):
    """Protocol for something that produces numstat log lines for one repository"""

    def iter_log_lines(self, extra_args: Sequence[str] = (), sentinel: str = '+') -> Iterator[str]: ...
    def close(self) -> None: ...

    @property
    def path(self) -> Path: ...


class OutputHandler(Protocol):
    """Protocol for handling output"""

    def info(self, message: str, indent: int = 0) -> None: ...
    def success(self, message: str, indent: int = 0) -> None: ...
    def warning(self, message: str, indent: int = 0) -> None: ...
    def error(self, message: str, indent: int = 0) -> None: ...
    def debug(self, message: str) -> None: ...
