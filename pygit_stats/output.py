"""Output handler implementations: console, null, buffered."""

from __future__ import annotations

import sys

from colorama import Fore, Style
from tqdm import tqdm

from pygit_stats.protocols import OutputHandler


class ConsoleOutputHandler:
    """Console output. Report lines go to stdout, diagnostics to stderr."""

    def __init__(self, verbose: bool = False, use_color: bool = False):
        """Create a console handler. Set verbose=True to enable debug output."""
        self.verbose = verbose
        self.use_color = use_color

    def _paint(self, color: str, message: str) -> str:
        if not self.use_color:
            return message
        return f"{color}{message}{Style.RESET_ALL}"

    def info(self, message: str, indent: int = 0) -> None:
        """Print a line of regular output."""
        tqdm.write("  " * indent + message, file=sys.stdout)

    def success(self, message: str, indent: int = 0) -> None:
        """Print a green success message."""
        tqdm.write("  " * indent + self._paint(Fore.GREEN, message), file=sys.stdout)

    def warning(self, message: str, indent: int = 0) -> None:
        """Print a yellow warning to stderr."""
        tqdm.write("  " * indent + self._paint(Fore.YELLOW, message), file=sys.stderr)

    def error(self, message: str, indent: int = 0) -> None:
        """Print a red error to stderr."""
        tqdm.write("  " * indent + self._paint(Fore.RED, message), file=sys.stderr)

    def debug(self, message: str) -> None:
        """Print a cyan debug message to stderr (only when verbose is enabled)."""
        if self.verbose:
            tqdm.write(self._paint(Fore.CYAN, f"[DEBUG] {message}"), file=sys.stderr)


class NullOutputHandler:
    """Silent output handler for testing and JSON mode."""

    def info(self, message: str, indent: int = 0) -> None:
        pass

    def success(self, message: str, indent: int = 0) -> None:
        pass

    def warning(self, message: str, indent: int = 0) -> None:
        pass

    def error(self, message: str, indent: int = 0) -> None:
        pass

    def debug(self, message: str) -> None:
        pass


class BufferedOutputHandler:
    """Collects messages for deferred printing (used in parallel mode)."""

    def __init__(self):
        """Initialize with an empty message buffer."""
        self.messages: list[tuple[str, str, int]] = []

    def info(self, message: str, indent: int = 0) -> None:
        self.messages.append(('info', message, indent))

    def success(self, message: str, indent: int = 0) -> None:
        self.messages.append(('success', message, indent))

    def warning(self, message: str, indent: int = 0) -> None:
        self.messages.append(('warning', message, indent))

    def error(self, message: str, indent: int = 0) -> None:
        self.messages.append(('error', message, indent))

    def debug(self, message: str) -> None:
        self.messages.append(('debug', message, 0))

    def flush_to(self, target: OutputHandler) -> None:
        """Replay all buffered messages on a target handler and clear the buffer."""
        for level, message, indent in self.messages:
            if level == 'debug':
                target.debug(message)
            else:
                getattr(target, level)(message, indent=indent)
        self.messages.clear()
