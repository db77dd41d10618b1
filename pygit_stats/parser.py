"""Log-stream parser: turns `git log --numstat` output into an AggregationTable."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from pygit_stats.models import CommitRecord
from pygit_stats.table import AggregationTable

STAT_LINE = re.compile(r'^(\d+)\s+(\d+)\s+(.+)$')

logger = logging.getLogger(__name__)


@dataclass
class _CommitAccumulator:
    """Parse state for the commit currently being read"""
    author: str
    added: int = 0
    removed: int = 0
    files: set[str] = field(default_factory=set)

    def to_record(self) -> CommitRecord | None:
        """Finish the commit. Commits that touched no files produce nothing."""
        if not self.files:
            return None
        return CommitRecord(self.author, self.added, self.removed, frozenset(self.files))


class LogParser:
    """Parses sentinel-headed numstat log output.

    Each commit starts with a line beginning with the sentinel character,
    followed by the author identity. Every other non-blank line is expected
    to be `<added> <removed> <filename>`; anything else is skipped.
    """

    def __init__(
        self,
        include: str | re.Pattern[str] | None = None,
        exclude: str | re.Pattern[str] | None = None,
        repo_prefix: str | None = None,
        sentinel: str = '+',
    ):
        """Create a parser with optional filename filters and repository prefix."""
        if not sentinel:
            raise ValueError("sentinel must be a non-empty string")
        self.include = re.compile(include) if isinstance(include, str) else include
        self.exclude = re.compile(exclude) if isinstance(exclude, str) else exclude
        self.repo_prefix = repo_prefix.rstrip('/') if repo_prefix else None
        self.sentinel = sentinel

    def accepts(self, filename: str) -> bool:
        """Return True if the filename passes the include and exclude filters."""
        if self.include is not None and not self.include.search(filename):
            return False
        if self.exclude is not None and self.exclude.search(filename):
            return False
        return True

    def parse(self, lines: Iterable[str]) -> AggregationTable:
        """Consume the lines once, in order, and return the folded table."""
        table = AggregationTable()
        current: _CommitAccumulator | None = None

        for raw in lines:
            line = raw.rstrip('\r\n')
            if not line.strip():
                continue
            if line.startswith(self.sentinel):
                self._finish(current, table)
                current = _CommitAccumulator(line[len(self.sentinel):].strip())
                continue
            if not self._feed(current, line):
                table.skipped_lines += 1

        self._finish(current, table)

        if table.skipped_lines:
            logger.debug("Skipped %d unrecognized log line(s)", table.skipped_lines)
        return table

    def _feed(self, current: _CommitAccumulator | None, line: str) -> bool:
        """Apply one stat line to the accumulator. Returns False for unrecognized lines."""
        match = STAT_LINE.match(line)
        if match is None or current is None:
            return False

        filename = match.group(3).strip()
        if not self.accepts(filename):
            return True

        current.added += int(match.group(1))
        current.removed += int(match.group(2))
        current.files.add(f"{self.repo_prefix}/{filename}" if self.repo_prefix else filename)
        return True

    @staticmethod
    def _finish(current: _CommitAccumulator | None, table: AggregationTable) -> None:
        if current is None:
            return
        record = current.to_record()
        if record is not None:
            table.add_commit(record)


def parse_log(
    lines: Iterable[str],
    include: str | None = None,
    exclude: str | None = None,
    repo_prefix: str | None = None,
    sentinel: str = '+',
) -> AggregationTable:
    """Parse a numstat log stream in one call."""
    return LogParser(include, exclude, repo_prefix, sentinel).parse(lines)
