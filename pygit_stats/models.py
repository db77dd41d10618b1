"""Domain models: commit records, author aggregates, sort spec, configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SortField(Enum):
    """Columns a report can be ordered by"""
    AUTHOR = 'author'
    FILES = 'files'
    COMMITS = 'commits'
    ADDED = 'added'
    REMOVED = 'removed'
    DELTA = 'delta'

    @classmethod
    def names(cls) -> list[str]:
        """Return the CLI spellings of all fields."""
        return [f.value for f in cls]


@dataclass(frozen=True)
class CommitRecord:
    """One parsed commit"""
    author: str
    added: int = 0
    removed: int = 0
    files: frozenset[str] = frozenset()

    @property
    def delta(self) -> int:
        return self.added - self.removed


@dataclass
class AuthorAggregate:
    """Running totals for a single author"""
    author: str
    added: int = 0
    removed: int = 0
    files: set[str] = field(default_factory=set)
    commits: list[CommitRecord] = field(default_factory=list)

    @property
    def delta(self) -> int:
        return self.added - self.removed

    @property
    def commit_count(self) -> int:
        return len(self.commits)

    @property
    def file_count(self) -> int:
        return len(self.files)

    def fold(self, record: CommitRecord) -> None:
        """Accumulate one commit into this aggregate."""
        self.added += record.added
        self.removed += record.removed
        self.files |= record.files
        self.commits.append(record)

    def merged(self, other: AuthorAggregate) -> AuthorAggregate:
        """Return a new aggregate combining this one with another for the same author."""
        return AuthorAggregate(
            author=self.author,
            added=self.added + other.added,
            removed=self.removed + other.removed,
            files=self.files | other.files,
            commits=self.commits + other.commits,
        )

    def copy(self) -> AuthorAggregate:
        return AuthorAggregate(self.author, self.added, self.removed, set(self.files), list(self.commits))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            'author': self.author,
            'commits': self.commit_count,
            'files': self.file_count,
            'delta': self.delta,
            'added': self.added,
            'removed': self.removed,
        }


@dataclass(frozen=True)
class SortSpec:
    """Sort field plus direction"""
    key: SortField = SortField.DELTA
    descending: bool = True

    @classmethod
    def parse(cls, text: str) -> SortSpec:
        """Parse 'delta', '+files', '-author', ...

        A leading '+' means ascending and '-' descending. Without a prefix the
        direction is descending, except for 'author' which lists alphabetically.
        """
        raw = text.strip()
        direction = None
        if raw[:1] in ('+', '-'):
            direction, raw = raw[0], raw[1:]
        try:
            sort_field = SortField(raw.lower())
        except ValueError:
            raise ValueError(
                f"invalid order '{text}' (choose from {', '.join(SortField.names())}, "
                "optionally prefixed with + or -)"
            ) from None

        if direction is None:
            descending = sort_field is not SortField.AUTHOR
        else:
            descending = direction == '-'
        return cls(sort_field, descending)

    def __str__(self) -> str:
        return f"{'-' if self.descending else '+'}{self.key.value}"


@dataclass(frozen=True)
class StatsConfig:
    """Resolved configuration for a single run"""
    include: str | None = None
    exclude: str | None = None
    sort: SortSpec = field(default_factory=SortSpec)
    repos: list[str] = field(default_factory=list)
    log_args: list[str] = field(default_factory=list)
    sentinel: str = '+'
    max_name_width: int = 60
    use_color: bool = False
    json_output: bool = False
    verbose: bool = False
    parallel: bool = False
    max_workers: int = field(default_factory=lambda: min(os.cpu_count() or 4, 8))

    def with_updates(self, **kwargs) -> StatsConfig:
        """Return a new StatsConfig with the given fields replaced."""
        current = {f.name: getattr(self, f.name) for f in self.__dataclass_fields__.values()}
        current.update(kwargs)
        return StatsConfig(**current)
