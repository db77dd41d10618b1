"""AggregationTable: per-author totals with merge and ordered iteration."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from pygit_stats.models import AuthorAggregate, CommitRecord, SortField, SortSpec

_SORT_KEYS: dict[SortField, Callable[[AuthorAggregate], Any]] = {
    SortField.AUTHOR: lambda agg: agg.author,
    SortField.FILES: lambda agg: agg.file_count,
    SortField.COMMITS: lambda agg: agg.commit_count,
    SortField.ADDED: lambda agg: agg.added,
    SortField.REMOVED: lambda agg: agg.removed,
    SortField.DELTA: lambda agg: agg.delta,
}


class AggregationTable:
    """Mapping of author identity to AuthorAggregate.

    Plain lookups never create entries; use get_or_create() when folding.
    Iteration order comes only from the active SortSpec.
    """

    def __init__(self, sort: SortSpec | None = None):
        """Create an empty table, optionally with an initial sort order."""
        self._authors: dict[str, AuthorAggregate] = {}
        self._sort = sort or SortSpec()
        self.skipped_lines = 0

    @property
    def sort(self) -> SortSpec:
        return self._sort

    def get_or_create(self, author: str) -> AuthorAggregate:
        """Return the aggregate for author, creating an empty one if needed."""
        aggregate = self._authors.get(author)
        if aggregate is None:
            aggregate = AuthorAggregate(author)
            self._authors[author] = aggregate
        return aggregate

    def get(self, author: str) -> AuthorAggregate | None:
        """Return the aggregate for author, or None. Never creates an entry."""
        return self._authors.get(author)

    def add_commit(self, record: CommitRecord) -> None:
        """Fold a finished commit into its author's aggregate."""
        self.get_or_create(record.author).fold(record)

    def merge(self, other: AggregationTable) -> AggregationTable:
        """Return a new table with per-author totals of both tables combined."""
        merged = AggregationTable(self._sort)
        for author, aggregate in self._authors.items():
            merged._authors[author] = aggregate.copy()
        for author, aggregate in other._authors.items():
            existing = merged._authors.get(author)
            merged._authors[author] = existing.merged(aggregate) if existing else aggregate.copy()
        merged.skipped_lines = self.skipped_lines + other.skipped_lines
        return merged

    def order_by(self, spec: SortSpec) -> AggregationTable:
        """Set the sort order used by subsequent iteration."""
        self._sort = spec
        return self

    def iterate(self) -> Iterator[str]:
        """Yield author identities in the active sort order.

        Equal primary keys fall back to author identity, ascending.
        """
        # sorted() is stable, including with reverse=True
        by_author = sorted(self._authors.values(), key=lambda agg: agg.author)
        ordered = sorted(by_author, key=_SORT_KEYS[self._sort.key], reverse=self._sort.descending)
        for aggregate in ordered:
            yield aggregate.author

    def __iter__(self) -> Iterator[str]:
        return self.iterate()

    def rows(self) -> list[AuthorAggregate]:
        """Return the aggregates in the active sort order."""
        return [self._authors[author] for author in self.iterate()]

    def count(self) -> int:
        """Number of distinct authors."""
        return len(self._authors)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, author: object) -> bool:
        return author in self._authors

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            'order': str(self._sort),
            'authors': [aggregate.to_dict() for aggregate in self.rows()],
            'skipped_lines': self.skipped_lines,
        }
