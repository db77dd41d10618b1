"""ReportRenderer: prints the aggregated table."""

from __future__ import annotations

import json

from colorama import Fore, Style

from pygit_stats.protocols import OutputHandler
from pygit_stats.table import AggregationTable

DEFAULT_NAME_WIDTH = 60
NO_COMMITS_MESSAGE = "no commits found"
HEADER = ('commits', 'files', 'delta', '+', '-')


class ReportRenderer:
    """Renders an AggregationTable as a fixed-width, tab-separated report"""

    def __init__(self, output: OutputHandler, use_color: bool = False, max_name_width: int = DEFAULT_NAME_WIDTH):
        """Create a renderer. use_color is decided once by the caller."""
        self.output = output
        self.use_color = use_color
        self.max_name_width = max_name_width

    def render(self, table: AggregationTable) -> None:
        """Print the header, a rule and one row per author in table order."""
        if not table.count():
            self.output.info(NO_COMMITS_MESSAGE)
            return

        for line in self.lines(table):
            self.output.info(line)

    def lines(self, table: AggregationTable) -> list[str]:
        """Return the report as a list of lines."""
        width = self.max_name_width
        header = f"{'author':<{width}}\t" + "\t".join(HEADER)
        rule = "-" * width + "\t" + "\t".join("-" * len(title) for title in HEADER)

        rows = [header, rule]
        for aggregate in table.rows():
            name = aggregate.author[:width]
            rows.append(
                f"{name:<{width}}\t{aggregate.commit_count}\t{aggregate.file_count}\t{aggregate.delta}\t"
                f"{self._added(aggregate.added)}\t{self._removed(aggregate.removed)}"
            )
        return rows

    def render_json(self, table: AggregationTable) -> None:
        """Print the table as an indented JSON document."""
        self.output.info(json.dumps(table.to_dict(), indent=2))

    def _added(self, value: int) -> str:
        if self.use_color:
            return f"{Fore.GREEN}{value}{Style.RESET_ALL}"
        return str(value)

    def _removed(self, value: int) -> str:
        if self.use_color:
            return f"{Fore.RED}{value}{Style.RESET_ALL}"
        return str(value)
