"""StatsAggregator: collects and merges log statistics across repositories."""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Callable
from pathlib import Path

from git import InvalidGitRepositoryError, NoSuchPathError
from tqdm import tqdm

from pygit_stats.models import StatsConfig
from pygit_stats.output import BufferedOutputHandler
from pygit_stats.parser import LogParser
from pygit_stats.protocols import LogSource, OutputHandler
from pygit_stats.repository import GitLogSource
from pygit_stats.table import AggregationTable

logger = logging.getLogger(__name__)


class StatsAggregator:
    """Main orchestrator - runs the log parser per repository and merges the results"""

    def __init__(
        self,
        config: StatsConfig,
        output: OutputHandler,
        source_factory: Callable[[Path], LogSource] = GitLogSource,
    ):
        """Create an aggregator with the given config, output handler and log source factory."""
        self.config = config
        self.output = output
        self.source_factory = source_factory

    def collect(self) -> AggregationTable:
        """Parse every configured repository and return the merged, ordered table."""
        if not self.config.repos:
            table = self._collect_single(Path.cwd(), prefix=None)
        elif self.config.parallel and len(self.config.repos) > 1:
            table = self._collect_parallel(self.config.repos)
        else:
            table = self._collect_sequential(self.config.repos)

        if table.skipped_lines:
            self.output.debug(f"Ignored {table.skipped_lines} unrecognized log line(s)")
        return table.order_by(self.config.sort)

    def _collect_sequential(self, repos: list[str]) -> AggregationTable:
        """Process repositories one at a time with a progress bar."""
        combined = AggregationTable()
        show_progress = len(repos) > 1 and not self.config.json_output

        with tqdm(total=len(repos), desc="Reading", unit="repo", disable=not show_progress) as pbar:
            for repo in repos:
                pbar.set_postfix_str(Path(repo).name, refresh=True)
                combined = combined.merge(self._collect_single(Path(repo), prefix=repo))
                pbar.update(1)

        return combined

    def _collect_parallel(self, repos: list[str]) -> AggregationTable:
        """Process repositories concurrently with buffered output per thread."""
        combined = AggregationTable()

        def _collect_with_buffer(repo: str) -> tuple[AggregationTable, BufferedOutputHandler]:
            buf = BufferedOutputHandler()
            return self._collect_single(Path(repo), prefix=repo, output_override=buf), buf

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {executor.submit(_collect_with_buffer, repo): repo for repo in repos}

            with tqdm(total=len(repos), desc="Reading", unit="repo", disable=self.config.json_output) as pbar:
                for future in concurrent.futures.as_completed(futures):
                    repo = futures[future]
                    table, buf = future.result()
                    buf.flush_to(self.output)
                    combined = combined.merge(table)
                    pbar.set_postfix_str(Path(repo).name, refresh=True)
                    pbar.update(1)

        return combined

    def _collect_single(
        self,
        repo_path: Path,
        prefix: str | None,
        output_override: OutputHandler | None = None,
    ) -> AggregationTable:
        """Open one repository, stream its log through a parser and return the table."""
        output = output_override or self.output
        parser = LogParser(
            include=self.config.include,
            exclude=self.config.exclude,
            repo_prefix=prefix,
            sentinel=self.config.sentinel,
        )

        logger.debug("Reading log of %s", repo_path)
        source = None
        try:
            source = self.source_factory(repo_path)
            table = parser.parse(source.iter_log_lines(self.config.log_args, self.config.sentinel))
            output.debug(f"{repo_path}: {table.count()} author(s)")
            return table
        except (InvalidGitRepositoryError, NoSuchPathError):
            output.error(f"Not a valid git repository: {repo_path}")
            return AggregationTable()
        finally:
            if source is not None:
                source.close()
