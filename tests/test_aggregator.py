"""Tests for StatsAggregator using in-memory log sources."""

from pathlib import Path

import pytest
from git import InvalidGitRepositoryError

from pygit_stats import BufferedOutputHandler, NullOutputHandler, SortSpec, StatsAggregator, StatsConfig


class FakeLogSource:
    """LogSource that replays canned lines and records how it was called."""

    LOGS: dict[str, list[str]] = {}
    calls: list[tuple[str, tuple[str, ...], str]] = []
    closed: list[str] = []

    def __init__(self, repo_path: Path):
        key = str(repo_path)
        if key not in self.LOGS:
            raise InvalidGitRepositoryError(key)
        self._path = Path(repo_path)
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    def iter_log_lines(self, extra_args=(), sentinel='+'):
        FakeLogSource.calls.append((self._key, tuple(extra_args), sentinel))
        yield from self.LOGS[self._key]

    def close(self) -> None:
        FakeLogSource.closed.append(self._key)


@pytest.fixture(autouse=True)
def fake_logs(monkeypatch, tmp_path):
    FakeLogSource.LOGS = {
        "api": ["+Alice <a@x.com>", "3\t1\tmain.py", "+Bob <b@x.com>", "1\t0\tmain.py"],
        "web": ["+Alice <a@x.com>", "10\t2\tmain.py", "junk line"],
        str(tmp_path): ["+Carol <c@x.com>", "1\t1\tREADME"],
    }
    FakeLogSource.calls = []
    FakeLogSource.closed = []
    monkeypatch.chdir(tmp_path)
    return FakeLogSource.LOGS


def _collect(output=None, **overrides):
    config = StatsConfig(**overrides)
    aggregator = StatsAggregator(config, output or NullOutputHandler(), source_factory=FakeLogSource)
    return aggregator.collect()


class TestSingleRepository:
    def test_current_directory_without_prefix(self, tmp_path):
        table = _collect()
        assert list(table) == ["Carol <c@x.com>"]
        assert table.get("Carol <c@x.com>").files == {"README"}

    def test_log_args_and_sentinel_forwarded(self, tmp_path):
        _collect(log_args=["--since=2024-01-01", "main"])
        assert FakeLogSource.calls == [(str(tmp_path), ("--since=2024-01-01", "main"), "+")]

    def test_source_closed(self, tmp_path):
        _collect()
        assert FakeLogSource.closed == [str(tmp_path)]


class TestMultipleRepositories:
    def test_merged_with_prefixes(self):
        table = _collect(repos=["api", "web"])
        alice = table.get("Alice <a@x.com>")
        assert alice.commit_count == 2
        assert alice.added == 13
        assert alice.removed == 3
        assert alice.files == {"api/main.py", "web/main.py"}
        assert table.skipped_lines == 1

    def test_sorted_by_config(self):
        table = _collect(repos=["api", "web"], sort=SortSpec.parse("author"))
        assert list(table) == ["Alice <a@x.com>", "Bob <b@x.com>"]

    def test_filters_applied_per_repository(self):
        table = _collect(repos=["api", "web"], include=r"^nothing$")
        assert table.count() == 0

    def test_invalid_repository_reported_and_skipped(self):
        output = BufferedOutputHandler()
        table = _collect(output, repos=["api", "missing"])
        assert table.count() == 2
        errors = [m for level, m, _ in output.messages if level == 'error']
        assert errors == ["Not a valid git repository: missing"]

    def test_parallel_matches_sequential(self):
        sequential = _collect(repos=["api", "web"])
        parallel = _collect(repos=["api", "web"], parallel=True, max_workers=2)
        assert parallel.to_dict() == sequential.to_dict()

    def test_skipped_lines_reported_in_debug(self):
        output = BufferedOutputHandler()
        _collect(output, repos=["web"])
        debug = [m for level, m, _ in output.messages if level == 'debug']
        assert "Ignored 1 unrecognized log line(s)" in debug
