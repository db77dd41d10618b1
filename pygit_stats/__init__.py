"""
pygit-stats: per-author commit statistics

Runs ``git log --numstat`` over one or more repositories and reports
commits, touched files and added/removed lines for every author.
"""

from colorama import just_fix_windows_console

just_fix_windows_console()

__version__ = "1.0.0"

# Re-export public API so `from pygit_stats import X` keeps working.
from pygit_stats.aggregator import StatsAggregator  # noqa: E402
from pygit_stats.cli import main  # noqa: E402
from pygit_stats.config import create_argument_parser, load_config_file  # noqa: E402
from pygit_stats.models import (  # noqa: E402
    AuthorAggregate,
    CommitRecord,
    SortField,
    SortSpec,
    StatsConfig,
)
from pygit_stats.output import (  # noqa: E402
    BufferedOutputHandler,
    ConsoleOutputHandler,
    NullOutputHandler,
)
from pygit_stats.parser import LogParser, parse_log  # noqa: E402
from pygit_stats.protocols import LogSource, OutputHandler  # noqa: E402
from pygit_stats.renderer import NO_COMMITS_MESSAGE, ReportRenderer  # noqa: E402
from pygit_stats.repository import GitLogSource, resolve_color  # noqa: E402
from pygit_stats.table import AggregationTable  # noqa: E402

__all__ = [
    "__version__",
    # Models
    "AuthorAggregate",
    "CommitRecord",
    "SortField",
    "SortSpec",
    "StatsConfig",
    # Protocols
    "LogSource",
    "OutputHandler",
    # Implementations
    "AggregationTable",
    "GitLogSource",
    "LogParser",
    "BufferedOutputHandler",
    "ConsoleOutputHandler",
    "NullOutputHandler",
    "ReportRenderer",
    "NO_COMMITS_MESSAGE",
    # Services
    "StatsAggregator",
    "parse_log",
    "resolve_color",
    # Config / CLI
    "create_argument_parser",
    "load_config_file",
    "main",
]
