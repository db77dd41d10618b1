"""GitPython-based log source and git color detection."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator, Sequence
from pathlib import Path

from git import Git, GitCommandError, Repo
from git.exc import CommandError

logger = logging.getLogger(__name__)

AUTHOR_FORMAT = '%aN <%aE>'
COLOR_MODES = ('auto', 'always', 'never')


class GitLogSource:
    """Streams `git log --numstat` output from a repository"""

    def __init__(self, repo_path: Path):
        """Open the git repository containing repo_path."""
        self._path = Path(repo_path)
        self._repo = Repo(self._path, search_parent_directories=True)

    def close(self) -> None:
        """Release underlying git resources."""
        self._repo.close()

    @property
    def path(self) -> Path:
        """Path the source was opened with."""
        return self._path

    def log_arguments(self, extra_args: Sequence[str] = (), sentinel: str = '+') -> list[str]:
        """Arguments passed to `git log`."""
        return ['--numstat', f'--format={sentinel}{AUTHOR_FORMAT}', *extra_args]

    def iter_log_lines(self, extra_args: Sequence[str] = (), sentinel: str = '+') -> Iterator[str]:
        """Yield decoded log lines as git produces them.

        A failing git command is logged; lines already produced are kept.
        """
        args = self.log_arguments(extra_args, sentinel)
        logger.debug("Running git log %s in %s", ' '.join(args), self._repo.working_dir)
        proc = self._repo.git.log(*args, as_process=True)
        try:
            for raw in proc.stdout:
                yield raw.decode('utf-8', errors='replace').rstrip('\r\n')
            proc.wait()
        except GitCommandError as e:
            logger.warning("git log failed in %s: %s", self._path, str(e.stderr or e).strip())


def resolve_color(mode: str = 'auto', stream=None) -> bool:
    """Decide once whether report output should be colorized.

    'auto' follows git's color.ui setting for the given stream; NO_COLOR
    disables it.
    """
    if mode == 'always':
        return True
    if mode == 'never':
        return False
    if mode != 'auto':
        raise ValueError(f"invalid color mode '{mode}'")
    if os.environ.get('NO_COLOR'):
        return False

    stream = stream if stream is not None else sys.stdout
    try:
        is_tty = stream.isatty()
    except (AttributeError, ValueError):
        is_tty = False

    try:
        answer = Git().config('--get-colorbool', 'color.ui', 'true' if is_tty else 'false')
    except CommandError as e:
        logger.debug("git could not resolve color.ui: %s", e)
        return is_tty
    return answer.strip() == 'true'
