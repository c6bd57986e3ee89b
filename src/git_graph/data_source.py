"""Git queries used by the command layer."""

from __future__ import annotations

import asyncio
import logging
import re
import shutil

from git_graph.models import GitExecutable
from git_graph.utils import normalize_path

logger = logging.getLogger(__name__)

_VERSION_LINE = re.compile(r"^git version (\S+)")


class DataSourceUnavailableError(RuntimeError):
    """Git could not be executed at all."""


async def find_git(git_path: str | None = None) -> GitExecutable | None:
    """Locate a working git executable, preferring ``git_path`` when given."""
    path = git_path or shutil.which("git")
    if not path:
        return None
    try:
        proc = await asyncio.create_subprocess_exec(
            path, "--version",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, _ = await proc.communicate()
    except (FileNotFoundError, OSError):
        logger.exception("Failed to run git executable at %s", path)
        return None
    m = _VERSION_LINE.match(stdout.decode().strip())
    if proc.returncode != 0 or not m:
        return None
    return GitExecutable(path=path, version=m.group(1))


class DataSource:
    """Runs git commands against a repository."""

    def __init__(self, git_executable: GitExecutable | None) -> None:
        self.git_executable = git_executable

    def set_git_executable(self, git_executable: GitExecutable | None) -> None:
        self.git_executable = git_executable

    async def _run(self, repo: str, *args: str) -> tuple[int, str]:
        if self.git_executable is None:
            raise DataSourceUnavailableError("No git executable is configured")
        try:
            proc = await asyncio.create_subprocess_exec(
                self.git_executable.path, *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=repo,
            )
            stdout, _ = await proc.communicate()
        except FileNotFoundError as e:
            # Either git or the repo directory disappeared
            if shutil.which(self.git_executable.path) is None:
                raise DataSourceUnavailableError(str(e)) from e
            raise
        return proc.returncode or 0, stdout.decode()

    async def get_commit_subject(self, repo: str, commit_hash: str) -> str | None:
        """Return the one-line subject of a commit, or None if it cannot be found."""
        code, out = await self._run(
            repo, "-c", "log.showSignature=false", "log", "--format=%s", "-n", "1", commit_hash, "--",
        )
        if code != 0:
            return None
        subject = out.strip()
        return subject or None

    async def repo_root(self, path: str) -> str | None:
        """Return the root of the repository containing ``path``, or None."""
        try:
            code, out = await self._run(path, "rev-parse", "--show-toplevel")
        except (FileNotFoundError, NotADirectoryError):
            return None
        if code != 0 or not out.strip():
            return None
        return normalize_path(out.strip())
