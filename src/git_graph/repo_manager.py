"""Registry of the repositories known to Git Graph."""

from __future__ import annotations

import asyncio
import logging

from git_graph.data_source import DataSource
from git_graph.extension_state import ExtensionState
from git_graph.models import RegisterRepoResult, RepoSource, RepoState
from git_graph.utils import (
    get_repo_name,
    is_path_in_workspace,
    is_path_within,
    normalize_path,
    resolve_to_canonical_path,
)

logger = logging.getLogger(__name__)


class RepoManager:
    """Tracks known and ignored repositories, persisting them through ExtensionState."""

    def __init__(self, data_source: DataSource, extension_state: ExtensionState) -> None:
        self.data_source = data_source
        self.extension_state = extension_state
        self.repos: dict[str, RepoState] = extension_state.get_repos()
        self.ignored_repos: list[str] = extension_state.get_ignored_repos()

    def get_repos(self) -> dict[str, RepoState]:
        return dict(sorted(self.repos.items()))

    def is_known_repo(self, repo: str) -> bool:
        return repo in self.repos

    async def get_known_repo(self, repo: str) -> str | None:
        """Return the known repo path equal to ``repo``, comparing canonical paths too."""
        if self.is_known_repo(repo):
            return repo
        canonical = await asyncio.to_thread(resolve_to_canonical_path, repo)
        for known in self.repos:
            if canonical == await asyncio.to_thread(resolve_to_canonical_path, known):
                return known
        return None

    def get_repo_containing_file(self, path: str) -> str | None:
        """Return the deepest known repo that contains ``path``."""
        path = normalize_path(path)
        containing = [repo for repo in self.repos if is_path_within(path, repo)]
        return max(containing, key=len) if containing else None

    async def register_repo(self, path: str, loaded_from_external: bool) -> RegisterRepoResult:
        """Register the repository containing ``path``.

        If the root is already known, it is returned alongside an error so
        callers that only need a repo to open can still use it.
        """
        root = await self.data_source.repo_root(path)
        if root is None:
            return RegisterRepoResult(root=None, error=f'The folder "{path}" is not a Git repository.')
        if self.is_known_repo(root):
            return RegisterRepoResult(
                root=root, error=f'The folder "{path}" is contained within the known repository "{root}".',
            )

        if root in self.ignored_repos:
            self.ignored_repos.remove(root)
            self.extension_state.set_ignored_repos(self.ignored_repos)
        source = RepoSource.EXTERNAL if loaded_from_external else RepoSource.USER
        self.repos[root] = RepoState(source=source)
        self.extension_state.save_repos(self.repos)
        logger.info("Added repository %s (%s)", root, source.value)
        return RegisterRepoResult(root=root)

    def ignore_repo(self, repo: str) -> bool:
        """Stop tracking ``repo``. Returns False if it was not known."""
        if not self.is_known_repo(repo):
            return False
        del self.repos[repo]
        if repo not in self.ignored_repos:
            self.ignored_repos.append(repo)
        self.extension_state.save_repos(self.repos)
        self.extension_state.set_ignored_repos(self.ignored_repos)
        logger.info("Ignored repository %s", repo)
        return True

    async def add_user_repo(self, path: str, workspace_folders: list[str]) -> RegisterRepoResult:
        """Register a folder the user chose, which must lie within the workspace."""
        path = normalize_path(path)
        if not is_path_in_workspace(path, workspace_folders):
            return RegisterRepoResult(root=None, error=f'The folder "{path}" is not within the opened workspace.')
        return await self.register_repo(path, loaded_from_external=False)

    def remove_repo(self, repo: str) -> str | None:
        """Ignore a repo the user chose. Returns an error message if it was not known."""
        if self.ignore_repo(repo):
            return None
        return f'The repository "{get_repo_name(repo)}" is not known to Git Graph.'
