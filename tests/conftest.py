"""Shared fixtures for Git Graph tests."""

from __future__ import annotations

import pytest

from git_graph.data_source import DataSource
from git_graph.extension_state import ExtensionState
from git_graph.host import Host, QuickPickItem
from git_graph.models import GitExecutable, LoadViewTo
from git_graph.repo_manager import RepoManager

GIT = GitExecutable(path="/usr/bin/git", version="2.43.0")


@pytest.fixture(autouse=True)
def _isolate_workspace(tmp_path, monkeypatch):
    """Prevent tests from writing state to the real project .git-graph/ directory."""
    monkeypatch.chdir(tmp_path)


class FakeDataSource(DataSource):
    """DataSource answering from dicts instead of running git."""

    def __init__(
        self,
        subjects: dict[tuple[str, str], str] | None = None,
        roots: dict[str, str] | None = None,
        git_executable: GitExecutable | None = GIT,
    ) -> None:
        super().__init__(git_executable)
        self.subjects = subjects or {}
        self.roots = roots or {}
        self.subject_calls: list[tuple[str, str]] = []

    async def get_commit_subject(self, repo: str, commit_hash: str) -> str | None:
        self.subject_calls.append((repo, commit_hash))
        return self.subjects.get((repo, commit_hash))

    async def repo_root(self, path: str) -> str | None:
        for candidate in sorted(self.roots, key=len, reverse=True):
            if path == candidate or path.startswith(candidate.rstrip("/") + "/"):
                return self.roots[candidate]
        return None


class FakeHost(Host):
    """Host that records messages and answers prompts from preset values."""

    def __init__(self, *, pick: int | None = 0, folder: str | None = None, active_document: str | None = None) -> None:
        self.pick = pick
        self.folder = folder
        self._active_document = active_document
        self.errors: list[str] = []
        self.infos: list[str] = []
        self.quick_picks: list[tuple[list[QuickPickItem], str]] = []
        self.views: list[LoadViewTo | None] = []

    def show_error_message(self, message: str) -> None:
        self.errors.append(message)

    def show_information_message(self, message: str) -> None:
        self.infos.append(message)

    async def show_quick_pick(self, items: list[QuickPickItem], placeholder: str) -> int | None:
        self.quick_picks.append((items, placeholder))
        return self.pick

    async def show_open_folder_dialog(self) -> str | None:
        return self.folder

    def active_document(self) -> str | None:
        return self._active_document

    def show_view(self, load_view_to: LoadViewTo | None) -> None:
        self.views.append(load_view_to)


@pytest.fixture
def data_source() -> FakeDataSource:
    return FakeDataSource()


@pytest.fixture
def extension_state(tmp_path) -> ExtensionState:
    return ExtensionState(tmp_path)


@pytest.fixture
def repo_manager(data_source, extension_state) -> RepoManager:
    return RepoManager(data_source, extension_state)
