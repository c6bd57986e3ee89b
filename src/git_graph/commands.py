"""Commands exposed to the host: view, repository management and code reviews."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from git_graph.avatar_manager import AvatarManager
from git_graph.code_review_items import get_code_review_quick_pick_items
from git_graph.config import load_config
from git_graph.data_source import DataSource, DataSourceUnavailableError
from git_graph.extension_state import ExtensionState
from git_graph.host import Host, QuickPickItem
from git_graph.models import CodeReviewQuickPickItem, GitExecutable, LoadViewTo
from git_graph.repo_manager import RepoManager
from git_graph.utils import UNABLE_TO_FIND_GIT_MSG, get_repo_name
from git_graph.view_resolution import ViewContext, code_review_view_target, resolve_view_repo

logger = logging.getLogger(__name__)

NO_CODE_REVIEWS_MSG = "There are no Code Reviews in progress within the current workspace."


class CommandManager:
    """Registers the Git Graph commands and dispatches them by id."""

    def __init__(
        self,
        workspace: str | Path,
        host: Host,
        avatar_manager: AvatarManager,
        data_source: DataSource,
        extension_state: ExtensionState,
        repo_manager: RepoManager,
        git_executable: GitExecutable | None,
    ) -> None:
        self.workspace = Path(workspace)
        self.host = host
        self.avatar_manager = avatar_manager
        self.data_source = data_source
        self.extension_state = extension_state
        self.repo_manager = repo_manager
        self.git_executable = git_executable
        self.commands: dict[str, Callable[..., Awaitable[Any]]] = {}

        self._register_command("git-graph.view", self.view)
        self._register_command("git-graph.addGitRepository", self.add_git_repository)
        self._register_command("git-graph.removeGitRepository", self.remove_git_repository)
        self._register_command("git-graph.clearAvatarCache", self.clear_avatar_cache)
        self._register_command("git-graph.endAllWorkspaceCodeReviews", self.end_all_workspace_code_reviews)
        self._register_command("git-graph.endSpecificWorkspaceCodeReview", self.end_specific_workspace_code_review)
        self._register_command("git-graph.resumeWorkspaceCodeReview", self.resume_workspace_code_review)

    def _register_command(self, command: str, callback: Callable[..., Awaitable[Any]]) -> None:
        self.commands[command] = callback

    async def execute(self, command: str, *args: Any) -> Any:
        callback = self.commands.get(command)
        if callback is None:
            raise KeyError(f"Unknown command: {command}")
        logger.debug("Executing %s", command)
        return await callback(*args)

    def set_git_executable(self, git_executable: GitExecutable | None) -> None:
        self.git_executable = git_executable
        self.data_source.set_git_executable(git_executable)

    # --- Commands ---

    async def view(self, arg: Any = None) -> LoadViewTo | None:
        ctx = ViewContext(
            arg=arg,
            config=load_config(self.workspace),
            active_document=self.host.active_document(),
        )
        repo = await resolve_view_repo(ctx, self.repo_manager)
        load_view_to = LoadViewTo(repo=repo) if repo is not None else None
        self.host.show_view(load_view_to)
        return load_view_to

    async def add_git_repository(self) -> None:
        if self.git_executable is None:
            self.host.show_error_message(UNABLE_TO_FIND_GIT_MSG)
            return

        folder = await self.host.show_open_folder_dialog()
        if not folder:
            return
        status = await self.repo_manager.add_user_repo(folder, load_config(self.workspace).workspace_folders)
        if status.error is None:
            self.host.show_information_message(f'The repository "{status.root}" was added to Git Graph.')
        else:
            self.host.show_error_message(f"{status.error} Therefore it could not be added to Git Graph.")

    async def remove_git_repository(self) -> None:
        if self.git_executable is None:
            self.host.show_error_message(UNABLE_TO_FIND_GIT_MSG)
            return

        repo_paths = list(self.repo_manager.get_repos())
        items = [QuickPickItem(label=get_repo_name(path), description=path) for path in repo_paths]
        index = await self.host.show_quick_pick(items, "Select a repository to remove from Git Graph:")
        if index is None:
            return
        item = items[index]
        error = self.repo_manager.remove_repo(item.description)
        if error is None:
            self.host.show_information_message(f'The repository "{item.label}" was removed from Git Graph.')
        else:
            self.host.show_error_message(error)

    async def clear_avatar_cache(self) -> None:
        self.avatar_manager.clear_cache()

    async def end_all_workspace_code_reviews(self) -> None:
        error = self.extension_state.end_all_workspace_code_reviews()
        if error is None:
            self.host.show_information_message("Ended All Code Reviews in Workspace")
        else:
            self.host.show_error_message(error)

    async def end_specific_workspace_code_review(self) -> None:
        item = await self._pick_code_review("Select the Code Review you want to end:")
        if item is None:
            return
        error = self.extension_state.end_code_review(item.code_review_repo, item.code_review_id)
        if error is None:
            self.host.show_information_message(f'Successfully ended Code Review "{item.label}".')
        else:
            self.host.show_error_message(error)

    async def resume_workspace_code_review(self) -> LoadViewTo | None:
        item = await self._pick_code_review("Select the Code Review you want to resume:")
        if item is None:
            return None
        load_view_to = code_review_view_target(item.code_review_repo, item.code_review_id)
        self.host.show_view(load_view_to)
        return load_view_to

    # --- Helpers ---

    async def _pick_code_review(self, placeholder: str) -> CodeReviewQuickPickItem | None:
        code_reviews = self.extension_state.get_code_reviews()
        if not code_reviews:
            self.host.show_error_message(NO_CODE_REVIEWS_MSG)
            return None

        try:
            review_items = await get_code_review_quick_pick_items(code_reviews, self.data_source)
        except DataSourceUnavailableError as e:
            self.host.show_error_message(f"Unable to load the Code Reviews in progress: {e}")
            return None
        if not review_items:
            self.host.show_error_message(NO_CODE_REVIEWS_MSG)
            return None

        items = [QuickPickItem(label=i.label, description=i.description, detail=i.detail) for i in review_items]
        index = await self.host.show_quick_pick(items, placeholder)
        return review_items[index] if index is not None else None
