"""Wire the collaborators into a CommandManager for a workspace."""

from __future__ import annotations

from pathlib import Path

from git_graph.avatar_manager import AvatarManager
from git_graph.commands import CommandManager
from git_graph.config import load_config
from git_graph.data_source import DataSource, find_git
from git_graph.extension_state import ExtensionState
from git_graph.host import Host
from git_graph.repo_manager import RepoManager


async def create_command_manager(workspace: str | Path, host: Host) -> CommandManager:
    config = load_config(workspace)
    git_executable = await find_git(config.git_path)
    data_source = DataSource(git_executable)
    extension_state = ExtensionState(workspace, code_review_expiry_days=config.code_review_expiry_days)
    repo_manager = RepoManager(data_source, extension_state)
    return CommandManager(
        workspace,
        host,
        AvatarManager(workspace),
        data_source,
        extension_state,
        repo_manager,
        git_executable,
    )
