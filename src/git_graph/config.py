"""Workspace configuration from .git-graph/config.yaml."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

CONFIG_DIR = ".git-graph"
CONFIG_FILE = "config.yaml"


class GitGraphConfig(BaseModel):
    open_to_the_repo_of_the_active_text_editor_document: bool = False
    code_review_expiry_days: int = 90
    git_path: str | None = None
    workspace_folders: list[str] = Field(default_factory=list)


def load_config(workspace: str | Path) -> GitGraphConfig:
    """Load config for a workspace. Missing or empty files yield the defaults.

    ``workspace_folders`` defaults to the workspace itself; relative entries
    are resolved against it.
    """
    root = Path(workspace)
    config_file = root / CONFIG_DIR / CONFIG_FILE

    raw = None
    if config_file.exists():
        raw = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    config = GitGraphConfig(**raw) if raw else GitGraphConfig()

    if config.workspace_folders:
        config.workspace_folders = [str((root / folder).resolve()) for folder in config.workspace_folders]
    else:
        config.workspace_folders = [str(root.resolve())]
    return config
