"""Choose the repository the "view" command opens.

Strategies run in order; the first to return a repo path wins. A strategy
returns None when it has no opinion, and the view then shows its own
repository picker.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from git_graph.code_review_id import decode_code_review_id
from git_graph.config import GitGraphConfig
from git_graph.data_source import DataSourceUnavailableError
from git_graph.models import CommitDetails, LoadViewTo
from git_graph.repo_manager import RepoManager
from git_graph.utils import normalize_path, resolve_to_canonical_path

logger = logging.getLogger(__name__)


@dataclass
class ViewContext:
    arg: Any
    config: GitGraphConfig
    active_document: str | None


Strategy = Callable[[ViewContext, RepoManager], Awaitable[str | None]]


def get_root_path(arg: Any) -> str | None:
    """Extract an explicit source control root from a command argument."""
    if isinstance(arg, dict):
        root = arg.get("rootUri") or arg.get("root_uri")
    else:
        root = getattr(arg, "root_uri", None)
    if not root:
        return None
    root = str(root)
    if root.startswith("file://"):
        root = root[len("file://"):]
    return normalize_path(root)


async def from_source_control_root(ctx: ViewContext, repo_manager: RepoManager) -> str | None:
    repo_path = get_root_path(ctx.arg)
    if repo_path is None:
        return None
    known = await repo_manager.get_known_repo(repo_path)
    if known is not None:
        return known
    try:
        result = await repo_manager.register_repo(resolve_to_canonical_path(repo_path), loaded_from_external=True)
    except DataSourceUnavailableError as e:
        logger.warning("Unable to register %s: %s", repo_path, e)
        return None
    if result.root is None:
        logger.warning("Unable to open %s: %s", repo_path, result.error)
    return result.root


async def from_active_document(ctx: ViewContext, repo_manager: RepoManager) -> str | None:
    if not ctx.config.open_to_the_repo_of_the_active_text_editor_document or not ctx.active_document:
        return None
    return repo_manager.get_repo_containing_file(ctx.active_document)


STRATEGIES: list[Strategy] = [from_source_control_root, from_active_document]


async def resolve_view_repo(
    ctx: ViewContext, repo_manager: RepoManager, strategies: list[Strategy] | None = None,
) -> str | None:
    for strategy in strategies if strategies is not None else STRATEGIES:
        repo = await strategy(ctx, repo_manager)
        if repo is not None:
            return repo
    return None


def code_review_view_target(repo: str, code_review_id: str) -> LoadViewTo:
    """View target for resuming a review: its target commit, compared with its base if any.

    Raises MalformedCodeReviewIdError.
    """
    from_hash, to_hash = decode_code_review_id(code_review_id)
    return LoadViewTo(
        repo=repo,
        commit_details=CommitDetails(
            commit_hash=to_hash,
            compare_with_hash=from_hash if from_hash != to_hash else None,
        ),
    )
