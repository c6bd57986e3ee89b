"""FastAPI server exposing repositories, code reviews and view resolution."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request

from git_graph.avatar_manager import AvatarManager
from git_graph.code_review_id import MalformedCodeReviewIdError
from git_graph.code_review_items import get_code_review_quick_pick_items
from git_graph.config import load_config
from git_graph.data_source import DataSource, DataSourceUnavailableError, find_git
from git_graph.extension_state import ExtensionState
from git_graph.repo_manager import RepoManager
from git_graph.utils import UNABLE_TO_FIND_GIT_MSG, get_repo_name
from git_graph.view_resolution import ViewContext, code_review_view_target, resolve_view_repo


def create_app(workspace: str | Path | None = None, data_source: DataSource | None = None) -> FastAPI:
    """Create the FastAPI application for a workspace (defaults to the cwd)."""
    root = Path(workspace) if workspace is not None else Path.cwd()
    config = load_config(root)
    data_source = data_source or DataSource(None)
    extension_state = ExtensionState(root, code_review_expiry_days=config.code_review_expiry_days)
    repo_manager = RepoManager(data_source, extension_state)
    avatar_manager = AvatarManager(root)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if data_source.git_executable is None:
            data_source.set_git_executable(await find_git(load_config(root).git_path))
        yield

    app = FastAPI(title="Git Graph", version="0.1.0", lifespan=lifespan)
    app.state.extension_state = extension_state
    app.state.repo_manager = repo_manager

    def _require_git() -> None:
        if data_source.git_executable is None:
            raise HTTPException(status_code=503, detail=UNABLE_TO_FIND_GIT_MSG)

    # --- Repos ---

    @app.get("/api/repos")
    async def api_list_repos():
        return [
            {"path": path, "name": state.name or get_repo_name(path), "source": state.source.value}
            for path, state in repo_manager.get_repos().items()
        ]

    @app.post("/api/repos")
    async def api_add_repo(request: Request):
        _require_git()
        body = await request.json()
        raw_path = str(body.get("path") or "").strip()
        if not raw_path:
            raise HTTPException(status_code=400, detail="path is required")
        status = await repo_manager.add_user_repo(raw_path, load_config(root).workspace_folders)
        if status.error is not None:
            raise HTTPException(status_code=400, detail=status.error)
        return {"root": status.root}

    @app.delete("/api/repos")
    async def api_remove_repo(path: str = ""):
        _require_git()
        error = repo_manager.remove_repo(path)
        if error is not None:
            raise HTTPException(status_code=404, detail=error)
        return {"status": "removed", "path": path}

    # --- Code Reviews ---

    @app.get("/api/code-reviews")
    async def api_list_code_reviews():
        try:
            items = await get_code_review_quick_pick_items(extension_state.get_code_reviews(), data_source)
        except DataSourceUnavailableError as e:
            raise HTTPException(status_code=503, detail=str(e)) from e
        return [item.model_dump(mode="json") for item in items]

    @app.delete("/api/code-reviews")
    async def api_end_all_code_reviews():
        error = extension_state.end_all_workspace_code_reviews()
        if error is not None:
            raise HTTPException(status_code=500, detail=error)
        return {"status": "ended"}

    @app.delete("/api/code-reviews/{code_review_id}")
    async def api_end_code_review(code_review_id: str, repo: str = ""):
        error = extension_state.end_code_review(repo, code_review_id)
        if error is not None:
            raise HTTPException(status_code=404, detail=error)
        return {"status": "ended", "repo": repo, "code_review_id": code_review_id}

    @app.post("/api/code-reviews/{code_review_id}/resume")
    async def api_resume_code_review(code_review_id: str, repo: str = ""):
        if code_review_id not in extension_state.get_code_reviews().get(repo, {}):
            raise HTTPException(status_code=404, detail=f'The Code Review "{code_review_id}" could not be found.')
        try:
            load_view_to = code_review_view_target(repo, code_review_id)
        except MalformedCodeReviewIdError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return load_view_to.model_dump(mode="json")

    # --- View ---

    @app.post("/api/view")
    async def api_view(request: Request):
        body: dict[str, Any] = await request.json() if await request.body() else {}
        ctx = ViewContext(
            arg=body,
            config=load_config(root),
            active_document=body.get("activeDocument"),
        )
        repo = await resolve_view_repo(ctx, repo_manager)
        return {"repo": repo}

    # --- Avatars ---

    @app.post("/api/avatars/clear")
    async def api_clear_avatar_cache():
        avatar_manager.clear_cache()
        return {"status": "cleared"}

    return app
