"""CLI entrypoint for git-graph."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import typer
import uvicorn

from git_graph.app import create_command_manager
from git_graph.host import ConsoleHost

app = typer.Typer(name="git-graph", help="Git Graph repository and code review commands")

_workspace_option = typer.Option(Path("."), "--workspace", "-w", help="Workspace folder")


def _run(workspace: Path, command: str, *args: Any, active_document: str | None = None) -> None:
    async def _execute() -> None:
        manager = await create_command_manager(workspace.resolve(), ConsoleHost(active_document))
        await manager.execute(command, *args)

    asyncio.run(_execute())


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@app.command()
def view(
    root: str = typer.Option(None, "--root", help="Source control root to open"),
    file: str = typer.Option(None, "--file", help="Active document, used to pick its repository"),
    workspace: Path = _workspace_option,
) -> None:
    """Open Git Graph."""
    _run(workspace, "git-graph.view", {"rootUri": root} if root else None, active_document=file)


@app.command("add-repo")
def add_repo(workspace: Path = _workspace_option) -> None:
    """Add a Git repository to Git Graph."""
    _run(workspace, "git-graph.addGitRepository")


@app.command("remove-repo")
def remove_repo(workspace: Path = _workspace_option) -> None:
    """Remove a Git repository from Git Graph."""
    _run(workspace, "git-graph.removeGitRepository")


@app.command("clear-avatar-cache")
def clear_avatar_cache(workspace: Path = _workspace_option) -> None:
    _run(workspace, "git-graph.clearAvatarCache")


@app.command("end-all-reviews")
def end_all_reviews(workspace: Path = _workspace_option) -> None:
    """End all code reviews in the workspace."""
    _run(workspace, "git-graph.endAllWorkspaceCodeReviews")


@app.command("end-review")
def end_review(workspace: Path = _workspace_option) -> None:
    """End one code review in the workspace."""
    _run(workspace, "git-graph.endSpecificWorkspaceCodeReview")


@app.command("resume-review")
def resume_review(workspace: Path = _workspace_option) -> None:
    """Resume a code review in the workspace."""
    _run(workspace, "git-graph.resumeWorkspaceCodeReview")


@app.command()
def serve(
    port: int = typer.Option(3000, help="Server port"),
    workspace: Path = _workspace_option,
) -> None:
    """Serve the Git Graph API."""
    from git_graph.server import create_app

    fastapi_app = create_app(workspace.resolve())

    typer.echo(f"Starting Git Graph API on http://localhost:{port}")

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s %(levelprefix)s %(message)s"
    log_config["formatters"]["default"]["datefmt"] = "%Y-%m-%d %H:%M:%S"
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s %(levelprefix)s %(client_addr)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["access"]["datefmt"] = "%Y-%m-%d %H:%M:%S"

    uvicorn.run(fastapi_app, host="127.0.0.1", port=port, log_level="info", log_config=log_config)


if __name__ == "__main__":
    app()
