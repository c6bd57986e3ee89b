"""Host environment interface: messages, pickers and the Git Graph view."""

from __future__ import annotations

import abc
import asyncio
from dataclasses import dataclass

import typer

from git_graph.models import LoadViewTo


@dataclass
class QuickPickItem:
    label: str
    description: str = ""
    detail: str = ""


class Host(abc.ABC):
    """What the commands need from the surrounding editor or terminal."""

    @abc.abstractmethod
    def show_error_message(self, message: str) -> None:
        ...

    @abc.abstractmethod
    def show_information_message(self, message: str) -> None:
        ...

    @abc.abstractmethod
    async def show_quick_pick(self, items: list[QuickPickItem], placeholder: str) -> int | None:
        """Let the user pick one item. Returns its index, or None if dismissed."""
        ...

    @abc.abstractmethod
    async def show_open_folder_dialog(self) -> str | None:
        ...

    @abc.abstractmethod
    def active_document(self) -> str | None:
        """Path of the document the user is focused on, if any."""
        ...

    @abc.abstractmethod
    def show_view(self, load_view_to: LoadViewTo | None) -> None:
        """Create or reveal the Git Graph view, optionally loading a repo."""
        ...


class ConsoleHost(Host):
    """Terminal host: prompts on stdin and reports with typer.

    Prompts block on stdin, so they run in a worker thread to keep the event
    loop free for in-flight git lookups.
    """

    def __init__(self, active_document: str | None = None) -> None:
        self._active_document = active_document
        self.shown: LoadViewTo | None = None

    def show_error_message(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.RED, err=True)

    def show_information_message(self, message: str) -> None:
        typer.echo(message)

    async def show_quick_pick(self, items: list[QuickPickItem], placeholder: str) -> int | None:
        typer.echo(placeholder)
        for i, item in enumerate(items, start=1):
            line = f"  {i}. {item.label}"
            if item.description:
                line += f"  ({item.description})"
            typer.echo(line)
            if item.detail:
                typer.echo(f"     {item.detail}")
        choice = await asyncio.to_thread(typer.prompt, "Number (blank to cancel)", default="", show_default=False)
        if not choice.strip().isdigit():
            return None
        index = int(choice) - 1
        return index if 0 <= index < len(items) else None

    async def show_open_folder_dialog(self) -> str | None:
        folder = await asyncio.to_thread(typer.prompt, "Folder", default="", show_default=False)
        return folder.strip() or None

    def active_document(self) -> str | None:
        return self._active_document

    def show_view(self, load_view_to: LoadViewTo | None) -> None:
        self.shown = load_view_to
        if load_view_to is None:
            typer.echo("Git Graph: no repository selected")
            return
        typer.echo(f"Git Graph: {load_view_to.repo}")
        details = load_view_to.commit_details
        if details is not None:
            if details.compare_with_hash:
                typer.echo(f"  comparing {details.compare_with_hash} -> {details.commit_hash}")
            else:
                typer.echo(f"  commit {details.commit_hash}")
