"""Data models for the Git Graph command layer."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


def _now_ms() -> int:
    return int(time.time() * 1000)


# --- Repositories ---


class RepoSource(str, enum.Enum):
    USER = "user"          # Added through the "Add Git Repository" command
    EXTERNAL = "external"  # Discovered from an explicit source control root


class RepoState(BaseModel):
    name: str | None = None
    source: RepoSource = RepoSource.USER


@dataclass
class RegisterRepoResult:
    root: str | None
    error: str | None = None


@dataclass
class GitExecutable:
    path: str
    version: str


# --- Code Reviews ---


class CodeReviewData(BaseModel):
    """Persisted progress of one code review.

    Only ``lastActive`` is interpreted by the command layer; the remaining
    fields belong to the view and unknown keys are kept as-is.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    last_active: int = Field(default_factory=_now_ms, alias="lastActive")
    last_viewed_file: str | None = Field(default=None, alias="lastViewedFile")
    remaining_files: list[str] = Field(default_factory=list, alias="remainingFiles")


# repo -> code review id -> data
CodeReviews = dict[str, dict[str, CodeReviewData]]


class CodeReviewQuickPickItem(BaseModel):
    code_review_repo: str
    code_review_id: str
    label: str
    description: str = ""
    detail: str = ""


# --- View ---


class CommitDetails(BaseModel):
    commit_hash: str
    compare_with_hash: str | None = None


class LoadViewTo(BaseModel):
    repo: str
    commit_details: CommitDetails | None = None
