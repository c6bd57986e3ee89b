"""Persisted workspace state: known repos, ignored repos and code reviews."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from git_graph.config import CONFIG_DIR
from git_graph.models import CodeReviewData, CodeReviews, RepoState, _now_ms

logger = logging.getLogger(__name__)

_MS_PER_DAY = 86_400_000


class ExtensionState:
    """Workspace-scoped store backed by a JSON file."""

    def __init__(self, workspace: str | Path, *, code_review_expiry_days: int = 90) -> None:
        self._state_file = Path(workspace) / CONFIG_DIR / "runtime" / "workspace-state.json"
        self.repos: dict[str, RepoState] = {}
        self.ignored_repos: list[str] = []
        self.code_reviews: CodeReviews = {}
        self._load_state()
        self.expire_old_code_reviews(code_review_expiry_days)

    def _load_state(self) -> None:
        if not self._state_file.exists():
            return
        try:
            raw = json.loads(self._state_file.read_text(encoding="utf-8"))
            self.repos = {
                path: RepoState.model_validate(state) for path, state in raw.get("repos", {}).items()
            }
            self.ignored_repos = list(raw.get("ignoredRepos", []))
            self.code_reviews = {
                repo: {cid: CodeReviewData.model_validate(data) for cid, data in reviews.items()}
                for repo, reviews in raw.get("codeReviews", {}).items()
            }
        except Exception:
            logger.exception("Failed to load workspace state from %s", self._state_file)
            self.repos, self.ignored_repos, self.code_reviews = {}, [], {}

    def _build_snapshot(self) -> dict:
        return {
            "repos": {path: state.model_dump(mode="json") for path, state in self.repos.items()},
            "ignoredRepos": self.ignored_repos,
            "codeReviews": {
                repo: {cid: data.model_dump(mode="json", by_alias=True) for cid, data in reviews.items()}
                for repo, reviews in self.code_reviews.items()
            },
        }

    def persist(self) -> str | None:
        """Write state to disk. Returns an error message on failure, None on success."""
        try:
            self._state_file.parent.mkdir(parents=True, exist_ok=True)
            temp = self._state_file.with_suffix(".tmp")
            temp.write_text(
                json.dumps(self._build_snapshot(), ensure_ascii=False, indent=2), encoding="utf-8",
            )
            temp.replace(self._state_file)
        except OSError as e:
            logger.exception("Failed to persist workspace state to %s", self._state_file)
            return f"Unable to save the Git Graph workspace state: {e}"
        return None

    # --- Repos ---

    def get_repos(self) -> dict[str, RepoState]:
        return dict(self.repos)

    def save_repos(self, repos: dict[str, RepoState]) -> None:
        self.repos = dict(repos)
        self.persist()

    def get_ignored_repos(self) -> list[str]:
        return list(self.ignored_repos)

    def set_ignored_repos(self, ignored_repos: list[str]) -> None:
        self.ignored_repos = list(ignored_repos)
        self.persist()

    # --- Code Reviews ---

    def get_code_reviews(self) -> CodeReviews:
        """Return a copy of the repo -> id -> review mapping."""
        return {repo: dict(reviews) for repo, reviews in self.code_reviews.items()}

    def start_code_review(
        self, repo: str, code_review_id: str, remaining_files: list[str], last_viewed_file: str | None,
    ) -> CodeReviewData:
        review = CodeReviewData(remaining_files=remaining_files, last_viewed_file=last_viewed_file)
        self.code_reviews.setdefault(repo, {})[code_review_id] = review
        self.persist()
        return review

    def update_code_review(
        self, repo: str, code_review_id: str, remaining_files: list[str], last_viewed_file: str | None,
    ) -> str | None:
        """Record progress on a review, ending it once no files remain."""
        review = self.code_reviews.get(repo, {}).get(code_review_id)
        if review is None:
            return self._not_found_message(repo, code_review_id)
        if not remaining_files:
            return self.end_code_review(repo, code_review_id)
        review.remaining_files = remaining_files
        review.last_viewed_file = last_viewed_file
        review.last_active = _now_ms()
        return self.persist()

    def end_code_review(self, repo: str, code_review_id: str) -> str | None:
        """Remove one review. Returns an error message if it does not exist."""
        reviews = self.code_reviews.get(repo)
        if not reviews or code_review_id not in reviews:
            return self._not_found_message(repo, code_review_id)
        del reviews[code_review_id]
        if not reviews:
            del self.code_reviews[repo]
        return self.persist()

    def end_all_workspace_code_reviews(self) -> str | None:
        self.code_reviews = {}
        return self.persist()

    def expire_old_code_reviews(self, expiry_days: int) -> None:
        """Drop reviews that have not been active within ``expiry_days``."""
        cutoff = _now_ms() - expiry_days * _MS_PER_DAY
        changed = False
        for repo in list(self.code_reviews):
            reviews = self.code_reviews[repo]
            for cid in [cid for cid, data in reviews.items() if data.last_active < cutoff]:
                del reviews[cid]
                changed = True
            if not reviews:
                del self.code_reviews[repo]
                changed = True
        if changed:
            self.persist()

    @staticmethod
    def _not_found_message(repo: str, code_review_id: str) -> str:
        return f'The Code Review "{code_review_id}" in repository "{repo}" could not be found.'
