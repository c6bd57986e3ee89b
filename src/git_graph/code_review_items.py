"""Build the quick pick entries used to choose an in-progress code review."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Protocol

from git_graph.code_review_id import MalformedCodeReviewIdError, decode_code_review_id
from git_graph.data_source import DataSourceUnavailableError
from git_graph.models import CodeReviewData, CodeReviewQuickPickItem, CodeReviews
from git_graph.utils import abbrev_commit, abbrev_text, get_relative_time_diff, get_repo_name

logger = logging.getLogger(__name__)

UNKNOWN_COMMIT_SUBJECT = "<Unknown Commit Subject>"
COMPARISON_MARKER = " <-> "
SUBJECT_MAX_LENGTH = 50


class CommitSubjectResolver(Protocol):
    async def get_commit_subject(self, repo: str, commit_hash: str) -> str | None: ...


@dataclass
class _DecodedReview:
    repo: str
    id: str
    review: CodeReviewData
    from_hash: str
    to_hash: str


def _decode_all(code_reviews: CodeReviews) -> list[_DecodedReview]:
    decoded: list[_DecodedReview] = []
    for repo, reviews in code_reviews.items():
        for cid, review in reviews.items():
            try:
                from_hash, to_hash = decode_code_review_id(cid)
            except MalformedCodeReviewIdError:
                logger.warning("Skipping code review with malformed id %r in %s", cid, repo)
                continue
            decoded.append(_DecodedReview(repo, cid, review, from_hash, to_hash))
    return decoded


async def _resolve_subject(resolver: CommitSubjectResolver, repo: str, commit_hash: str) -> str:
    """Resolve one subject; only DataSourceUnavailableError escapes."""
    try:
        subject = await resolver.get_commit_subject(repo, commit_hash)
    except DataSourceUnavailableError:
        raise
    except Exception:
        logger.exception("Failed to resolve the subject of commit %s in %s", commit_hash, repo)
        return UNKNOWN_COMMIT_SUBJECT
    return subject if subject is not None else UNKNOWN_COMMIT_SUBJECT


async def _resolve_subjects(
    resolver: CommitSubjectResolver, decoded: list[_DecodedReview],
) -> dict[tuple[str, str], str]:
    # Keyed by (repo, hash): the same hash in two repos is two lookups
    wanted: dict[tuple[str, str], None] = {}
    for item in decoded:
        wanted[(item.repo, item.from_hash)] = None
        wanted[(item.repo, item.to_hash)] = None
    keys = list(wanted)

    results = await asyncio.gather(
        *(_resolve_subject(resolver, repo, commit_hash) for repo, commit_hash in keys),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return dict(zip(keys, results))


def _build_item(item: _DecodedReview, subjects: dict[tuple[str, str], str], now: float) -> CodeReviewQuickPickItem:
    from_subject = subjects[(item.repo, item.from_hash)]
    to_subject = subjects[(item.repo, item.to_hash)]
    is_comparison = item.from_hash != item.to_hash

    label = get_repo_name(item.repo) + ": " + abbrev_commit(item.from_hash)
    if is_comparison:
        label += COMPARISON_MARKER + abbrev_commit(item.to_hash)
        detail = (
            abbrev_text(from_subject, SUBJECT_MAX_LENGTH)
            + COMPARISON_MARKER
            + abbrev_text(to_subject, SUBJECT_MAX_LENGTH)
        )
    else:
        detail = abbrev_text(from_subject, SUBJECT_MAX_LENGTH)

    return CodeReviewQuickPickItem(
        code_review_repo=item.repo,
        code_review_id=item.id,
        label=label,
        description=get_relative_time_diff(round(item.review.last_active / 1000), now=now),
        detail=detail,
    )


async def get_code_review_quick_pick_items(
    code_reviews: CodeReviews, resolver: CommitSubjectResolver,
) -> list[CodeReviewQuickPickItem]:
    """Return one entry per decodable code review, most recently active first.

    Raises DataSourceUnavailableError if git cannot be run at all; any other
    lookup failure only degrades that commit's subject to a placeholder.
    """
    decoded = _decode_all(code_reviews)
    subjects = await _resolve_subjects(resolver, decoded)
    now = time.time()
    decoded.sort(key=lambda item: item.review.last_active, reverse=True)
    return [_build_item(item, subjects, now) for item in decoded]
