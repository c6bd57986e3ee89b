"""Tests for building code review quick pick entries."""

import asyncio
import time

import pytest

from conftest import FakeDataSource
from git_graph.code_review_items import UNKNOWN_COMMIT_SUBJECT, get_code_review_quick_pick_items
from git_graph.data_source import DataSourceUnavailableError
from git_graph.models import CodeReviewData

REPO_A = "/work/alpha"
REPO_B = "/work/beta"
HASH_1 = "1111111111aaaaaaaaaa"
HASH_2 = "2222222222bbbbbbbbbb"
HASH_3 = "3333333333cccccccccc"


def _now_ms(seconds_ago: int = 0) -> int:
    return int((time.time() - seconds_ago) * 1000)


class TestOrdering:
    async def test_sorted_by_last_active_descending(self):
        reviews = {
            REPO_A: {
                HASH_1: CodeReviewData(last_active=100),
                HASH_2: CodeReviewData(last_active=300),
                HASH_3: CodeReviewData(last_active=200),
            }
        }
        items = await get_code_review_quick_pick_items(reviews, FakeDataSource())
        assert [i.code_review_id for i in items] == [HASH_2, HASH_3, HASH_1]

    async def test_sorted_across_repos(self):
        reviews = {
            REPO_A: {HASH_1: CodeReviewData(last_active=100)},
            REPO_B: {HASH_1: CodeReviewData(last_active=500)},
        }
        items = await get_code_review_quick_pick_items(reviews, FakeDataSource())
        assert [i.code_review_repo for i in items] == [REPO_B, REPO_A]

    async def test_order_ignores_resolver_completion_order(self):
        class SlowFirst(FakeDataSource):
            async def get_commit_subject(self, repo, commit_hash):
                await asyncio.sleep(0.02 if commit_hash == HASH_2 else 0)
                return f"subject {commit_hash[:4]}"

        reviews = {REPO_A: {HASH_1: CodeReviewData(last_active=1), HASH_2: CodeReviewData(last_active=2)}}
        items = await get_code_review_quick_pick_items(reviews, SlowFirst())
        assert [i.code_review_id for i in items] == [HASH_2, HASH_1]
        assert items[0].detail == "subject 2222"


class TestDeduplication:
    async def test_each_repo_hash_pair_resolved_once(self):
        source = FakeDataSource()
        reviews = {
            REPO_A: {HASH_1: CodeReviewData(), f"{HASH_1}-{HASH_2}": CodeReviewData()},
            REPO_B: {HASH_1: CodeReviewData()},
        }
        await get_code_review_quick_pick_items(reviews, source)
        assert sorted(source.subject_calls) == sorted([(REPO_A, HASH_1), (REPO_A, HASH_2), (REPO_B, HASH_1)])

    async def test_subjects_scoped_by_repo(self):
        source = FakeDataSource(subjects={(REPO_A, HASH_1): "In alpha", (REPO_B, HASH_1): "In beta"})
        reviews = {
            REPO_A: {HASH_1: CodeReviewData(last_active=2)},
            REPO_B: {HASH_1: CodeReviewData(last_active=1)},
        }
        items = await get_code_review_quick_pick_items(reviews, source)
        assert [i.detail for i in items] == ["In alpha", "In beta"]


class TestFormatting:
    async def test_single_commit_entry(self):
        source = FakeDataSource(subjects={(REPO_A, HASH_1): "Add login page"})
        reviews = {REPO_A: {HASH_1: CodeReviewData(last_active=_now_ms(7200))}}
        [item] = await get_code_review_quick_pick_items(reviews, source)
        assert item.code_review_repo == REPO_A
        assert item.code_review_id == HASH_1
        assert item.label == "alpha: 11111111"
        assert item.description == "2 hours ago"
        assert item.detail == "Add login page"

    async def test_comparison_entry(self):
        source = FakeDataSource(subjects={(REPO_A, HASH_1): "Base", (REPO_A, HASH_2): "Target"})
        reviews = {REPO_A: {f"{HASH_1}-{HASH_2}": CodeReviewData(last_active=_now_ms(30))}}
        [item] = await get_code_review_quick_pick_items(reviews, source)
        assert item.label == "alpha: 11111111 <-> 22222222"
        assert item.detail == "Base <-> Target"

    async def test_long_subjects_abbreviated(self):
        long_subject = "Refactor " * 10
        source = FakeDataSource(subjects={(REPO_A, HASH_1): long_subject, (REPO_A, HASH_2): long_subject})
        reviews = {REPO_A: {HASH_1: CodeReviewData(), f"{HASH_1}-{HASH_2}": CodeReviewData()}}
        items = await get_code_review_quick_pick_items(reviews, source)
        single = next(i for i in items if i.code_review_id == HASH_1)
        comparison = next(i for i in items if i.code_review_id != HASH_1)
        assert single.detail == long_subject[:49] + "..."
        from_part, to_part = comparison.detail.split(" <-> ")
        assert len(from_part) == 52
        assert to_part.endswith("...")


class TestFailures:
    async def test_malformed_id_dropped(self):
        reviews = {REPO_A: {"a-b-c": CodeReviewData(), HASH_1: CodeReviewData()}}
        items = await get_code_review_quick_pick_items(reviews, FakeDataSource())
        assert [i.code_review_id for i in items] == [HASH_1]

    async def test_malformed_id_not_removed_from_store_input(self):
        reviews = {REPO_A: {"a-b-c": CodeReviewData()}}
        items = await get_code_review_quick_pick_items(reviews, FakeDataSource())
        assert items == []
        assert "a-b-c" in reviews[REPO_A]

    async def test_not_found_subject_uses_placeholder(self):
        reviews = {REPO_A: {HASH_1: CodeReviewData()}}
        [item] = await get_code_review_quick_pick_items(reviews, FakeDataSource())
        assert item.detail == UNKNOWN_COMMIT_SUBJECT == "<Unknown Commit Subject>"

    async def test_lookup_error_uses_placeholder(self):
        class Flaky(FakeDataSource):
            async def get_commit_subject(self, repo, commit_hash):
                if commit_hash == HASH_1:
                    raise OSError("transient")
                return "Fine"

        reviews = {REPO_A: {f"{HASH_1}-{HASH_2}": CodeReviewData()}}
        [item] = await get_code_review_quick_pick_items(reviews, Flaky())
        assert item.detail == f"{UNKNOWN_COMMIT_SUBJECT} <-> Fine"

    async def test_unavailable_data_source_rejects(self):
        class Unavailable(FakeDataSource):
            async def get_commit_subject(self, repo, commit_hash):
                raise DataSourceUnavailableError("git is gone")

        reviews = {REPO_A: {HASH_1: CodeReviewData()}}
        with pytest.raises(DataSourceUnavailableError):
            await get_code_review_quick_pick_items(reviews, Unavailable())

    async def test_rejection_waits_for_other_lookups(self):
        finished: list[str] = []

        class PartlyUnavailable(FakeDataSource):
            async def get_commit_subject(self, repo, commit_hash):
                if commit_hash == HASH_1:
                    raise DataSourceUnavailableError("git is gone")
                await asyncio.sleep(0.01)
                finished.append(commit_hash)
                return "ok"

        reviews = {REPO_A: {HASH_1: CodeReviewData(), HASH_2: CodeReviewData()}}
        with pytest.raises(DataSourceUnavailableError):
            await get_code_review_quick_pick_items(reviews, PartlyUnavailable())
        assert finished == [HASH_2]

    async def test_empty(self):
        assert await get_code_review_quick_pick_items({}, FakeDataSource()) == []
