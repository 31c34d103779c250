from datetime import date, timedelta

import pytest

from jobloss.db.base import utcnow
from jobloss.db.repositories import CandidateRepository
from jobloss.db.session import SessionLocal
from jobloss.errors import CandidateStateError, NotFoundError
from jobloss.types import CandidateStatus, InsertOutcome


def test_insert_if_new_is_idempotent_on_external_id(draft_factory) -> None:
    with SessionLocal() as db:
        repo = CandidateRepository(db)

        assert repo.insert_if_new(draft_factory("a1")) is InsertOutcome.CREATED
        assert repo.insert_if_new(draft_factory("a1", title="Updated headline")) is InsertOutcome.EXISTS

        rows = [row for row in repo.list_candidates() if row.external_id == "a1"]
        assert len(rows) == 1
        assert rows[0].title == "Article a1"
        assert rows[0].status is CandidateStatus.PENDING


def test_conflict_after_lookup_is_reported_as_exists(draft_factory, monkeypatch) -> None:
    with SessionLocal() as db:
        repo = CandidateRepository(db)
        repo.insert_if_new(draft_factory("race"))

        # Simulate a concurrent insert landing between our lookup and our commit.
        real_lookup = repo.get_by_external_id
        calls = {"count": 0}

        def stale_then_real(external_id: str):
            calls["count"] += 1
            return None if calls["count"] == 1 else real_lookup(external_id)

        monkeypatch.setattr(repo, "get_by_external_id", stale_then_real)
        assert repo.insert_if_new(draft_factory("race")) is InsertOutcome.EXISTS
        assert repo.stats().total == 1


def test_list_filters_by_status_and_orders_by_published_date(draft_factory) -> None:
    with SessionLocal() as db:
        repo = CandidateRepository(db)
        repo.insert_if_new(draft_factory("old", published_at=date(2026, 1, 1)))
        repo.insert_if_new(draft_factory("new", published_at=date(2026, 1, 20)))
        repo.insert_if_new(draft_factory("new-2", published_at=date(2026, 1, 20)))

        assert [row.external_id for row in repo.list_candidates()] == ["new-2", "new", "old"]

        rejected = repo.get_by_external_id("old")
        repo.set_status(rejected.id, CandidateStatus.REJECTED)
        assert [row.external_id for row in repo.list_candidates("rejected")] == ["old"]
        assert [row.external_id for row in repo.list_candidates(CandidateStatus.PENDING)] == ["new-2", "new"]
        assert repo.list_candidates("bogus") == []


def test_stats_count_each_status(draft_factory) -> None:
    with SessionLocal() as db:
        repo = CandidateRepository(db)
        for external_id in ("a1", "a2", "a3"):
            repo.insert_if_new(draft_factory(external_id))
        repo.set_status(repo.get_by_external_id("a2").id, CandidateStatus.REJECTED)

        stats = repo.stats()
        assert (stats.pending, stats.approved, stats.rejected, stats.total) == (2, 0, 1, 3)


def test_set_status_on_unknown_id_is_not_found() -> None:
    with SessionLocal() as db:
        with pytest.raises(NotFoundError):
            CandidateRepository(db).set_status(404, CandidateStatus.REJECTED)


def test_delete_older_than_only_removes_expired_rejected(draft_factory) -> None:
    with SessionLocal() as db:
        repo = CandidateRepository(db)
        ages = {"expired": 61, "recent": 59, "old-pending": 90}
        for external_id, age in ages.items():
            repo.insert_if_new(draft_factory(external_id))
            candidate = repo.get_by_external_id(external_id)
            candidate.created_at = utcnow() - timedelta(days=age)
            if external_id != "old-pending":
                candidate.status = CandidateStatus.REJECTED
        db.commit()

        assert repo.delete_older_than(60) == 1
        remaining = {row.external_id for row in repo.list_candidates()}
        assert remaining == {"recent", "old-pending"}

        assert repo.delete_older_than(60) == 0


def test_set_status_only_moves_pending_candidates(draft_factory) -> None:
    with SessionLocal() as db:
        repo = CandidateRepository(db)
        repo.insert_if_new(draft_factory("a1"))
        candidate_id = repo.get_by_external_id("a1").id
        repo.set_status(candidate_id, CandidateStatus.REJECTED)

        with pytest.raises(CandidateStateError):
            repo.set_status(candidate_id, CandidateStatus.APPROVED, 1)
        db.rollback()

        candidate = repo.get_candidate(candidate_id)
        assert candidate.status is CandidateStatus.REJECTED
        assert candidate.report_id is None
