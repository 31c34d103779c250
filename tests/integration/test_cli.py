from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from jobloss.cli import app as cli
from jobloss.db.repositories import CandidateRepository, ReportRepository
from jobloss.db.session import SessionLocal
from jobloss.types import CandidateStatus

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda: None)


def _invoke(*args: str):
    result = runner.invoke(cli.app, list(args))
    return result, (json.loads(result.stdout) if result.exit_code == 0 else None)


def test_seed_then_list_published_reports() -> None:
    result, body = _invoke("seed")
    assert result.exit_code == 0
    assert body["seeded_reports"] > 0

    _, again = _invoke("seed")
    assert again["seeded_reports"] == 0

    _, listing = _invoke("reports", "list")
    assert listing["stats"]["published"] == body["seeded_reports"]
    assert len(listing["reports"]) == body["seeded_reports"]


def test_toggle_unknown_report_fails() -> None:
    result, _ = _invoke("reports", "toggle", "--id", "999")
    assert result.exit_code != 0


def test_candidate_review_commands(draft_factory) -> None:
    with SessionLocal() as db:
        repo = CandidateRepository(db)
        repo.insert_if_new(draft_factory("a1"))
        repo.insert_if_new(draft_factory("a2"))
        first_id = repo.get_by_external_id("a1").id
        second_id = repo.get_by_external_id("a2").id

    result, approved = _invoke(
        "candidates", "approve", "--id", str(first_id), "--company", "Acme", "--jobs-lost", "50"
    )
    assert result.exit_code == 0
    assert approved["status"] == "APPROVED"

    _, rejected = _invoke("candidates", "reject", "--id", str(second_id))
    assert rejected["status"] == "REJECTED"

    result, _ = _invoke("candidates", "reject", "--id", str(second_id))
    assert result.exit_code != 0

    _, listing = _invoke("candidates", "list", "--status", "approved")
    assert [row["external_id"] for row in listing["candidates"]] == ["a1"]

    with SessionLocal() as db:
        report = ReportRepository(db).get_report(approved["report_id"])
        assert report.include is False
        assert CandidateRepository(db).get_candidate(first_id).status is CandidateStatus.APPROVED


def test_scan_without_api_key_reports_not_configured() -> None:
    result, body = _invoke("candidates", "scan", "--days", "2")
    assert result.exit_code == 0
    assert body["status"] == "not_configured"


def test_daily_runs_scan_and_cleanup() -> None:
    result, body = _invoke("daily")
    assert result.exit_code == 0
    assert body["scan"]["status"] == "not_configured"
    assert body["cleaned"] == 0
