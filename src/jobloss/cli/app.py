from __future__ import annotations

import json

import typer
import uvicorn

from jobloss.api.app import create_app
from jobloss.api.schemas import CandidateResponse, ReportResponse
from jobloss.config import get_settings
from jobloss.core.review import ReviewPipeline, serialize_scan
from jobloss.db.init import ensure_initialized, init_database
from jobloss.db.repositories import CandidateRepository, ReportRepository
from jobloss.db.seed import seed_reports
from jobloss.db.session import SessionLocal
from jobloss.errors import CandidateStateError, NotFoundError, ReportValidationError
from jobloss.logging_config import configure_logging
from jobloss.types import ReportInput

app = typer.Typer(help="AI Job Loss Tracker CLI")
reports_app = typer.Typer(help="Curated layoff reports")
candidates_app = typer.Typer(help="Discovered article candidates")

app.add_typer(reports_app, name="reports")
app.add_typer(candidates_app, name="candidates")


def _echo(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


@app.command("init")
def init_cmd() -> None:
    """Create the schema and import starter reports into an empty database."""
    configure_logging()
    result = init_database()
    _echo({"ok": True, **result})


@app.command("seed")
def seed_cmd() -> None:
    configure_logging()
    init_database(seed=False)
    with SessionLocal() as db:
        inserted = seed_reports(db)
    _echo({"ok": True, "seeded_reports": inserted})


@app.command("daily")
def daily_cmd() -> None:
    """Scheduled trigger: scan the last few days, then purge old rejected candidates."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        _echo(ReviewPipeline(db).run_scheduled())


@reports_app.command("list")
def reports_list(all_reports: bool = typer.Option(False, "--all", help="Include drafts")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        repo = ReportRepository(db)
        rows = repo.list_all() if all_reports else repo.list_published()
        stats = repo.stats()
        _echo(
            {
                "reports": [ReportResponse.model_validate(row).model_dump(mode="json") for row in rows],
                "stats": {"published": stats.published, "draft": stats.draft, "total": stats.total},
            }
        )


@reports_app.command("toggle")
def reports_toggle(report_id: int = typer.Option(..., "--id")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            report = ReportRepository(db).toggle_include(report_id)
        except NotFoundError as exc:
            raise typer.BadParameter(str(exc)) from exc
        _echo({"id": report.id, "include": report.include})


@candidates_app.command("list")
def candidates_list(status: str | None = typer.Option(None, "--status")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        repo = CandidateRepository(db)
        stats = repo.stats()
        _echo(
            {
                "candidates": [
                    CandidateResponse.model_validate(row).model_dump(mode="json")
                    for row in repo.list_candidates(status)
                ],
                "stats": {
                    "pending": stats.pending,
                    "approved": stats.approved,
                    "rejected": stats.rejected,
                    "total": stats.total,
                },
            }
        )


@candidates_app.command("scan")
def candidates_scan(days: int | None = typer.Option(None, "--days", min=0)) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        result = ReviewPipeline(db).scan(days)
    _echo(serialize_scan(result))
    if result.status == "failed":
        raise typer.Exit(code=1)


@candidates_app.command("approve")
def candidates_approve(
    candidate_id: int = typer.Option(..., "--id"),
    company: str = typer.Option(..., "--company"),
    jobs_lost: int = typer.Option(..., "--jobs-lost"),
    date: str | None = typer.Option(None, "--date", help="YYYY-MM-DD; defaults to the article date"),
    industry: str | None = typer.Option(None, "--industry"),
    region: str | None = typer.Option(None, "--region"),
    country: str | None = typer.Option(None, "--country"),
    workforce: int | None = typer.Option(None, "--workforce"),
    ai_attribution: str | None = typer.Option(None, "--attribution"),
) -> None:
    configure_logging()
    ensure_initialized()
    values = ReportInput.model_validate(
        {
            "company": company,
            "jobs_lost": jobs_lost,
            "date": date,
            "industry": industry,
            "region": region,
            "country": country,
            "workforce": workforce,
            "ai_attribution": ai_attribution,
        }
    )
    with SessionLocal() as db:
        try:
            report, candidate = ReviewPipeline(db).approve(candidate_id, values)
        except (NotFoundError, CandidateStateError, ReportValidationError) as exc:
            raise typer.BadParameter(str(exc)) from exc
        _echo({"candidate_id": candidate.id, "status": candidate.status.value, "report_id": report.id})


@candidates_app.command("reject")
def candidates_reject(candidate_id: int = typer.Option(..., "--id")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            candidate = ReviewPipeline(db).reject(candidate_id)
        except (NotFoundError, CandidateStateError) as exc:
            raise typer.BadParameter(str(exc)) from exc
        _echo({"candidate_id": candidate.id, "status": candidate.status.value})


@candidates_app.command("cleanup")
def candidates_cleanup(days: int | None = typer.Option(None, "--days", min=1)) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        removed = ReviewPipeline(db).cleanup(days)
    _echo({"ok": True, "removed": removed})


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    configure_logging(log_level)
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(
        app_instance,
        host=host or settings.app_host,
        port=port or settings.app_port,
        log_level=(log_level or settings.log_level).lower(),
    )


def main() -> None:
    app()
