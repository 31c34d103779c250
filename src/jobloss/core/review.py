from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobloss.config import Settings, get_settings
from jobloss.core.discovery import EventRegistryClient
from jobloss.db.models import Candidate, Report
from jobloss.db.repositories import CandidateRepository, ReportRepository
from jobloss.errors import (
    CandidateStateError,
    DiscoveryNotConfiguredError,
    DiscoveryUnavailableError,
    NotFoundError,
    ReportValidationError,
)
from jobloss.types import CandidateStatus, InsertOutcome, ReportInput, ScanResult

logger = logging.getLogger(__name__)

APPROVAL_REQUIRED_FIELDS = ("company", "jobs_lost")


class ReviewPipeline:
    """Candidate ingestion and the editor review state machine.

    A candidate only ever moves PENDING -> APPROVED or PENDING -> REJECTED.
    Approved candidates point at the draft report created for them.
    """

    def __init__(
        self,
        session: Session,
        *,
        settings: Settings | None = None,
        client: EventRegistryClient | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.client = client or EventRegistryClient(self.settings)
        self.reports = ReportRepository(session)
        self.candidates = CandidateRepository(session)

    def scan(self, lookback_days: int | None = None) -> ScanResult:
        days = self.settings.discovery_lookback_days if lookback_days is None else lookback_days
        try:
            batch = self.client.fetch_articles(days)
        except DiscoveryNotConfiguredError as exc:
            logger.warning("Candidate scan skipped: %s", exc)
            return ScanResult(status="not_configured", message=str(exc))
        except DiscoveryUnavailableError as exc:
            logger.error("Candidate scan failed: %s", exc)
            return ScanResult(status="failed", errors=1, message=str(exc))

        added = skipped = 0
        errors = batch.malformed
        for draft in batch.drafts:
            try:
                outcome = self.candidates.insert_if_new(draft)
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.error("Failed to store candidate external_id=%s: %s", draft.external_id, exc)
                errors += 1
                continue

            if outcome is InsertOutcome.EXISTS:
                skipped += 1
            else:
                added += 1

        logger.info("Candidate scan done: %s added, %s duplicates, %s errors", added, skipped, errors)
        return ScanResult(status="completed", added=added, skipped=skipped, errors=errors)

    def approve(self, candidate_id: int, values: ReportInput) -> tuple[Report, Candidate]:
        missing = values.missing_required(APPROVAL_REQUIRED_FIELDS)
        if missing:
            raise ReportValidationError(missing)

        candidate = self._pending_candidate(candidate_id, action="approve")
        draft = values.model_copy(
            update={
                "include": False,
                "date": values.date or candidate.published_at or datetime.now(UTC).date(),
                "source_label": values.source_label or candidate.source_name,
                "source_url": values.source_url or candidate.source_url,
            }
        )

        # Report insert and candidate link commit together or not at all.
        try:
            report = self.reports.create_report(draft, commit=False)
            candidate = self.candidates.set_status(
                candidate_id, CandidateStatus.APPROVED, report.id, commit=False
            )
            self.session.commit()
        except (NotFoundError, CandidateStateError) as exc:
            # Another editor decided (or removed) the candidate after our check.
            self.session.rollback()
            logger.warning("Approval lost a race candidate_id=%s: %s", candidate_id, exc)
            raise
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Approval failed candidate_id=%s", candidate_id)
            raise

        self.session.refresh(report)
        self.session.refresh(candidate)
        logger.info("Approved candidate_id=%s as draft report_id=%s", candidate_id, report.id)
        return report, candidate

    def reject(self, candidate_id: int) -> Candidate:
        self._pending_candidate(candidate_id, action="reject")
        candidate = self.candidates.set_status(candidate_id, CandidateStatus.REJECTED, None)
        logger.info("Rejected candidate_id=%s", candidate_id)
        return candidate

    def cleanup(self, retention_days: int | None = None) -> int:
        days = self.settings.candidate_retention_days if retention_days is None else retention_days
        return self.candidates.delete_older_than(days, CandidateStatus.REJECTED)

    def run_scheduled(self) -> dict[str, Any]:
        """Daily cron entry point: a short scan followed by retention cleanup."""
        result = self.scan(self.settings.scheduled_lookback_days)
        removed = self.cleanup(self.settings.candidate_retention_days)
        return {"scan": serialize_scan(result), "cleaned": removed}

    def _pending_candidate(self, candidate_id: int, *, action: str) -> Candidate:
        candidate = self.candidates.get_candidate(candidate_id)
        if candidate is None:
            raise NotFoundError("candidate", candidate_id)
        if candidate.status != CandidateStatus.PENDING:
            raise CandidateStateError(
                f"cannot {action} candidate {candidate_id}: status is {candidate.status.value}"
            )
        return candidate


def serialize_scan(result: ScanResult) -> dict[str, Any]:
    data: dict[str, Any] = {
        "ok": result.ok,
        "status": result.status,
        "added": result.added,
        "skipped": result.skipped,
        "errors": result.errors,
    }
    if result.message:
        data["message"] = result.message
    return data
