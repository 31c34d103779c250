from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobloss.db.base import utcnow
from jobloss.db.models import Candidate, Report
from jobloss.errors import CandidateStateError, NotFoundError
from jobloss.types import (
    CandidateDraft,
    CandidateStats,
    CandidateStatus,
    InsertOutcome,
    ReportInput,
    ReportStats,
    coerce_choice,
)

logger = logging.getLogger(__name__)


class ReportRepository:
    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _ordered():
        return select(Report).order_by(Report.date.desc(), Report.id.desc())

    def list_published(self) -> list[Report]:
        statement = self._ordered().where(Report.include.is_(True))
        return list(self.session.scalars(statement).all())

    def list_all(self) -> list[Report]:
        return list(self.session.scalars(self._ordered()).all())

    def get_report(self, report_id: int) -> Report | None:
        return self.session.get(Report, report_id)

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(Report)) or 0

    def create_report(self, values: ReportInput, *, commit: bool = True) -> Report:
        report = Report(**values.column_values())
        self.session.add(report)
        self._persist(report, commit)
        return report

    def update_report(self, report_id: int, values: ReportInput) -> Report:
        report = self.session.get(Report, report_id)
        if not report:
            raise NotFoundError("report", report_id)

        for key, value in values.column_values().items():
            setattr(report, key, value)
        report.updated_at = utcnow()

        self._persist(report, commit=True)
        return report

    def delete_report(self, report_id: int) -> None:
        report = self.session.get(Report, report_id)
        if not report:
            raise NotFoundError("report", report_id)

        self.session.execute(
            update(Candidate).where(Candidate.report_id == report_id).values(report_id=None)
        )
        self.session.delete(report)
        self.session.commit()

    def toggle_include(self, report_id: int) -> Report:
        report = self.session.get(Report, report_id)
        if not report:
            raise NotFoundError("report", report_id)

        report.include = not report.include
        report.updated_at = utcnow()
        self._persist(report, commit=True)
        return report

    def stats(self) -> ReportStats:
        row = self.session.execute(
            select(
                func.count().filter(Report.include.is_(True)),
                func.count().filter(Report.include.is_(False)),
                func.count(),
            ).select_from(Report)
        ).one()
        return ReportStats(published=row[0] or 0, draft=row[1] or 0, total=row[2] or 0)

    def _persist(self, obj: Report, commit: bool) -> None:
        if commit:
            self.session.commit()
            self.session.refresh(obj)
        else:
            self.session.flush()


class CandidateRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_candidates(self, status: CandidateStatus | str | None = None) -> list[Candidate]:
        statement = select(Candidate).order_by(
            Candidate.published_at.desc().nulls_last(), Candidate.id.desc()
        )
        if status:
            wanted = coerce_choice(status, CandidateStatus, None)
            if wanted is None:
                return []
            statement = statement.where(Candidate.status == wanted)
        return list(self.session.scalars(statement).all())

    def get_candidate(self, candidate_id: int) -> Candidate | None:
        return self.session.get(Candidate, candidate_id)

    def get_by_external_id(self, external_id: str) -> Candidate | None:
        return self.session.scalar(select(Candidate).where(Candidate.external_id == external_id))

    def stats(self) -> CandidateStats:
        row = self.session.execute(
            select(
                func.count().filter(Candidate.status == CandidateStatus.PENDING),
                func.count().filter(Candidate.status == CandidateStatus.APPROVED),
                func.count().filter(Candidate.status == CandidateStatus.REJECTED),
                func.count(),
            ).select_from(Candidate)
        ).one()
        return CandidateStats(
            pending=row[0] or 0,
            approved=row[1] or 0,
            rejected=row[2] or 0,
            total=row[3] or 0,
        )

    def insert_if_new(self, draft: CandidateDraft) -> InsertOutcome:
        if self.get_by_external_id(draft.external_id) is not None:
            return InsertOutcome.EXISTS

        candidate = Candidate(
            external_id=draft.external_id,
            title=draft.title,
            summary=draft.summary,
            source_name=draft.source_name,
            source_url=draft.source_url,
            published_at=draft.published_at,
        )
        self.session.add(candidate)
        try:
            self.session.commit()
        except IntegrityError:
            # A concurrent scan may have inserted the same article after our lookup.
            self.session.rollback()
            if self.get_by_external_id(draft.external_id) is not None:
                return InsertOutcome.EXISTS
            raise
        return InsertOutcome.CREATED

    def set_status(
        self,
        candidate_id: int,
        status: CandidateStatus,
        report_id: int | None = None,
        *,
        commit: bool = True,
    ) -> Candidate:
        """Move a PENDING candidate to ``status``.

        The status check is part of the UPDATE itself, so a decision that
        another session committed first is never overwritten.
        """
        result = self.session.execute(
            update(Candidate)
            .where(Candidate.id == candidate_id, Candidate.status == CandidateStatus.PENDING)
            .values(status=status, report_id=report_id)
            .execution_options(synchronize_session=False)
        )
        candidate = self.session.get(Candidate, candidate_id, populate_existing=True)
        if candidate is None:
            raise NotFoundError("candidate", candidate_id)
        if not result.rowcount:
            current = candidate.status.value
            if commit:
                self.session.rollback()
            raise CandidateStateError(f"candidate {candidate_id} was already decided: status is {current}")

        if commit:
            self.session.commit()
            self.session.refresh(candidate)
        else:
            self.session.flush()
        return candidate

    def delete_older_than(
        self,
        days: int,
        status: CandidateStatus = CandidateStatus.REJECTED,
        *,
        now: datetime | None = None,
    ) -> int:
        cutoff = (now or utcnow()) - timedelta(days=days)
        result = self.session.execute(
            delete(Candidate)
            .where(Candidate.status == status, Candidate.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        removed = result.rowcount or 0
        if removed:
            logger.info("Deleted %s %s candidates older than %s days", removed, status.value, days)
        return removed
