from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from jobloss.api.deps import get_db, require_editor
from jobloss.api.schemas import (
    AdminReportListResponse,
    CandidateEnvelope,
    CandidateListResponse,
    CandidateResponse,
    CandidateStatsResponse,
    CleanupRequest,
    CleanupResponse,
    OkResponse,
    PublicReportListResponse,
    PublicReportResponse,
    ReportEnvelope,
    ReportResponse,
    ReportStatsResponse,
    ScanRequest,
    ScanResponse,
)
from jobloss.config import get_settings
from jobloss.core.review import ReviewPipeline, serialize_scan
from jobloss.db.repositories import CandidateRepository, ReportRepository
from jobloss.errors import CandidateStateError, NotFoundError, ReportValidationError
from jobloss.types import ReportInput

router = APIRouter(prefix="/api", tags=["public"])
admin_router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_editor)])


@router.get("/reports", response_model=PublicReportListResponse)
def list_public_reports(response: Response, db: Session = Depends(get_db)) -> PublicReportListResponse:
    rows = ReportRepository(db).list_published()
    response.headers["Cache-Control"] = f"public, max-age={get_settings().public_cache_max_age_sec}"
    return PublicReportListResponse(
        reports=[PublicReportResponse.model_validate(row) for row in rows],
        count=len(rows),
    )


@admin_router.get("/reports", response_model=AdminReportListResponse)
def list_all_reports(db: Session = Depends(get_db)) -> AdminReportListResponse:
    repo = ReportRepository(db)
    return AdminReportListResponse(
        reports=[ReportResponse.model_validate(row) for row in repo.list_all()],
        stats=ReportStatsResponse.model_validate(repo.stats()),
    )


@admin_router.post("/reports", response_model=ReportEnvelope, status_code=status.HTTP_201_CREATED)
def create_report(payload: ReportInput, db: Session = Depends(get_db)) -> ReportEnvelope:
    missing = payload.missing_required()
    if missing:
        raise HTTPException(status_code=400, detail=str(ReportValidationError(missing)))

    report = ReportRepository(db).create_report(payload)
    return ReportEnvelope(report=ReportResponse.model_validate(report))


@admin_router.put("/reports/{report_id}", response_model=ReportEnvelope)
def update_report(report_id: int, payload: ReportInput, db: Session = Depends(get_db)) -> ReportEnvelope:
    missing = payload.missing_required()
    if missing:
        raise HTTPException(status_code=400, detail=str(ReportValidationError(missing)))

    try:
        report = ReportRepository(db).update_report(report_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ReportEnvelope(report=ReportResponse.model_validate(report))


@admin_router.delete("/reports/{report_id}", response_model=OkResponse)
def delete_report(report_id: int, db: Session = Depends(get_db)) -> OkResponse:
    try:
        ReportRepository(db).delete_report(report_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return OkResponse()


@admin_router.patch("/reports/{report_id}/toggle", response_model=ReportEnvelope)
def toggle_report(report_id: int, db: Session = Depends(get_db)) -> ReportEnvelope:
    try:
        report = ReportRepository(db).toggle_include(report_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ReportEnvelope(report=ReportResponse.model_validate(report))


@admin_router.get("/candidates", response_model=CandidateListResponse)
def list_candidates(
    status_filter: str | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
) -> CandidateListResponse:
    repo = CandidateRepository(db)
    return CandidateListResponse(
        candidates=[CandidateResponse.model_validate(row) for row in repo.list_candidates(status_filter)],
        stats=CandidateStatsResponse.model_validate(repo.stats()),
    )


@admin_router.post("/candidates/scan", response_model=ScanResponse)
def scan_candidates(payload: ScanRequest | None = None, db: Session = Depends(get_db)) -> ScanResponse:
    lookback_days = payload.lookback_days if payload else None
    result = ReviewPipeline(db).scan(lookback_days)
    return ScanResponse(**serialize_scan(result))


@admin_router.post(
    "/candidates/{candidate_id}/approve",
    response_model=CandidateEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def approve_candidate(
    candidate_id: int,
    payload: ReportInput,
    db: Session = Depends(get_db),
) -> CandidateEnvelope:
    try:
        report, candidate = ReviewPipeline(db).approve(candidate_id, payload)
    except ReportValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except CandidateStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return CandidateEnvelope(
        candidate=CandidateResponse.model_validate(candidate),
        report=ReportResponse.model_validate(report),
    )


@admin_router.post("/candidates/{candidate_id}/reject", response_model=CandidateEnvelope)
def reject_candidate(candidate_id: int, db: Session = Depends(get_db)) -> CandidateEnvelope:
    try:
        candidate = ReviewPipeline(db).reject(candidate_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except CandidateStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return CandidateEnvelope(candidate=CandidateResponse.model_validate(candidate))


@admin_router.post("/candidates/cleanup", response_model=CleanupResponse)
def cleanup_candidates(payload: CleanupRequest | None = None, db: Session = Depends(get_db)) -> CleanupResponse:
    retention_days = payload.retention_days if payload else None
    removed = ReviewPipeline(db).cleanup(retention_days)
    return CleanupResponse(removed=removed)
