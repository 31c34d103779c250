from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from jobloss.types import AIAttribution, CandidateStatus, LossType, Region


class OkResponse(BaseModel):
    ok: bool = True


class LoginRequest(BaseModel):
    password: str | None = None


class AuthCheckResponse(OkResponse):
    authenticated: bool


class PublicReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: dt.date
    company: str
    industry: str
    region: Region
    country: str
    workforce: int
    jobs_lost: int
    loss_type: LossType
    ai_attribution: AIAttribution
    source_label: str
    source_url: str
    stock_delta_pct: float | None
    estimate: bool


class ReportResponse(PublicReportResponse):
    include: bool
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class PublicReportListResponse(OkResponse):
    reports: list[PublicReportResponse]
    count: int


class ReportStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    published: int
    draft: int
    total: int


class AdminReportListResponse(OkResponse):
    reports: list[ReportResponse]
    stats: ReportStatsResponse


class ReportEnvelope(OkResponse):
    report: ReportResponse


class CandidateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str
    title: str
    summary: str
    source_name: str
    source_url: str
    published_at: dt.date | None
    status: CandidateStatus
    report_id: int | None
    created_at: dt.datetime | None = None


class CandidateStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pending: int
    approved: int
    rejected: int
    total: int


class CandidateListResponse(OkResponse):
    candidates: list[CandidateResponse]
    stats: CandidateStatsResponse


class CandidateEnvelope(OkResponse):
    candidate: CandidateResponse
    report: ReportResponse | None = None


class ScanRequest(BaseModel):
    lookback_days: int | None = Field(default=None, ge=0, le=30)


class ScanResponse(BaseModel):
    ok: bool
    status: str
    added: int
    skipped: int
    errors: int
    message: str | None = None


class CleanupRequest(BaseModel):
    retention_days: int | None = Field(default=None, ge=1)


class CleanupResponse(OkResponse):
    removed: int
