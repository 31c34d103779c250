from __future__ import annotations

import datetime as dt

from sqlalchemy import Boolean, Date, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobloss.db.base import Base, CreatedAtMixin, TimestampMixin
from jobloss.types import AIAttribution, CandidateStatus, LossType, Region


def _enum_column(enum_cls: type, length: int) -> Enum:
    return Enum(enum_cls, native_enum=False, length=length, validate_strings=True)


class Report(TimestampMixin, Base):
    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[str] = mapped_column(String(255), default="Unknown", nullable=False)
    region: Mapped[Region] = mapped_column(_enum_column(Region, 10), default=Region.GLOBAL, nullable=False)
    country: Mapped[str] = mapped_column(String(255), default="Global", nullable=False)
    workforce: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    jobs_lost: Mapped[int] = mapped_column(Integer, nullable=False)
    loss_type: Mapped[LossType] = mapped_column(
        _enum_column(LossType, 20), default=LossType.NEW, nullable=False
    )
    ai_attribution: Mapped[AIAttribution] = mapped_column(
        _enum_column(AIAttribution, 20), default=AIAttribution.BLAMED, nullable=False
    )
    source_label: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    source_url: Mapped[str] = mapped_column(Text, default="", nullable=False)
    stock_delta_pct: Mapped[float | None] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=True)
    estimate: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    include: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)


class Candidate(CreatedAtMixin, Base):
    __tablename__ = "candidates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    external_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, default="", nullable=False)
    source_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    source_url: Mapped[str] = mapped_column(Text, default="", nullable=False)
    published_at: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    status: Mapped[CandidateStatus] = mapped_column(
        _enum_column(CandidateStatus, 20), default=CandidateStatus.PENDING, nullable=False, index=True
    )
    report_id: Mapped[int | None] = mapped_column(
        ForeignKey("reports.id", ondelete="SET NULL"), nullable=True, index=True
    )
