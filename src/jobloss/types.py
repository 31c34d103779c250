from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator


class Region(str, Enum):
    US = "US"
    INTL = "INTL"
    GLOBAL = "GLOBAL"


class LossType(str, Enum):
    NEW = "NEW"
    RESTATED = "RESTATED"
    DUPLICATE = "DUPLICATE"


class AIAttribution(str, Enum):
    EXPLICIT = "EXPLICIT"
    BLAMED = "BLAMED"
    MIXED = "MIXED"


class CandidateStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class InsertOutcome(str, Enum):
    CREATED = "created"
    EXISTS = "exists"


ScanStatus = Literal["completed", "not_configured", "failed"]

_TRUE_STRINGS = {"1", "true", "yes", "on", "y", "t"}
_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


def coerce_choice(value: Any, enum_cls: type[Enum], default: Enum) -> Any:
    """Upper-case ``value`` into ``enum_cls``; anything outside the set becomes ``default``."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    text = str(value).strip().upper()
    if not text:
        return default
    try:
        return enum_cls(text)
    except ValueError:
        return default


def coerce_count(value: Any) -> int:
    """Leading-integer parse: ``"1,200 staff"`` -> 1200, ``"350.7"`` -> 350, garbage -> 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return max(int(value), 0)
    match = _LEADING_INTEGER.match(str(value).replace(",", ""))
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def coerce_decimal(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return round(number, 2)


def coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ReportInput(BaseModel):
    """Editor-supplied report fields, normalized on construction.

    Nothing here is rejected: enums are upper-cased (unknown values fall back
    to the column default), counts become non-negative ints and blank text
    takes its default. Required-field checks happen at the call site through
    ``missing_required`` so the same schema serves create, update and approve.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    date: dt.date | None = None
    company: str | None = None
    industry: str = "Unknown"
    region: Region = Region.GLOBAL
    country: str = "Global"
    workforce: int = 0
    jobs_lost: int | None = None
    loss_type: LossType = LossType.NEW
    ai_attribution: AIAttribution = AIAttribution.BLAMED
    source_label: str = ""
    source_url: str = ""
    stock_delta_pct: float | None = None
    estimate: bool = False
    include: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if isinstance(value, str):
            return value.strip()[:10]
        return value

    @field_validator("company", mode="before")
    @classmethod
    def normalize_company(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return str(value).strip() if value is not None else None

    @field_validator("industry", mode="before")
    @classmethod
    def normalize_industry(cls, value: Any) -> str:
        value = _blank_to_none(value)
        return str(value).strip() if value is not None else "Unknown"

    @field_validator("country", mode="before")
    @classmethod
    def normalize_country(cls, value: Any) -> str:
        value = _blank_to_none(value)
        return str(value).strip() if value is not None else "Global"

    @field_validator("source_label", "source_url", mode="before")
    @classmethod
    def normalize_text(cls, value: Any) -> str:
        value = _blank_to_none(value)
        return str(value).strip() if value is not None else ""

    @field_validator("region", mode="before")
    @classmethod
    def normalize_region(cls, value: Any) -> Region:
        return coerce_choice(value, Region, Region.GLOBAL)

    @field_validator("loss_type", mode="before")
    @classmethod
    def normalize_loss_type(cls, value: Any) -> LossType:
        return coerce_choice(value, LossType, LossType.NEW)

    @field_validator("ai_attribution", mode="before")
    @classmethod
    def normalize_attribution(cls, value: Any) -> AIAttribution:
        return coerce_choice(value, AIAttribution, AIAttribution.BLAMED)

    @field_validator("workforce", mode="before")
    @classmethod
    def normalize_workforce(cls, value: Any) -> int:
        return coerce_count(value)

    @field_validator("jobs_lost", mode="before")
    @classmethod
    def normalize_jobs_lost(cls, value: Any) -> int | None:
        value = _blank_to_none(value)
        return None if value is None else coerce_count(value)

    @field_validator("stock_delta_pct", mode="before")
    @classmethod
    def normalize_stock_delta(cls, value: Any) -> float | None:
        return coerce_decimal(value)

    @field_validator("estimate", "include", mode="before")
    @classmethod
    def normalize_flags(cls, value: Any) -> bool:
        return coerce_flag(value)

    def missing_required(self, fields: tuple[str, ...] = ("date", "company", "jobs_lost")) -> list[str]:
        return [name for name in fields if getattr(self, name) is None]

    def column_values(self) -> dict[str, Any]:
        values = self.model_dump()
        if values["jobs_lost"] is None:
            values["jobs_lost"] = 0
        return values


@dataclass(slots=True, frozen=True)
class CandidateDraft:
    external_id: str
    title: str
    summary: str
    source_name: str
    source_url: str
    published_at: dt.date


@dataclass(slots=True, frozen=True)
class ArticleBatch:
    """One provider page: usable drafts plus how many entries could not be read."""

    drafts: list[CandidateDraft]
    malformed: int = 0


@dataclass(slots=True, frozen=True)
class ScanResult:
    status: ScanStatus
    added: int = 0
    skipped: int = 0
    errors: int = 0
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "completed"


@dataclass(slots=True, frozen=True)
class ReportStats:
    published: int
    draft: int
    total: int


@dataclass(slots=True, frozen=True)
class CandidateStats:
    pending: int
    approved: int
    rejected: int
    total: int
