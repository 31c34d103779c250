from datetime import date

import pytest
from pydantic import ValidationError

from jobloss.types import AIAttribution, LossType, Region, ReportInput


def test_enumerated_fields_are_upper_cased() -> None:
    values = ReportInput(ai_attribution="blamed", loss_type="restated", region="us")
    assert values.ai_attribution is AIAttribution.BLAMED
    assert values.loss_type is LossType.RESTATED
    assert values.region is Region.US


def test_unknown_enum_values_fall_back_to_defaults() -> None:
    values = ReportInput(ai_attribution="maybe", loss_type="", region="mars")
    assert values.ai_attribution is AIAttribution.BLAMED
    assert values.loss_type is LossType.NEW
    assert values.region is Region.GLOBAL


def test_counts_are_coerced_to_non_negative_integers() -> None:
    values = ReportInput(workforce="1,200", jobs_lost="350.7")
    assert values.workforce == 1200
    assert values.jobs_lost == 350

    assert ReportInput(workforce=-40, jobs_lost="lots").workforce == 0
    assert ReportInput(jobs_lost="lots").jobs_lost == 0
    assert ReportInput(jobs_lost=-5).jobs_lost == 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("12abc", 12),
        ("1,200 staff", 1200),
        ("  75 ", 75),
        ("1e3", 1),
        ("-3 roles", 0),
        ("about 40", 0),
        (float("nan"), 0),
    ],
)
def test_counts_use_the_leading_integer(raw, expected) -> None:
    assert ReportInput(jobs_lost=raw).jobs_lost == expected


def test_blank_text_takes_defaults() -> None:
    values = ReportInput(industry="", country=None, source_label=None, company="  Acme  ")
    assert values.industry == "Unknown"
    assert values.country == "Global"
    assert values.source_label == ""
    assert values.company == "Acme"


def test_stock_delta_and_flags() -> None:
    values = ReportInput(stock_delta_pct="-12.5", estimate="true", include="0")
    assert values.stock_delta_pct == -12.5
    assert values.estimate is True
    assert values.include is False

    assert ReportInput(stock_delta_pct="").stock_delta_pct is None
    assert ReportInput(stock_delta_pct="n/a").stock_delta_pct is None


def test_missing_required_fields() -> None:
    assert ReportInput().missing_required() == ["date", "company", "jobs_lost"]
    assert ReportInput(company="Acme", jobs_lost="").missing_required(("company", "jobs_lost")) == [
        "jobs_lost"
    ]
    complete = ReportInput(date="2026-01-29", company="Acme", jobs_lost=0)
    assert complete.missing_required() == []
    assert complete.date == date(2026, 1, 29)


def test_invalid_date_is_rejected_by_schema() -> None:
    with pytest.raises(ValidationError):
        ReportInput(date="2026-13-45")


def test_input_is_immutable() -> None:
    values = ReportInput(company="Acme")
    with pytest.raises(ValidationError):
        values.company = "Other"
