from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from jobloss.db.repositories import ReportRepository
from jobloss.types import ReportInput

logger = logging.getLogger(__name__)

STARTER_REPORTS: list[dict[str, object]] = [
    {
        "date": "2025-02-05",
        "company": "Workday",
        "industry": "Enterprise Software",
        "region": "US",
        "country": "United States",
        "workforce": 20588,
        "jobs_lost": 1750,
        "ai_attribution": "EXPLICIT",
        "source_label": "AP",
        "source_url": "https://apnews.com/article/437581ad79d6e1cef2de7b300015dfbb",
        "stock_delta_pct": -44.8,
    },
    {
        "date": "2025-05-07",
        "company": "CrowdStrike",
        "industry": "Cybersecurity",
        "region": "US",
        "country": "United States",
        "workforce": 10118,
        "jobs_lost": 500,
        "ai_attribution": "EXPLICIT",
        "source_label": "CNBC",
        "source_url": (
            "https://www.cnbc.com/2025/05/07/"
            "crowdstrike-announces-5percent-job-cuts-says-ai-reshaping-every-industry.html"
        ),
        "stock_delta_pct": -4,
    },
    {
        "date": "2025-05-13",
        "company": "Microsoft",
        "industry": "Technology",
        "region": "GLOBAL",
        "country": "Global",
        "workforce": 228000,
        "jobs_lost": 6000,
        "ai_attribution": "MIXED",
        "source_label": "CNBC",
        "source_url": (
            "https://www.cnbc.com/2025/05/13/"
            "microsoft-is-cutting-3percent-of-workers-across-the-software-company.html"
        ),
        "stock_delta_pct": -8.1,
    },
    {
        "date": "2025-07-02",
        "company": "Microsoft",
        "industry": "Technology",
        "region": "GLOBAL",
        "country": "Global",
        "workforce": 228000,
        "jobs_lost": 9000,
        "ai_attribution": "MIXED",
        "source_label": "CNBC",
        "source_url": (
            "https://www.cnbc.com/2025/07/03/"
            "microsoft-layoffs-hit-830-workers-in-home-state-of-washington-.html"
        ),
        "stock_delta_pct": -15.9,
    },
    {
        "date": "2025-07-16",
        "company": "Scale AI",
        "industry": "AI Infrastructure",
        "region": "GLOBAL",
        "country": "Global",
        "workforce": 1400,
        "jobs_lost": 200,
        "ai_attribution": "MIXED",
        "source_label": "CNBC",
        "source_url": (
            "https://www.cnbc.com/2025/07/16/"
            "scale-ai-cuts-14percent-of-workforce-after-meta-investment-hiring-of-wang.html"
        ),
        "stock_delta_pct": None,
    },
    {
        "date": "2025-10-22",
        "company": "Meta",
        "industry": "Technology",
        "region": "US",
        "country": "United States",
        "workforce": 72000,
        "jobs_lost": 600,
        "ai_attribution": "MIXED",
        "source_label": "AP",
        "source_url": "https://apnews.com/article/7f7b77ba002f7095984f17ebd034bf60",
        "stock_delta_pct": -7.2,
    },
    {
        "date": "2025-10-28",
        "company": "Amazon",
        "industry": "Technology / E-commerce",
        "region": "GLOBAL",
        "country": "Global",
        "workforce": 350000,
        "jobs_lost": 14000,
        "ai_attribution": "BLAMED",
        "source_label": "AP",
        "source_url": "https://apnews.com/article/cb64af47ebb794541fbdfa8fd264932c",
        "stock_delta_pct": -8.2,
    },
    {
        "date": "2026-01-27",
        "company": "Pinterest",
        "industry": "Social Media",
        "region": "US",
        "country": "United States",
        "workforce": 5205,
        "jobs_lost": 700,
        "ai_attribution": "BLAMED",
        "source_label": "AP",
        "source_url": "https://apnews.com/article/cf278cf06929db07d5b1310ab7f91861",
        "stock_delta_pct": -14.7,
        "estimate": True,
    },
    {
        "date": "2026-01-28",
        "company": "ASML",
        "industry": "Semiconductor Equipment",
        "region": "INTL",
        "country": "Netherlands",
        "workforce": 42500,
        "jobs_lost": 1700,
        "ai_attribution": "MIXED",
        "source_label": "AP",
        "source_url": "https://apnews.com/article/446babea4e88330a7c493412644fa3f3",
        "stock_delta_pct": 0.8,
    },
    {
        "date": "2026-01-29",
        "company": "Amazon",
        "industry": "Technology / E-commerce",
        "region": "GLOBAL",
        "country": "Global",
        "workforce": 350000,
        "jobs_lost": 16000,
        "ai_attribution": "MIXED",
        "source_label": "AP",
        "source_url": "https://apnews.com/article/7736d042172743301dd7e494813a885d",
        "stock_delta_pct": -13,
    },
    {
        "date": "2026-01-29",
        "company": "Dow",
        "industry": "Chemicals",
        "region": "US",
        "country": "United States",
        "workforce": 34600,
        "jobs_lost": 4500,
        "ai_attribution": "BLAMED",
        "source_label": "AP",
        "source_url": "https://apnews.com/article/7b220683a25cd32912523bfe2dfb8e5f",
        "stock_delta_pct": 19.1,
    },
    {
        "date": "2026-01-29",
        "company": "Expedia",
        "industry": "Online Travel",
        "region": "US",
        "country": "United States",
        "workforce": 16500,
        "jobs_lost": 162,
        "ai_attribution": "BLAMED",
        "source_label": "AP",
        "source_url": "https://apnews.com/article/7736d042172743301dd7e494813a885d",
        "stock_delta_pct": -12.8,
    },
]


def seed_reports(session: Session) -> int:
    """Import the starter reports, but only into an empty table."""
    repo = ReportRepository(session)
    existing = repo.count()
    if existing:
        logger.info("Database already has %s reports; skipping seed", existing)
        return 0

    for row in STARTER_REPORTS:
        repo.create_report(ReportInput.model_validate({**row, "include": True}), commit=False)
    session.commit()
    logger.info("Seeded %s starter reports", len(STARTER_REPORTS))
    return len(STARTER_REPORTS)
