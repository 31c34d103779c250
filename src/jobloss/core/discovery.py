from __future__ import annotations

import logging
from datetime import UTC, date, datetime, timedelta
from typing import Any

import requests

from jobloss.config import Settings, get_settings
from jobloss.errors import DiscoveryNotConfiguredError, DiscoveryUnavailableError
from jobloss.types import ArticleBatch, CandidateDraft

logger = logging.getLogger(__name__)

# Each phrase already pairs an AI signal with a layoff signal, so they are OR-ed.
# Event Registry caps a simple keyword query at 15 words; this list uses 14.
SEARCH_PHRASES: list[str] = [
    "AI layoffs",
    "AI job cuts",
    "AI job losses",
    "replaced by AI",
    "AI eliminated jobs",
]

ARTICLES_ENDPOINT = "/article/getArticles"


def search_window(lookback_days: int, today: date | None = None) -> tuple[date, date]:
    end = today or datetime.now(UTC).date()
    return end - timedelta(days=max(lookback_days, 0)), end


class EventRegistryClient:
    """Thin client for the Event Registry (newsapi.ai) article search."""

    def __init__(self, settings: Settings | None = None, *, http: Any = None):
        self.settings = settings or get_settings()
        self.http = http or requests

    @property
    def configured(self) -> bool:
        return self.settings.discovery_configured

    def build_query(self, date_start: date, date_end: date) -> dict[str, Any]:
        return {
            "action": "getArticles",
            "keyword": list(SEARCH_PHRASES),
            "keywordOper": "or",
            "keywordSearchMode": "simple",
            "lang": "eng",
            "dateStart": date_start.isoformat(),
            "dateEnd": date_end.isoformat(),
            "isDuplicateFilter": "skipDuplicates",
            "dataType": ["news"],
            "articlesPage": 1,
            "articlesCount": self.settings.discovery_page_size,
            "articlesSortBy": "date",
            "articlesSortByAsc": False,
            "resultType": "articles",
            "articleBodyLen": 300,
        }

    def fetch_articles(self, lookback_days: int = 3, *, today: date | None = None) -> ArticleBatch:
        if not self.configured:
            raise DiscoveryNotConfiguredError("EVENT_REGISTRY_API_KEY not configured")

        date_start, date_end = search_window(lookback_days, today)
        body = self.build_query(date_start, date_end)
        logger.info(
            "Querying Event Registry %s to %s with %s phrases",
            date_start.isoformat(),
            date_end.isoformat(),
            len(SEARCH_PHRASES),
        )

        data = self._post(ARTICLES_ENDPOINT, body)
        page = data.get("articles") or {}
        if not isinstance(page, dict):
            raise DiscoveryUnavailableError("Event Registry returned an unexpected 'articles' payload")
        results = page.get("results") or []
        if not isinstance(results, list):
            raise DiscoveryUnavailableError("Event Registry returned an unexpected 'results' payload")
        logger.info("Fetched %s articles (total matches: %s)", len(results), page.get("totalResults"))

        drafts: list[CandidateDraft] = []
        malformed = 0
        for position, article in enumerate(results):
            try:
                drafts.append(self.normalize_article(article, fallback_date=date_end))
            except ValueError as exc:
                malformed += 1
                logger.warning("Skipping malformed article at position %s: %s", position, exc)
        return ArticleBatch(drafts=drafts, malformed=malformed)

    def normalize_article(self, article: Any, *, fallback_date: date) -> CandidateDraft:
        if not isinstance(article, dict):
            raise ValueError(f"expected an object, got {type(article).__name__}")
        uri = article.get("uri")
        if uri is None or not str(uri).strip():
            raise ValueError("article has no uri")

        source = article.get("source")
        source_name = source.get("title") if isinstance(source, dict) else None
        return CandidateDraft(
            external_id=str(uri).strip(),
            title=str(article.get("title") or "").strip() or "Untitled",
            summary=str(article.get("body") or "")[: self.settings.discovery_summary_max_chars],
            source_name=str(source_name or ""),
            source_url=str(article.get("url") or ""),
            published_at=_parse_article_date(article.get("date")) or fallback_date,
        )

    def _post(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.settings.event_registry_base_url.rstrip('/')}{endpoint}"
        payload = {**body, "apiKey": self.settings.event_registry_api_key}
        try:
            response = self.http.post(url, json=payload, timeout=self.settings.event_registry_timeout_sec)
        except requests.RequestException as exc:
            raise DiscoveryUnavailableError(f"Event Registry request failed: {exc}") from exc

        if not response.ok:
            raise DiscoveryUnavailableError(
                f"Event Registry API error {response.status_code}: {response.text[:500]}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise DiscoveryUnavailableError("Event Registry returned a non-JSON response") from exc

        if not isinstance(data, dict):
            raise DiscoveryUnavailableError("Event Registry returned an unexpected payload")
        if data.get("error"):
            raise DiscoveryUnavailableError(f"Event Registry API error: {data['error']}")
        return data


def _parse_article_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None
