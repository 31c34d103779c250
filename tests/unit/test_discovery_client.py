from __future__ import annotations

from datetime import date

import pytest
import requests

from jobloss.config import get_settings
from jobloss.core.discovery import SEARCH_PHRASES, EventRegistryClient, search_window
from jobloss.errors import DiscoveryNotConfiguredError, DiscoveryUnavailableError


class FakeResponse:
    def __init__(self, *, status_code: int = 200, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeHTTP:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _client(http: FakeHTTP, **overrides) -> EventRegistryClient:
    settings = get_settings().model_copy(update={"event_registry_api_key": "test-key", **overrides})
    return EventRegistryClient(settings, http=http)


def _payload(*articles: dict) -> dict:
    return {"articles": {"results": list(articles), "totalResults": len(articles)}}


def test_search_window_spans_lookback_days() -> None:
    start, end = search_window(3, today=date(2026, 2, 1))
    assert start == date(2026, 1, 29)
    assert end == date(2026, 2, 1)


def test_fetch_builds_disjunctive_date_bounded_query() -> None:
    http = FakeHTTP(FakeResponse(payload=_payload()))
    client = _client(http, event_registry_timeout_sec=7)

    assert client.fetch_articles(3, today=date(2026, 2, 1)).drafts == []

    call = http.calls[0]
    assert call["url"] == "https://eventregistry.org/api/v1/article/getArticles"
    assert call["timeout"] == 7
    body = call["json"]
    assert body["apiKey"] == "test-key"
    assert body["keyword"] == SEARCH_PHRASES
    assert body["keywordOper"] == "or"
    assert body["lang"] == "eng"
    assert body["dateStart"] == "2026-01-29"
    assert body["dateEnd"] == "2026-02-01"
    assert body["isDuplicateFilter"] == "skipDuplicates"
    assert body["articlesCount"] == 50


def test_articles_are_normalized_into_drafts() -> None:
    http = FakeHTTP(
        FakeResponse(
            payload=_payload(
                {
                    "uri": 8123456,
                    "title": "Firm blames AI for 500 job cuts",
                    "body": "x" * 900,
                    "source": {"title": "Reuters"},
                    "url": "https://reuters.com/a",
                    "date": "2026-01-30",
                },
                {"uri": "b2", "title": "", "body": None, "source": None, "url": None, "date": None},
            )
        )
    )

    first, second = _client(http).fetch_articles(3, today=date(2026, 2, 1)).drafts

    assert first.external_id == "8123456"
    assert first.title == "Firm blames AI for 500 job cuts"
    assert len(first.summary) == 500
    assert first.source_name == "Reuters"
    assert first.published_at == date(2026, 1, 30)

    assert second.external_id == "b2"
    assert second.title == "Untitled"
    assert second.summary == ""
    assert second.source_name == ""
    assert second.source_url == ""
    assert second.published_at == date(2026, 2, 1)


def test_missing_api_key_is_reported_not_raised_as_crash() -> None:
    http = FakeHTTP(FakeResponse(payload=_payload()))
    client = EventRegistryClient(get_settings().model_copy(update={"event_registry_api_key": ""}), http=http)

    with pytest.raises(DiscoveryNotConfiguredError):
        client.fetch_articles(3)
    assert http.calls == []


@pytest.mark.parametrize(
    "http",
    [
        FakeHTTP(FakeResponse(status_code=503, text="maintenance")),
        FakeHTTP(error=requests.ConnectionError("connection refused")),
        FakeHTTP(error=requests.Timeout("read timed out")),
        FakeHTTP(FakeResponse(payload=ValueError("not json"))),
        FakeHTTP(FakeResponse(payload={"error": "Invalid API key"})),
    ],
)
def test_provider_failures_raise_unavailable(http: FakeHTTP) -> None:
    with pytest.raises(DiscoveryUnavailableError):
        _client(http).fetch_articles(3)


def test_malformed_articles_are_skipped_and_counted() -> None:
    http = FakeHTTP(
        FakeResponse(
            payload=_payload(
                {"uri": "a1", "title": "Layoffs blamed on AI"},
                None,
                "not-an-article",
                {"title": "No identifier"},
            )
        )
    )

    batch = _client(http).fetch_articles(3, today=date(2026, 2, 1))

    assert [draft.external_id for draft in batch.drafts] == ["a1"]
    assert batch.malformed == 3


@pytest.mark.parametrize(
    "payload",
    [
        {"articles": "rate limited"},
        {"articles": {"results": {"uri": "a1"}}},
    ],
)
def test_wrongly_shaped_article_page_raises_unavailable(payload) -> None:
    with pytest.raises(DiscoveryUnavailableError):
        _client(FakeHTTP(FakeResponse(payload=payload))).fetch_articles(3)
