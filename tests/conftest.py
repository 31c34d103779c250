from __future__ import annotations

import os
import tempfile
from datetime import date
from pathlib import Path

_TEST_DIR = Path(tempfile.mkdtemp(prefix="jobloss-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR / 'jobloss_test.db'}"
os.environ["DATA_DIR"] = str(_TEST_DIR)
os.environ["APP_ENV"] = "test"
os.environ["ADMIN_PASSWORD"] = "correct horse battery"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["EVENT_REGISTRY_API_KEY"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from jobloss.api.app import create_app  # noqa: E402
from jobloss.db.base import Base  # noqa: E402
from jobloss.db.session import engine  # noqa: E402
from jobloss.types import CandidateDraft  # noqa: E402

ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def editor_client(client: TestClient) -> TestClient:
    response = client.post("/api/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


def make_draft(external_id: str, published_at: date = date(2026, 1, 29), **overrides) -> CandidateDraft:
    values = {
        "external_id": external_id,
        "title": f"Article {external_id}",
        "summary": "Company cites AI as it cuts jobs",
        "source_name": "Reuters",
        "source_url": f"https://example.com/{external_id}",
        "published_at": published_at,
    }
    values.update(overrides)
    return CandidateDraft(**values)


@pytest.fixture
def draft_factory():
    return make_draft
