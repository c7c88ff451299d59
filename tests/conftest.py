"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests,
and a fake AI gateway built on httpx.MockTransport so no network is used.
"""
import json
import uuid
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from critiquelab.db.base import Base, get_db
from critiquelab.main import app
from critiquelab.services.gateway import AIGatewayClient, get_gateway
from critiquelab.services.score_store import ScoreRecord

SQLITE_URL = "sqlite:///./test_critiquelab.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client_key() -> str:
    """A fresh client key so every test starts with an empty score history."""
    return f"test-{uuid.uuid4().hex}"


@pytest.fixture()
def headers(client_key) -> dict[str, str]:
    return {"X-Client-Id": client_key}


# ---------------------------------------------------------------------------
# Fake AI gateway
# ---------------------------------------------------------------------------

class GatewayStub:
    """Records every request body and answers with `status_code` / `body`."""

    def __init__(self):
        self.status_code = 200
        self.body: object = {"choices": [{"message": {"content": ""}}]}
        self.requests: list[dict] = []

    def reply_content(self, content: str) -> None:
        self.status_code = 200
        self.body = {"choices": [{"message": {"role": "assistant", "content": content}}]}

    def reply_tool_call(self, arguments: dict | str) -> None:
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments)
        self.status_code = 200
        self.body = {"choices": [{"message": {
            "role": "assistant",
            "tool_calls": [{
                "type": "function",
                "function": {"name": "score_argument", "arguments": arguments},
            }],
        }}]}

    def reply_error(self, status_code: int, text: str = "upstream error") -> None:
        self.status_code = status_code
        self.body = text

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=str(self.body))


@pytest.fixture()
def gateway() -> GatewayStub:
    return GatewayStub()


@pytest.fixture()
def client(gateway):
    fake = AIGatewayClient(api_key="test-key", transport=httpx.MockTransport(gateway.handler))
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: fake
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _make_record(
    total: int | None = None,
    *,
    clarity: int = 15,
    logic: int = 15,
    evidence: int = 15,
    defense: int = 15,
    source: str = "critique",
    created_at: datetime | None = None,
    day_offset: int = 0,
    minute_offset: int = 0,
) -> ScoreRecord:
    """
    Build a ScoreRecord without touching the database. When `total` is
    given the four categories are spread evenly to add up to it.
    """
    if total is not None:
        base, rest = divmod(total, 4)
        clarity, logic, evidence, defense = (
            base + (1 if i < rest else 0) for i in range(4)
        )
    return ScoreRecord(
        id=str(uuid.uuid4()),
        source=source,
        input_preview="An argument about something.",
        total_score=clarity + logic + evidence + defense,
        clarity_score=clarity,
        logic_score=logic,
        evidence_score=evidence,
        defense_score=defense,
        created_at=created_at
        or BASE_TIME + timedelta(days=day_offset, minutes=minute_offset),
    )


@pytest.fixture()
def make_record():
    """Factory for in-memory ScoreRecords dated from BASE_TIME (2026-03-01 12:00 UTC)."""
    return _make_record


@pytest.fixture()
def base_time() -> datetime:
    return BASE_TIME
