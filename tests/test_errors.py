"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
import json

import pytest
from critiquelab.core.errors import (
    CritiqueLabException,
    InvalidOracleResponse,
    OracleQuotaExhaustedError,
    OracleRateLimitedError,
    OracleUnavailableError,
    RateLimitedError,
    ServiceNotConfiguredError,
    critiquelab_exception_handler,
    unhandled_exception_handler,
)


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_rate_limited_error(self):
        err = RateLimitedError(retry_after=42, limit=10)
        assert err.http_status == 429
        assert err.code == "RATE_LIMITED"
        assert "10" in err.message
        d = err.to_dict()
        assert d["details"] == {"retry_after": 42, "limit": 10}
        assert err.headers() == {
            "Retry-After": "42",
            "X-RateLimit-Limit": "10",
            "X-RateLimit-Remaining": "0",
        }

    def test_service_not_configured(self):
        err = ServiceNotConfiguredError()
        assert err.http_status == 503
        assert err.code == "SERVICE_UNAVAILABLE"
        assert err.headers() is None

    def test_oracle_rate_limited(self):
        err = OracleRateLimitedError()
        assert err.http_status == 429
        assert err.code == "ORACLE_RATE_LIMITED"

    def test_oracle_quota_exhausted(self):
        err = OracleQuotaExhaustedError()
        assert err.http_status == 402
        assert err.code == "ORACLE_QUOTA_EXHAUSTED"

    def test_oracle_unavailable(self):
        err = OracleUnavailableError(upstream_status=503)
        assert err.http_status == 502
        assert err.code == "ORACLE_UNAVAILABLE"
        assert err.details == {"upstream_status": 503}

    def test_oracle_unavailable_without_status(self):
        assert "details" not in OracleUnavailableError().to_dict()

    def test_invalid_oracle_response(self):
        err = InvalidOracleResponse("no tool call in response")
        assert err.http_status == 502
        assert err.code == "INVALID_ORACLE_RESPONSE"
        assert err.details["reason"] == "no tool call in response"

    def test_base_defaults(self):
        err = CritiqueLabException("boom")
        assert err.http_status == 500
        assert err.code == "INTERNAL_ERROR"
        assert err.to_dict() == {"code": "INTERNAL_ERROR", "message": "boom"}

    def test_upstream_detail_never_leaks_into_message(self):
        err = OracleUnavailableError(upstream_status=500)
        assert "500" not in err.message


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

class TestHandlers:
    @pytest.mark.asyncio
    async def test_app_exception_handler_sets_headers(self):
        r = await critiquelab_exception_handler(None, RateLimitedError(retry_after=5, limit=10))
        assert r.status_code == 429
        assert r.headers["retry-after"] == "5"
        assert json.loads(r.body)["code"] == "RATE_LIMITED"

    @pytest.mark.asyncio
    async def test_unhandled_exception_handler(self):
        r = await unhandled_exception_handler(None, RuntimeError("secret detail"))
        assert r.status_code == 500
        body = json.loads(r.body)
        assert body == {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred."}


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

class TestValidationErrors:
    def test_empty_text_returns_validation_error(self, client):
        r = client.post("/critique", json={"text": ""})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "errors" in body["details"]
        assert isinstance(body["details"]["errors"], list)

    def test_whitespace_only_text_returns_validation_error(self, client):
        r = client.post("/critique", json={"text": "   \t\n  "})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_missing_text_returns_validation_error(self, client):
        r = client.post("/critique", json={})
        assert r.status_code == 422
        fields = [e["field"] for e in r.json()["details"]["errors"]]
        assert "text" in fields

    def test_short_text_message(self, client):
        r = client.post("/critique", json={"text": "short"})
        assert r.status_code == 422
        messages = [e["message"] for e in r.json()["details"]["errors"]]
        assert any("at least 10 characters" in m for m in messages)

    def test_unexpected_field_is_named(self, client):
        r = client.post("/critique", json={"text": "A long enough argument.", "model": "gpt"})
        assert r.status_code == 422
        fields = [e["field"] for e in r.json()["details"]["errors"]]
        assert any("model" in f for f in fields)

    def test_invalid_score_source(self, client):
        r = client.post("/scores", json={
            "source": "blog",
            "clarity_score": 1, "logic_score": 1, "evidence_score": 1, "defense_score": 1,
        })
        assert r.status_code == 422
        fields = [e["field"] for e in r.json()["details"]["errors"]]
        assert any("source" in f for f in fields)


class TestSourceValidation:
    @pytest.mark.parametrize("source", ["critique", "coach", "autopsy"])
    def test_all_valid_sources_accepted(self, client, headers, source):
        r = client.post("/scores", json={
            "source": source,
            "clarity_score": 10, "logic_score": 10, "evidence_score": 10, "defense_score": 10,
        }, headers=headers)
        assert r.status_code == 201
        assert r.json()["source"] == source

    @pytest.mark.parametrize("source", ["", "Critique", "blog", "leaderboard"])
    def test_invalid_sources_rejected(self, client, headers, source):
        r = client.post("/scores", json={
            "source": source,
            "clarity_score": 10, "logic_score": 10, "evidence_score": 10, "defense_score": 10,
        }, headers=headers)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"
