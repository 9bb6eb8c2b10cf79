"""Tests for smartreplies.core.exceptions: handlers and error classes."""

import json
from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from smartreplies.core.exceptions import (
    AppException,
    GenerationProviderError,
    PaymentSessionError,
    ValidationError,
    WebhookVerificationError,
    app_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)


def _make_request(origin: str = "") -> MagicMock:
    """Build a minimal mock Starlette Request."""
    req = MagicMock()
    req.headers = {"origin": origin} if origin else {}
    req.url = "http://test/path"
    return req


@pytest.fixture(autouse=True)
def _patch_settings():
    """Patch get_settings so the CORS origin check is deterministic."""
    mock_settings = MagicMock()
    mock_settings.cors_origins = ["http://allowed.example.com"]
    with patch("smartreplies.core.config.get_settings", return_value=mock_settings):
        yield


# =============================================================================
# Exception classes
# =============================================================================

class TestAppException:

    def test_carries_status_and_message(self):
        err = AppException("boom", status_code=418)
        assert err.status_code == 418
        assert err.message == "boom"
        assert err.details == {}

    def test_default_status_is_500(self):
        assert AppException("x").status_code == 500

    @pytest.mark.parametrize(
        "exc, status_code",
        [
            (ValidationError("Message is required."), 400),
            (PaymentSessionError(), 500),
            (WebhookVerificationError("bad signature"), 400),
            (GenerationProviderError("openai", "timeout"), 502),
        ],
        ids=["validation", "payment", "webhook", "provider"],
    )
    def test_subclass_status_codes(self, exc: AppException, status_code: int):
        assert exc.status_code == status_code

    def test_webhook_error_message_prefix(self):
        assert WebhookVerificationError("bad").message == "Webhook Error: bad"

    def test_payment_error_default_message(self):
        assert PaymentSessionError().message == "Failed to create checkout session."


# =============================================================================
# app_exception_handler
# =============================================================================

class TestAppExceptionHandler:

    async def test_returns_error_envelope(self):
        resp = await app_exception_handler(_make_request(), ValidationError("Message is required."))
        assert resp.status_code == 400
        assert json.loads(resp.body) == {"error": {"message": "Message is required."}}

    async def test_includes_details_when_present(self):
        resp = await app_exception_handler(
            _make_request(), GenerationProviderError("gemini", "quota")
        )
        body = json.loads(resp.body)
        assert resp.status_code == 502
        assert body["error"]["details"] == {"provider": "gemini"}

    async def test_cors_headers_for_allowed_origin(self):
        req = _make_request(origin="http://allowed.example.com")
        resp = await app_exception_handler(req, PaymentSessionError())
        assert resp.headers.get("Access-Control-Allow-Origin") == "http://allowed.example.com"


# =============================================================================
# http_exception_handler
# =============================================================================

class TestHttpExceptionHandler:

    async def test_returns_status_and_body(self):
        resp = await http_exception_handler(_make_request(), HTTPException(status_code=404, detail="Not Found"))
        assert resp.status_code == 404
        assert json.loads(resp.body) == {"error": {"message": "Not Found"}}

    async def test_no_cors_for_unknown_origin(self):
        req = _make_request(origin="http://evil.example.com")
        resp = await http_exception_handler(req, HTTPException(status_code=400, detail="bad"))
        assert "Access-Control-Allow-Origin" not in resp.headers


# =============================================================================
# unhandled_exception_handler
# =============================================================================

class TestUnhandledExceptionHandler:

    async def test_returns_500(self):
        resp = await unhandled_exception_handler(_make_request(), RuntimeError("kaboom"))
        assert resp.status_code == 500

    async def test_generic_message(self):
        resp = await unhandled_exception_handler(_make_request(), RuntimeError("secret"))
        body = bytes(resp.body)
        assert b"internal error" in body.lower()
        assert b"secret" not in body
