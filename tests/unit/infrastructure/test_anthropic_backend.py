"""
===============================================================================
CRC — tests/unit/infrastructure/test_anthropic_backend.py

Responsibilities:
    - Validar el request a la API de Messages (headers, body, timeout).
    - Validar extracción de content[0].text y normalización HTML.
    - Validar mapeo de errores: 429 → RATE_LIMITED, timeout → TIMEOUT,
      respuesta inválida → MALFORMED, 400 → OTHER sin reintentos.

Collaborators:
    - AnthropicTextBackend (SUT)
    - httpx.MockTransport (mock HTTP)
===============================================================================
"""

from __future__ import annotations

import json

import httpx
import pytest

from longdoc.crosscutting.exceptions import (
    BackendError,
    BackendErrorKind,
    ConfigurationError,
)
from longdoc.infrastructure.services.anthropic_backend import AnthropicTextBackend
from longdoc.infrastructure.services.retry import create_retry_decorator

pytestmark = pytest.mark.unit

_KEY = "sk-ant-test-secret"


def _fast_retry():
    return create_retry_decorator(max_attempts=3, base_delay=0.0, max_delay=0.01)


def _make_backend(handler, **kwargs) -> AnthropicTextBackend:
    kwargs.setdefault("render_html", False)
    return AnthropicTextBackend(
        _KEY,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        retry_decorator=_fast_retry(),
        **kwargs,
    )


def _ok(text: str) -> httpx.Response:
    return httpx.Response(200, json={"content": [{"type": "text", "text": text}]})


class TestRequestShape:
    def test_sends_messages_payload_and_headers(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _ok("hello")

        backend = _make_backend(handler, max_tokens=900, temperature=0.1)

        text = backend.generate("SYS", "USER", timeout_seconds=7.0)

        assert text == "hello"
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == _KEY
        assert request.headers["anthropic-version"] == "2023-06-01"
        body = json.loads(request.content)
        assert body == {
            "model": "claude-3-haiku-20240307",
            "max_tokens": 900,
            "temperature": 0.1,
            "system": "SYS",
            "messages": [{"role": "user", "content": "USER"}],
        }
        assert request.extensions["timeout"]["read"] == 7.0

    def test_render_html_converts_markdown(self):
        backend = _make_backend(lambda r: _ok("# Title\n- a\n- b"), render_html=True)

        text = backend.generate("SYS", "USER")

        assert text == "<h2>Title</h2>\n<ul>\n  <li>a</li>\n  <li>b</li>\n</ul>"

    def test_missing_api_key_raises(self):
        with pytest.raises(ConfigurationError):
            AnthropicTextBackend("  ")


class TestErrorMapping:
    def test_429_retried_then_rate_limited(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(
                429,
                json={
                    "type": "error",
                    "error": {"type": "rate_limit_error", "message": "slow down"},
                },
            )

        backend = _make_backend(handler)

        with pytest.raises(BackendError) as exc_info:
            backend.generate("SYS", "USER")

        assert exc_info.value.kind is BackendErrorKind.RATE_LIMITED
        assert exc_info.value.is_rate_limited
        assert str(exc_info.value) == "slow down"
        assert len(calls) == 3

    def test_transient_then_success(self):
        responses = iter([httpx.Response(529), _ok("recovered")])
        backend = _make_backend(lambda r: next(responses))

        assert backend.generate("SYS", "USER") == "recovered"

    def test_bad_request_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(
                400,
                json={"error": {"type": "invalid_request_error", "message": "bad"}},
            )

        backend = _make_backend(handler)

        with pytest.raises(BackendError) as exc_info:
            backend.generate("SYS", "USER")

        assert exc_info.value.kind is BackendErrorKind.OTHER
        assert len(calls) == 1

    def test_timeout_maps_to_timeout_kind(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        backend = _make_backend(handler)

        with pytest.raises(BackendError) as exc_info:
            backend.generate("SYS", "USER")

        assert exc_info.value.kind is BackendErrorKind.TIMEOUT

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, json={"content": []}),
            httpx.Response(200, json={"id": "msg_1"}),
            httpx.Response(200, content=b"not json"),
            httpx.Response(200, json={"content": [{"type": "text", "text": "  "}]}),
        ],
    )
    def test_malformed_response(self, response):
        backend = _make_backend(lambda r: response)

        with pytest.raises(BackendError) as exc_info:
            backend.generate("SYS", "USER")

        assert exc_info.value.kind is BackendErrorKind.MALFORMED
        assert "No response from Claude" in str(exc_info.value)
