"""
Name: Google Gemini Text Backend Tests

Responsibilities:
  - Validate the generate_content call (model, contents, config)
  - Validate error mapping (429 → RATE_LIMITED, empty → MALFORMED)

Notes:
  - The genai client is a Mock; no network
"""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from google.genai import errors as genai_errors

from longdoc.crosscutting.exceptions import (
    BackendError,
    BackendErrorKind,
    ConfigurationError,
)
from longdoc.infrastructure.services.google_backend import GoogleTextBackend

pytestmark = pytest.mark.unit


def _no_retry(fn):
    return fn


def _make_backend(generate_content, **kwargs) -> GoogleTextBackend:
    client = Mock()
    client.models.generate_content = generate_content
    kwargs.setdefault("render_html", False)
    return GoogleTextBackend(client=client, retry_decorator=_no_retry, **kwargs)


def test_generate_passes_system_instruction_and_limits():
    generate_content = Mock(return_value=SimpleNamespace(text="  partial  "))
    backend = _make_backend(generate_content, max_tokens=700, temperature=0.3)

    text = backend.generate("SYS", "USER", timeout_seconds=12.0)

    assert text == "partial"
    kwargs = generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-1.5-flash"
    assert kwargs["contents"] == "USER"
    config = kwargs["config"]
    assert config.system_instruction == "SYS"
    assert config.max_output_tokens == 700
    assert config.temperature == 0.3
    assert config.http_options.timeout == 12000


def test_default_timeout_used_when_not_given():
    generate_content = Mock(return_value=SimpleNamespace(text="ok"))
    backend = _make_backend(generate_content, default_timeout_seconds=45.0)

    backend.generate("SYS", "USER")

    assert generate_content.call_args.kwargs["config"].http_options.timeout == 45000


def test_render_html_applied():
    generate_content = Mock(return_value=SimpleNamespace(text="## Key points"))
    backend = _make_backend(generate_content, render_html=True)

    assert backend.generate("SYS", "USER") == "<h3>Key points</h3>"


def test_rate_limit_maps_to_rate_limited():
    error = genai_errors.ClientError(
        429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}}
    )
    backend = _make_backend(Mock(side_effect=error))

    with pytest.raises(BackendError) as exc_info:
        backend.generate("SYS", "USER")

    assert exc_info.value.kind is BackendErrorKind.RATE_LIMITED


def test_other_api_error_maps_to_other():
    error = genai_errors.ServerError(
        500, {"error": {"code": 500, "message": "internal", "status": "INTERNAL"}}
    )
    backend = _make_backend(Mock(side_effect=error))

    with pytest.raises(BackendError) as exc_info:
        backend.generate("SYS", "USER")

    assert exc_info.value.kind is BackendErrorKind.OTHER


def test_empty_text_is_malformed():
    backend = _make_backend(Mock(return_value=SimpleNamespace(text=None)))

    with pytest.raises(BackendError) as exc_info:
        backend.generate("SYS", "USER")

    assert exc_info.value.kind is BackendErrorKind.MALFORMED


def test_timeout_maps_to_timeout_kind():
    backend = _make_backend(Mock(side_effect=TimeoutError("deadline")))

    with pytest.raises(BackendError) as exc_info:
        backend.generate("SYS", "USER")

    assert exc_info.value.kind is BackendErrorKind.TIMEOUT


def test_missing_key_without_client_raises():
    with pytest.raises(ConfigurationError):
        GoogleTextBackend("")
