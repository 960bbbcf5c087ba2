"""
Name: JSON Logger Tests

Responsibilities:
  - JSON line shape with extras and request context
  - Secrets hidden, document content reduced to its length
  - Oversized strings truncated
"""

import json
import logging
import sys

import pytest

from longdoc.context import bind_pipeline_context
from longdoc.crosscutting.exceptions import BackendErrorKind
from longdoc.crosscutting.logger import JSONFormatter, _FieldSanitizer

pytestmark = pytest.mark.unit


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="longdoc",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_format_includes_extras_and_context():
    formatter = JSONFormatter()

    with bind_pipeline_context(request_id="req-1", document_name="doc.pdf"):
        record = _record(event="segment_processed", position=2)
        entry = json.loads(formatter.format(record))

    assert entry["msg"] == "hello"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "longdoc"
    assert entry["event"] == "segment_processed"
    assert entry["position"] == 2
    assert entry["request_id"] == "req-1"
    assert entry["document_name"] == "doc.pdf"


def test_secrets_hidden():
    record = _record(anthropic_api_key="sk-ant-123", headers={"x-api-key": "k"})

    entry = json.loads(JSONFormatter().format(record))

    assert entry["anthropic_api_key"] == "[hidden]"
    assert entry["headers"]["x-api-key"] == "[hidden]"


def test_document_content_reduced_to_length():
    record = _record(user_message="confidential " * 10)

    entry = json.loads(JSONFormatter().format(record))

    assert entry["user_message"] == "<130 chars>"


def test_long_strings_truncated():
    sanitizer = _FieldSanitizer(max_chars=10)

    cleaned = sanitizer.clean("x" * 50, "error")

    assert cleaned == "x" * 10 + "... [+40 chars]"


def test_enums_flattened():
    assert _FieldSanitizer().clean(BackendErrorKind.TIMEOUT, "error_kind") == "timeout"


def test_exception_info_attached():
    try:
        raise RuntimeError("kaboom")
    except RuntimeError:
        record = _record()
        record.exc_info = sys.exc_info()

    entry = json.loads(JSONFormatter().format(record))

    assert entry["exception"]["type"] == "RuntimeError"
    assert entry["exception"]["message"] == "kaboom"
