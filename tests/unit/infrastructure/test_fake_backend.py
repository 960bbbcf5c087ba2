"""
Name: Fake Text Backend Tests

Responsibilities:
  - Deterministic output per (system, user) pair
  - Recorded calls and injected failures
"""

import pytest

from longdoc.crosscutting.exceptions import BackendError, BackendErrorKind
from longdoc.infrastructure.services import FakeTextBackend

pytestmark = pytest.mark.unit


def test_output_is_deterministic_and_input_sensitive():
    backend = FakeTextBackend()

    first = backend.generate("SYS", "hello")
    second = backend.generate("SYS", "hello")
    other = backend.generate("SYS", "bye")

    assert first == second
    assert first != other
    assert first.startswith("Texto simulado (")


def test_output_never_echoes_input():
    backend = FakeTextBackend()

    assert "PART 1" not in backend.generate("SYS", "PART 1 of 2")


def test_records_calls():
    backend = FakeTextBackend()

    backend.generate("SYS", "msg", timeout_seconds=3.0)

    assert backend.call_count == 1
    assert backend.calls[0].user_message == "msg"
    assert backend.calls[0].timeout_seconds == 3.0
    assert backend.model_id == "fake-text-v1"


def test_injected_failures_by_call_number():
    backend = FakeTextBackend(fail_on_calls=[2], failure_kind=BackendErrorKind.TIMEOUT)

    backend.generate("SYS", "one")
    with pytest.raises(BackendError) as exc_info:
        backend.generate("SYS", "two")
    backend.generate("SYS", "three")

    assert exc_info.value.kind is BackendErrorKind.TIMEOUT
    assert backend.call_count == 3


def test_response_overrides():
    backend = FakeTextBackend(responses={1: "scripted"})

    assert backend.generate("SYS", "x") == "scripted"
    assert backend.generate("SYS", "x") != "scripted"


def test_recorded_calls_are_bounded_but_counted():
    backend = FakeTextBackend(max_recorded_calls=2, fail_on_calls=[3])

    backend.generate("SYS", "one")
    backend.generate("SYS", "two")
    with pytest.raises(BackendError):
        backend.generate("SYS", "three")
    backend.generate("SYS", "four")

    assert backend.call_count == 4
    assert [c.user_message for c in backend.calls] == ["three", "four"]


def test_reset_clears_calls_and_numbering():
    backend = FakeTextBackend(responses={1: "first"})
    backend.generate("SYS", "x")

    backend.reset()

    assert backend.call_count == 0
    assert len(backend.calls) == 0
    assert backend.generate("SYS", "x") == "first"
