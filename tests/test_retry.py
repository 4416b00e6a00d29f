# tests/test_retry.py

import pytest

from app.utils.retry import with_retry


class Flaky:
    def __init__(self, failures, exc=RuntimeError):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc(f"failure {self.calls}")
        return "ok"


def test_returns_after_transient_failures():
    fn = Flaky(failures=2)
    assert with_retry(fn, max_retries=3, initial_delay=0) == "ok"
    assert fn.calls == 3


def test_reraises_last_exception_when_exhausted():
    fn = Flaky(failures=5)
    with pytest.raises(RuntimeError, match="failure 2"):
        with_retry(fn, max_retries=2, initial_delay=0)
    assert fn.calls == 2


def test_retry_if_false_stops_immediately():
    fn = Flaky(failures=5, exc=ValueError)
    with pytest.raises(ValueError):
        with_retry(fn, max_retries=3, initial_delay=0, retry_if=lambda e: not isinstance(e, ValueError))
    assert fn.calls == 1


def test_zero_retries_still_calls_once():
    fn = Flaky(failures=0)
    assert with_retry(fn, max_retries=0, initial_delay=0) == "ok"
    assert fn.calls == 1
