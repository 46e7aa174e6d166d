import asyncio
import pytest
from estimate_analyzer.services.retry import with_retry


class FlakyOperation:
    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"failure {self.calls}")
        return "ok"


def run(coro):
    return asyncio.run(coro)


def test_retry_succeeds_after_failures():
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    operation = FlakyOperation(failures=2)
    result = run(with_retry(operation, max_retries=3, sleep_func=fake_sleep))

    assert result == "ok"
    assert operation.calls == 3
    assert delays == [1.0, 2.0]


def test_retry_reraises_last_error():
    async def fake_sleep(delay):
        pass

    operation = FlakyOperation(failures=10)
    with pytest.raises(RuntimeError, match="failure 3"):
        run(with_retry(operation, max_retries=2, sleep_func=fake_sleep))
    assert operation.calls == 3


def test_no_retries_calls_once():
    operation = FlakyOperation(failures=1)
    with pytest.raises(RuntimeError):
        run(with_retry(operation, max_retries=0))
    assert operation.calls == 1
