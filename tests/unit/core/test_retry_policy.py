"""Unit tests for RetryPolicy."""

import pytest

from pishock_client.core.retry_policy import RetryOutcome, RetryPolicy


class Flaky:
    """Fails ``failures`` times with ``error`` and then returns ``value``."""

    def __init__(self, failures, error=ConnectionError("down"), value="ok"):
        self.failures = failures
        self.error = error
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.value


class TestRetryPolicyInit:

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)


class TestGetDelay:

    def test_first_attempt_has_no_delay(self):
        assert RetryPolicy().get_delay(1) == 0.0

    def test_exponential_backoff(self):
        policy = RetryPolicy(base_delay=1.0, backoff_factor=2.0, jitter=0)

        assert policy.get_delay(2) == pytest.approx(1.0)
        assert policy.get_delay(3) == pytest.approx(2.0)
        assert policy.get_delay(4) == pytest.approx(4.0)

    def test_capped_at_max_delay(self):
        policy = RetryPolicy(base_delay=1.0, max_delay=3.0, jitter=0)

        assert policy.get_delay(10) == pytest.approx(3.0)

    def test_jitter_stays_in_range(self):
        policy = RetryPolicy(base_delay=1.0, jitter=0.1)

        for _ in range(20):
            assert 0.9 <= policy.get_delay(2) <= 1.1


class TestExecute:

    @pytest.mark.asyncio
    async def test_success_first_try(self):
        operation = Flaky(0)

        result = await RetryPolicy(base_delay=0).execute(operation)

        assert result.outcome is RetryOutcome.SUCCESS
        assert result.unwrap() == "ok"
        assert result.attempts == 1

    @pytest.mark.asyncio
    async def test_recovers_after_failures(self):
        operation = Flaky(2)
        retries = []

        result = await RetryPolicy(max_attempts=3, base_delay=0).execute(
            operation, on_retry=lambda attempt, error: retries.append(attempt)
        )

        assert result.success
        assert result.attempts == 3
        assert operation.calls == 3
        assert retries == [2, 3]

    @pytest.mark.asyncio
    async def test_exhausted_reraises_on_unwrap(self):
        operation = Flaky(5, error=ConnectionError("still down"))

        result = await RetryPolicy(max_attempts=2, base_delay=0).execute(operation)

        assert result.outcome is RetryOutcome.EXHAUSTED
        assert result.attempts == 2
        assert operation.calls == 2
        with pytest.raises(ConnectionError, match="still down"):
            result.unwrap()

    @pytest.mark.asyncio
    async def test_other_errors_propagate_immediately(self):
        operation = Flaky(1, error=ValueError("bad json"))
        policy = RetryPolicy(max_attempts=3, base_delay=0, retry_on=(ConnectionError,))

        with pytest.raises(ValueError):
            await policy.execute(operation)

        assert operation.calls == 1
