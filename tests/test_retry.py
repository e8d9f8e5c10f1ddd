"""
Tests for rate-limit classification and the backoff loop.
"""

import pytest

from fakes import RateLimited
from svg_app.errors import is_rate_limit
from svg_app.retry import RetryPolicy, call_with_rate_limit_retry


class _Flaky:
    def __init__(self, failures, result="ok"):
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self, *args, **kwargs):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


class TestIsRateLimit:
    def test_code_429(self):
        assert is_rate_limit(RateLimited())

    def test_resource_exhausted_status(self):
        exc = Exception("slow down")
        exc.status = "RESOURCE_EXHAUSTED"
        assert is_rate_limit(exc)

    def test_quota_message(self):
        assert is_rate_limit(RuntimeError("Quota exceeded for model"))

    def test_other_errors(self):
        assert not is_rate_limit(RuntimeError("500 internal"))
        assert not is_rate_limit(ValueError("bad request"))


class TestCallWithRetry:
    @pytest.mark.asyncio
    async def test_exhausts_three_retries_with_doubling_delays(self, sleep_recorder):
        func = _Flaky([RateLimited() for _ in range(4)])

        with pytest.raises(RateLimited):
            await call_with_rate_limit_retry(func, sleep=sleep_recorder)

        assert func.calls == 4
        assert sleep_recorder.calls == [2.0, 4.0, 8.0]

    @pytest.mark.asyncio
    async def test_recovers_after_rate_limit(self, sleep_recorder):
        func = _Flaky([RateLimited(), RateLimited()], result="svg")

        result = await call_with_rate_limit_retry(func, sleep=sleep_recorder)

        assert result == "svg"
        assert func.calls == 3
        assert sleep_recorder.calls == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self, sleep_recorder):
        func = _Flaky([RuntimeError("connection reset")])

        with pytest.raises(RuntimeError):
            await call_with_rate_limit_retry(func, sleep=sleep_recorder)

        assert func.calls == 1
        assert sleep_recorder.calls == []

    @pytest.mark.asyncio
    async def test_passes_arguments_through(self, sleep_recorder):
        seen = {}

        async def func(*args, **kwargs):
            seen["args"] = args
            seen["kwargs"] = kwargs
            return "done"

        await call_with_rate_limit_retry(func, 1, model="m", sleep=sleep_recorder)

        assert seen == {"args": (1,), "kwargs": {"model": "m"}}

    @pytest.mark.asyncio
    async def test_custom_policy(self, sleep_recorder):
        func = _Flaky([RateLimited(), RateLimited()])
        policy = RetryPolicy(max_retries=1, base_delay=0.5)

        with pytest.raises(RateLimited):
            await call_with_rate_limit_retry(func, policy=policy, sleep=sleep_recorder)

        assert sleep_recorder.calls == [0.5]
