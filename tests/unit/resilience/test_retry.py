"""Unit tests for NoRetry / RetryPolicy and cancellation-aware execution."""

from __future__ import annotations

import asyncio

import pytest
import tenacity
from structlog.testing import capture_logs

from txunit.errors import InvalidSettingValueError, OperationCancelledError
from txunit.resilience.retry import (
    NO_RETRY,
    NoRetry,
    RetryPolicy,
    cancellable_sleep,
    run_cancellable,
)


class TransientError(Exception):
    pass


def _fast(max_attempts: int = 3, **kwargs) -> RetryPolicy:  # type: ignore[no-untyped-def]
    return RetryPolicy(max_attempts=max_attempts, wait=tenacity.wait_none(), **kwargs)


# ---------------------------------------------------------------------------
# NoRetry
# ---------------------------------------------------------------------------


class TestNoRetry:
    def test_returns_result(self) -> None:
        assert NO_RETRY.execute(lambda: "ok") == "ok"

    def test_single_failing_attempt_propagates(self) -> None:
        calls = 0

        def op() -> None:
            nonlocal calls
            calls += 1
            raise TransientError("boom")

        with pytest.raises(TransientError):
            NoRetry().execute(op)
        assert calls == 1

    def test_async_single_attempt(self) -> None:
        calls = 0

        async def op() -> None:
            nonlocal calls
            calls += 1
            raise TransientError("boom")

        with pytest.raises(TransientError):
            asyncio.run(NO_RETRY.execute_async(op))
        assert calls == 1

    def test_max_attempts_is_one(self) -> None:
        assert NO_RETRY.max_attempts == 1


# ---------------------------------------------------------------------------
# RetryPolicy — sync
# ---------------------------------------------------------------------------


class TestRetryPolicySync:
    def test_succeeds_on_first_try(self) -> None:
        calls = 0

        def op() -> str:
            nonlocal calls
            calls += 1
            return "ok"

        assert _fast().execute(op) == "ok"
        assert calls == 1

    def test_fails_n_minus_one_times_then_succeeds(self) -> None:
        calls = 0

        def op() -> int:
            nonlocal calls
            calls += 1
            if calls < 4:
                raise TransientError("not yet")
            return 42

        assert _fast(max_attempts=4).execute(op) == 42
        assert calls == 4

    def test_exhaustion_propagates_original_error(self) -> None:
        calls = 0
        error = TransientError("always")

        def op() -> None:
            nonlocal calls
            calls += 1
            raise error

        with pytest.raises(TransientError) as info:
            _fast(max_attempts=3).execute(op)
        assert info.value is error
        assert calls == 3

    def test_non_retryable_type_propagates_immediately(self) -> None:
        calls = 0

        def op() -> None:
            nonlocal calls
            calls += 1
            raise KeyError("k")

        with pytest.raises(KeyError):
            _fast(max_attempts=5, retryable_exceptions=(TransientError,)).execute(op)
        assert calls == 1

    def test_predicate_rejects_failure(self) -> None:
        calls = 0

        def op() -> None:
            nonlocal calls
            calls += 1
            raise TransientError("permanent")

        policy = _fast(max_attempts=5, predicate=lambda exc: "permanent" not in str(exc))
        with pytest.raises(TransientError):
            policy.execute(op)
        assert calls == 1

    def test_wait_strategy_is_consulted_between_attempts(self) -> None:
        seen: list[int] = []

        def wait(retry_state: tenacity.RetryCallState) -> float:
            seen.append(retry_state.attempt_number)
            return 0.0

        def op() -> None:
            raise TransientError("x")

        with pytest.raises(TransientError):
            RetryPolicy(max_attempts=3, wait=wait).execute(op)
        assert seen == [1, 2]

    def test_logs_each_scheduled_retry(self) -> None:
        def op() -> None:
            raise TransientError("x")

        with capture_logs() as logs:
            with pytest.raises(TransientError):
                _fast(max_attempts=3).execute(op)
        scheduled = [e for e in logs if e["event"] == "retry.scheduled"]
        assert [e["attempt"] for e in scheduled] == [1, 2]


class TestRetryPolicyConfig:
    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            RetryPolicy(max_attempts=0)

    def test_is_immutable(self) -> None:
        policy = RetryPolicy()
        with pytest.raises(AttributeError):
            policy.max_attempts = 10  # type: ignore[misc]

    def test_cancellation_is_never_retryable(self) -> None:
        assert RetryPolicy().is_retryable(OperationCancelledError()) is False
        assert RetryPolicy().is_retryable(TransientError()) is True

    def test_base_exceptions_not_retried_by_default(self) -> None:
        assert RetryPolicy().is_retryable(KeyboardInterrupt()) is False


# ---------------------------------------------------------------------------
# RetryPolicy — async
# ---------------------------------------------------------------------------


class TestRetryPolicyAsync:
    def test_retries_and_succeeds(self) -> None:
        calls = 0

        async def op() -> str:
            nonlocal calls
            calls += 1
            if calls < 3:
                raise TransientError("not ready")
            return "ready"

        assert asyncio.run(_fast().execute_async(op)) == "ready"
        assert calls == 3

    def test_exhausts_and_raises(self) -> None:
        calls = 0

        async def op() -> None:
            nonlocal calls
            calls += 1
            raise TransientError("down")

        with pytest.raises(TransientError):
            asyncio.run(_fast(max_attempts=2).execute_async(op))
        assert calls == 2

    def test_non_retryable_propagates_immediately(self) -> None:
        calls = 0

        async def op() -> None:
            nonlocal calls
            calls += 1
            raise KeyError("key")

        with pytest.raises(KeyError):
            asyncio.run(_fast(max_attempts=5, retryable_exceptions=(TransientError,)).execute_async(op))
        assert calls == 1


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class TestCancellation:
    def test_preset_signal_skips_operation(self) -> None:
        calls = 0

        async def op() -> None:
            nonlocal calls
            calls += 1

        async def run() -> None:
            cancel = asyncio.Event()
            cancel.set()
            await _fast().execute_async(op, cancel)

        with pytest.raises(OperationCancelledError) as info:
            asyncio.run(run())
        assert calls == 0
        assert info.value.attempts == 0

    def test_cancel_during_wait_stops_retrying(self) -> None:
        calls = 0

        async def run() -> None:
            cancel = asyncio.Event()

            async def op() -> None:
                nonlocal calls
                calls += 1
                asyncio.get_running_loop().call_soon(cancel.set)
                raise TransientError("transient")

            policy = RetryPolicy(max_attempts=5, wait=tenacity.wait_fixed(10))
            await policy.execute_async(op, cancel)

        with pytest.raises(OperationCancelledError) as info:
            asyncio.run(run())
        assert calls == 1
        assert info.value.attempts == 1

    def test_cancel_during_attempt_aborts_it(self) -> None:
        state = {"started": 0, "finished": 0, "cancelled": 0}

        async def run() -> None:
            cancel = asyncio.Event()

            async def op() -> None:
                state["started"] += 1
                try:
                    await asyncio.sleep(10)
                except asyncio.CancelledError:
                    state["cancelled"] += 1
                    raise
                state["finished"] += 1

            asyncio.get_running_loop().call_later(0.01, cancel.set)
            await _fast(max_attempts=3).execute_async(op, cancel)

        with pytest.raises(OperationCancelledError):
            asyncio.run(run())
        assert state == {"started": 1, "finished": 0, "cancelled": 1}

    def test_cancelled_is_distinct_from_exhaustion(self) -> None:
        assert not issubclass(OperationCancelledError, TransientError)
        assert issubclass(OperationCancelledError, Exception)

    def test_run_cancellable_without_signal(self) -> None:
        async def op() -> int:
            return 7

        assert asyncio.run(run_cancellable(op, None)) == 7

    def test_run_cancellable_propagates_operation_error(self) -> None:
        async def op() -> None:
            raise TransientError("x")

        async def run() -> None:
            await run_cancellable(op, asyncio.Event())

        with pytest.raises(TransientError):
            asyncio.run(run())

    def test_self_cancelled_attempt_is_not_reported_as_cancellation(self) -> None:
        cancel = asyncio.Event()

        async def op() -> None:
            raise asyncio.CancelledError

        async def run() -> None:
            with pytest.raises(asyncio.CancelledError):
                await run_cancellable(op, cancel)

        asyncio.run(run())
        assert not cancel.is_set()

    def test_cancellable_sleep_returns_after_delay(self) -> None:
        async def run() -> None:
            await cancellable_sleep(0.01, asyncio.Event())

        asyncio.run(run())

    def test_cancellable_sleep_raises_when_set(self) -> None:
        async def run() -> None:
            cancel = asyncio.Event()
            asyncio.get_running_loop().call_later(0.01, cancel.set)
            await cancellable_sleep(10, cancel, attempt=2)

        with pytest.raises(OperationCancelledError) as info:
            asyncio.run(run())
        assert info.value.attempts == 2


class TestPublicReExports:
    def test_all_symbols_importable(self) -> None:
        import importlib

        mod = importlib.import_module("txunit.resilience.retry")
        for name in mod.__all__:
            assert hasattr(mod, name), f"{name!r} missing"
