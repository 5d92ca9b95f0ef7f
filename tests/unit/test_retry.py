import asyncio
from typing import Any

import pytest

from wazapin_wa.exceptions import ConfigurationError, WhatsAppError
from wazapin_wa.retry import (
    RetryConfig,
    backoff_schedule,
    resolve_retry_config,
    with_retry,
    with_retry_sync,
)


class _FlakyOperation:
    def __init__(self, *outcomes: Any) -> None:
        self._outcomes = list(outcomes)
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        outcome = self._outcomes[min(self.calls, len(self._outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class _AsyncFlakyOperation(_FlakyOperation):
    async def __call__(self) -> Any:  # type: ignore[override]
        return super().__call__()


def _network_error() -> WhatsAppError:
    return WhatsAppError.network("network request failed")


def test_default_config_values():
    config = RetryConfig()

    assert config.max_retries == 3
    assert config.initial_delay_ms == 1000
    assert config.max_delay_ms == 30000
    assert config.backoff_multiplier == 2
    assert config.retry_on_rate_limit is True
    assert config.deadline_ms is None
    assert config.max_attempts == 4


def test_resolve_retry_config_accepts_partial_mapping_and_aliases():
    config = resolve_retry_config({"maxRetries": 5, "initialDelay": 10, "retry_on_rate_limit": False})

    assert config.max_retries == 5
    assert config.initial_delay_ms == 10
    assert config.max_delay_ms == 30000
    assert config.retry_on_rate_limit is False


def test_resolve_retry_config_rejects_unknown_keys():
    with pytest.raises(ConfigurationError):
        resolve_retry_config({"retries": 2})


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_retries": -1},
        {"max_retries": 1.5},
        {"initial_delay_ms": 0},
        {"initial_delay_ms": 100, "max_delay_ms": 50},
        {"backoff_multiplier": 1},
        {"deadline_ms": 0},
        {"initial_delay_ms": "fast"},
        {"max_delay_ms": "30s"},
        {"backoff_multiplier": "2"},
        {"backoff_multiplier": True},
        {"deadline_ms": "soon"},
        {"retry_on_rate_limit": "yes"},
    ],
)
def test_invalid_retry_config_is_rejected(overrides):
    with pytest.raises(ConfigurationError):
        resolve_retry_config(overrides)


def test_backoff_schedule_is_capped_by_max_delay():
    assert backoff_schedule({"max_retries": 5, "initial_delay_ms": 1000, "max_delay_ms": 5000}) == [
        1000,
        2000,
        4000,
        5000,
        5000,
    ]


def test_exhausted_retries_reraise_last_error_after_exact_attempts():
    waits: list[float] = []
    last_error = _network_error()
    operation = _FlakyOperation(_network_error(), _network_error(), _network_error(), last_error)

    with pytest.raises(WhatsAppError) as exc_info:
        with_retry_sync(operation, {"max_retries": 3}, sleeper=waits.append)

    assert exc_info.value is last_error
    assert operation.calls == 4
    assert waits == [1.0, 2.0, 4.0]


def test_max_retries_zero_runs_once():
    waits: list[float] = []
    operation = _FlakyOperation(_network_error())

    with pytest.raises(WhatsAppError):
        with_retry_sync(operation, {"max_retries": 0}, sleeper=waits.append)

    assert operation.calls == 1
    assert waits == []


def test_validation_error_is_never_retried():
    waits: list[float] = []
    operation = _FlakyOperation(WhatsAppError.validation("bad input"), "never")

    with pytest.raises(WhatsAppError) as exc_info:
        with_retry_sync(operation, {"max_retries": 3}, sleeper=waits.append)

    assert exc_info.value.is_validation_error
    assert operation.calls == 1
    assert waits == []


def test_rate_limit_surfaces_immediately_when_disabled():
    waits: list[float] = []
    operation = _FlakyOperation(WhatsAppError.rate_limit("slow down", retry_after_seconds=1), "never")

    with pytest.raises(WhatsAppError) as exc_info:
        with_retry_sync(
            operation,
            {"max_retries": 3, "retry_on_rate_limit": False},
            sleeper=waits.append,
        )

    assert exc_info.value.is_rate_limit
    assert operation.calls == 1
    assert waits == []


def test_rate_limit_hint_replaces_single_wait():
    waits: list[float] = []
    operation = _FlakyOperation(
        WhatsAppError.rate_limit("slow down", retry_after_seconds=7),
        _network_error(),
        "ok",
    )

    result = with_retry_sync(operation, {"max_retries": 3}, sleeper=waits.append)

    assert result == "ok"
    assert operation.calls == 3
    assert waits == [7.0, 2.0]


def test_rate_limit_without_hint_uses_backoff():
    waits: list[float] = []
    operation = _FlakyOperation(WhatsAppError.rate_limit("slow down"), "ok")

    assert with_retry_sync(operation, None, sleeper=waits.append) == "ok"
    assert waits == [1.0]


def test_success_on_third_attempt_sleeps_twice():
    waits: list[float] = []
    operation = _FlakyOperation(_network_error(), WhatsAppError.api("oops", status_code=500), "done")

    assert with_retry_sync(operation, {"max_retries": 3}, sleeper=waits.append) == "done"
    assert operation.calls == 3
    assert waits == [1.0, 2.0]


def test_unclassified_exceptions_are_retried():
    waits: list[float] = []
    operation = _FlakyOperation(RuntimeError("flaky"), "ok")

    assert with_retry_sync(operation, {"max_retries": 1}, sleeper=waits.append) == "ok"
    assert waits == [1.0]


def test_deadline_stops_retrying_before_sleeping_past_it():
    now = [0.0]
    waits: list[float] = []

    def sleeper(seconds: float) -> None:
        waits.append(seconds)
        now[0] += seconds

    operation = _FlakyOperation(_network_error())

    with pytest.raises(WhatsAppError):
        with_retry_sync(
            operation,
            {"max_retries": 10, "deadline_ms": 2500},
            sleeper=sleeper,
            clock=lambda: now[0],
        )

    assert waits == [1.0]
    assert operation.calls == 2


def test_async_retry_sleeps_with_backoff_sequence():
    waits: list[float] = []

    async def sleeper(seconds: float) -> None:
        waits.append(seconds)

    operation = _AsyncFlakyOperation(_network_error(), _network_error(), _network_error(), _network_error())

    async def run() -> None:
        with pytest.raises(WhatsAppError):
            await with_retry(operation, {"max_retries": 3}, sleeper=sleeper)

    asyncio.run(run())

    assert operation.calls == 4
    assert waits == [1.0, 2.0, 4.0]


def test_async_retry_returns_first_success_without_sleeping():
    waits: list[float] = []

    async def sleeper(seconds: float) -> None:
        waits.append(seconds)

    operation = _AsyncFlakyOperation({"ok": True})

    result = asyncio.run(with_retry(operation, RetryConfig(), sleeper=sleeper))

    assert result == {"ok": True}
    assert operation.calls == 1
    assert waits == []


def test_retry_waits_are_capped_by_max_delay():
    waits: list[float] = []
    operation = _FlakyOperation(*[_network_error() for _ in range(5)], "ok")

    result = with_retry_sync(
        operation,
        {"max_retries": 5, "initial_delay_ms": 1000, "max_delay_ms": 3000},
        sleeper=waits.append,
    )

    assert result == "ok"
    assert operation.calls == 6
    assert waits == [1.0, 2.0, 3.0, 3.0, 3.0]


def test_async_retry_waits_are_capped_by_max_delay():
    waits: list[float] = []

    async def sleeper(seconds: float) -> None:
        waits.append(seconds)

    operation = _AsyncFlakyOperation(*[_network_error() for _ in range(6)])

    async def run() -> None:
        with pytest.raises(WhatsAppError):
            await with_retry(
                operation,
                {"max_retries": 5, "initial_delay_ms": 1000, "max_delay_ms": 3000},
                sleeper=sleeper,
            )

    asyncio.run(run())

    assert operation.calls == 6
    assert waits == [1.0, 2.0, 3.0, 3.0, 3.0]
