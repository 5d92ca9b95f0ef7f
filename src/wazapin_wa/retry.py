import asyncio
import time
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any, Awaitable, Callable, List, Optional, TypeVar, Union

from .exceptions import ConfigurationError, WhatsAppError
from .log import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

_FIELD_ALIASES = {
    "maxRetries": "max_retries",
    "initialDelay": "initial_delay_ms",
    "initialDelayMs": "initial_delay_ms",
    "maxDelay": "max_delay_ms",
    "maxDelayMs": "max_delay_ms",
    "backoffMultiplier": "backoff_multiplier",
    "retryOnRateLimit": "retry_on_rate_limit",
    "deadline": "deadline_ms",
    "deadlineMs": "deadline_ms",
}


def _require_number(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number")


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 3
    initial_delay_ms: float = 1000.0
    max_delay_ms: float = 30000.0
    backoff_multiplier: float = 2.0
    retry_on_rate_limit: bool = True
    deadline_ms: Optional[float] = None

    def __post_init__(self) -> None:
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ConfigurationError("max_retries must be an integer")
        for name in ("initial_delay_ms", "max_delay_ms", "backoff_multiplier"):
            _require_number(name, getattr(self, name))
        if self.deadline_ms is not None:
            _require_number("deadline_ms", self.deadline_ms)
        if not isinstance(self.retry_on_rate_limit, bool):
            raise ConfigurationError("retry_on_rate_limit must be a boolean")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if self.initial_delay_ms <= 0:
            raise ConfigurationError("initial_delay_ms must be > 0")
        if self.max_delay_ms < self.initial_delay_ms:
            raise ConfigurationError("max_delay_ms must be >= initial_delay_ms")
        if self.backoff_multiplier <= 1:
            raise ConfigurationError("backoff_multiplier must be > 1")
        if self.deadline_ms is not None and self.deadline_ms <= 0:
            raise ConfigurationError("deadline_ms must be > 0 when set")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


RetryConfigInput = Union[RetryConfig, Mapping[str, Any], None]

_FIELD_NAMES = {item.name for item in fields(RetryConfig)}


def resolve_retry_config(config: RetryConfigInput = None) -> RetryConfig:
    if config is None:
        return RetryConfig()
    if isinstance(config, RetryConfig):
        return config
    if not isinstance(config, Mapping):
        raise ConfigurationError("retry config must be a RetryConfig or a mapping")
    overrides: dict[str, Any] = {}
    for key, value in config.items():
        name = _FIELD_ALIASES.get(str(key), str(key))
        if name not in _FIELD_NAMES:
            raise ConfigurationError(f"unknown retry option: {key}")
        if value is None and name != "deadline_ms":
            continue
        overrides[name] = value
    return replace(RetryConfig(), **overrides)


def backoff_schedule(config: RetryConfigInput, attempts: Optional[int] = None) -> List[float]:
    resolved = resolve_retry_config(config)
    count = resolved.max_retries if attempts is None else attempts
    delays: List[float] = []
    delay = resolved.initial_delay_ms
    for _ in range(max(count, 0)):
        delays.append(delay)
        delay = min(delay * resolved.backoff_multiplier, resolved.max_delay_ms)
    return delays


def _planned_wait_ms(error: Exception, config: RetryConfig, delay_ms: float) -> Optional[float]:
    if not isinstance(error, WhatsAppError):
        return delay_ms
    if error.is_validation_error:
        return None
    if error.is_rate_limit:
        if not config.retry_on_rate_limit:
            return None
        if error.retry_after_seconds:
            return float(error.retry_after_seconds) * 1000.0
    return delay_ms


def _exceeds_deadline(config: RetryConfig, started: float, now: float, wait_ms: float) -> bool:
    if config.deadline_ms is None:
        return False
    elapsed_ms = (now - started) * 1000.0
    return elapsed_ms + wait_ms > config.deadline_ms


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfigInput = None,
    *,
    sleeper: Optional[Callable[[float], Awaitable[Any]]] = None,
    clock: Optional[Callable[[], float]] = None,
) -> T:
    """Run ``operation`` with bounded retries and exponential backoff.

    Attempts are strictly sequential. Validation errors and, when disabled,
    rate-limit errors surface on the first failure; everything else is retried
    until ``max_retries`` is spent and the last error is re-raised unchanged.
    ``sleeper`` receives seconds.
    """
    resolved = resolve_retry_config(config)
    sleep = sleeper or asyncio.sleep
    now = clock or time.monotonic
    started = now()
    delay_ms = resolved.initial_delay_ms
    for attempt in range(resolved.max_attempts):
        try:
            return await operation()
        except Exception as exc:
            wait_ms = _planned_wait_ms(exc, resolved, delay_ms)
            if wait_ms is None:
                raise
            if attempt == resolved.max_retries:
                logger.warning("giving up after %d attempts: %r", attempt + 1, exc)
                raise
            if _exceeds_deadline(resolved, started, now(), wait_ms):
                logger.warning("retry deadline of %.0f ms reached: %r", resolved.deadline_ms, exc)
                raise
            logger.info(
                "attempt %d/%d failed, retrying in %.0f ms: %r",
                attempt + 1,
                resolved.max_attempts,
                wait_ms,
                exc,
            )
            await sleep(wait_ms / 1000.0)
            delay_ms = min(delay_ms * resolved.backoff_multiplier, resolved.max_delay_ms)
    raise AssertionError("unreachable")  # pragma: no cover


def with_retry_sync(
    operation: Callable[[], T],
    config: RetryConfigInput = None,
    *,
    sleeper: Optional[Callable[[float], Any]] = None,
    clock: Optional[Callable[[], float]] = None,
) -> T:
    resolved = resolve_retry_config(config)
    sleep = sleeper or time.sleep
    now = clock or time.monotonic
    started = now()
    delay_ms = resolved.initial_delay_ms
    for attempt in range(resolved.max_attempts):
        try:
            return operation()
        except Exception as exc:
            wait_ms = _planned_wait_ms(exc, resolved, delay_ms)
            if wait_ms is None:
                raise
            if attempt == resolved.max_retries:
                logger.warning("giving up after %d attempts: %r", attempt + 1, exc)
                raise
            if _exceeds_deadline(resolved, started, now(), wait_ms):
                logger.warning("retry deadline of %.0f ms reached: %r", resolved.deadline_ms, exc)
                raise
            logger.info(
                "attempt %d/%d failed, retrying in %.0f ms: %r",
                attempt + 1,
                resolved.max_attempts,
                wait_ms,
                exc,
            )
            sleep(wait_ms / 1000.0)
            delay_ms = min(delay_ms * resolved.backoff_multiplier, resolved.max_delay_ms)
    raise AssertionError("unreachable")  # pragma: no cover
