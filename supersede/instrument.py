"""
Caller-side instrumentation for sequenced operations.

A Sequencer never logs or counts the outcomes it suppresses. Callers who
need to observe every attempt wrap the underlying operation before handing
it to the Sequencer:

    configure_observability()
    search = sequencer.wrap(instrument(fetch_suggestions, "search"))

Every attempt is then logged and counted, stale or not, while the
Sequencer still decides which outcome the caller sees.
"""

from __future__ import annotations

import functools
import inspect
import os
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, ParamSpec, TypeVar, Union

from .core.errors import NotCallableError
from .logging_config import get_logger, setup_logging
from .metrics import observe_call_duration, start_metrics_server, track_call, track_failure

P = ParamSpec("P")
R = TypeVar("R")


@dataclass
class ObservabilityConfig:
    log_level: str
    log_format: str
    metrics_enabled: bool
    metrics_port: int

    @staticmethod
    def from_env() -> "ObservabilityConfig":
        log_level = os.getenv("SUPERSEDE_LOG_LEVEL", "INFO")
        log_format = os.getenv("SUPERSEDE_LOG_FORMAT", "json")
        metrics_enabled = os.getenv("SUPERSEDE_METRICS_ENABLED", "false").lower() in ("1", "true", "yes")
        metrics_port = int(os.getenv("SUPERSEDE_METRICS_PORT", "8080"))
        return ObservabilityConfig(
            log_level=log_level,
            log_format=log_format,
            metrics_enabled=metrics_enabled,
            metrics_port=metrics_port,
        )


def configure_observability(config: Optional[ObservabilityConfig] = None) -> ObservabilityConfig:
    """
    Apply logging and metrics settings.

    Args:
        config: Settings to apply (None = read from environment)

    Returns:
        The applied configuration
    """
    config = config or ObservabilityConfig.from_env()
    setup_logging(level=config.log_level, log_format=config.log_format)
    start_metrics_server(enabled=config.metrics_enabled, port=config.metrics_port)
    return config


def instrument(
    fn: Callable[P, Union[Awaitable[R], R]],
    operation: Optional[str] = None,
) -> Callable[P, Union[Awaitable[R], R]]:
    """
    Log and count every attempt of fn.

    Results and exceptions pass through unchanged. If fn returns an
    awaitable, the wrapper returns one too, and the attempt is recorded
    when it settles.

    Args:
        fn: Operation to observe
        operation: Name used in logs and metric labels (default: fn's name)

    Raises:
        NotCallableError: If fn is not callable
    """
    if not callable(fn):
        raise NotCallableError(f"instrument() expects a callable, got {type(fn).__name__}")

    name = operation or getattr(fn, "__name__", type(fn).__name__)
    logger = get_logger(__name__, operation=name)

    @functools.wraps(fn)
    def observed(*args: P.args, **kwargs: P.kwargs) -> Any:
        track_call(name)
        logger.debug("Attempt started")
        started = time.perf_counter()
        try:
            outcome = fn(*args, **kwargs)
        except Exception as exc:
            _record_failure(logger, name, exc, started)
            raise

        if inspect.isawaitable(outcome):
            return _observe(outcome, logger, name, started)
        _record_success(logger, name, started)
        return outcome

    return observed


async def _observe(outcome: Awaitable[Any], logger, name: str, started: float) -> Any:
    try:
        result = await outcome
    except Exception as exc:
        _record_failure(logger, name, exc, started)
        raise
    _record_success(logger, name, started)
    return result


def _record_success(logger, name: str, started: float) -> None:
    elapsed = time.perf_counter() - started
    observe_call_duration(name, elapsed)
    logger.debug("Attempt settled in %.3fs", elapsed)


def _record_failure(logger, name: str, exc: Exception, started: float) -> None:
    elapsed = time.perf_counter() - started
    observe_call_duration(name, elapsed)
    track_failure(name)
    logger.warning("Attempt failed after %.3fs: %s: %s", elapsed, type(exc).__name__, exc)
