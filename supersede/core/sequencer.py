"""
Stale response suppression for overlapping calls.

A Sequencer stamps every call made through one of its wrappers with a
monotonically increasing token. When the underlying operation settles, its
outcome (value or exception) surfaces only if no newer call has been issued
on the same Sequencer in the meantime. Otherwise the call resolves to the
sentinel, for values and exceptions alike.

Underlying operations are never cancelled. They start immediately, in call
order, and run to completion.

Usage:
    seq = Sequencer()
    suggest = seq.wrap(fetch_suggestions)

    first = suggest("py")
    second = suggest("pyt")
    await first   # -> None, superseded by the second call
    await second  # -> suggestions for "pyt"

All wrappers created by one Sequencer share its counter, so two different
operations wrapped on the same instance supersede each other.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import threading
from typing import Any, Awaitable, Callable, Optional, ParamSpec, Set, TypeVar, Union

from .errors import NotCallableError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Sequencer:
    """
    Issues call tokens and filters outcomes by freshness.

    Fields:
        sentinel: Value returned by superseded calls (None by default,
            SUPPRESSED to make suppression distinguishable from a None result)
    """

    def __init__(self, sentinel: Any = None) -> None:
        self.sentinel = sentinel
        self._latest = 0
        self._lock = threading.Lock()
        self._pending: Set[asyncio.Task] = set()

    def _issue(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def _is_fresh(self, token: int) -> bool:
        with self._lock:
            return token == self._latest

    def wrap(self, fn: Callable[P, Union[Awaitable[R], R]]) -> Callable[P, Awaitable[Optional[R]]]:
        """
        Wrap fn so that only the newest call surfaces its outcome.

        fn may be a plain function, a coroutine function or any callable
        returning an awaitable. The wrapper takes the same arguments and
        always returns an awaitable: an asyncio.Task when called inside a
        running loop, a coroutine otherwise.

        Args:
            fn: Operation to wrap (not modified)

        Returns:
            Wrapper callable, also usable as a decorator result

        Raises:
            NotCallableError: If fn is not callable
        """
        if not callable(fn):
            raise NotCallableError(f"wrap() expects a callable, got {type(fn).__name__}")

        @functools.wraps(fn)
        def wrapped(*args: P.args, **kwargs: P.kwargs) -> Awaitable[Optional[R]]:
            token = self._issue()
            try:
                outcome = fn(*args, **kwargs)
            except Exception as exc:
                return self._schedule(self._settle(token, None, exc))
            return self._schedule(self._settle(token, self._start(outcome)))

        logger.debug("Wrapped %s", getattr(fn, "__qualname__", repr(fn)))
        return wrapped

    async def _settle(self, token: int, outcome: Any, error: Optional[Exception] = None) -> Any:
        # Single suspension point: the underlying outcome. Futures are shielded
        # so cancelling the wrapper never cancels the operation.
        if error is None and inspect.isawaitable(outcome):
            try:
                if isinstance(outcome, asyncio.Future):
                    outcome = await asyncio.shield(outcome)
                else:
                    outcome = await outcome
            except Exception as exc:
                error = exc

        if not self._is_fresh(token):
            return self.sentinel
        if error is not None:
            raise error
        return outcome

    def _start(self, outcome: Any) -> Any:
        """Start a coroutine outcome right away when a loop is running."""
        if asyncio.iscoroutine(outcome) and _running_loop() is not None:
            return self._track(asyncio.ensure_future(outcome))
        return outcome

    def _schedule(self, settle: Awaitable[Any]) -> Awaitable[Any]:
        if _running_loop() is None:
            return settle
        return self._track(asyncio.ensure_future(settle))

    def _track(self, task: asyncio.Task) -> asyncio.Task:
        # The loop holds tasks weakly; keep them alive until they finish.
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task
