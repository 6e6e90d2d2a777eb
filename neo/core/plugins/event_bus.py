"""
In-process publish/subscribe event bus.

Handlers come from independently written plugins, so a failing handler
is logged and never stops the remaining handlers for the same event.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from ...utils.awaitables import await_value
from ..interfaces.logger import ILogger

EventHandler = Callable[[Any], "Awaitable[None] | None"]


class EventBus:
    """
    Publish/subscribe bus keyed by event name.

    Handlers for one event run in registration order. Inside a running
    event loop, coroutine handlers are scheduled as tasks and not awaited
    by emit(); their failures are logged from a done-callback.

    Without a running loop (the synchronous CLI path) there is nothing to
    schedule on, so emit() drives each coroutine to completion with
    asyncio.run() after the synchronous handlers. emit() then blocks
    until they finish, and a handler that never completes blocks it.
    """

    def __init__(self, logger: ILogger | None = None) -> None:
        if logger is None:
            from ...services.logging import NullLogger

            logger = NullLogger()
        self._logger = logger
        # dict as an insertion-ordered set of handlers
        self._handlers: dict[str, dict[EventHandler, None]] = {}
        self._tasks: set[asyncio.Future[Any]] = set()

    def emit(self, event: str, data: Any = None) -> None:
        """Invoke every handler currently subscribed to ``event``."""
        handlers = self._handlers.get(event)
        if not handlers:
            return

        pending: list[Awaitable[Any]] = []
        # Snapshot: once() handlers unsubscribe while we iterate
        for handler in list(handlers):
            try:
                result = handler(data)
            except Exception as e:
                self._logger.error('Event handler error for "%s": %s', event, e)
                continue
            if inspect.isawaitable(result):
                pending.append(result)

        for awaitable in pending:
            self._dispatch_async(event, awaitable)

    def _dispatch_async(self, event: str, awaitable: Awaitable[Any]) -> None:
        """Run an async handler result without letting its failure escape."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No loop: drive it now, after every synchronous handler has run
            try:
                asyncio.run(await_value(awaitable))
            except Exception as e:
                self._logger.error('Event handler error for "%s": %s', event, e)
            return

        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(functools.partial(self._on_task_done, event))

    def _on_task_done(self, event: str, task: asyncio.Future[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._logger.error('Event handler error for "%s": %s', event, error)

    def on(self, event: str, handler: EventHandler) -> None:
        """Subscribe; subscribing the same handler twice is a no-op."""
        self._handlers.setdefault(event, {})[handler] = None

    def off(self, event: str, handler: EventHandler) -> None:
        """Unsubscribe; the event entry is dropped once it has no handlers."""
        handlers = self._handlers.get(event)
        if handlers is None:
            return
        handlers.pop(handler, None)
        if not handlers:
            del self._handlers[event]

    def once(self, event: str, handler: EventHandler) -> None:
        """Subscribe for a single invocation."""

        @functools.wraps(handler)
        def wrapper(data: Any) -> Any:
            self.off(event, wrapper)
            return handler(data)

        self.on(event, wrapper)

    def clear(self, event: str | None = None) -> None:
        """Remove handlers for one event, or for all events."""
        if event is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event, None)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))

    def event_names(self) -> list[str]:
        return list(self._handlers)
