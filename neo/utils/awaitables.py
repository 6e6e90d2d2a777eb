"""
Helpers for calling plugin code that may be sync or async.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable
from typing import Any


async def await_value(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def run_sync(value: Any) -> Any:
    """
    Return ``value``, or its awaited result if it is awaitable.

    Plugin hooks may be plain functions or coroutines; the runtime is
    synchronous, so coroutines are driven to completion here.

    Raises:
        RuntimeError: If called with an awaitable while an event loop is running
    """
    if not inspect.isawaitable(value):
        return value
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(await_value(value))
    if inspect.iscoroutine(value):
        value.close()
    raise RuntimeError("Cannot block on an awaitable from inside a running event loop")
