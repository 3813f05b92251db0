"""
Polling
=======

A small retry-with-sleep primitive used wherever the SDK waits on a remote
resource that does not push notifications (assistant runs, mainly).

    run = await poll_until(
        fetch=lambda: client.beta.threads.runs.retrieve(run.id, thread_id=tid),
        is_done=lambda r: r.status not in ("queued", "in_progress"),
        initial=run,
        interval=1.0,
    )

The wait between fetches is an asyncio.sleep, so other coroutines keep
running while a poll loop is idle.
"""

import asyncio
import time
from typing import Awaitable, Callable, TypeVar

from monai_agent.errors import PollTimeoutError

T = TypeVar("T")


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    is_done: Callable[[T], bool],
    initial: T | None = None,
    interval: float = 1.0,
    max_wait: float | None = None,
) -> T:
    """
    Re-fetch a value until a predicate accepts it.

    Args:
        fetch: Coroutine factory returning the latest value
        is_done: Predicate; polling stops on the first value it accepts
        initial: Value already in hand. When given, it is checked before
            the first sleep, and no fetch happens if it is already done.
        interval: Seconds to sleep before each fetch
        max_wait: Optional bound on total time spent sleeping and fetching

    Returns:
        The first value accepted by is_done

    Raises:
        PollTimeoutError: If max_wait elapses first
    """
    value = initial if initial is not None else await fetch()
    started = time.monotonic()

    while not is_done(value):
        if max_wait is not None and time.monotonic() - started >= max_wait:
            raise PollTimeoutError(f"Gave up waiting after {max_wait:g}s")

        await asyncio.sleep(interval)
        value = await fetch()

    return value
