"""Typewriter pacing bound to the lifetime of one streaming response.

A response owns a single CancellationToken. The disconnect watcher, the
upstream call and the pacing loop all observe that token, so a caller
disconnect stops whichever of them is running and nothing is written after
the token fires.
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Awaitable, Callable, Optional, TypeVar

from app.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DISCONNECT_POLL_SECONDS = 0.1


class ClientDisconnected(Exception):
    """The caller went away while the response was being produced."""


class CancellationToken:
    """One-shot cancellation signal scoped to a single response."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    async def sleep(self, delay: float) -> bool:
        """Sleep for delay seconds; return True if cancelled meanwhile."""
        if self.cancelled:
            return True
        if delay <= 0:
            await asyncio.sleep(0)
            return self.cancelled
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await a coroutine, cancelling it if the token fires first."""
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise ClientDisconnected()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except BaseException:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise ClientDisconnected()
        return task.result()


class Typewriter:
    """Async iterator yielding one character of text per tick.

    Each step waits one tick first, then yields the next character. The
    iterator ends when the text is exhausted or when the token is cancelled;
    it never yields after cancellation.
    """

    def __init__(self, text: str, interval: float, token: CancellationToken) -> None:
        self.text = text
        self.interval = interval
        self.token = token
        self.emitted = 0

    def __aiter__(self) -> AsyncIterator[str]:
        return self._ticks()

    async def _ticks(self) -> AsyncIterator[str]:
        while self.emitted < len(self.text):
            if await self.token.sleep(self.interval):
                logger.debug("[STREAM] cancelled after %d/%d chars", self.emitted, len(self.text))
                return
            char = self.text[self.emitted]
            self.emitted += 1
            yield char


async def watch_disconnect(
    is_disconnected: Callable[[], Awaitable[bool]],
    token: CancellationToken,
    poll_interval: float = DISCONNECT_POLL_SECONDS,
) -> None:
    """Cancel token as soon as the caller connection is gone."""
    try:
        while not token.cancelled:
            if await is_disconnected():
                logger.info("[STREAM] client disconnected")
                token.cancel()
                return
            await token.sleep(poll_interval)
    except Exception as e:
        logger.error("[STREAM] disconnect check failed, stopping response: %s", e, exc_info=True)
        token.cancel()


class PacedResponse:
    """Scheduled-task wrapper owning the token and watcher for one response."""

    def __init__(
        self,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
        poll_interval: float = DISCONNECT_POLL_SECONDS,
    ) -> None:
        self.token = CancellationToken()
        self._is_disconnected = is_disconnected
        self._poll_interval = poll_interval
        self._watcher: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "PacedResponse":
        if self._is_disconnected is not None:
            self._watcher = asyncio.ensure_future(
                watch_disconnect(self._is_disconnected, self.token, self._poll_interval)
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        # may run while the enclosing task is itself being cancelled, so the
        # watcher is only signalled here, never awaited
        self.token.cancel()
        if self._watcher is not None:
            self._watcher.cancel()
            self._watcher = None

    def typewriter(self, text: str, interval: float) -> Typewriter:
        return Typewriter(text, interval, self.token)
