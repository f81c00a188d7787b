"""Async pub/sub for SystemEvents.

Services emit an event after every successful write; subscribers (audit
sinks, notifiers) consume them on a background worker so a slow or broken
subscriber never blocks or fails the write path.

Usage:
    from osmnotes.events import emit, subscribe

    subscribe(my_handler)  # async def my_handler(event: SystemEvent) -> None
    subscribe(on_status, event_types=[EventType.NOTE_STATUS_CHANGED])

    await emit(SystemEvent(event_type=EventType.NOTE_CREATED, note_id=note.id))
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine, Iterable
from typing import Any

from osmnotes.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SystemEvent], Coroutine[Any, Any, None]]


class EventBus:
    """Queue plus one worker task fanning events out to subscribers."""

    def __init__(self) -> None:
        self._global: list[EventHandler] = []
        self._typed: dict[EventType, list[EventHandler]] = {}
        self._queue: asyncio.Queue[SystemEvent] | None = None
        self._worker: asyncio.Task[None] | None = None

    # ── Subscriptions ───────────────────────────────────────────────

    def subscribe(self, handler: EventHandler, event_types: Iterable[EventType] | None = None) -> None:
        """Register a handler for all events, or only for `event_types`."""
        if event_types is None:
            self._global.append(handler)
            logger.info("Registered global event subscriber: %s", _name(handler))
            return
        types = list(event_types)
        for et in types:
            self._typed.setdefault(et, []).append(handler)
        logger.info("Registered event subscriber %s for types: %s", _name(handler), [t.value for t in types])

    def unsubscribe(self, handler: EventHandler) -> None:
        """Remove a handler from every list it was registered on."""
        if handler in self._global:
            self._global.remove(handler)
        for handlers in self._typed.values():
            if handler in handlers:
                handlers.remove(handler)

    def handlers_for(self, event_type: EventType) -> list[EventHandler]:
        return [*self._global, *self._typed.get(event_type, [])]

    # ── Publishing ──────────────────────────────────────────────────

    async def emit(self, event: SystemEvent) -> None:
        """Queue an event; starts the worker lazily on first use."""
        queue = self._ensure_worker()
        await queue.put(event)
        logger.debug("Event emitted: %s (note=%s user=%s)", event.event_type.value, event.note_id, event.user_id)

    async def dispatch(self, event: SystemEvent) -> None:
        """Deliver one event to its subscribers right now, isolating failures."""
        handlers = self.handlers_for(event.event_type)
        if not handlers:
            return
        results = await asyncio.gather(*(h(event) for h in handlers), return_exceptions=True)
        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(
                    "Event handler %s failed for %s: %r",
                    _name(handler),
                    event.event_type.value,
                    result,
                )

    # ── Lifecycle ───────────────────────────────────────────────────

    async def start(self) -> None:
        self._ensure_worker()
        logger.info(
            "Event system started with %d global + %d typed subscribers",
            len(self._global),
            sum(len(v) for v in self._typed.values()),
        )

    async def stop(self) -> None:
        """Drain queued events, then cancel the worker."""
        worker = self._worker
        if worker is not None and not worker.done() and worker.get_loop() is asyncio.get_running_loop():
            if self._queue is not None:
                await self._queue.join()
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker
        self._worker = None
        self._queue = None
        logger.info("Event system stopped")

    def _ensure_worker(self) -> asyncio.Queue[SystemEvent]:
        """Return the live queue, (re)starting the worker on the running loop if needed."""
        loop = asyncio.get_running_loop()
        worker = self._worker
        stale = worker is not None and worker.get_loop() is not loop
        if self._queue is None or stale:
            # queues and tasks from another (possibly closed) loop are unusable
            self._queue = asyncio.Queue()
        if worker is None or worker.done() or stale:
            self._worker = loop.create_task(self._run(self._queue))
            logger.info("Event worker started")
        return self._queue

    async def _run(self, queue: asyncio.Queue[SystemEvent]) -> None:
        while True:
            event = await queue.get()
            try:
                await self.dispatch(event)
            except Exception:
                logger.exception("Error in event worker")
            finally:
                queue.task_done()


def _name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", repr(handler))


# Module-level singleton and shortcuts, imported by the services
event_bus = EventBus()


def subscribe(handler: EventHandler, event_types: Iterable[EventType] | None = None) -> None:
    event_bus.subscribe(handler, event_types)


def unsubscribe(handler: EventHandler) -> None:
    event_bus.unsubscribe(handler)


async def emit(event: SystemEvent) -> None:
    await event_bus.emit(event)


async def emit_nowait(event: SystemEvent) -> None:
    """Dispatch directly without queueing. Prefer `emit()`."""
    await event_bus.dispatch(event)


async def start_event_system() -> None:
    await event_bus.start()


async def stop_event_system() -> None:
    await event_bus.stop()
