"""In-process event bus for dashboard writes.

Appointment, board, catalog, stock and cash-flow writes publish a
``SystemEvent`` through ``emit``. Handlers registered with ``subscribe``
run on a background worker, so a slow audit write never delays the
request that caused it. The bus lives for the app lifespan
(``start_event_system`` / ``stop_event_system``).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from salon.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SystemEvent], Coroutine[Any, Any, None]]

_subscribers: list[EventHandler] = []
_type_subscribers: dict[EventType, list[EventHandler]] = {}
_queue: asyncio.Queue[SystemEvent] | None = None
_worker_task: asyncio.Task[None] | None = None


# ── Subscriptions ────────────────────────────────────────────────────


def subscribe(handler: EventHandler, event_types: list[EventType] | None = None) -> None:
    """Register ``handler`` for ``event_types``, or for every event when None."""
    if event_types is None:
        _subscribers.append(handler)
        logger.info("Subscribed %s to all events", handler.__name__)
        return
    for event_type in event_types:
        _type_subscribers.setdefault(event_type, []).append(handler)
    logger.info("Subscribed %s to %s", handler.__name__, [t.value for t in event_types])


def unsubscribe(handler: EventHandler) -> None:
    if handler in _subscribers:
        _subscribers.remove(handler)
    for handlers in _type_subscribers.values():
        if handler in handlers:
            handlers.remove(handler)


def _handlers_for(event_type: EventType) -> list[EventHandler]:
    return [*_subscribers, *_type_subscribers.get(event_type, [])]


# ── Publishing ───────────────────────────────────────────────────────


async def emit(event: SystemEvent) -> None:
    """Queue ``event`` for the background worker."""
    global _queue
    if _queue is None:
        _queue = asyncio.Queue()
        _ensure_worker()

    await _queue.put(event)
    logger.debug("Event queued: %s (tenant=%s)", event.event_type.value, event.tenant_id)


def _ensure_worker() -> None:
    global _worker_task
    if _worker_task is None or _worker_task.done():
        _worker_task = asyncio.create_task(_event_worker())


async def _event_worker() -> None:
    if _queue is None:
        return
    queue = _queue
    while True:
        try:
            event = await queue.get()
        except asyncio.CancelledError:
            logger.info("Event worker cancelled")
            break
        try:
            await _dispatch(event)
        except Exception:
            logger.exception("Dispatch failed for %s", event.event_type.value)
        finally:
            queue.task_done()


async def _dispatch(event: SystemEvent) -> None:
    """Run every matching handler concurrently; one failure does not stop the others."""
    handlers = _handlers_for(event.event_type)
    if not handlers:
        return

    results = await asyncio.gather(*(handler(event) for handler in handlers), return_exceptions=True)
    for handler, result in zip(handlers, results):
        if isinstance(result, Exception):
            logger.error(
                "Handler %s failed for %s (tenant=%s): %s",
                handler.__name__,
                event.event_type.value,
                event.tenant_id,
                result,
            )


# ── Lifespan ─────────────────────────────────────────────────────────


async def start_event_system() -> None:
    global _queue
    _queue = asyncio.Queue()
    _ensure_worker()
    logger.info(
        "Event bus started: %d global, %d typed handlers",
        len(_subscribers),
        sum(len(v) for v in _type_subscribers.values()),
    )


async def stop_event_system() -> None:
    """Deliver what is still queued, then stop the worker."""
    global _worker_task, _queue

    if _queue is not None:
        await _queue.join()

    if _worker_task is not None and not _worker_task.done():
        _worker_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await _worker_task

    _worker_task = None
    _queue = None
    logger.info("Event bus stopped")
