"""Async pub-sub used to publish simulation job status changes."""
from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Coroutine[Any, Any, None]]


class EventBus:
    """In-process async event bus.

    Subscribers are coroutines; a failing subscriber is logged and does not
    prevent delivery to the others, and never propagates into the publisher.

    Example:
        >>> bus = EventBus()
        >>> async def on_status(snapshot):
        ...     print(snapshot.status)
        >>> bus.subscribe("simulation.status", on_status)
        >>> await bus.emit("simulation.status", snapshot)
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> None:
        """Register ``handler`` for ``event``.

        Raises:
            TypeError: If handler is not callable.
        """
        if not callable(handler):
            raise TypeError(f"Handler must be callable, got {type(handler)}")
        self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def subscriber_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    async def emit(self, event: str, data: Any = None) -> None:
        """Deliver ``data`` to every subscriber of ``event`` concurrently."""
        handlers = list(self._handlers.get(event, []))
        if not handlers:
            return
        await asyncio.gather(*(self._deliver(h, event, data) for h in handlers))

    async def _deliver(self, handler: Handler, event: str, data: Any) -> None:
        try:
            await handler(data)
        except Exception:
            logger.exception(
                "Subscriber %s failed for event '%s'",
                getattr(handler, "__name__", repr(handler)),
                event,
            )
