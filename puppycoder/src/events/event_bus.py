# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Event bus module: the boundary between front-ends and the agent loop."""

import asyncio
import logging

from collections import defaultdict
from typing import Awaitable, Callable, ClassVar, Iterable, Optional
from pydantic import BaseModel, PrivateAttr

from ..types.event_types import EventType, Event, INPUT_EVENTS

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

Subscriber = Callable[[Event], Awaitable[None]]


def _as_types(event_types: EventType | Iterable[EventType]) -> list[EventType]:
    if isinstance(event_types, EventType):
        return [event_types]
    return list(event_types)


class EventBus(BaseModel):
    """
    Carries events in both directions.

    Front-ends `post` input events, which the agent loop consumes one at a
    time with `next_event`. The loop `publish`es output events, which are
    delivered to every subscriber of that event type.
    """

    _instance: ClassVar[Optional["EventBus"]] = None
    _lock: ClassVar[Optional[asyncio.Lock]] = None

    _subscribers: dict[EventType, list[Subscriber]] = PrivateAttr(
        default_factory=lambda: defaultdict(list)
    )
    _inbox: asyncio.Queue = PrivateAttr(default_factory=asyncio.Queue)

    class Config:
        arbitrary_types_allowed = True

    def __new__(cls) -> "EventBus":
        raise TypeError(
            "EventBus is a process-wide singleton. "
            "Use 'await EventBus.get_instance()' to get it."
        )

    @classmethod
    async def get_instance(cls) -> "EventBus":
        """The shared bus, created on first use."""
        if not cls._lock:
            cls._lock = asyncio.Lock()

        async with cls._lock:
            if not cls._instance:
                bus = super(EventBus, cls).__new__(cls)
                bus.__init__()
                cls._instance = bus
            return cls._instance

    # Input side --------------------------------------------------------------

    def post(self, event: Event) -> None:
        """Queue an input event for the agent loop.

        Raises:
            ValueError: if the event is not an input event
        """
        if event.type not in INPUT_EVENTS:
            raise ValueError(f"{event.type} is not an input event")
        logger.debug(f"Posted {event.type.value}")
        self._inbox.put_nowait(event)

    async def next_event(self) -> Event:
        return await self._inbox.get()

    # Output side -------------------------------------------------------------

    async def publish(self, event: Event) -> None:
        """Deliver an output event to its subscribers, in subscription order.

        A failing subscriber is logged and does not stop delivery to the rest.
        """
        logger.debug(f"Publishing {event.type.value}")
        for callback in list(self._subscribers[event.type]):
            try:
                await callback(event)
            except Exception as e:
                logger.error(f"Subscriber {callback} failed on {event.type.value}: {e}")

    def subscribe(
        self, event_types: EventType | Iterable[EventType], callback: Subscriber
    ) -> None:
        """Register an async callback for one event type or several."""
        for event_type in _as_types(event_types):
            self._subscribers[event_type].append(callback)

    def unsubscribe(
        self, event_types: EventType | Iterable[EventType], callback: Subscriber
    ) -> None:
        """Remove a callback; types it was never subscribed to are skipped."""
        for event_type in _as_types(event_types):
            if callback in self._subscribers[event_type]:
                self._subscribers[event_type].remove(callback)

    def clear(self) -> None:
        """Drop pending input events and all subscribers (mainly for testing)."""
        self._subscribers.clear()
        while not self._inbox.empty():
            self._inbox.get_nowait()
