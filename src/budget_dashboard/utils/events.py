"""
Change notification.

Each owner (session gate, aggregation store) creates its own ``EventBus``;
there is no process-wide instance.
"""

from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = ['Event', 'EventBus', 'Handler']


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event], None]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> Callable[[], None]:
        """Register a handler; returns a callable that unsubscribes it"""
        if name not in self._subscribers:
            self._subscribers[name] = []
        self._subscribers[name].append(handler)
        return lambda: self.unsubscribe(name, handler)

    def publish(self, name: str, payload: dict) -> Event:
        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )
        # Copy so handlers may unsubscribe while being called
        handlers = list(self._subscribers.get(name, []))
        for handler in handlers:
            handler(event)
        return event

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if name in self._subscribers:
            if handler in self._subscribers[name]:
                self._subscribers[name].remove(handler)
