from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Type, TypeVar


@dataclass(frozen=True)
class EnteredRound:
    participant: str
    index: int


@dataclass(frozen=True)
class RoundCalculating:
    request_id: int


@dataclass(frozen=True)
class WinnerPicked:
    winner: str


E = TypeVar("E")
Listener = Callable[[object], None]

log = logging.getLogger(__name__)


class EventLog:
    """Append-only log of emitted events with optional listeners."""

    def __init__(self) -> None:
        self._events: List[object] = []
        self._listeners: List[Listener] = []

    def __iter__(self):
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def emit(self, event: object) -> None:
        self._events.append(event)
        # Listener failures are logged; the event stands.
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                log.exception("Event listener failed on %r", event)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def once(self, event_type: Type[E], callback: Callable[[E], None]) -> None:
        """Call callback for the next event of event_type only."""

        def listener(event: object) -> None:
            if isinstance(event, event_type):
                unsubscribe()
                callback(event)

        unsubscribe = self.subscribe(listener)

    def of_type(self, event_type: Type[E]) -> List[E]:
        return [e for e in self._events if isinstance(e, event_type)]

    def last(self, event_type: Type[E]) -> E | None:
        found = self.of_type(event_type)
        return found[-1] if found else None
