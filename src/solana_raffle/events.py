from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Type, TypeVar, Union

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryRecorded:
    player: str


@dataclass(frozen=True)
class SettlementRequested:
    request_id: int


@dataclass(frozen=True)
class WinnerPicked:
    winner: str


RaffleEvent = Union[EntryRecorded, SettlementRequested, WinnerPicked]
E = TypeVar("E")


class EventLog:
    """Ordered record of emitted raffle events plus synchronous subscribers."""

    def __init__(self) -> None:
        self.records: List[RaffleEvent] = []
        self._subscribers: List[Callable[[RaffleEvent], None]] = []

    def subscribe(self, callback: Callable[[RaffleEvent], None]) -> None:
        self._subscribers.append(callback)

    def emit(self, event: RaffleEvent) -> None:
        self.records.append(event)
        log.debug("Event: %s", event)
        for callback in list(self._subscribers):
            callback(event)

    def of_type(self, event_type: Type[E]) -> List[E]:
        return [e for e in self.records if isinstance(e, event_type)]
