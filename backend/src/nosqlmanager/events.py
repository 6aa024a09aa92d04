# backend/src/nosqlmanager/events.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Inserted:
    id: int

@dataclass(frozen=True)
class Updated:
    id: int

@dataclass(frozen=True)
class Deleted:
    id: int

@dataclass(frozen=True)
class Cleared:
    pass


MutationEvent = Union[Inserted, Updated, Deleted, Cleared]
Subscriber = Callable[[MutationEvent], None]


class MutationFeed:
    """Synchronous fan-out of store mutations to viewers.

    Subscribers run on the caller's thread after the mirror write. A failing
    subscriber is logged and skipped; it never fails the store operation.
    """

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        self._subscribers.append(fn)
        return lambda: self.unsubscribe(fn)

    def unsubscribe(self, fn: Subscriber) -> None:
        if fn in self._subscribers:
            self._subscribers.remove(fn)

    def publish(self, event: MutationEvent) -> None:
        for fn in list(self._subscribers):
            try:
                fn(event)
            except Exception:
                logger.exception("mutation subscriber %r failed on %r", fn, event)

    def __len__(self) -> int:
        return len(self._subscribers)
