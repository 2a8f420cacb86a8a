"""
Vault notifications

Events are broadcast in order to an append-only log. Subscribers are
fire-and-forget: a failing subscriber is logged and never affects the
operation that emitted the event.
"""

import logging
import threading
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional, Type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deposit:
    sender: str
    amount: int


@dataclass(frozen=True)
class TransactionSubmitted:
    index: int
    target: str
    value: int
    payload: bytes


@dataclass(frozen=True)
class TransactionConfirmed:
    index: int
    owner: str


@dataclass(frozen=True)
class TransactionExecuted:
    index: int
    executor: str


@dataclass(frozen=True)
class ExecutionFailure:
    index: int
    executor: str


def event_to_dict(event) -> Dict[str, Any]:
    data = asdict(event)
    for key, value in data.items():
        if isinstance(value, bytes):
            data[key] = value.hex()
    data['event'] = type(event).__name__
    return data


class EventLog:
    """Ordered, append-only event sink"""

    def __init__(self):
        self._events = []
        self._subscribers: List[Callable] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable) -> None:
        self._subscribers.append(callback)

    def append(self, event) -> None:
        with self._lock:
            self._events.append(event)

    def notify(self, event) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                logger.warning(f"Event subscriber {callback!r} failed on {type(event).__name__}: {e}")

    def emit(self, event) -> None:
        self.append(event)
        self.notify(event)

    def events(self, kind: Optional[Type] = None) -> list:
        with self._lock:
            if kind is None:
                return list(self._events)
            return [e for e in self._events if isinstance(e, kind)]

    def __len__(self):
        with self._lock:
            return len(self._events)
