"""One-shot listeners for contract events.

A subscription is opened before the transaction that should emit the event,
waited on afterwards and always closed again, whether the event arrived, the
wait timed out or the caller cancelled it::

    with once(raffle, "WinnerPicked", timeout=10) as winner_picked:
        coordinator.fulfillRandomWords(request_id, raffle.address)
        event = winner_picked.wait()

While at least one subscription is open on an env, every call that env
executes is recorded for it. ``wait()`` only searches calls made after
``subscribe()``, so events from earlier transactions are never returned and
later calls on the same contract handle cannot hide a match.
"""
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Set

from script.errors import EventTimeoutError
from script.logger import get_logger

logger = get_logger(__name__)

DEFAULT_EVENT_TIMEOUT = 30.0

_active: Set["EventSubscription"] = set()
# id(env) -> env whose execute_code is currently wrapped
_tapped: Dict[int, Any] = {}


def event_name(log: Any) -> Optional[str]:
    event_type = getattr(log, "event_type", None)
    if event_type is not None:
        return getattr(event_type, "name", None)
    return type(log).__name__


def event_args(log: Any) -> dict:
    args_map = getattr(log, "args_map", None)
    if args_map is not None:
        return dict(args_map)
    if hasattr(log, "_asdict"):
        return dict(log._asdict())
    return {}


def _same_address(a: Any, b: Any) -> bool:
    return str(a).lower() == str(b).lower()


def _tap(env) -> None:
    if id(env) in _tapped:
        return
    execute_code = env.execute_code

    def recording_execute_code(*args, **kwargs):
        computation = execute_code(*args, **kwargs)
        # reverted calls emit nothing
        if not getattr(computation, "is_error", False):
            for subscription in list(_active):
                if subscription.env is env:
                    subscription._record(computation)
        return computation

    env.execute_code = recording_execute_code
    _tapped[id(env)] = env


def _untap(env) -> None:
    if any(subscription.env is env for subscription in _active):
        return
    if _tapped.pop(id(env), None) is not None:
        # drops the instance attribute, the class method shows through again
        del env.execute_code


class EventSubscription:
    def __init__(self, source, name: str, timeout: float = DEFAULT_EVENT_TIMEOUT, poll_interval: float = 0.1):
        self.source = source
        self.name = name
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.env = source.env
        self.event = None
        self._open = False
        self._computations: List[Any] = []
        self._searched = 0

    @property
    def active(self) -> bool:
        return self._open

    def subscribe(self) -> "EventSubscription":
        if self._open:
            raise RuntimeError(f"Already listening for {self.name}")
        self._computations = []
        self._searched = 0
        self._open = True
        _active.add(self)
        _tap(self.env)
        logger.debug("Listening for %s", self.name)
        return self

    def cancel(self) -> None:
        if self._open:
            self._open = False
            _active.discard(self)
            _untap(self.env)
            logger.debug("Stopped listening for %s", self.name)

    def _record(self, computation) -> None:
        self._computations.append(computation)

    def _matches(self, log) -> bool:
        if event_name(log) != self.name:
            return False
        emitter = getattr(log, "address", None)
        address = getattr(self.source, "address", None)
        return emitter is None or address is None or _same_address(emitter, address)

    def _poll(self) -> Optional[Any]:
        while self._searched < len(self._computations):
            computation = self._computations[self._searched]
            self._searched += 1
            for log in self.source.get_logs(computation):
                if self._matches(log):
                    return log
        return None

    def wait(self):
        """Return the first matching event emitted since ``subscribe()``, or raise ``EventTimeoutError``."""
        if not self._open:
            raise RuntimeError(f"Not listening for {self.name}")
        deadline = time.monotonic() + self.timeout
        try:
            while True:
                found = self._poll()
                if found is not None:
                    self.event = found
                    return found
                if time.monotonic() >= deadline:
                    raise EventTimeoutError(f"{self.name} not emitted within {self.timeout}s")
                time.sleep(self.poll_interval)
        finally:
            self.cancel()

    def __enter__(self) -> "EventSubscription":
        return self.subscribe()

    def __exit__(self, *exc) -> None:
        self.cancel()


def once(source, name: str, timeout: float = DEFAULT_EVENT_TIMEOUT, poll_interval: float = 0.1) -> EventSubscription:
    return EventSubscription(source, name, timeout=timeout, poll_interval=poll_interval)


def active_subscriptions() -> List[EventSubscription]:
    return list(_active)


def find_events(source, name: str) -> list:
    """All logs named ``name`` from the source's most recent transaction."""
    return [log for log in source.get_logs() if event_name(log) == name]
