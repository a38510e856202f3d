"""
Ordered multi-listener registry.
Subscriptions are (event -> list of entries), kept in invocation order.
Each registry is owned by a single emitter; nothing here is shared or global.
"""
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Hashable, List, Optional


@dataclass(eq=False)
class _Entry:
    listener: Callable[..., Any]
    once: bool = False
    active: bool = True


class ListenerRegistry:
    def __init__(self):
        self._listeners: Dict[Hashable, List[_Entry]] = {}
        self._lock = Lock()

    def add(self, event: Hashable, listener: Callable[..., Any], once: bool = False, prepend: bool = False) -> None:
        entry = _Entry(listener, once=once)
        with self._lock:
            entries = self._listeners.setdefault(event, [])
            if prepend:
                entries.insert(0, entry)
            else:
                entries.append(entry)

    def remove(self, event: Hashable, listener: Optional[Callable[..., Any]]) -> bool:
        """Remove the first entry registered for `listener`; False if there was none."""
        if listener is None:
            return False
        with self._lock:
            for entry in self._listeners.get(event, []):
                if entry.listener == listener:
                    self._detach(event, entry)
                    return True
        return False

    def remove_all(self, event: Optional[Hashable] = None) -> None:
        with self._lock:
            events = list(self._listeners) if event is None else [event]
            for name in events:
                for entry in self._listeners.pop(name, []):
                    entry.active = False

    def emit(self, event: Hashable, *args, **kwargs) -> bool:
        with self._lock:
            snapshot = list(self._listeners.get(event, []))
        invoked = False
        for entry in snapshot:
            # removed (or already fired once) after the snapshot was taken
            if not entry.active:
                continue
            if entry.once:
                with self._lock:
                    if not entry.active:
                        continue
                    self._detach(event, entry)
            entry.listener(*args, **kwargs)
            invoked = True
        return invoked

    def count(self, event: Hashable) -> int:
        with self._lock:
            return len(self._listeners.get(event, []))

    def listeners(self, event: Hashable) -> List[Callable[..., Any]]:
        with self._lock:
            return [entry.listener for entry in self._listeners.get(event, [])]

    def has_listener(self, listener: Callable[..., Any]) -> bool:
        with self._lock:
            return any(
                entry.listener == listener
                for entries in self._listeners.values()
                for entry in entries
            )

    def events(self) -> List[Hashable]:
        with self._lock:
            return list(self._listeners)

    def _detach(self, event: Hashable, entry: _Entry) -> None:
        # caller holds the lock
        entry.active = False
        entries = self._listeners[event]
        entries.remove(entry)
        if not entries:
            del self._listeners[event]
