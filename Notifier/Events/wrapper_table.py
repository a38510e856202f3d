"""
Identity translation table: original listener -> registered wrapper.

Entries are keyed by listener identity, never by `hash`/`==`, so unhashable
callables work and two equal but distinct callables get their own wrappers.
Bound methods are created fresh on every attribute access and are keyed by the
identity of their `(__self__, __func__)` pair instead; bound builtin methods
such as `some_list.append` by `__self__` identity and method name.

The table only holds a weak reference to each wrapper. A wrapper lives while a
registry holds it and keeps its listener alive through `__wrapped__`, so the
identity key stays valid for as long as the entry exists; when the wrapper is
collected its entry is dropped and the table keeps nothing alive.
"""
import inspect
import types
import weakref
from typing import Any, Callable, Dict, Hashable, Optional

Listener = Callable[..., Any]


def _is_builtin_method(listener: Listener) -> bool:
    if not isinstance(listener, types.BuiltinMethodType):
        return False
    owner = listener.__self__
    return owner is not None and not inspect.ismodule(owner)


def _identity(listener: Listener) -> Hashable:
    if inspect.ismethod(listener):
        return ("method", id(listener.__self__), id(listener.__func__))
    if _is_builtin_method(listener):
        return ("builtin", id(listener.__self__), listener.__name__)
    return ("object", id(listener))


def _same(a: Listener, b: Listener) -> bool:
    if inspect.ismethod(a) and inspect.ismethod(b):
        return a.__self__ is b.__self__ and a.__func__ is b.__func__
    if _is_builtin_method(a) and _is_builtin_method(b):
        return a.__self__ is b.__self__ and a.__name__ == b.__name__
    return a is b


class WrapperTable:
    def __init__(self, factory: Callable[[Listener], Listener]):
        self._factory = factory
        self._entries: Dict[Hashable, weakref.ref] = {}

    def wrap(self, listener: Listener) -> Listener:
        """Return the wrapper for `listener`, creating it on first use."""
        wrapper = self.get(listener)
        if wrapper is not None:
            return wrapper
        wrapper = self._factory(listener)
        key = _identity(listener)
        self._entries[key] = weakref.ref(wrapper, self._forget(key))
        return wrapper

    def get(self, listener: Listener) -> Optional[Listener]:
        ref = self._entries.get(_identity(listener))
        wrapper = ref() if ref is not None else None
        if wrapper is None or not _same(wrapper.__wrapped__, listener):
            return None
        return wrapper

    def discard(self, listener: Listener) -> None:
        self._entries.pop(_identity(listener), None)

    def clear(self) -> None:
        self._entries.clear()

    def _forget(self, key: Hashable) -> Callable[[weakref.ref], None]:
        def callback(ref: weakref.ref) -> None:
            # a newer wrapper may already own the key
            if self._entries.get(key) is ref:
                del self._entries[key]
        return callback
