"""
Typed event names.

An `EventKey[P]` is a symbol-like event name whose parameter spec `P` describes
what its listeners accept, so a type checker can reject a listener or an
emission whose arguments do not match:

    class ServerEvents(EventMap):
        ready: EventKey[[int]] = EventKey()
        closed: EventKey[[]] = EventKey()

Keys compare by identity; two keys declared with the same name are still two
different events. Plain strings work as event names too, but are not checked.
"""
from typing import Generic, List, Optional, ParamSpec

P = ParamSpec("P")


class EventKey(Generic[P]):
    __slots__ = ("name",)

    def __init__(self, name: Optional[str] = None):
        self.name = name

    def __set_name__(self, owner, attr: str) -> None:
        if self.name is None:
            self.name = attr

    def __repr__(self) -> str:
        return f"EventKey({self.name!r})"


"""Namespace of `EventKey` declarations describing the events an emitter publishes."""
class EventMap:

    @classmethod
    def keys(cls) -> List[EventKey]:
        """Introspection helper: every declared key, base classes first. Not used for dispatch."""
        seen = []
        for klass in reversed(cls.__mro__):
            for value in vars(klass).values():
                if isinstance(value, EventKey) and value not in seen:
                    seen.append(value)
        return seen
