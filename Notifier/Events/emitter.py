"""
Typed, failure-isolating event emitter base class.

Subclasses publish events with the protected `_emit`; everyone else subscribes
with `on` / `once` / `prepend_listener` and unsubscribes with `off`. Compared
to a plain dispatcher:

  - event names declared as `EventKey[P]` are type checked against listeners
    and emitted arguments;
  - an exception raised by a listener does not reach the emitting code or stop
    the remaining listeners; it is re-raised later, outside the dispatch;
  - there is no limit on the number of listeners;
  - `stop()` removes every listener and turns all further calls into no-ops,
    except `_emit`, which raises `EmitterStoppedError`.
"""
import logging
from typing import Any, Callable, List, Optional, ParamSpec, TypeVar, Union

from Notifier.Events.isolation import isolate_failures
from Notifier.Events.listener_registry import ListenerRegistry
from Notifier.Events.wrapper_table import WrapperTable
from Notifier.Exception.EmitterError import EmitterStoppedError
from Notifier.Model.EventKey import EventKey
from Notifier.Utility import deferred

logger = logging.getLogger(__name__)

P = ParamSpec("P")
E = TypeVar("E", bound="Emitter")

Event = Union[EventKey, str]


class Emitter:

    def __init__(self) -> None:
        self.__registry: Optional[ListenerRegistry] = ListenerRegistry()
        self.__wrappers: Optional[WrapperTable] = WrapperTable(isolate_failures)

    @property
    def stopped(self) -> bool:
        return self.__registry is None

    def _emit(self, event: Union[EventKey[P], str], /, *args: P.args, **kwargs: P.kwargs) -> bool:
        """Invoke every listener registered for `event`, in order.

        Returns True if at least one listener was called. Raises
        `EmitterStoppedError` if the emitter has been stopped.
        """
        if self.__registry is None:
            raise EmitterStoppedError(event)
        # listener failures surface only once the whole dispatch has returned
        with deferred.held():
            return self.__registry.emit(event, *args, **kwargs)

    def on(self: E, event: Union[EventKey[P], str], listener: Callable[P, Any]) -> E:
        return self.__register(event, listener, once=False, prepend=False)

    def once(self: E, event: Union[EventKey[P], str], listener: Callable[P, Any]) -> E:
        return self.__register(event, listener, once=True, prepend=False)

    def prepend_listener(self: E, event: Union[EventKey[P], str], listener: Callable[P, Any]) -> E:
        return self.__register(event, listener, once=False, prepend=True)

    def off(self: E, event: Union[EventKey[P], str], listener: Callable[P, Any]) -> E:
        if self.__registry is None or self.__wrappers is None:
            return self
        wrapper = self.__wrappers.get(listener)
        self.__registry.remove(event, wrapper)
        if wrapper is not None and not self.__registry.has_listener(wrapper):
            self.__wrappers.discard(listener)
        logger.debug("%s: removed listener %r from %r", type(self).__name__, listener, event)
        return self

    def stop(self) -> None:
        if self.__registry is None:
            return
        self.__registry.remove_all()
        if self.__wrappers is not None:
            self.__wrappers.clear()
        # release both; the instance is inert from here on
        self.__registry = None
        self.__wrappers = None
        logger.debug("%s stopped", type(self).__name__)

    def listener_count(self, event: Event) -> int:
        if self.__registry is None:
            return 0
        return self.__registry.count(event)

    def listeners(self, event: Event) -> List[Callable[..., Any]]:
        """Original listeners for `event`, in invocation order."""
        if self.__registry is None:
            return []
        return [getattr(wrapper, "__wrapped__", wrapper) for wrapper in self.__registry.listeners(event)]

    def __register(self: E, event: Event, listener: Callable[..., Any], once: bool, prepend: bool) -> E:
        if self.__registry is None or self.__wrappers is None:
            return self
        wrapper = self.__wrappers.wrap(listener)
        self.__registry.add(event, wrapper, once=once, prepend=prepend)
        logger.debug(
            "%s: registered %r for %r (once=%s, prepend=%s)",
            type(self).__name__, listener, event, once, prepend,
        )
        return self
