"""Failure-isolating listener wrapper."""
import functools
import logging
from typing import Any, Callable

from Notifier.Utility import deferred

logger = logging.getLogger(__name__)


def isolate_failures(listener: Callable[..., Any]) -> Callable[..., None]:
    """Wrap `listener` so an exception it raises never reaches the dispatcher.

    The error is handed to `deferred.raise_later` and surfaces once the current
    call stack has unwound. The original stays reachable as `__wrapped__`.
    """
    @functools.wraps(listener)
    def wrapper(*args, **kwargs) -> None:
        try:
            listener(*args, **kwargs)
        except Exception as exc:
            logger.debug("Listener %r raised %r, re-raising later", listener, exc)
            deferred.raise_later(exc)

    return wrapper
