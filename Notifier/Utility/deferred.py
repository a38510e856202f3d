"""
Deferred error surfacing.

`raise_later` re-raises an exception after the caller's current call stack has
unwound, so the error reaches the host's unhandled-failure channel instead of
the code that triggered it:

  - inside a running asyncio loop the error is raised from a `call_soon`
    callback and lands in the loop's exception handler;
  - otherwise it is raised from a zero-delay `threading.Timer` and lands in
    `threading.excepthook`.

Inside a `held()` block nothing is scheduled yet: errors are collected and
handed over when the outermost block on this thread exits, so a dispatch
always finishes before any of its failures can surface.
"""
import asyncio
import itertools
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from Notifier.Utility.EmitterConfiguration import DEFAULT_DEFERRED_ERROR_SETTINGS

logger = logging.getLogger(__name__)

_counter = itertools.count(1)
_local = threading.local()


def _reraise(exc: BaseException) -> None:
    raise exc


@contextmanager
def held() -> Iterator[None]:
    if getattr(_local, "pending", None) is not None:
        yield
        return
    pending = _local.pending = []
    try:
        yield
    finally:
        _local.pending = None
        for exc in pending:
            _schedule(exc)


def raise_later(exc: BaseException) -> Optional[Union[asyncio.Handle, threading.Timer]]:
    pending = getattr(_local, "pending", None)
    if pending is not None:
        pending.append(exc)
        return None
    return _schedule(exc)


def _schedule(exc: BaseException) -> Union[asyncio.Handle, threading.Timer]:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is not None:
        logger.debug("Deferring %s to the running event loop", type(exc).__name__)
        return loop.call_soon(_reraise, exc)

    settings = DEFAULT_DEFERRED_ERROR_SETTINGS
    timer = threading.Timer(0, _reraise, args=(exc,))
    timer.name = f"{settings['thread_name_prefix']}-{next(_counter)}"
    timer.daemon = settings["daemon"]
    logger.debug("Deferring %s to thread %s", type(exc).__name__, timer.name)
    timer.start()
    return timer
