import asyncio
import threading

from Notifier.Utility import deferred
from Notifier.Utility.EmitterConfiguration import DEFAULT_DEFERRED_ERROR_SETTINGS


def test_raise_later_uses_running_loop():
    seen = []

    async def main():
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(lambda loop, context: seen.append(context.get("exception")))
        handle = deferred.raise_later(ValueError("boom"))
        assert isinstance(handle, asyncio.Handle)
        # nothing happens until control returns to the loop
        assert seen == []
        await asyncio.sleep(0)

    asyncio.run(main())
    assert len(seen) == 1
    assert isinstance(seen[0], ValueError)
    assert str(seen[0]) == "boom"


def test_raise_later_without_loop_reaches_thread_excepthook(monkeypatch):
    seen = []
    monkeypatch.setattr(threading, "excepthook", lambda args: seen.append((args.exc_value, args.thread.name)))

    error = RuntimeError("listener failed")
    timer = deferred.raise_later(error)
    timer.join(timeout=5)

    assert len(seen) == 1
    assert seen[0][0] is error
    assert seen[0][1].startswith("notifier-deferred-error-")


def test_thread_settings_are_read_at_call_time(monkeypatch):
    monkeypatch.setattr(threading, "excepthook", lambda args: None)
    monkeypatch.setitem(DEFAULT_DEFERRED_ERROR_SETTINGS, "thread_name_prefix", "custom")
    monkeypatch.setitem(DEFAULT_DEFERRED_ERROR_SETTINGS, "daemon", True)

    timer = deferred.raise_later(KeyError("x"))
    timer.join(timeout=5)
    assert timer.name.startswith("custom-")
    assert timer.daemon is True


def test_held_collects_until_outermost_block_exits(monkeypatch):
    scheduled = []
    monkeypatch.setattr(deferred, "_schedule", scheduled.append)
    first, second = ValueError("a"), KeyError("b")

    with deferred.held():
        assert deferred.raise_later(first) is None
        with deferred.held():
            deferred.raise_later(second)
        assert scheduled == []

    assert scheduled == [first, second]
