from typing import Any, Dict


DEFAULT_DEFERRED_ERROR_SETTINGS: Dict[str, Any] = {
    # used only when no asyncio loop is running in the emitting thread
    "thread_name_prefix": "notifier-deferred-error",
    # a daemon thread could be killed at interpreter exit before the error is reported
    "daemon": False,
}
