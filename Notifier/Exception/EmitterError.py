"""Emitter error base class."""
from typing import Any, Optional


class EmitterError(Exception):

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

"""Raised when `_emit` is called on an emitter that has been stopped."""
class EmitterStoppedError(EmitterError):
    def __init__(self, event: Optional[Any] = None, message: str = "emitter has been stopped"):
        super().__init__(message)
        self.event = event
