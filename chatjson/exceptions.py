# chatjson/exceptions.py
"""ChatJSON exceptions."""


class ChatJsonError(Exception):
    """Base class for errors raised by chatjson."""


class UnsupportedShapeError(ChatJsonError, ValueError):
    """Raised when a decode or default is requested for a shape with no rules."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"No decoding rules for response shape {kind!r}")
