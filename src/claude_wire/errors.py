"""Error types raised by the wire layer."""

from typing import Iterable, List, Optional


class ClaudeWireError(Exception):
    """Base class for all claude-wire errors."""


class ValidationError(ClaudeWireError):
    """A request could not be finalized.

    Raised by the request builders when a required field was never set or a
    set value does not fit the field's type.
    """

    def __init__(self, message: str, fields: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.fields: List[str] = list(fields or [])


class SchemaError(ClaudeWireError):
    """An inbound payload does not match the expected shape."""


class TransportError(ClaudeWireError):
    """Failure reported by the external transport feeding a stream."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
