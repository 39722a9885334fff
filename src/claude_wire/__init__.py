"""claude-wire: request builders, response records and stream decoding for the Claude API."""

from .config import Settings, get_settings
from .errors import ClaudeWireError, SchemaError, TransportError, ValidationError
from .models import *  # noqa: F401,F403
from .models import __all__ as _models_all
from .stream import CompleteResponseStream, CreateMessageResponseStream, ResponseStream, StreamItem

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "ClaudeWireError",
    "SchemaError",
    "TransportError",
    "ValidationError",
    "CompleteResponseStream",
    "CreateMessageResponseStream",
    "ResponseStream",
    "StreamItem",
    *_models_all,
]
