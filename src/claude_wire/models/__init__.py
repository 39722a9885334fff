"""Data models for the Claude API wire format."""

from .claude import (
    BlockContent,
    CompleteResponse,
    Content,
    ContentBlock,
    ContentDelta,
    CreateMessageResponse,
    ErrorData,
    ImageSource,
    InputMessage,
    Message,
    MessageDelta,
    StopReason,
    TextContent,
    Usage,
    decode_complete_response,
    decode_content,
    decode_message,
    decode_message_response,
)
from .events import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    ErrorEvent,
    MessageDeltaEvent,
    MessageStartEvent,
    MessageStopEvent,
    PingEvent,
    StreamEvent,
    UnknownEvent,
    decode_stream_event,
)
from .requests import (
    DEFAULT_MODEL,
    CompleteRequest,
    CompleteRequestBuilder,
    CreateMessageRequest,
    CreateMessageRequestBuilder,
)

__all__ = [
    # Content and responses
    "BlockContent",
    "CompleteResponse",
    "Content",
    "ContentBlock",
    "ContentDelta",
    "CreateMessageResponse",
    "ErrorData",
    "ImageSource",
    "InputMessage",
    "Message",
    "MessageDelta",
    "StopReason",
    "TextContent",
    "Usage",
    "decode_complete_response",
    "decode_content",
    "decode_message",
    "decode_message_response",
    # Stream events
    "ContentBlockDeltaEvent",
    "ContentBlockStartEvent",
    "ContentBlockStopEvent",
    "ErrorEvent",
    "MessageDeltaEvent",
    "MessageStartEvent",
    "MessageStopEvent",
    "PingEvent",
    "StreamEvent",
    "UnknownEvent",
    "decode_stream_event",
    # Requests
    "DEFAULT_MODEL",
    "CompleteRequest",
    "CompleteRequestBuilder",
    "CreateMessageRequest",
    "CreateMessageRequestBuilder",
]
