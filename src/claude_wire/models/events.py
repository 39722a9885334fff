"""Claude API streaming event models."""

import logging
from typing import Any, Dict, Literal, Mapping, Type, Union

from pydantic import Field, StrictInt

from ..errors import SchemaError
from .claude import (
    ContentBlock,
    ContentDelta,
    ErrorData,
    Message,
    MessageDelta,
    WireModel,
    load_payload,
    validate_payload,
)

logger = logging.getLogger(__name__)


class MessageStartEvent(WireModel):
    """message_start event data."""
    type: Literal["message_start"] = "message_start"
    message: Message


class ContentBlockStartEvent(WireModel):
    """content_block_start event data."""
    type: Literal["content_block_start"] = "content_block_start"
    index: StrictInt = Field(..., ge=0)
    content_block: ContentBlock


class ContentBlockDeltaEvent(WireModel):
    """content_block_delta event data."""
    type: Literal["content_block_delta"] = "content_block_delta"
    index: StrictInt = Field(..., ge=0)
    delta: ContentDelta


class ContentBlockStopEvent(WireModel):
    """content_block_stop event data."""
    type: Literal["content_block_stop"] = "content_block_stop"
    index: StrictInt = Field(..., ge=0)


class MessageDeltaEvent(WireModel):
    """message_delta event data."""
    type: Literal["message_delta"] = "message_delta"
    delta: MessageDelta


class MessageStopEvent(WireModel):
    """message_stop event data."""
    type: Literal["message_stop"] = "message_stop"


class PingEvent(WireModel):
    """ping event data."""
    type: Literal["ping"] = "ping"


class ErrorEvent(WireModel):
    """error event data."""
    type: Literal["error"] = "error"
    error: ErrorData


class UnknownEvent(WireModel):
    """An event whose tag this version does not recognize.

    Carries only the tag so newer server event kinds pass through a stream
    without breaking it.
    """
    type: str


StreamEvent = Union[
    MessageStartEvent,
    ContentBlockStartEvent,
    ContentBlockDeltaEvent,
    ContentBlockStopEvent,
    MessageDeltaEvent,
    MessageStopEvent,
    PingEvent,
    ErrorEvent,
    UnknownEvent,
]

EVENT_TYPES: Dict[str, Type[WireModel]] = {
    "message_start": MessageStartEvent,
    "content_block_start": ContentBlockStartEvent,
    "content_block_delta": ContentBlockDeltaEvent,
    "content_block_stop": ContentBlockStopEvent,
    "message_delta": MessageDeltaEvent,
    "message_stop": MessageStopEvent,
    "ping": PingEvent,
    "error": ErrorEvent,
}


def decode_stream_event(payload: Union[str, bytes, Mapping[str, Any]]) -> StreamEvent:
    """Decode one server-sent event payload into its StreamEvent variant.

    The variant is picked by exact match on the payload's ``type`` field.
    Unrecognized tags decode to ``UnknownEvent`` instead of failing.

    Raises:
        SchemaError: the payload is not a JSON object, has no string ``type``
            field, or does not match the variant its tag names.
    """
    data = load_payload(payload)

    tag = data.get("type")
    if not isinstance(tag, str):
        raise SchemaError(f"Stream event has no string 'type' field: {data!r}")

    event_cls = EVENT_TYPES.get(tag)
    if event_cls is None:
        logger.debug(f"Unknown stream event type '{tag}', passing through")
        return UnknownEvent(type=tag)

    return validate_payload(event_cls, data)
