"""Claude API data models: content, messages and responses."""

import json
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field, RootModel, StrictInt, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import SchemaError

ModelT = TypeVar("ModelT", bound=BaseModel)


class WireModel(BaseModel):
    """Immutable record exchanged with the API."""

    model_config = {"frozen": True}

    def to_wire(self) -> Dict[str, Any]:
        """Dump to a JSON-ready dict, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True, by_alias=True)


class StopReason(str, Enum):
    """Why a legacy completion stopped."""
    MAX_TOKENS = "max_tokens"
    STOP_SEQUENCE = "stop_sequence"


class ImageSource(WireModel):
    """Inline image payload."""
    type: str = Field(..., description="Source encoding, e.g. base64")
    media_type: str = Field(..., description="e.g. image/png, image/jpeg")
    data: str


class ContentBlock(WireModel):
    """One unit of message content: text or an inline image."""
    type: str = Field(..., description="Block kind: text, image")
    text: Optional[str] = None
    source: Optional[ImageSource] = None


class TextContent(RootModel[str]):
    """Message content given as a plain string."""

    model_config = {"frozen": True}

    @property
    def text(self) -> str:
        return self.root

    def to_wire(self) -> str:
        return self.root


class BlockContent(RootModel[List[ContentBlock]]):
    """Message content given as an ordered list of content blocks."""

    model_config = {"frozen": True}

    @property
    def blocks(self) -> List[ContentBlock]:
        return self.root

    def to_wire(self) -> List[Dict[str, Any]]:
        return [block.to_wire() for block in self.root]


Content = Union[TextContent, BlockContent]


class InputMessage(WireModel):
    """One conversational turn sent to the API."""
    role: Literal["user", "assistant"] = Field(..., description="Message role: user, assistant")
    content: Content = Field(..., union_mode="left_to_right", description="Message content")

    @field_validator("content", mode="before")
    @classmethod
    def _resolve_content_shape(cls, value: Any) -> Any:
        # Strings are Text, lists are Blocks; nothing else is content.
        if isinstance(value, (TextContent, BlockContent)):
            return value
        if isinstance(value, str):
            return TextContent(value)
        if isinstance(value, (list, tuple)):
            return list(value)
        raise ValueError(
            f"content must be a string or a list of content blocks, got {type(value).__name__}"
        )


class Usage(WireModel):
    """Token accounting."""
    input_tokens: StrictInt
    output_tokens: StrictInt


class Message(WireModel):
    """A message as returned by the API, e.g. inside message_start."""
    id: str
    type: Literal["message"] = Field(..., description="Always message")
    role: Literal["assistant"] = Field(..., description="Always assistant")
    content: List[ContentBlock]
    model: str
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Usage


class CreateMessageResponse(WireModel):
    """/v1/messages non-streaming response."""
    id: str
    type: Literal["message"] = Field(..., description="Always message")
    role: Literal["assistant"] = Field(..., description="Always assistant")
    content: List[ContentBlock]
    model: str
    stop_reason: str
    stop_sequence: Optional[str] = None
    usage: Usage


class CompleteResponse(WireModel):
    """/v1/complete response, also one item of a completion stream."""
    completion: str
    stop_reason: Optional[StopReason] = None


class ContentDelta(WireModel):
    """Incremental text for a content block."""
    type: str = Field(..., description="Delta kind, currently text_delta")
    text: str


class MessageDelta(WireModel):
    """Top-level changes to the message carried by message_delta."""
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Optional[Usage] = None


class ErrorData(WireModel):
    """Error body carried by an error event."""
    type: str
    message: str


def load_payload(payload: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, Any]:
    """Turn raw JSON text or an already parsed mapping into a dict."""
    if isinstance(payload, Mapping):
        return dict(payload)

    if isinstance(payload, (str, bytes, bytearray)):
        try:
            data = json.loads(payload)
        except ValueError as e:
            raise SchemaError(f"Payload is not valid JSON: {e}") from e
    else:
        raise SchemaError(f"Unsupported payload type: {type(payload).__name__}")

    if not isinstance(data, dict):
        raise SchemaError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def validate_payload(model_cls: Type[ModelT], payload: Any) -> ModelT:
    """Validate a payload against ``model_cls``, raising SchemaError on mismatch."""
    try:
        return model_cls.model_validate(payload)
    except PydanticValidationError as e:
        raise SchemaError(f"{model_cls.__name__} payload does not match the expected shape: {e}") from e


def decode_content(value: Any) -> Content:
    """Decode message content by its JSON shape.

    A string becomes ``TextContent`` and an array becomes ``BlockContent``.
    Any other shape raises ``SchemaError``.
    """
    if isinstance(value, str):
        return TextContent(value)
    if isinstance(value, list):
        return validate_payload(BlockContent, value)
    raise SchemaError(
        f"content must be a string or a list of content blocks, got {type(value).__name__}"
    )


def decode_message(payload: Union[str, bytes, Mapping[str, Any]]) -> Message:
    """Decode a message object."""
    return validate_payload(Message, load_payload(payload))


def decode_message_response(payload: Union[str, bytes, Mapping[str, Any]]) -> CreateMessageResponse:
    """Decode a non-streaming /v1/messages response body."""
    return validate_payload(CreateMessageResponse, load_payload(payload))


def decode_complete_response(payload: Union[str, bytes, Mapping[str, Any]]) -> CompleteResponse:
    """Decode a /v1/complete response body or one completion stream event."""
    return validate_payload(CompleteResponse, load_payload(payload))
