"""Claude API request models and their builders."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, Union

from pydantic import Field, StrictBool, StrictFloat, StrictInt
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from .claude import InputMessage, WireModel

logger = logging.getLogger(__name__)

# Model used by CompleteRequest when none is set.
DEFAULT_MODEL = "claude-instant-1"


class CreateMessageRequest(WireModel):
    """Claude API /v1/messages request format."""
    model: str = Field(..., description="Claude model name")
    messages: List[InputMessage] = Field(..., description="Conversation messages")
    system: Optional[str] = Field(default=None, description="System prompt")
    max_tokens: StrictInt = Field(..., description="Maximum tokens to generate")
    stop_sequences: Optional[List[str]] = Field(default=None)
    stream: StrictBool = Field(default=False, description="Enable streaming")
    temperature: Optional[StrictFloat] = Field(default=None, ge=0.0, le=1.0)
    top_p: Optional[StrictFloat] = Field(default=None, ge=0.0, le=1.0)
    top_k: Optional[StrictInt] = Field(default=None, ge=1)

    @classmethod
    def builder(cls) -> "CreateMessageRequestBuilder":
        return CreateMessageRequestBuilder()


class CompleteRequest(WireModel):
    """Claude API /v1/complete (legacy) request format."""
    prompt: str = Field(..., description="The prompt to complete")
    model: str = Field(default=DEFAULT_MODEL, description="The model to use")
    max_tokens_to_sample: StrictInt = Field(..., ge=0, description="The number of tokens to sample")
    stop_sequences: Optional[List[str]] = Field(default=None, description="The stop sequences to use")
    stream: StrictBool = Field(default=False, description="Whether to incrementally stream the response")

    @classmethod
    def builder(cls) -> "CompleteRequestBuilder":
        return CompleteRequestBuilder()


def _as_string_list(value: Union[str, Iterable[str], None]) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return list(value)


class _RequestBuilder:
    """Collects request fields and validates them into an immutable request."""

    request_cls: Type[WireModel]
    required: Tuple[str, ...] = ()

    def __init__(self):
        self._fields: Dict[str, Any] = {}

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self._fields.items())
        return f"{type(self).__name__}({fields})"

    def _set(self, name: str, value: Any):
        self._fields[name] = value
        return self

    def build(self):
        """Validate the collected fields and return the request.

        Raises:
            ValidationError: a required field was never set, or a set value
                does not fit its field.
        """
        name = self.request_cls.__name__
        missing = [field for field in self.required if field not in self._fields]
        if missing:
            raise ValidationError(
                f"{name}: missing required field(s): {', '.join(missing)}",
                fields=missing,
            )

        try:
            return self.request_cls.model_validate(dict(self._fields))
        except PydanticValidationError as e:
            invalid = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            logger.debug(f"{name} rejected fields {invalid}: {e}")
            raise ValidationError(
                f"{name}: invalid value(s) for {', '.join(invalid)}",
                fields=invalid,
            ) from e


class CreateMessageRequestBuilder(_RequestBuilder):
    """Builder for CreateMessageRequest.

    Every setter returns the builder, so calls can be chained::

        request = (
            CreateMessageRequestBuilder()
            .model("claude-3-haiku-20240307")
            .messages([{"role": "user", "content": "Hello"}])
            .max_tokens(256)
            .build()
        )
    """

    request_cls = CreateMessageRequest
    required = ("model", "messages", "max_tokens")

    def model(self, model: str) -> "CreateMessageRequestBuilder":
        return self._set("model", model)

    def messages(
        self, messages: Iterable[Union[InputMessage, Dict[str, Any]]]
    ) -> "CreateMessageRequestBuilder":
        return self._set("messages", list(messages))

    def system(self, system: str) -> "CreateMessageRequestBuilder":
        return self._set("system", system)

    def max_tokens(self, max_tokens: int) -> "CreateMessageRequestBuilder":
        return self._set("max_tokens", max_tokens)

    def stop_sequences(self, stop_sequences: Union[str, Iterable[str]]) -> "CreateMessageRequestBuilder":
        return self._set("stop_sequences", _as_string_list(stop_sequences))

    def stream(self, stream: bool) -> "CreateMessageRequestBuilder":
        return self._set("stream", stream)

    def temperature(self, temperature: float) -> "CreateMessageRequestBuilder":
        return self._set("temperature", temperature)

    def top_p(self, top_p: float) -> "CreateMessageRequestBuilder":
        return self._set("top_p", top_p)

    def top_k(self, top_k: int) -> "CreateMessageRequestBuilder":
        return self._set("top_k", top_k)

    def build(self) -> CreateMessageRequest:
        return super().build()


class CompleteRequestBuilder(_RequestBuilder):
    """Builder for CompleteRequest. ``model`` falls back to DEFAULT_MODEL."""

    request_cls = CompleteRequest
    required = ("prompt", "max_tokens_to_sample")

    def prompt(self, prompt: str) -> "CompleteRequestBuilder":
        return self._set("prompt", prompt)

    def model(self, model: str) -> "CompleteRequestBuilder":
        return self._set("model", model)

    def max_tokens_to_sample(self, max_tokens_to_sample: int) -> "CompleteRequestBuilder":
        return self._set("max_tokens_to_sample", max_tokens_to_sample)

    def stop_sequences(self, stop_sequences: Union[str, Iterable[str]]) -> "CompleteRequestBuilder":
        return self._set("stop_sequences", _as_string_list(stop_sequences))

    def stream(self, stream: bool) -> "CompleteRequestBuilder":
        return self._set("stream", stream)

    def build(self) -> CompleteRequest:
        return super().build()
