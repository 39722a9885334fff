"""Lazy, single-consumption streams of decoded response items."""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterable, AsyncIterator, Callable, Generic, Mapping, Optional, TypeVar, Union

from .config import get_settings
from .errors import ClaudeWireError, SchemaError, TransportError
from .models.claude import CompleteResponse, decode_complete_response
from .models.events import ErrorEvent, StreamEvent, decode_stream_event
from .utils import describe_api_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

Payload = Union[str, bytes, Mapping[str, Any]]


@dataclass(frozen=True)
class StreamItem(Generic[T]):
    """One stream item: either a decoded value or the error that replaced it."""

    value: Optional[T] = None
    error: Optional[ClaudeWireError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the item's error."""
        if self.error is not None:
            raise self.error
        return self.value


class ResponseStream(Generic[T]):
    """Decodes payloads from an external transport, in arrival order.

    The transport hands over one complete payload per server-sent event and
    ends the iteration when the response is over. A payload that fails to
    decode becomes a failed item; the stream keeps going unless
    ``stop_on_error`` is set. An exception from the transport is fatal: it
    becomes one failed ``TransportError`` item and the stream ends.

    The stream can be iterated once. Closing it (``aclose()`` or leaving an
    ``async with`` block) closes the transport source.
    """

    def __init__(
        self,
        source: AsyncIterable[Payload],
        decode: Callable[[Payload], T],
        stop_on_error: Optional[bool] = None,
    ):
        self._source = source
        self._decode = decode
        if stop_on_error is None:
            stop_on_error = get_settings().stop_stream_on_error
        self.stop_on_error = stop_on_error
        self._iterator: Optional[AsyncIterator[StreamItem[T]]] = None
        self._source_iterator: Optional[AsyncIterator[Payload]] = None
        self._consumed = False
        self._closed = False
        self._source_closed = False
        self._reading = False

    @classmethod
    def for_messages(
        cls, source: AsyncIterable[Payload], stop_on_error: Optional[bool] = None
    ) -> "ResponseStream[StreamEvent]":
        """Stream of /v1/messages events."""
        return cls(source, decode_stream_event, stop_on_error)

    @classmethod
    def for_completions(
        cls, source: AsyncIterable[Payload], stop_on_error: Optional[bool] = None
    ) -> "ResponseStream[CompleteResponse]":
        """Stream of /v1/complete events."""
        return cls(source, decode_complete_response, stop_on_error)

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> AsyncIterator[StreamItem[T]]:
        if self._consumed:
            raise RuntimeError("ResponseStream can only be consumed once")
        self._consumed = True
        self._iterator = self._iterate()
        return self._iterator

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()

    async def aclose(self) -> None:
        """Stop the stream and release the transport source.

        Safe to call from another task while the stream is being iterated:
        the consumer sees no further items once its pending read returns.
        """
        self._closed = True
        await self._close_source()
        iterator = self._iterator
        if iterator is not None and not (self._reading or iterator.ag_running):
            await iterator.aclose()

    async def _iterate(self) -> AsyncIterator[StreamItem[T]]:
        self._source_iterator = self._source.__aiter__()
        try:
            while not self._closed:
                try:
                    payload = await self._read()
                except StopAsyncIteration:
                    return
                except Exception as e:
                    if self._closed:
                        return
                    yield StreamItem(error=self._transport_error(e))
                    return

                if self._closed:
                    return
                item = self._decode_item(payload)
                yield item
                if not item.ok and self.stop_on_error:
                    logger.info("Ending response stream after a malformed payload")
                    return
        finally:
            await self._close_source()

    async def _read(self) -> Payload:
        self._reading = True
        try:
            return await self._source_iterator.__anext__()
        finally:
            self._reading = False

    def _decode_item(self, payload: Payload) -> StreamItem[T]:
        try:
            value = self._decode(payload)
        except SchemaError as e:
            logger.warning(f"Malformed stream payload: {e}")
            return StreamItem(error=e)

        if isinstance(value, ErrorEvent):
            logger.warning(f"Stream reported an error: {describe_api_error(value.error)}")
        return StreamItem(value=value)

    def _transport_error(self, error: Exception) -> TransportError:
        if isinstance(error, TransportError):
            transport_error = error
        else:
            transport_error = TransportError(f"Transport failed: {error}", cause=error)
            transport_error.__cause__ = error
        logger.error(f"Response stream terminated: {transport_error}")
        return transport_error

    async def _close_source(self) -> None:
        if self._source_closed:
            return

        resources = [self._source]
        if self._source_iterator is not None and self._source_iterator is not self._source:
            resources.insert(0, self._source_iterator)
        # A generator source paused in a read is closed by the reading task.
        if self._reading and any(inspect.isasyncgen(resource) for resource in resources):
            return

        self._source_closed = True
        for resource in resources:
            aclose = getattr(resource, "aclose", None)
            if aclose is not None:
                await aclose()


CreateMessageResponseStream = ResponseStream[StreamEvent]
CompleteResponseStream = ResponseStream[CompleteResponse]
