"""Tests for response streams."""

import asyncio
import json
import os
from unittest.mock import patch

import pytest

from claude_wire.errors import SchemaError, TransportError
from claude_wire.models.claude import CompleteResponse, StopReason
from claude_wire.models.events import (
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ContentBlockStopEvent,
    ErrorEvent,
    MessageStartEvent,
    MessageStopEvent,
    PingEvent,
    UnknownEvent,
)
from claude_wire.stream import ResponseStream, StreamItem


class FakeTransport:
    """Async source of event payloads that records whether it was closed."""

    def __init__(self, payloads, fail_with=None):
        self.payloads = list(payloads)
        self.fail_with = fail_with
        self.delivered = 0
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.closed:
            raise StopAsyncIteration
        if self.delivered < len(self.payloads):
            payload = self.payloads[self.delivered]
            self.delivered += 1
            return payload
        if self.fail_with is not None:
            raise self.fail_with
        raise StopAsyncIteration

    async def aclose(self):
        self.closed = True


class GatedTransport(FakeTransport):
    """Delivers the first payload, then blocks every later read until released."""

    def __init__(self, payloads):
        super().__init__(payloads)
        self.waiting = asyncio.Event()
        self.release = asyncio.Event()

    async def __anext__(self):
        if self.delivered > 0:
            self.waiting.set()
            await self.release.wait()
        if self.delivered >= len(self.payloads):
            raise StopAsyncIteration
        payload = self.payloads[self.delivered]
        self.delivered += 1
        return payload


async def collect(stream):
    return [item async for item in stream]


@pytest.mark.asyncio
async def test_five_event_sequence(stream_payloads):
    """A complete short reply yields one ok item per event, in order."""
    transport = FakeTransport(json.dumps(p) for p in stream_payloads)
    items = await collect(ResponseStream.for_messages(transport))

    assert len(items) == 5
    assert all(item.ok for item in items)
    assert [type(item.value) for item in items] == [
        MessageStartEvent,
        ContentBlockStartEvent,
        ContentBlockDeltaEvent,
        ContentBlockStopEvent,
        MessageStopEvent,
    ]
    assert items[2].unwrap().delta.text == "Hi"
    assert transport.closed


@pytest.mark.asyncio
async def test_bad_payload_is_reported_per_item(stream_payloads):
    """One malformed event fails alone and the stream continues."""
    payloads = [stream_payloads[0], {"type": "content_block_delta", "index": 0}, {"type": "ping"}]
    items = await collect(ResponseStream.for_messages(FakeTransport(payloads), stop_on_error=False))

    assert [item.ok for item in items] == [True, False, True]
    assert isinstance(items[1].error, SchemaError)
    assert items[1].value is None
    assert items[2].value == PingEvent()
    with pytest.raises(SchemaError):
        items[1].unwrap()


@pytest.mark.asyncio
async def test_stop_on_error(stream_payloads):
    """With stop_on_error the stream ends after the failed item."""
    transport = FakeTransport(["not json", stream_payloads[4]])
    items = await collect(ResponseStream.for_messages(transport, stop_on_error=True))

    assert len(items) == 1
    assert not items[0].ok
    assert transport.closed


@pytest.mark.asyncio
async def test_stop_on_error_defaults_to_settings():
    """The default error policy comes from the environment."""
    with patch.dict(os.environ, {"CLAUDE_WIRE_STOP_STREAM_ON_ERROR": "true"}):
        stream = ResponseStream.for_messages(FakeTransport([]))
    assert stream.stop_on_error is True

    with patch.dict(os.environ, {"CLAUDE_WIRE_STOP_STREAM_ON_ERROR": "false"}):
        from claude_wire.config import reset_settings

        reset_settings()
        assert ResponseStream.for_messages(FakeTransport([])).stop_on_error is False


@pytest.mark.asyncio
async def test_unknown_events_pass_through():
    """Unknown event kinds are successful items."""
    items = await collect(ResponseStream.for_messages(FakeTransport([{"type": "thinking_delta"}])))
    assert items[0].ok
    assert items[0].value == UnknownEvent(type="thinking_delta")


@pytest.mark.asyncio
async def test_error_event_is_a_value():
    """Server error events are decoded values, not failed items."""
    payload = {"type": "error", "error": {"type": "rate_limit_error", "message": "Slow down"}}
    items = await collect(ResponseStream.for_messages(FakeTransport([payload])))
    assert items[0].ok
    assert isinstance(items[0].value, ErrorEvent)


@pytest.mark.asyncio
async def test_transport_failure_ends_stream():
    """A transport exception becomes one TransportError item and ends the stream."""
    cause = ConnectionResetError("peer went away")
    transport = FakeTransport([{"type": "ping"}], fail_with=cause)
    items = await collect(ResponseStream.for_messages(transport))

    assert len(items) == 2
    assert items[0].ok
    error = items[1].error
    assert isinstance(error, TransportError)
    assert error.cause is cause
    assert error.__cause__ is cause
    assert transport.closed


@pytest.mark.asyncio
async def test_transport_error_passes_through_unchanged():
    """TransportErrors raised by the source are reported as-is."""
    failure = TransportError("HTTP 529")
    items = await collect(ResponseStream.for_messages(FakeTransport([], fail_with=failure)))
    assert len(items) == 1
    assert items[0].error is failure


@pytest.mark.asyncio
async def test_single_consumption(stream_payloads):
    """A stream cannot be replayed."""
    stream = ResponseStream.for_messages(FakeTransport(stream_payloads))
    await collect(stream)
    with pytest.raises(RuntimeError):
        await collect(stream)


@pytest.mark.asyncio
async def test_close_releases_transport(stream_payloads):
    """Abandoning a stream closes the source and produces nothing further."""
    transport = FakeTransport(stream_payloads)
    seen = []
    async with ResponseStream.for_messages(transport) as stream:
        async for item in stream:
            seen.append(item)
            if len(seen) == 2:
                break

    assert len(seen) == 2
    assert transport.closed
    assert transport.delivered == 2
    assert stream.closed


@pytest.mark.asyncio
async def test_close_before_iteration(stream_payloads):
    """Closing an unread stream closes the source and yields nothing."""
    transport = FakeTransport(stream_payloads)
    stream = ResponseStream.for_messages(transport)
    await stream.aclose()

    assert transport.closed
    assert await collect(stream) == []
    assert transport.delivered == 0


@pytest.mark.asyncio
async def test_close_from_another_task(stream_payloads):
    """Closing while another task waits on the source releases it and ends the stream."""
    transport = GatedTransport(stream_payloads)
    stream = ResponseStream.for_messages(transport)
    seen = []

    async def consume():
        async for item in stream:
            seen.append(item)

    consumer = asyncio.create_task(consume())
    await transport.waiting.wait()

    await stream.aclose()
    assert transport.closed
    assert stream.closed

    # The pending read still returns a payload, which must not be yielded.
    transport.release.set()
    await asyncio.wait_for(consumer, timeout=1)

    assert len(seen) == 1
    assert transport.delivered == 2


@pytest.mark.asyncio
async def test_close_from_another_task_with_generator_source(stream_payloads):
    """A generator source paused mid-read is finalized by the consuming task."""
    waiting = asyncio.Event()
    release = asyncio.Event()
    finalized = []

    async def events():
        try:
            yield stream_payloads[0]
            waiting.set()
            await release.wait()
            yield stream_payloads[1]
            yield stream_payloads[2]
        finally:
            finalized.append(True)

    stream = ResponseStream.for_messages(events())
    seen = []

    async def consume():
        async for item in stream:
            seen.append(item)

    consumer = asyncio.create_task(consume())
    await waiting.wait()

    await stream.aclose()
    release.set()
    await asyncio.wait_for(consumer, timeout=1)

    assert len(seen) == 1
    assert finalized == [True]


@pytest.mark.asyncio
async def test_async_generator_source():
    """Plain async generators work as sources."""
    async def lines():
        yield '{"completion": " Hello", "stop_reason": null}'
        yield '{"completion": " world", "stop_reason": "stop_sequence"}'

    items = await collect(ResponseStream.for_completions(lines()))

    assert [item.unwrap() for item in items] == [
        CompleteResponse(completion=" Hello"),
        CompleteResponse(completion=" world", stop_reason=StopReason.STOP_SEQUENCE),
    ]


def test_stream_item():
    """Items are either ok with a value or failed with an error."""
    ok = StreamItem(value=PingEvent())
    assert ok.ok
    assert ok.unwrap() == PingEvent()

    failed = StreamItem(error=SchemaError("bad"))
    assert not failed.ok
    with pytest.raises(SchemaError):
        failed.unwrap()
