"""Tests for shared schemas: service location and event variants."""

import pytest
from pydantic import ValidationError

from node_bridge.models.schemas import (
    EventEnvelope,
    EventKind,
    KnownEvent,
    PostPublishedData,
    ServiceLocation,
    UnknownEvent,
    build_envelope,
    parse_event,
)


class TestServiceLocation:

    def test_base_url_derived_from_port(self):
        assert ServiceLocation(port=4567).base_url == "http://localhost:4567"

    def test_immutable(self):
        location = ServiceLocation(port=3000)
        with pytest.raises(ValidationError):
            location.port = 4000


class TestParseEvent:

    def test_known_event(self):
        event = parse_event(EventEnvelope(event="post_published", data={"id": 5, "title": "Hello"}))
        assert isinstance(event, KnownEvent)
        assert event.kind is EventKind.POST_PUBLISHED
        assert event.payload.title == "Hello"
        assert event.name == "post_published"

    def test_unknown_event_is_explicit_fallback(self):
        event = parse_event(EventEnvelope(event="comment_posted", data={"id": 1}))
        assert isinstance(event, UnknownEvent)
        assert event.name == "comment_posted"
        assert event.data == {"id": 1}

    def test_partial_or_odd_payload_still_accepted(self):
        event = parse_event(EventEnvelope(event="user_registered", data={"id": "not-an-int"}))
        assert isinstance(event, KnownEvent)
        assert event.kind is EventKind.USER_REGISTERED

    @pytest.mark.parametrize("data", [None, [1, 2], "text", 7])
    def test_known_event_with_non_object_data(self, data):
        event = parse_event(EventEnvelope(event="post_published", data=data))
        assert isinstance(event, KnownEvent)
        assert event.payload.title is None

    def test_unknown_event_keeps_raw_data(self):
        event = parse_event(EventEnvelope(event="bulk_sync", data=[1, 2]))
        assert isinstance(event, UnknownEvent)
        assert event.data == [1, 2]

    def test_non_string_event_compared_as_string(self):
        envelope = EventEnvelope(event=42)
        assert envelope.name == "42"
        assert parse_event(envelope).name == "42"

    def test_envelope_requires_event(self):
        with pytest.raises(ValidationError):
            EventEnvelope(data={})


class TestBuildEnvelope:

    def test_post_published(self):
        envelope = build_envelope(EventKind.POST_PUBLISHED, PostPublishedData(id=5, title="Hello"))
        assert envelope.event == "post_published"
        assert envelope.data["id"] == 5
        assert envelope.data["title"] == "Hello"
