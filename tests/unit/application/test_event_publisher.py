"""
Unit tests for EventPublisher
"""

from datetime import datetime, timezone

from qrshare.application.event_publisher import EventPublisher
from qrshare.domain.events import (
    DomainEvent,
    ImageDeletedEvent,
    ImageUploadedEvent,
)

NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _uploaded():
    return ImageUploadedEvent("img1", NOW, owner_id="u1", storage_path="u1/a.jpg", size_bytes=1)


def _deleted():
    return ImageDeletedEvent("img1", NOW, owner_id="u1", storage_path="u1/a.jpg")


class TestEventPublisher:
    def test_dispatches_to_exact_type(self):
        publisher = EventPublisher()
        received = []
        publisher.subscribe(ImageUploadedEvent, received.append)

        publisher.publish(_uploaded())
        publisher.publish(_deleted())

        assert [type(e) for e in received] == [ImageUploadedEvent]

    def test_base_type_receives_all_events(self):
        publisher = EventPublisher()
        received = []
        publisher.subscribe(DomainEvent, received.append)

        publisher.publish(_uploaded())
        publisher.publish(_deleted())

        assert len(received) == 2

    def test_multiple_handlers_all_called(self):
        publisher = EventPublisher()
        first, second = [], []
        publisher.subscribe(ImageUploadedEvent, first.append)
        publisher.subscribe(ImageUploadedEvent, second.append)

        publisher.publish(_uploaded())

        assert len(first) == len(second) == 1

    def test_no_handlers_is_fine(self):
        EventPublisher().publish(_uploaded())

    def test_handler_error_is_logged_and_isolated(self, caplog):
        publisher = EventPublisher()
        received = []

        def broken(event):
            raise RuntimeError("handler exploded")

        publisher.subscribe(ImageUploadedEvent, broken)
        publisher.subscribe(ImageUploadedEvent, received.append)

        publisher.publish(_uploaded())

        assert len(received) == 1
        assert "handler exploded" in caplog.text

    def test_specific_handlers_run_before_base_handlers(self):
        publisher = EventPublisher()
        calls = []
        publisher.subscribe(DomainEvent, lambda e: calls.append("base"))
        publisher.subscribe(ImageUploadedEvent, lambda e: calls.append("specific"))

        publisher.publish(_uploaded())

        assert calls == ["specific", "base"]
