"""Unit tests for core event bus module."""
import logging

import pytest

from stratlab.core.event_bus import EventBus


@pytest.fixture
def bus():
    """Fixture providing a fresh EventBus instance."""
    return EventBus()


class TestEventBusBasics:
    """Test basic EventBus functionality."""

    async def test_subscribe_and_emit(self, bus):
        received = []

        async def handler(data):
            received.append(data)

        bus.subscribe("simulation.status", handler)
        await bus.emit("simulation.status", {"status": "completed"})
        assert received == [{"status": "completed"}]

    async def test_emit_without_data(self, bus):
        received = []

        async def handler(data):
            received.append(data)

        bus.subscribe("event", handler)
        await bus.emit("event")
        assert received == [None]

    async def test_emit_without_subscribers_is_noop(self, bus):
        await bus.emit("nobody_listens", 1)

    async def test_multiple_subscribers_all_receive(self, bus):
        a, b = [], []

        async def handler_a(data):
            a.append(data)

        async def handler_b(data):
            b.append(data)

        bus.subscribe("e", handler_a)
        bus.subscribe("e", handler_b)
        await bus.emit("e", 7)
        assert a == [7]
        assert b == [7]

    async def test_events_are_isolated(self, bus):
        received = []

        async def handler(data):
            received.append(data)

        bus.subscribe("one", handler)
        await bus.emit("two", "x")
        assert received == []


class TestEventBusSubscriptions:
    def test_subscribe_non_callable_raises(self, bus):
        with pytest.raises(TypeError):
            bus.subscribe("e", "not a handler")

    async def test_unsubscribe(self, bus):
        received = []

        async def handler(data):
            received.append(data)

        bus.subscribe("e", handler)
        assert bus.subscriber_count("e") == 1
        bus.unsubscribe("e", handler)
        assert bus.subscriber_count("e") == 0
        await bus.emit("e", 1)
        assert received == []

    def test_unsubscribe_unknown_handler_is_noop(self, bus):
        async def handler(data):
            pass

        bus.unsubscribe("e", handler)
        assert bus.subscriber_count("e") == 0


class TestEventBusErrorIsolation:
    async def test_failing_subscriber_does_not_block_others(self, bus, caplog):
        caplog.set_level(logging.ERROR, logger="stratlab")
        received = []

        async def broken(data):
            raise RuntimeError("subscriber bug")

        async def healthy(data):
            received.append(data)

        bus.subscribe("e", broken)
        bus.subscribe("e", healthy)
        await bus.emit("e", "payload")

        assert received == ["payload"]
        assert "Subscriber broken failed for event 'e'" in caplog.text
