import gc
import pytest
from enum import Enum, auto
from runtime.core.events import EventBus, Event, DialogueEvent

class MockEvent(Enum):
    TEST_EVENT = auto()
    OTHER_EVENT = auto()

def test_event_bus_subscribe_publish(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT, data="test")

    assert len(received) == 1
    assert received[0].type == MockEvent.TEST_EVENT
    assert received[0]["data"] == "test"
    assert received[0].get("missing", 5) == 5

def test_event_bus_unsubscribe(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.unsubscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 0

def test_event_priority(event_bus):
    order = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("low"), priority=1, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("high"), priority=10, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("normal"), priority=5, weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["high", "normal", "low"]

def test_equal_priority_keeps_subscription_order(event_bus):
    order = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("first"), weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("second"), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["first", "second"]

def test_event_consumption(event_bus):
    received = []

    def consumer(event):
        received.append("consumer")
        event.consume()

    def later_handler(event):
        received.append("later")

    event_bus.subscribe(MockEvent.TEST_EVENT, consumer, priority=10)
    event_bus.subscribe(MockEvent.TEST_EVENT, later_handler, priority=5)

    event = event_bus.publish(MockEvent.TEST_EVENT)

    assert received == ["consumer"]
    assert event.consumed

def test_one_shot_handler(event_bus):
    received = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: received.append(e), one_shot=True, weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 1

def test_weak_handler_is_dropped(event_bus):
    received = []

    class Listener:
        def on_event(self, event):
            received.append(event)

    listener = Listener()
    event_bus.subscribe(MockEvent.TEST_EVENT, listener.on_event)
    assert event_bus.has_subscribers(MockEvent.TEST_EVENT)

    del listener
    gc.collect()

    event_bus.publish(MockEvent.TEST_EVENT)
    assert received == []
    assert not event_bus.has_subscribers(MockEvent.TEST_EVENT)

def test_nested_publish_is_queued(event_bus):
    order = []

    def outer(event):
        order.append("outer-start")
        event_bus.publish(MockEvent.OTHER_EVENT)
        order.append("outer-end")

    def inner(event):
        order.append("inner")

    event_bus.subscribe(MockEvent.TEST_EVENT, outer)
    event_bus.subscribe(MockEvent.OTHER_EVENT, inner)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["outer-start", "outer-end", "inner"]

def test_failing_handler_does_not_stop_others(event_bus, caplog):
    received = []

    def broken(event):
        raise RuntimeError("boom")

    def healthy(event):
        received.append(event)

    event_bus.subscribe(DialogueEvent.DIALOGUE_ENDED, broken, priority=1)
    event_bus.subscribe(DialogueEvent.DIALOGUE_ENDED, healthy)

    event_bus.publish(DialogueEvent.DIALOGUE_ENDED)

    assert len(received) == 1
    assert "Error in event handler" in caplog.text

def test_clear(event_bus):
    def handler(event):
        pass

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.subscribe(MockEvent.OTHER_EVENT, handler)

    event_bus.clear(MockEvent.TEST_EVENT)
    assert not event_bus.has_subscribers(MockEvent.TEST_EVENT)
    assert event_bus.has_subscribers(MockEvent.OTHER_EVENT)

    event_bus.clear()
    assert not event_bus.has_subscribers(MockEvent.OTHER_EVENT)

def test_publish_event_object(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event = Event(type=MockEvent.TEST_EVENT, data={"x": 1})
    event_bus.publish_event(event)

    assert received == [event]
