from purecon.core.events import EventBus


def test_event_bus_invokes_subscribers():
    bus = EventBus()
    received = []
    bus.subscribe("topic", lambda payload: received.append(payload))
    bus.emit("topic", 42)
    assert received == [42]


def test_failing_handler_does_not_block_others():
    bus = EventBus()
    received = []

    def broken(payload):
        raise RuntimeError("boom")

    bus.subscribe("topic", broken)
    bus.subscribe("topic", received.append)
    bus.emit("topic", "payload")
    assert received == ["payload"]


def test_unsubscribe():
    bus = EventBus()
    received = []
    bus.subscribe("topic", received.append)
    bus.unsubscribe("topic", received.append)
    bus.emit("topic", 1)
    assert received == []
