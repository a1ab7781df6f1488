from tilegames.events.bus import EventBus


def test_event_bus_emit_subscribe():
    bus = EventBus()
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe("test", handler)
    bus.emit("test", value=42, msg="hello")

    assert received["value"] == 42
    assert received["msg"] == "hello"


def test_unsubscribe_and_unknown_events():
    bus = EventBus()
    calls = []

    def handler(sender, **kwargs):
        calls.append(kwargs)

    bus.emit("nobody_listens", value=1)
    bus.subscribe("ping", handler)
    bus.emit("ping")
    bus.unsubscribe("ping", handler)
    bus.emit("ping")
    bus.unsubscribe("never_subscribed", handler)
    assert calls == [{}]
