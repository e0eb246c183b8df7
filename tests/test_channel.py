import logging

from swr import Channel


def test_publish_without_listeners_is_silent():
    channel = Channel[int]()
    assert channel.publish("k", 1) == 0


def test_every_listener_receives_payload(recorder):
    channel = Channel[int]()
    other = []
    channel.subscribe("k", recorder)
    channel.subscribe("k", other.append)
    channel.subscribe("other-key", other.append)

    delivered = channel.publish("k", 7)

    assert delivered == 2
    assert recorder.events == [7]
    assert other == [7]


def test_unsubscribe_handle_and_method(recorder):
    channel = Channel[int]()
    off = channel.subscribe("k", recorder)

    off()
    off()
    channel.publish("k", 1)

    assert recorder.events == []
    assert channel.listener_count("k") == 0

    channel.subscribe("k", recorder)
    channel.unsubscribe("k", recorder)
    channel.unsubscribe("k", recorder)
    channel.publish("k", 2)
    assert recorder.events == []


def test_listener_may_unsubscribe_itself_during_publish(recorder):
    channel = Channel[int]()
    offs = []

    def once(value: int) -> None:
        recorder(value)
        offs[0]()

    offs.append(channel.subscribe("k", once))
    channel.publish("k", 1)
    channel.publish("k", 2)

    assert recorder.events == [1]


def test_raising_listener_does_not_stop_delivery(recorder, caplog):
    channel = Channel[int]("data")

    def broken(value: int) -> None:
        raise RuntimeError("listener bug")

    channel.subscribe("k", broken)
    channel.subscribe("k", recorder)

    with caplog.at_level(logging.ERROR, logger="swr.channel"):
        channel.publish("k", 3)

    assert recorder.events == [3]
    assert "listener for 'k' raised" in caplog.text
