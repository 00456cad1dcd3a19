import logging

from src.roster_tracker.roster_tracker.attendees.live import LiveQueryHub, PendingMutations


def test_subscribe_pushes_current_result_then_every_publish():
    hub = LiveQueryHub()
    state = {"n": 0}
    seen = []

    hub.subscribe(lambda: state["n"], seen.append)
    state["n"] = 5
    hub.publish()

    assert seen == [0, 5]


def test_subscribe_without_initial_delivery():
    hub = LiveQueryHub()
    seen = []

    hub.subscribe(lambda: "x", seen.append, initial=False)
    assert seen == []

    hub.publish()
    assert seen == ["x"]


def test_cancelled_subscription_stops_receiving():
    hub = LiveQueryHub()
    seen = []

    sub = hub.subscribe(lambda: 1, seen.append)
    assert hub.subscriber_count == 1

    sub.cancel()
    sub.cancel()
    hub.publish()

    assert hub.subscriber_count == 0
    assert seen == [1]


def test_failing_subscriber_does_not_block_others(caplog):
    hub = LiveQueryHub()
    seen = []

    def broken(_):
        raise RuntimeError("listener gone")

    hub.subscribe(lambda: 1, broken, initial=False)
    hub.subscribe(lambda: 2, seen.append, initial=False)

    with caplog.at_level(logging.ERROR):
        hub.publish()

    assert seen == [2]
    assert "Live query delivery failed" in caplog.text


def test_pending_markers_are_counted_per_record():
    pending = PendingMutations()

    with pending.track([1, 2]):
        with pending.track([1]):
            assert pending.snapshot() == frozenset({1, 2})
        assert pending.is_pending(1)

    assert pending.snapshot() == frozenset()


def test_pending_markers_are_released_on_error():
    pending = PendingMutations()

    try:
        with pending.track([7]):
            raise ValueError("write failed")
    except ValueError:
        pass

    assert not pending.is_pending(7)
