"""Tests for the change notification channel."""

from ledgerkit.notifications import ACCOUNT_CREATED, ChangeEvent, ChangeNotifier


def test_publish_reaches_subscribers():
    notifier = ChangeNotifier()
    received = []
    notifier.subscribe(received.append)

    event = notifier.publish(ACCOUNT_CREATED, [3, 4])

    assert received == [event]
    assert isinstance(event, ChangeEvent)
    assert event.kind == ACCOUNT_CREATED
    assert event.entity_ids == (3, 4)
    assert event.occurred_at is not None


def test_unsubscribe():
    notifier = ChangeNotifier()
    received = []
    unsubscribe = notifier.subscribe(received.append)

    unsubscribe()
    unsubscribe()
    notifier.publish(ACCOUNT_CREATED, [1])

    assert received == []


def test_failing_subscriber_does_not_block_others():
    notifier = ChangeNotifier()
    received = []

    def broken(event):
        raise RuntimeError("subscriber bug")

    notifier.subscribe(broken)
    notifier.subscribe(received.append)

    notifier.publish(ACCOUNT_CREATED, [1])

    assert [event.entity_ids for event in received] == [(1,)]
