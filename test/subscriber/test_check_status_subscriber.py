import asyncio
import threading

import pytest

from checkgate.model.enum.check_status_enum import CheckStatus
from checkgate.util.pubsub.in_memory_pubsub import InMemoryPubSub
from checkgate.util.pubsub.pubsub_topic import PubSubTopic
from checkgate.util.pubsub.subscriber.check_status_subscriber import CheckStatusSubscriber
from checkgate.util.status_listener import StatusChangeListener


class RecordingListener:
    def __init__(self):
        self.received = []

    def on_status_changed(self, status):
        self.received.append(status)


class FailingListener:
    def on_status_changed(self, status):
        raise RuntimeError("boom")


class TestCheckStatusSubscriberDelivery:

    def test_recording_listener_matches_protocol(self):
        assert isinstance(RecordingListener(), StatusChangeListener)

    def test_deliver_to_all_listeners_in_order(self):
        # Arrange
        subscriber = CheckStatusSubscriber(InMemoryPubSub())
        first, second = RecordingListener(), RecordingListener()
        subscriber.add_status_listener(first)
        subscriber.add_status_listener(second)

        # Act
        subscriber.deliver(CheckStatus.FAILED)
        subscriber.deliver(CheckStatus.PASSED)

        # Assert
        assert first.received == [CheckStatus.FAILED, CheckStatus.PASSED]
        assert second.received == [CheckStatus.FAILED, CheckStatus.PASSED]

    def test_duplicate_registration_ignored(self):
        subscriber = CheckStatusSubscriber(InMemoryPubSub())
        listener = RecordingListener()

        subscriber.add_status_listener(listener)
        subscriber.add_status_listener(listener)
        subscriber.deliver(CheckStatus.FAILED)

        assert subscriber.listener_count == 1
        assert listener.received == [CheckStatus.FAILED]

    def test_removed_listener_gets_nothing(self):
        subscriber = CheckStatusSubscriber(InMemoryPubSub())
        listener = RecordingListener()
        subscriber.add_status_listener(listener)

        subscriber.remove_status_listener(listener)
        subscriber.deliver(CheckStatus.FAILED)

        assert listener.received == []

    def test_remove_unknown_listener_is_noop(self):
        subscriber = CheckStatusSubscriber(InMemoryPubSub())

        subscriber.remove_status_listener(RecordingListener())

        assert subscriber.listener_count == 0

    def test_failing_listener_does_not_block_others(self):
        subscriber = CheckStatusSubscriber(InMemoryPubSub())
        listener = RecordingListener()
        subscriber.add_status_listener(FailingListener())
        subscriber.add_status_listener(listener)

        subscriber.deliver(CheckStatus.FAILED)

        assert listener.received == [CheckStatus.FAILED]

    def test_listener_removing_another_during_delivery(self):
        subscriber = CheckStatusSubscriber(InMemoryPubSub())
        victim = RecordingListener()

        class Remover:
            def on_status_changed(self, status):
                subscriber.remove_status_listener(victim)

        subscriber.add_status_listener(Remover())
        subscriber.add_status_listener(victim)

        subscriber.deliver(CheckStatus.FAILED)

        assert victim.received == []

    def test_remove_waits_for_inflight_delivery(self):
        # Arrange
        subscriber = CheckStatusSubscriber(InMemoryPubSub())
        entered = threading.Event()
        release = threading.Event()
        finished = []

        class SlowListener:
            def on_status_changed(self, status):
                entered.set()
                release.wait(timeout=2)
                finished.append(status)

        listener = SlowListener()
        subscriber.add_status_listener(listener)
        delivery = threading.Thread(target=subscriber.deliver, args=(CheckStatus.FAILED,))
        delivery.start()
        assert entered.wait(timeout=2)

        # Act
        remover = threading.Thread(target=subscriber.remove_status_listener, args=(listener,))
        remover.start()
        remover.join(timeout=0.05)
        blocked = remover.is_alive()
        release.set()
        delivery.join(timeout=2)
        remover.join(timeout=2)

        # Assert
        assert blocked is True
        assert finished == [CheckStatus.FAILED]
        assert subscriber.listener_count == 0


class TestCheckStatusSubscriberRun:

    @pytest.mark.asyncio
    async def test_run_forwards_published_statuses(self):
        # Arrange
        pubsub = InMemoryPubSub()
        subscriber = CheckStatusSubscriber(pubsub)
        listener = RecordingListener()
        subscriber.add_status_listener(listener)
        task = asyncio.create_task(subscriber.run())
        await asyncio.sleep(0.01)

        # Act
        await pubsub.publish(PubSubTopic.CHECK_STATUS, CheckStatus.FAILED)
        await pubsub.publish(PubSubTopic.CHECK_STATUS, "PASSED")
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        # Assert
        assert listener.received == [CheckStatus.FAILED, "PASSED"]
