import asyncio
import logging
from collections import defaultdict
from typing import Any, AsyncGenerator, DefaultDict

from checkgate.model.topic_policy import DropPolicyEnum, TopicPolicyModel
from checkgate.util.pubsub.base import PubSub
from checkgate.util.pubsub.pubsub_topic import PubSubTopic

logger = logging.getLogger("InMemoryPubSub")


class InMemoryPubSub(PubSub):
    """
    In-process PubSub with one bounded queue per subscriber.

    - publish never blocks (put_nowait)
    - a full queue is handled by the topic's drop policy
    - dropped messages are counted per topic
    """

    def __init__(self) -> None:
        self._topic_subscribers: DefaultDict[PubSubTopic, list[asyncio.Queue]] = defaultdict(list)
        self._topic_policy: dict[PubSubTopic, TopicPolicyModel] = {}
        self._dropped: DefaultDict[PubSubTopic, int] = defaultdict(int)

    def set_topic_policy_model(self, topic: PubSubTopic, policy: TopicPolicyModel) -> None:
        self._topic_policy[topic] = policy

    def get_dropped_count(self, topic: PubSubTopic) -> int:
        return int(self._dropped.get(topic, 0))

    def subscriber_count(self, topic: PubSubTopic) -> int:
        return len(self._topic_subscribers.get(topic, []))

    async def publish(self, topic: PubSubTopic, data: Any) -> None:
        queues = self._topic_subscribers.get(topic)
        if not queues:
            return

        policy = self._get_policy(topic)

        for queue in list(queues):
            if self._offer(queue, data, policy.drop_policy):
                continue
            self._dropped[topic] += 1
            logger.debug(f"[PubSub] Dropped message on topic={topic.value} ({policy.drop_policy.value})")

    async def subscribe(self, topic: PubSubTopic) -> AsyncGenerator[Any, None]:
        policy = self._get_policy(topic)
        queue: asyncio.Queue = asyncio.Queue(maxsize=policy.queue_maxsize)
        self._topic_subscribers[topic].append(queue)

        try:
            while True:
                yield await queue.get()
        finally:
            subs = self._topic_subscribers.get(topic, [])
            if queue in subs:
                subs.remove(queue)

    async def close(self) -> None:
        self._topic_subscribers.clear()
        self._topic_policy.clear()
        self._dropped.clear()

    @staticmethod
    def _offer(queue: asyncio.Queue, data: Any, drop_policy: DropPolicyEnum) -> bool:
        """Enqueue data; False when a message (old or new) had to be dropped."""
        try:
            queue.put_nowait(data)
            return True
        except asyncio.QueueFull:
            if drop_policy == DropPolicyEnum.DROP_NEWEST:
                return False

        try:
            queue.get_nowait()
        except asyncio.QueueEmpty:
            queue.put_nowait(data)
            return True
        queue.put_nowait(data)
        return False

    def _get_policy(self, topic: PubSubTopic) -> TopicPolicyModel:
        return self._topic_policy.get(topic, TopicPolicyModel())
