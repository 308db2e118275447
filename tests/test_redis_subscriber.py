"""Tests for game broadcasts and the SSE relay, against fake redis objects."""
import asyncio
import json

from thegame.domain.card import Card
from thegame.domain.game import Game
from thegame.domain.player import Player
from thegame.notifier import RedisNotifier, game_channel
from thegame.redis_subscriber import RedisSubscriber, format_sse
from thegame.services.game_store import InMemoryGameStore

from conftest import CREATED_AT


class FakePubSub:
    def __init__(self, messages):
        self.messages = list(messages)
        self.subscribed = []
        self.unsubscribed = []
        self.closed = False

    async def subscribe(self, channel):
        self.subscribed.append(channel)

    async def unsubscribe(self, channel):
        self.unsubscribed.append(channel)

    async def close(self):
        self.closed = True

    async def get_message(self, ignore_subscribe_messages=False, timeout=None):
        return self.messages.pop(0)


class FakeRedis:
    def __init__(self, messages=()):
        self.published = []
        self._pubsub = FakePubSub(messages)

    async def publish(self, channel, message):
        self.published.append((channel, message))

    def pubsub(self):
        return self._pubsub


def _collect(generator):
    async def main():
        return [event async for event in generator]

    return asyncio.run(main())


def test_broadcast_publishes_json_on_the_game_channel():
    redis = FakeRedis()
    asyncio.run(RedisNotifier(redis).broadcast("ABC123", {"id": "ABC123", "status": "playing"}))

    assert game_channel("ABC123") == "game:ABC123"
    assert redis.published == [("game:ABC123", '{"id": "ABC123", "status": "playing"}')]


def test_format_sse():
    assert format_sse("game_update", "{}") == "event: game_update\ndata: {}\n\n"


def test_stream_sends_stored_state_then_relays_until_ended():
    store = InMemoryGameStore()
    store.games["ABC123"] = Game(
        id="ABC123",
        players=(Player(id="p1", name="Ana", hand=(Card.for_rank(9),)),),
        created_by="p1",
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )
    update = json.dumps({"id": "ABC123", "status": "playing"})
    ended = json.dumps({"game_id": "ABC123", "status": "ended"})
    redis = FakeRedis(
        [
            None,
            {"type": "message", "data": update},
            {"type": "message", "data": ended},
        ]
    )

    events = _collect(RedisSubscriber(store, "ABC123").event_generator(redis))

    assert len(events) == 3
    assert events[0].startswith("event: game_update\ndata: ")
    assert json.loads(events[0].split("data: ", 1)[1])["players"][0]["name"] == "Ana"
    assert events[1] == format_sse("game_update", update)
    assert events[2] == format_sse("game_update", ended)
    assert redis._pubsub.subscribed == ["game:ABC123"]
    assert redis._pubsub.unsubscribed == ["game:ABC123"]
    assert redis._pubsub.closed


def test_stream_of_unknown_game_only_relays():
    ended = json.dumps({"game_id": "NOPE00", "status": "ended"})
    redis = FakeRedis([{"type": "message", "data": ended}])

    events = _collect(RedisSubscriber(InMemoryGameStore(), "NOPE00").event_generator(redis))
    assert events == [format_sse("game_update", ended)]
