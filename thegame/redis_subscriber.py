import json
import logging
from typing import AsyncGenerator

from redis.asyncio import Redis

from thegame.converter import DataConverter
from thegame.notifier import game_channel
from thegame.services.game_store import GameStore

data_converter = DataConverter()


def format_sse(event: str, payload: str) -> str:
    return f"event: {event}\ndata: {payload}\n\n"


class RedisSubscriber:
    """Redis subscriber class to handle SSE events."""

    def __init__(self, store: GameStore, game_id: str):
        """Initialize RedisSubscriber with the game store and game_id."""
        self.store: GameStore = store
        self.game_id: str = game_id

    async def event_generator(self, redis: Redis) -> AsyncGenerator[str, None]:
        """Event generator to handle SSE events.

        The stored state is sent first, then every snapshot published on the
        game's channel is relayed as it arrives.

        Args:
            redis (Redis): Redis connection object.
        """
        channel = game_channel(self.game_id)
        pubsub = redis.pubsub()
        await pubsub.subscribe(channel)
        try:
            game = await self.store.find(self.game_id)
            if game is not None:
                state = data_converter.convert_game_to_statemodel(game)
                yield format_sse("game_update", state.model_dump_json())

            while True:
                msg = await pubsub.get_message(ignore_subscribe_messages=True, timeout=None)
                if msg and msg["type"] == "message":
                    payload = msg["data"]
                    logging.debug(f"Payload: {payload}")
                    yield format_sse("game_update", payload)
                    if json.loads(payload).get("status") == "ended":
                        break
        finally:
            logging.info("Unsubscribing from channel")
            await pubsub.unsubscribe(channel)
            await pubsub.close()
