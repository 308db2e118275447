import json
import logging
from typing import Any, Dict, Protocol

from redis.asyncio import Redis


def game_channel(game_id: str) -> str:
    return f"game:{game_id}"


class GameNotifier(Protocol):
    async def broadcast(self, game_id: str, payload: Dict[str, Any]) -> None: ...


class RedisNotifier:
    """Publish game snapshots to every subscriber of the game's channel."""

    def __init__(self, redis: Redis):
        self.redis = redis

    async def broadcast(self, game_id: str, payload: Dict[str, Any]) -> None:
        channel = game_channel(game_id)
        logging.info(f"Broadcasting message to channel: {channel}")
        await self.redis.publish(channel, json.dumps(payload))
