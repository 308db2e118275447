"""DB-backed GameStore.

- Game actions should not touch DB sessions directly; they call this module.
- This layer owns session boundaries: one session per store call.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from thegame.converter import DataConverter
from thegame.crud import CreateData, DeleteData, ReadData
from thegame.domain.game import Game

data_converter = DataConverter()


class SqlGameStore:
    def __init__(self, Session: async_sessionmaker):
        self.Session: async_sessionmaker = Session

    async def find(self, game_id: str) -> Optional[Game]:
        async with self.Session() as session:
            game_schema = await ReadData.read_game_data(game_id, session)
        if game_schema is None:
            return None
        return data_converter.convert_gameschema_to_game(game_schema)

    async def save(self, game: Game) -> None:
        async with self.Session() as session:
            await CreateData.save_game_data(data_converter.convert_game_to_gameschema(game), session)

    async def delete(self, game_id: str) -> None:
        async with self.Session() as session:
            await DeleteData.delete_game_data(game_id, session)

    async def delete_expired(self, now: Optional[datetime] = None) -> int:
        """Delete games past their ttl. Scheduled from main.py."""
        now = now or datetime.now(timezone.utc)
        async with self.Session() as session:
            deleted = await DeleteData.delete_expired_game_data(int(now.timestamp()), session)
        if deleted:
            logging.info(f"Deleted {deleted} expired games")
        return deleted
