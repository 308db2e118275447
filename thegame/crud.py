import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from thegame.models.schema_models import GameSchema
from thegame.models.schemas import Base, GameRecord


class CreateData:
    @staticmethod
    async def create_table(engine) -> None:
        """Create the games table if not exists"""
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @staticmethod
    async def save_game_data(game: GameSchema, session: AsyncSession) -> None:
        """Insert the game row, or overwrite it if the game already exists

        Args:
            game (GameSchema): Row to store
        """
        async with session:
            try:
                record = GameRecord(
                    game_id=game.game_id,
                    data=game.data,
                    status=game.status,
                    ttl=game.ttl,
                    updated_at=game.updated_at,
                )
                await session.merge(record)
                await session.commit()
            except Exception as e:
                logging.error(f"Failed to save game data: {e}")
                raise


class ReadData:
    @staticmethod
    async def read_game_data(game_id: str, session: AsyncSession) -> GameSchema | None:
        """Read game data from database

        Args:
            game_id (str): To identify the game

        Returns:
            GameSchema: The stored row, None if the game does not exist
        """
        async with session:
            try:
                stmt = select(GameRecord).where(GameRecord.game_id == game_id)
                result = await session.execute(stmt)
                result = result.scalars().first()

                if result is None:
                    return None

                return GameSchema.model_validate(result)
            except Exception as e:
                logging.error(f"Failed to read game data: {e}")
                raise


class DeleteData:
    @staticmethod
    async def delete_game_data(game_id: str, session: AsyncSession) -> None:
        async with session:
            try:
                stmt = delete(GameRecord).where(GameRecord.game_id == game_id)
                await session.execute(stmt)
                await session.commit()
            except Exception as e:
                logging.error(f"Failed to delete game data: {e}")
                raise

    @staticmethod
    async def delete_expired_game_data(now_epoch: int, session: AsyncSession) -> int:
        """Delete every game whose ttl has passed

        Args:
            now_epoch (int): Current time in epoch seconds

        Returns:
            int: Number of deleted games
        """
        async with session:
            try:
                stmt = delete(GameRecord).where(
                    GameRecord.ttl.is_not(None), GameRecord.ttl < now_epoch
                )
                result = await session.execute(stmt)
                await session.commit()
                return result.rowcount
            except Exception as e:
                logging.error(f"Failed to delete expired game data: {e}")
                raise
