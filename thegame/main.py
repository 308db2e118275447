import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from thegame.load_secrets import expired_game_sweep_hours, log_level
from thegame.routers import game

scheduler = AsyncIOScheduler()
logging.basicConfig(level=getattr(logging, log_level, logging.INFO))


@asynccontextmanager
async def lifespan(app):
    """Create the games table and schedule the expired-game cleanup.
    This function is called to start the server.
    """
    from thegame.create_engine import engine
    from thegame.crud import CreateData

    await CreateData.create_table(engine)
    store = game.get_game_store()

    # Games are not deleted by the engine itself; expired rows are swept here.
    scheduler.add_job(
        store.delete_expired,
        "interval",
        hours=expired_game_sweep_hours,
    )
    scheduler.start()
    try:
        yield
    finally:
        scheduler.shutdown()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(game.game_router)
