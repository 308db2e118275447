from sqlalchemy.ext.asyncio import create_async_engine

from thegame.load_secrets import database_url

if database_url.startswith("postgresql"):
    engine = create_async_engine(database_url, pool_size=20, max_overflow=20)
else:
    engine = create_async_engine(url=database_url, echo=False)
