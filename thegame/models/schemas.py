from datetime import datetime

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column
from sqlalchemy.types import JSON, BigInteger, DateTime, String


class Base(DeclarativeBase):
    pass


class GameRecord(Base):
    __tablename__ = "games"
    game_id = Column(String(16), primary_key=True)
    data = Column(JSON, nullable=False)  # full Game snapshot, see DataConverter
    status = Column(String(16), nullable=False)
    ttl = Column(BigInteger, nullable=True, index=True)  # epoch seconds
    updated_at = Column(DateTime(timezone=True), default=datetime.now)
