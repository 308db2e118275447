from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class GameSchema(BaseModel):
    game_id: str
    data: Dict[str, Any]
    status: str
    ttl: Optional[int] = None
    updated_at: datetime

    class Config:
        from_attributes = True
