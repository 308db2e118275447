"""Store boundary for Game aggregates.

Orchestration only talks to a GameStore. SqlGameStore (game_db.py) backs it
with the database; InMemoryGameStore keeps games in a dict.
"""

from typing import Dict, Optional, Protocol

from thegame.domain.game import Game


class GameStore(Protocol):
    async def find(self, game_id: str) -> Optional[Game]: ...

    async def save(self, game: Game) -> None: ...

    async def delete(self, game_id: str) -> None: ...


class InMemoryGameStore:
    def __init__(self):
        self.games: Dict[str, Game] = {}

    async def find(self, game_id: str) -> Optional[Game]:
        return self.games.get(game_id)

    async def save(self, game: Game) -> None:
        self.games[game.id] = game

    async def delete(self, game_id: str) -> None:
        self.games.pop(game_id, None)
