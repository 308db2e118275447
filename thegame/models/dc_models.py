from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from thegame.domain.card import MAX_RANK, MIN_RANK, Suit
from thegame.domain.game import Difficulty, GameStatus, PileId


class CardModel(BaseModel):
    rank: int = Field(ge=MIN_RANK, le=MAX_RANK)
    suit: Suit


class CreateGameModel(BaseModel):
    player_name: str
    player_id: Optional[str] = None
    difficulty: Difficulty = Difficulty.easy


class JoinGameModel(BaseModel):
    player_name: str
    player_id: Optional[str] = None


class PlayCardModel(BaseModel):
    player_id: str
    card: CardModel
    pile_id: PileId


class PlayerActionModel(BaseModel):
    player_id: str


class PilePreferenceModel(BaseModel):
    player_id: str
    pile_id: Optional[PileId] = None  # None clears the hint


class StartingPlayerModel(BaseModel):
    player_id: str  # requester, must be the creator
    starting_player_id: str


class PlayerStateModel(BaseModel):
    id: str
    name: str
    hand: List[CardModel]
    is_connected: bool


class PilesModel(BaseModel):
    ascending1: List[CardModel]
    ascending2: List[CardModel]
    descending1: List[CardModel]
    descending2: List[CardModel]


class GameStateModel(BaseModel):
    """Full game snapshot sent to every subscriber of a game.

    Hands are not redacted here.
    """

    id: str
    players: List[PlayerStateModel]
    piles: PilesModel
    deck: List[CardModel]
    discard_pile: List[CardModel]
    current_turn: Optional[str]
    cards_played_this_turn: int
    created_by: str
    status: GameStatus
    difficulty: Difficulty
    pile_preferences: Dict[str, Optional[PileId]]
    created_at: datetime
    updated_at: datetime
    ttl: Optional[int] = None
    remaining_cards: int
    minimum_cards_to_play: int


class GameEndedModel(BaseModel):
    game_id: str
    status: str = "ended"
