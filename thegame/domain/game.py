"""Game aggregate.

Every transition returns a new Game; nothing mutates an existing instance.
Timestamps are stamped by the caller through ``touch`` so that the
transitions themselves stay clock-free.
"""

from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from thegame.domain.card import Card
from thegame.domain.player import Player


class GameStatus(str, Enum):
    waiting = "waiting"
    playing = "playing"
    finished = "finished"
    abandoned = "abandoned"  # reserved, set only by external collaborators


class Difficulty(str, Enum):
    easy = "easy"
    hard = "hard"


class PileDirection(str, Enum):
    ascending = "ascending"
    descending = "descending"


class PileId(str, Enum):
    ascending1 = "ascending1"
    ascending2 = "ascending2"
    descending1 = "descending1"
    descending2 = "descending2"

    @property
    def direction(self) -> PileDirection:
        if self in (PileId.ascending1, PileId.ascending2):
            return PileDirection.ascending
        return PileDirection.descending


class GamePiles(BaseModel):
    """The four piles. Last element of each tuple is the top card."""

    model_config = ConfigDict(frozen=True)

    ascending1: Tuple[Card, ...] = ()
    ascending2: Tuple[Card, ...] = ()
    descending1: Tuple[Card, ...] = ()
    descending2: Tuple[Card, ...] = ()

    def get(self, pile_id: PileId) -> Tuple[Card, ...]:
        return getattr(self, PileId(pile_id).value)

    def items(self) -> Iterator[Tuple[PileId, Tuple[Card, ...]]]:
        for pile_id in PileId:
            yield pile_id, self.get(pile_id)

    def with_card(self, pile_id: PileId, card: Card) -> "GamePiles":
        pile_id = PileId(pile_id)
        return self.model_copy(update={pile_id.value: self.get(pile_id) + (card,)})

    def total_cards(self) -> int:
        return sum(len(pile) for _, pile in self.items())


class Game(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    players: Tuple[Player, ...] = ()
    piles: GamePiles = GamePiles()
    deck: Tuple[Card, ...] = ()
    discard_pile: Tuple[Card, ...] = ()
    current_turn: Optional[str] = None
    cards_played_this_turn: int = 0
    created_by: str
    status: GameStatus = GameStatus.waiting
    difficulty: Difficulty = Difficulty.easy
    pile_preferences: Dict[str, Optional[PileId]] = {}
    created_at: datetime
    updated_at: datetime
    ttl: Optional[int] = None

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def player_index(self, player_id: str) -> int:
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return -1

    def add_card_to_pile(self, pile_id: PileId, card: Card) -> "Game":
        return self.model_copy(
            update={
                "piles": self.piles.with_card(pile_id, card),
                "cards_played_this_turn": self.cards_played_this_turn + 1,
            }
        )

    def update_turn(self, next_player_id: Optional[str]) -> "Game":
        """Hand the turn to next_player_id and reset the per-turn counter.

        The new current player's pile hint is dropped: nobody hints while acting.
        """
        preferences = {
            player_id: pile_id
            for player_id, pile_id in self.pile_preferences.items()
            if player_id != next_player_id
        }
        return self.model_copy(
            update={
                "current_turn": next_player_id,
                "cards_played_this_turn": 0,
                "pile_preferences": preferences,
            }
        )

    def update_status(self, status: GameStatus) -> "Game":
        return self.model_copy(update={"status": status})

    def add_player(self, player: Player) -> "Game":
        return self.model_copy(update={"players": self.players + (player,)})

    def update_player(self, player_id: str, updater: Callable[[Player], Player]) -> "Game":
        players = tuple(
            updater(player) if player.id == player_id else player for player in self.players
        )
        return self.model_copy(update={"players": players})

    def draw_card_for_player(self, player_id: str) -> "Game":
        """Move the front card of the deck into the player's hand.

        Unchanged when the deck is empty or the player is unknown.
        """
        if not self.deck or self.find_player(player_id) is None:
            return self
        drawn, rest = self.deck[0], self.deck[1:]
        game = self.update_player(player_id, lambda p: p.add_card_to_hand(drawn))
        return game.model_copy(update={"deck": rest})

    def mark_pile_preference(self, player_id: str, pile_id: Optional[PileId]) -> "Game":
        preferences = dict(self.pile_preferences)
        if pile_id is None:
            preferences.pop(player_id, None)
        else:
            preferences[player_id] = PileId(pile_id)
        return self.model_copy(update={"pile_preferences": preferences})

    def touch(self, now: datetime) -> "Game":
        return self.model_copy(update={"updated_at": now})

    def all_cards(self) -> List[Card]:
        """Every card the game holds: deck, hands, piles and discard pile."""
        cards = list(self.deck)
        for player in self.players:
            cards.extend(player.hand)
        for _, pile in self.piles.items():
            cards.extend(pile)
        cards.extend(self.discard_pile)
        return cards
