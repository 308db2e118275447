"""Rules of play that are independent from HTTP and storage.

Rule of thumb:
- OK: legality checks, quotas, victory/defeat predicates.
- Not OK: touching the store, redis, FastAPI, datetime.now(), etc.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from thegame.domain.card import MAX_RANK, MIN_RANK, Card
from thegame.domain.game import Game, GamePiles, PileDirection, PileId
from thegame.domain.player import Player

TOTAL_CARDS = MAX_RANK - MIN_RANK + 1
JUMP_BACK = 10

# Piles start empty; nothing is seeded at reset.
BOOTSTRAP_CARDS_PER_PILE = 0


@dataclass(frozen=True)
class TurnState:
    """What the defeat check needs to know about the turn in progress."""

    current_turn: Optional[str]
    cards_played_this_turn: int
    deck_size: int
    players: Sequence[Player]
    piles: GamePiles

    @classmethod
    def from_game(cls, game: Game) -> "TurnState":
        return cls(
            current_turn=game.current_turn,
            cards_played_this_turn=game.cards_played_this_turn,
            deck_size=len(game.deck),
            players=game.players,
            piles=game.piles,
        )


def can_play_card(card: Card, pile: Sequence[Card], direction: PileDirection) -> bool:
    """Return True if card may go on top of pile.

    Ascending piles take a higher rank or exactly ten lower; descending piles
    take a lower rank or exactly ten higher. Any card goes on an empty pile.
    """
    if not pile:
        return True
    top = pile[-1]
    if direction == PileDirection.ascending:
        return card.rank > top.rank or card.rank == top.rank - JUMP_BACK
    return card.rank < top.rank or card.rank == top.rank + JUMP_BACK


def can_play_on(card: Card, piles: GamePiles, pile_id: PileId) -> bool:
    pile_id = PileId(pile_id)
    return can_play_card(card, piles.get(pile_id), pile_id.direction)


def get_minimum_cards_to_play(deck_size: int) -> int:
    """Per-turn quota: two cards while the deck lasts, one afterwards."""
    return 2 if deck_size > 0 else 1


def can_player_play_any_card(hand: Iterable[Card], piles: GamePiles) -> bool:
    for card in hand:
        for pile_id, _ in piles.items():
            if can_play_on(card, piles, pile_id):
                return True
    return False


def are_all_hands_empty(players: Iterable[Player]) -> bool:
    return all(not player.hand for player in players)


def has_any_cards_been_played(piles: GamePiles) -> bool:
    return any(len(pile) > BOOTSTRAP_CARDS_PER_PILE for _, pile in piles.items())


def calculate_score(piles: GamePiles) -> int:
    """Cards not yet played on any pile. 0 is a perfect game."""
    played = sum(max(len(pile) - BOOTSTRAP_CARDS_PER_PILE, 0) for _, pile in piles.items())
    return TOTAL_CARDS - played


def find_next_player_with_cards(players: Sequence[Player], start_index: int) -> Optional[Player]:
    """Next player after start_index, in join order and wrapping around, who holds a card.

    The player at start_index is considered last. Returns None if nobody holds cards.
    """
    count = len(players)
    for offset in range(count):
        candidate = players[(start_index + 1 + offset) % count]
        if candidate.hand:
            return candidate
    return None


def should_game_end_in_defeat(turn_state: TurnState) -> bool:
    """Defeat check for the current player.

    Only asks whether some legal move exists while the quota is unmet; it does
    not check that the full quota is reachable.
    """
    if turn_state.current_turn is None:
        return False
    player = next((p for p in turn_state.players if p.id == turn_state.current_turn), None)
    if player is None or not player.hand:
        return False
    if turn_state.cards_played_this_turn >= get_minimum_cards_to_play(turn_state.deck_size):
        return False
    return not can_player_play_any_card(player.hand, turn_state.piles)
