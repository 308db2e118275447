import random
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from thegame.domain.card import MAX_RANK, MIN_RANK, Card
from thegame.domain.game import Difficulty, Game, GamePiles, GameStatus
from thegame.domain.player import Player

# Cards per player by table size.
CARDS_PER_PLAYER: Dict[int, int] = {2: 7, 3: 6, 4: 6, 5: 5}
DEFAULT_CARDS_PER_PLAYER = 6


def create_deck() -> Tuple[Card, ...]:
    """Build the canonical deck: one card per rank from 2 to 99."""
    return tuple(Card.for_rank(rank) for rank in range(MIN_RANK, MAX_RANK + 1))


def shuffle_deck(cards: Sequence[Card], rng: random.Random) -> Tuple[Card, ...]:
    shuffled = list(cards)
    rng.shuffle(shuffled)
    return tuple(shuffled)


def cards_per_player(num_players: int) -> int:
    return CARDS_PER_PLAYER.get(num_players, DEFAULT_CARDS_PER_PLAYER)


def deal_cards(
    deck: Sequence[Card], num_players: int
) -> Tuple[List[Tuple[Card, ...]], Tuple[Card, ...]]:
    """Deal round-robin, one card per player per round.

    When the deck runs short, earlier players end up with more cards.

    Returns:
        Tuple[List[Tuple[Card, ...]], Tuple[Card, ...]]: One hand per player and the remaining deck
    """
    hands: List[List[Card]] = [[] for _ in range(num_players)]
    index = 0
    for _ in range(cards_per_player(num_players)):
        for player in range(num_players):
            if index < len(deck):
                hands[player].append(deck[index])
                index += 1
    return [tuple(hand) for hand in hands], tuple(deck[index:])


def create_initial_piles() -> GamePiles:
    return GamePiles()


def redeal(
    players: Sequence[Player], cards: Sequence[Card], rng: random.Random
) -> Tuple[Tuple[Player, ...], Tuple[Card, ...]]:
    """Shuffle cards and replace every player's hand with a fresh deal.

    Identity, name and connectivity of each player are kept.
    """
    hands, remaining = deal_cards(shuffle_deck(cards, rng), len(players))
    dealt = tuple(player.with_hand(hand) for player, hand in zip(players, hands))
    return dealt, remaining


def create_game(
    game_id: str,
    first_player: Player,
    now: datetime,
    rng: random.Random,
    difficulty: Difficulty = Difficulty.easy,
    ttl: Optional[int] = None,
) -> Game:
    """New waiting game holding only its creator, with a one-player hand dealt."""
    (creator,), remaining = redeal([first_player], create_deck(), rng)
    return Game(
        id=game_id,
        players=(creator,),
        piles=create_initial_piles(),
        deck=remaining,
        discard_pile=(),
        current_turn=None,
        cards_played_this_turn=0,
        created_by=first_player.id,
        status=GameStatus.waiting,
        difficulty=difficulty,
        pile_preferences={},
        created_at=now,
        updated_at=now,
        ttl=ttl,
    )
