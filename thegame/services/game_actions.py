"""Game actions: one method per player intent.

- Each action loads the game from the store, validates, computes the next
  Game and saves it before returning.
- Validation completes before any new Game is built, so a failed action
  never writes.
- Store errors are caught here and returned as failures; nothing raises
  out of an action.
"""

import logging
import random
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Union

from uuid6 import uuid7

from thegame.domain.card import Card
from thegame.domain.game import Difficulty, Game, GameStatus, PileId
from thegame.domain.game_initializer import create_game, create_initial_piles, redeal
from thegame.domain.game_rules import (
    BOOTSTRAP_CARDS_PER_PILE,
    TurnState,
    are_all_hands_empty,
    can_play_on,
    can_player_play_any_card,
    find_next_player_with_cards,
    get_minimum_cards_to_play,
    has_any_cards_been_played,
    should_game_end_in_defeat,
)
from thegame.domain.player import Player
from thegame.services.game_id_generator import generate_unique_id
from thegame.services.game_store import GameStore
from thegame.services.result import ErrorCode, Result, failure, not_found, success

MAX_PLAYERS = 5

# Hand size restored at the end of each turn in hard mode.
HARD_MODE_HAND_SIZE: Dict[int, int] = {2: 6, 3: 6, 4: 6, 5: 5}
DEFAULT_HARD_MODE_HAND_SIZE = 6


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_pile_id(pile_id: Union[PileId, str]) -> Optional[PileId]:
    try:
        return PileId(pile_id)
    except ValueError:
        return None


def _store_failure(action: str, error: Exception) -> Result:
    logging.error(f"Failed to {action}: {error}")
    return failure(f"Failed to {action}: {error}", ErrorCode.store_error)


def _is_defeated(game: Game) -> bool:
    return should_game_end_in_defeat(TurnState.from_game(game))


class GameActions:
    def __init__(
        self,
        store: GameStore,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        ttl_seconds: Optional[int] = None,
    ):
        """
        Args:
            store (GameStore): Where games are loaded from and saved to
            rng (random.Random, optional): Random source for ids and shuffles. Seed it for reproducible games.
            clock (Callable[[], datetime], optional): Source of timestamps. Defaults to UTC now.
            ttl_seconds (int, optional): Lifetime stamped into new games as an epoch-seconds ttl. None leaves ttl unset.
        """
        self.store = store
        self.rng = rng or random.Random()
        self.clock = clock or _utcnow
        self.ttl_seconds = ttl_seconds

    async def _save(self, game: Game) -> Game:
        game = game.touch(self.clock())
        await self.store.save(game)
        return game

    def _finish(self, game: Game, outcome: str) -> Game:
        logging.info(f"Game {game.id} finished: {outcome}")
        return game.update_status(GameStatus.finished)

    async def create_game(
        self,
        player_name: str,
        player_id: Optional[str] = None,
        difficulty: Union[Difficulty, str] = Difficulty.easy,
    ) -> Result[Game]:
        """Create a waiting game whose only player is its creator."""
        if not player_name or not player_name.strip():
            return failure("Player name is required")
        try:
            difficulty = Difficulty(difficulty)
        except ValueError:
            return failure(f"Invalid difficulty: {difficulty}")

        try:
            now = self.clock()
            game_id = await generate_unique_id(self.store, self.rng, now)
            creator = Player(id=player_id or str(uuid7()), name=player_name.strip())
            ttl = int(now.timestamp()) + self.ttl_seconds if self.ttl_seconds else None
            game = create_game(game_id, creator, now, self.rng, difficulty=difficulty, ttl=ttl)
            await self.store.save(game)
        except Exception as e:
            return _store_failure("create game", e)

        logging.info(f"Game {game.id} created by {creator.id} ({difficulty.value})")
        return success(game)

    async def join_game(
        self, game_id: str, player_name: str, player_id: Optional[str] = None
    ) -> Result[Game]:
        """Add a player, or reconnect one that is already seated.

        A player matching by id, or by name ignoring case, is marked connected
        and keeps their hand. A newcomer triggers a fresh deal for everyone.
        """
        player_name = (player_name or "").strip()

        try:
            game = await self.store.find(game_id)
            if game is None:
                return not_found()

            seated = next(
                (
                    p
                    for p in game.players
                    if (player_id is not None and p.id == player_id)
                    or (player_name and p.name.casefold() == player_name.casefold())
                ),
                None,
            )
            if seated is not None:
                reconnected = game.update_player(seated.id, lambda p: p.update_connection_status(True))
                reconnected = await self._save(reconnected)
                logging.info(f"Player {seated.id} reconnected to game {game_id}")
                return success(reconnected)

            if not player_name:
                return failure("Player name is required")
            accepting = game.status == GameStatus.waiting or (
                game.status == GameStatus.playing and not has_any_cards_been_played(game.piles)
            )
            if not accepting:
                return failure("Game is not accepting new players")
            if len(game.players) >= MAX_PLAYERS:
                return failure(f"Game is full (maximum {MAX_PLAYERS} players)")

            newcomer = Player(id=player_id or str(uuid7()), name=player_name)
            pool = game.deck + tuple(card for p in game.players for card in p.hand)
            grown = game.add_player(newcomer)
            players, deck = redeal(grown.players, pool, self.rng)

            joined = grown.model_copy(
                update={"players": players, "deck": deck, "cards_played_this_turn": 0}
            )
            if joined.status == GameStatus.waiting and len(players) >= 2:
                joined = joined.update_status(GameStatus.playing).update_turn(players[0].id)
                logging.info(f"Game {game_id} started with {len(players)} players")

            joined = await self._save(joined)
        except Exception as e:
            return _store_failure("join game", e)

        logging.info(f"Player {newcomer.id} joined game {game_id}")
        return success(joined)

    async def play_card(
        self, game_id: str, player_id: str, card: Card, pile_id: Union[PileId, str]
    ) -> Result[Game]:
        """Play one card from the current player's hand onto a pile.

        After the play a replacement is drawn while the deck lasts. The game then
        ends in defeat if the player is stuck, in victory if every hand is empty,
        and otherwise passes the turn on automatically once the player's hand is empty.
        """
        try:
            game = await self.store.find(game_id)
            if game is None:
                return not_found()
            if game.status != GameStatus.playing:
                return failure("Game is not in playing status")
            if game.current_turn != player_id:
                return failure("It is not your turn")

            player = game.find_player(player_id)
            if player is None:
                return failure("Player not found in game")
            card_index = player.find_card(card)
            if card_index is None:
                return failure("Card not in player hand")
            pile = _parse_pile_id(pile_id)
            if pile is None:
                return failure("Invalid pile ID")
            if not can_play_on(card, game.piles, pile):
                return failure(
                    f"Cannot play card {card.rank} on {pile.value} pile", ErrorCode.illegal_move
                )

            remaining, played = player.remove_card_from_hand(card_index)
            after_play = (
                game.update_player(player_id, lambda _: remaining)
                .add_card_to_pile(pile, played)
                .draw_card_for_player(player_id)
            )
            logging.info(f"Game {game_id}: {player_id} played {played} on {pile.value}")

            settled = await self._save(self._settle_after_play(after_play, player_id))
        except Exception as e:
            return _store_failure("play card", e)
        return success(settled)

    def _settle_after_play(self, game: Game, player_id: str) -> Game:
        if _is_defeated(game):
            return self._finish(game, "defeat")
        if are_all_hands_empty(game.players):
            return self._finish(game, "victory")

        actor = game.find_player(player_id)
        if actor.hand:
            return game

        # Someone still holds cards, otherwise the victory check above would have fired.
        next_player = find_next_player_with_cards(game.players, game.player_index(player_id))
        game = game.update_turn(next_player.id)
        logging.info(f"Game {game.id}: {player_id} emptied their hand, turn passes to {next_player.id}")
        if _is_defeated(game):
            return self._finish(game, "defeat")
        return game

    async def end_turn(self, game_id: str, player_id: str) -> Result[Game]:
        """Pass the turn once the quota is met.

        With the quota unmet, a player holding cards who can play none of them
        loses the game for everyone; otherwise the request is refused.
        """
        try:
            game = await self.store.find(game_id)
            if game is None:
                return not_found()
            if game.status != GameStatus.playing:
                return failure("Game is not in playing status")
            if game.current_turn != player_id:
                return failure("It is not your turn")
            player = game.find_player(player_id)
            if player is None:
                return failure("Player not found in game")

            minimum = get_minimum_cards_to_play(len(game.deck))
            if game.cards_played_this_turn < minimum:
                if player.hand and not can_player_play_any_card(player.hand, game.piles):
                    defeated = await self._save(self._finish(game, "defeat"))
                    return success(defeated)
                plural = "s" if minimum > 1 else ""
                return failure(f"You must play at least {minimum} card{plural} before ending your turn")

            if game.difficulty == Difficulty.hard:
                game = self._refill_hand(game, player_id)

            if are_all_hands_empty(game.players):
                victorious = await self._save(self._finish(game, "victory"))
                return success(victorious)

            next_player = find_next_player_with_cards(game.players, game.player_index(player_id))
            game = game.update_turn(next_player.id)
            logging.info(f"Game {game_id}: turn passes from {player_id} to {next_player.id}")
            if _is_defeated(game):
                game = self._finish(game, "defeat")

            game = await self._save(game)
        except Exception as e:
            return _store_failure("end turn", e)
        return success(game)

    def _refill_hand(self, game: Game, player_id: str) -> Game:
        target = HARD_MODE_HAND_SIZE.get(len(game.players), DEFAULT_HARD_MODE_HAND_SIZE)
        while game.deck and len(game.find_player(player_id).hand) < target:
            game = game.draw_card_for_player(player_id)
        return game

    async def mark_pile_preference(
        self, game_id: str, player_id: str, pile_id: Optional[Union[PileId, str]]
    ) -> Result[Game]:
        """Leave (or clear, with None) a hint on a pile while waiting for one's turn."""
        try:
            game = await self.store.find(game_id)
            if game is None:
                return not_found()
            if game.status != GameStatus.playing:
                return failure("Game is not in playing status")
            if game.find_player(player_id) is None:
                return failure("Player not found in game")
            if game.current_turn == player_id:
                return failure("You cannot mark a pile preference during your turn")

            pile = None
            if pile_id is not None:
                pile = _parse_pile_id(pile_id)
                if pile is None:
                    return failure("Invalid pile ID")

            game = await self._save(game.mark_pile_preference(player_id, pile))
        except Exception as e:
            return _store_failure("mark pile preference", e)
        return success(game)

    async def set_starting_player(
        self, game_id: str, requester_id: str, starting_player_id: str
    ) -> Result[Game]:
        """Let the creator pick who acts first, until the first card is played."""
        try:
            game = await self.store.find(game_id)
            if game is None:
                return not_found()
            if game.created_by != requester_id:
                return failure("Only the game creator can set the starting player")
            if has_any_cards_been_played(game.piles):
                return failure("Cannot change starting player after cards have been played")
            if game.status not in (GameStatus.waiting, GameStatus.playing):
                return failure("Cannot set starting player for a finished or abandoned game")
            if game.find_player(starting_player_id) is None:
                return failure("Starting player not found in game")

            game = await self._save(game.update_turn(starting_player_id))
        except Exception as e:
            return _store_failure("set starting player", e)

        logging.info(f"Game {game_id}: {starting_player_id} will start")
        return success(game)

    async def restart_game(self, game_id: str, player_id: str) -> Result[Game]:
        """Gather every card back, reshuffle and deal a new round to the same players."""
        try:
            game = await self.store.find(game_id)
            if game is None:
                return not_found()
            if game.status != GameStatus.finished:
                return failure("Game must be finished to restart")
            if game.find_player(player_id) is None:
                return failure("Player not found in game")

            cards = list(game.deck)
            for p in game.players:
                cards.extend(p.hand)
            for _, pile in game.piles.items():
                cards.extend(pile[BOOTSTRAP_CARDS_PER_PILE:])
            cards.extend(game.discard_pile)

            players, deck = redeal(game.players, cards, self.rng)
            playing = len(players) >= 2
            restarted = game.model_copy(
                update={
                    "players": players,
                    "piles": create_initial_piles(),
                    "deck": deck,
                    "discard_pile": (),
                    "current_turn": players[0].id if playing else None,
                    "cards_played_this_turn": 0,
                    "status": GameStatus.playing if playing else GameStatus.waiting,
                    "pile_preferences": {},
                }
            )
            restarted = await self._save(restarted)
        except Exception as e:
            return _store_failure("restart game", e)

        logging.info(f"Game {game_id} restarted by {player_id}")
        return success(restarted)

    async def end_game(self, game_id: str, player_id: str) -> Result[str]:
        """Delete the game. Returns the id of the deleted game."""
        try:
            game = await self.store.find(game_id)
            if game is None:
                return not_found()
            if game.find_player(player_id) is None:
                return failure("Player is not part of this game")
            await self.store.delete(game_id)
        except Exception as e:
            return _store_failure("end game", e)

        logging.info(f"Game {game_id} ended by {player_id}")
        return success(game_id)

    async def load_game(self, game_id: str) -> Result[Game]:
        try:
            game = await self.store.find(game_id)
        except Exception as e:
            return _store_failure("load game", e)
        if game is None:
            return not_found()
        return success(game)

    async def sync_game(self, game_id: str) -> Result[Game]:
        """Return the stored game, finishing it first if it can no longer go on.

        Covers drift caused outside the engine (e.g. a disconnect handled by the
        transport). Only games in playing status are re-evaluated.
        """
        try:
            game = await self.store.find(game_id)
            if game is None:
                return not_found()
            if game.status == GameStatus.playing:
                if _is_defeated(game):
                    game = await self._save(self._finish(game, "defeat"))
                elif are_all_hands_empty(game.players):
                    game = await self._save(self._finish(game, "victory"))
        except Exception as e:
            return _store_failure("sync game", e)
        return success(game)
