from thegame.domain.card import Card
from thegame.domain.game import Game
from thegame.domain.game_rules import calculate_score, get_minimum_cards_to_play
from thegame.models.dc_models import (
    CardModel,
    GameStateModel,
    PilesModel,
    PlayerStateModel,
)
from thegame.models.schema_models import GameSchema


class DataConverter:
    """This class is used to convert data between different formats."""

    def convert_card_to_cardmodel(self, card: Card) -> CardModel:
        return CardModel(rank=card.rank, suit=card.suit)

    def convert_cardmodel_to_card(self, card: CardModel) -> Card:
        """Convert a client card to the domain Card.

        Raises:
            pydantic.ValidationError: rank is outside the deck
        """
        return Card(rank=card.rank, suit=card.suit)

    def _cards(self, cards) -> list:
        return [self.convert_card_to_cardmodel(c) for c in cards]

    def convert_game_to_statemodel(self, game: Game) -> GameStateModel:
        """Convert the Game to the GameStateModel to send client

        Args:
            game (Game): The latest state of the game

        Returns:
            GameStateModel: Snapshot of every field plus derived counters, ready for broadcast
        """
        return GameStateModel(
            id=game.id,
            players=[
                PlayerStateModel(
                    id=player.id,
                    name=player.name,
                    hand=self._cards(player.hand),
                    is_connected=player.is_connected,
                )
                for player in game.players
            ],
            piles=PilesModel(**{pile_id.value: self._cards(pile) for pile_id, pile in game.piles.items()}),
            deck=self._cards(game.deck),
            discard_pile=self._cards(game.discard_pile),
            current_turn=game.current_turn,
            cards_played_this_turn=game.cards_played_this_turn,
            created_by=game.created_by,
            status=game.status,
            difficulty=game.difficulty,
            pile_preferences=dict(game.pile_preferences),
            created_at=game.created_at,
            updated_at=game.updated_at,
            ttl=game.ttl,
            remaining_cards=calculate_score(game.piles),
            minimum_cards_to_play=get_minimum_cards_to_play(len(game.deck)),
        )

    def convert_game_to_gameschema(self, game: Game) -> GameSchema:
        return GameSchema(
            game_id=game.id,
            data=game.model_dump(mode="json"),
            status=game.status.value,
            ttl=game.ttl,
            updated_at=game.updated_at,
        )

    def convert_gameschema_to_game(self, game_schema: GameSchema) -> Game:
        return Game.model_validate(game_schema.data)
