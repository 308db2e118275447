"""Tests for DataConverter."""
from thegame.converter import DataConverter
from thegame.domain.card import Card, Suit
from thegame.domain.game import Game, GamePiles, GameStatus, PileId
from thegame.domain.player import Player
from thegame.models.dc_models import CardModel

from conftest import CREATED_AT

data_converter = DataConverter()


def _make_game() -> Game:
    return Game(
        id="ABC123",
        players=(
            Player(id="p1", name="Ana", hand=(Card.for_rank(12),), is_connected=True),
            Player(id="p2", name="Bo", hand=(Card.for_rank(80), Card.for_rank(81))),
        ),
        piles=GamePiles(ascending1=(Card.for_rank(3), Card.for_rank(9)), descending2=(Card.for_rank(97),)),
        deck=(Card.for_rank(50),),
        current_turn="p2",
        cards_played_this_turn=1,
        created_by="p1",
        status=GameStatus.playing,
        pile_preferences={"p1": PileId.descending2},
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
        ttl=1767355200,
    )


def test_card_model_round_trip():
    card = Card(rank=33, suit=Suit.spades)
    model = data_converter.convert_card_to_cardmodel(card)

    assert model == CardModel(rank=33, suit=Suit.spades)
    assert data_converter.convert_cardmodel_to_card(model) == card


def test_state_model_carries_everything():
    state = data_converter.convert_game_to_statemodel(_make_game())
    data = state.model_dump(mode="json")

    assert data["id"] == "ABC123"
    assert data["players"][0] == {
        "id": "p1",
        "name": "Ana",
        "hand": [{"rank": 12, "suit": "hearts"}],
        "is_connected": True,
    }
    assert [card["rank"] for card in data["piles"]["ascending1"]] == [3, 9]
    assert data["piles"]["ascending2"] == []
    assert data["current_turn"] == "p2"
    assert data["status"] == "playing"
    assert data["difficulty"] == "easy"
    assert data["pile_preferences"] == {"p1": "descending2"}
    assert data["remaining_cards"] == 95
    assert data["minimum_cards_to_play"] == 2
    assert data["ttl"] == 1767355200


def test_game_schema_round_trip():
    game = _make_game()
    schema = data_converter.convert_game_to_gameschema(game)

    assert schema.game_id == "ABC123"
    assert schema.status == "playing"
    assert schema.ttl == game.ttl
    assert data_converter.convert_gameschema_to_game(schema) == game
