"""Tests for pile legality, quotas and end-of-game predicates."""
from thegame.domain.card import MAX_RANK, MIN_RANK, Card
from thegame.domain.game import GamePiles, PileDirection, PileId
from thegame.domain.game_rules import (
    TOTAL_CARDS,
    TurnState,
    are_all_hands_empty,
    calculate_score,
    can_play_card,
    can_play_on,
    can_player_play_any_card,
    find_next_player_with_cards,
    get_minimum_cards_to_play,
    has_any_cards_been_played,
    should_game_end_in_defeat,
)
from thegame.domain.player import Player


def _pile(*ranks):
    return tuple(Card.for_rank(rank) for rank in ranks)


def _player(player_id, *ranks):
    return Player(id=player_id, name=player_id, hand=_pile(*ranks))


def _turn(players, piles=None, current_turn="p1", played=0, deck_size=10):
    return TurnState(
        current_turn=current_turn,
        cards_played_this_turn=played,
        deck_size=deck_size,
        players=players,
        piles=piles or GamePiles(),
    )


# Every descending top is 2 and every ascending top is 98, so mid ranks are stuck.
BLOCKED = GamePiles(
    ascending1=_pile(98),
    ascending2=_pile(98),
    descending1=_pile(2),
    descending2=_pile(2),
)


def test_ascending_pile_takes_higher_or_ten_lower():
    pile = _pile(50)
    assert can_play_card(Card.for_rank(51), pile, PileDirection.ascending)
    assert can_play_card(Card.for_rank(40), pile, PileDirection.ascending)
    assert not can_play_card(Card.for_rank(45), pile, PileDirection.ascending)
    assert not can_play_card(Card.for_rank(50), pile, PileDirection.ascending)


def test_descending_pile_takes_lower_or_ten_higher():
    pile = _pile(50)
    assert can_play_card(Card.for_rank(49), pile, PileDirection.descending)
    assert can_play_card(Card.for_rank(60), pile, PileDirection.descending)
    assert not can_play_card(Card.for_rank(55), pile, PileDirection.descending)
    assert not can_play_card(Card.for_rank(50), pile, PileDirection.descending)


def test_any_card_goes_on_an_empty_pile():
    for direction in PileDirection:
        assert can_play_card(Card.for_rank(MIN_RANK), (), direction)
        assert can_play_card(Card.for_rank(MAX_RANK), (), direction)


def test_only_the_top_card_matters():
    assert can_play_card(Card.for_rank(30), _pile(90, 20), PileDirection.ascending)


def test_legality_matches_the_pile_law_for_every_pair():
    for top in range(MIN_RANK, MAX_RANK + 1):
        for rank in range(MIN_RANK, MAX_RANK + 1):
            card, pile = Card.for_rank(rank), _pile(top)
            assert can_play_card(card, pile, PileDirection.ascending) == (
                rank > top or rank == top - 10
            )
            assert can_play_card(card, pile, PileDirection.descending) == (
                rank < top or rank == top + 10
            )


def test_can_play_on_uses_the_pile_direction():
    piles = GamePiles(ascending1=_pile(50), descending1=_pile(50))
    assert can_play_on(Card.for_rank(60), piles, PileId.ascending1)
    assert not can_play_on(Card.for_rank(55), piles, PileId.descending1)
    assert can_play_on(Card.for_rank(55), piles, "ascending2")


def test_minimum_cards_to_play():
    assert get_minimum_cards_to_play(92) == 2
    assert get_minimum_cards_to_play(1) == 2
    assert get_minimum_cards_to_play(0) == 1


def test_can_player_play_any_card():
    assert not can_player_play_any_card(_pile(50, 60), BLOCKED)
    assert can_player_play_any_card(_pile(50, 99), BLOCKED)
    assert not can_player_play_any_card((), GamePiles())


def test_are_all_hands_empty():
    assert are_all_hands_empty([_player("p1"), _player("p2")])
    assert not are_all_hands_empty([_player("p1"), _player("p2", 7)])


def test_has_any_cards_been_played():
    assert not has_any_cards_been_played(GamePiles())
    assert has_any_cards_been_played(GamePiles(descending2=_pile(70)))


def test_calculate_score_counts_unplayed_cards():
    assert TOTAL_CARDS == 98
    assert calculate_score(GamePiles()) == 98
    assert calculate_score(GamePiles(ascending1=_pile(2, 3), descending1=_pile(99))) == 95


def test_next_player_skips_empty_hands_and_wraps():
    players = [_player("p1", 10), _player("p2"), _player("p3", 30)]
    assert find_next_player_with_cards(players, 0).id == "p3"
    assert find_next_player_with_cards(players, 2).id == "p1"


def test_next_player_considers_the_starting_player_last():
    players = [_player("p1", 10), _player("p2")]
    assert find_next_player_with_cards(players, 0).id == "p1"
    assert find_next_player_with_cards([_player("p1"), _player("p2")], 0) is None


def test_defeat_when_current_player_is_stuck_with_quota_unmet():
    players = [_player("p1", 50, 60), _player("p2", 99)]
    assert should_game_end_in_defeat(_turn(players, BLOCKED))
    assert should_game_end_in_defeat(_turn(players, BLOCKED, played=1, deck_size=5))


def test_no_defeat_once_quota_is_met():
    players = [_player("p1", 50, 60)]
    assert not should_game_end_in_defeat(_turn(players, BLOCKED, played=2, deck_size=5))
    assert not should_game_end_in_defeat(_turn(players, BLOCKED, played=1, deck_size=0))


def test_no_defeat_without_a_current_player_or_hand():
    players = [_player("p1"), _player("p2", 50)]
    assert not should_game_end_in_defeat(_turn(players, BLOCKED, current_turn=None))
    assert not should_game_end_in_defeat(_turn(players, BLOCKED, current_turn="p9"))
    assert not should_game_end_in_defeat(_turn(players, BLOCKED, current_turn="p1"))


def test_no_defeat_while_a_move_exists():
    players = [_player("p1", 50, 99)]
    assert not should_game_end_in_defeat(_turn(players, BLOCKED))
