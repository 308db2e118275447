from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from thegame.domain.card import Card


class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    hand: Tuple[Card, ...] = ()
    is_connected: bool = False

    def find_card(self, card: Card) -> Optional[int]:
        """Index of the card in hand, or None if the player does not hold it."""
        for index, held in enumerate(self.hand):
            if held == card:
                return index
        return None

    def add_card_to_hand(self, card: Card) -> "Player":
        return self.model_copy(update={"hand": self.hand + (card,)})

    def remove_card_from_hand(self, card_index: int) -> Tuple["Player", Card]:
        """Remove the card at card_index.

        Args:
            card_index (int): Position in hand

        Raises:
            IndexError: card_index is outside the hand

        Returns:
            Tuple[Player, Card]: The updated player and the removed card
        """
        if card_index < 0 or card_index >= len(self.hand):
            raise IndexError("Invalid card index")
        card = self.hand[card_index]
        new_hand = self.hand[:card_index] + self.hand[card_index + 1:]
        return self.model_copy(update={"hand": new_hand}), card

    def with_hand(self, hand: Tuple[Card, ...]) -> "Player":
        return self.model_copy(update={"hand": tuple(hand)})

    def update_connection_status(self, is_connected: bool) -> "Player":
        return self.model_copy(update={"is_connected": is_connected})
