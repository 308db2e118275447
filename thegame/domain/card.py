from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MIN_RANK = 2
MAX_RANK = 99


class Suit(str, Enum):
    hearts = "hearts"
    diamonds = "diamonds"
    clubs = "clubs"
    spades = "spades"


# Index order matters: the canonical deck assigns SUITS[rank % 4].
SUITS = (Suit.hearts, Suit.diamonds, Suit.clubs, Suit.spades)


class Card(BaseModel):
    """A single card. Equal to another card iff rank and suit match."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=MIN_RANK, le=MAX_RANK)
    suit: Suit

    @classmethod
    def for_rank(cls, rank: int) -> "Card":
        """Card of the canonical deck for the given rank."""
        return cls(rank=rank, suit=SUITS[rank % len(SUITS)])

    def __str__(self) -> str:
        return f"{self.rank}-{self.suit.value}"
