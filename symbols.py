"""
Cards and dice - immutable value types shared by both games.

Equality and ordering are structural: two cards are equal when suit and
rank match, and compare suit first, then rank.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

from entropy import EntropyProvider


class Suit(IntEnum):
    """Card suits in deck build order"""
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]


_SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}


class Rank(IntEnum):
    """Card ranks, Ace high. Values match face value (J=11 .. A=14)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def label(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return self.name[0]


@dataclass(frozen=True, order=True)
class Card:
    """A playing card"""
    suit: Suit
    rank: Rank

    def __str__(self) -> str:
        return f"{self.rank.label}{self.suit.symbol}"


class Pip(IntEnum):
    """Die face values"""
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6


@dataclass(frozen=True, order=True)
class Die:
    """A single die showing one face"""
    pip: Pip

    def __post_init__(self):
        # Accept plain ints so Die(3) reads naturally in tests and drivers
        if not isinstance(self.pip, Pip):
            try:
                object.__setattr__(self, "pip", Pip(self.pip))
            except ValueError:
                raise ValueError(f"die value must be 1-6, got {self.pip!r}") from None

    @property
    def value(self) -> int:
        return int(self.pip)

    def __str__(self) -> str:
        return str(self.value)


def standard_cards() -> Tuple[Card, ...]:
    """All 52 cards in build order: suit-major, rank-minor."""
    return tuple(Card(suit, rank) for suit in Suit for rank in Rank)


def roll_die(entropy: EntropyProvider) -> Die:
    """Roll one die using the given entropy provider."""
    return Die(Pip(entropy.next_int(1, 7)))


def make_dice(*values: int) -> Tuple[Die, ...]:
    """Create a tuple of dice from integer values."""
    return tuple(Die(Pip(v)) for v in values)
