"""
Poker hand classification and comparison - pure functions, no I/O.

A five-card hand maps to exactly one PokerCategory (first match in
priority order wins). Hands of the same category are ordered by a
category-specific tie-break sequence of ranks.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from functools import cmp_to_key
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from symbols import Card, Rank

logger = logging.getLogger(__name__)

HAND_SIZE = 5


class InvalidHandSizeError(ValueError):
    """Raised by strict classification when a hand is not exactly five items."""


class PokerCategory(IntEnum):
    """Poker hand categories. The value is the category strength."""
    NO_RANK = 0
    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title().replace(" Of ", " of a ")


_WHEEL = frozenset({Rank.ACE, Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE})


def rank_groups(cards: Sequence[Card]) -> List[Tuple[Rank, int]]:
    """Group ranks as (rank, count), largest group first, then highest rank."""
    counts = Counter(card.rank for card in cards)
    return sorted(counts.items(), key=lambda kv: (kv[1], kv[0]), reverse=True)


def is_flush(cards: Sequence[Card]) -> bool:
    return len(cards) == HAND_SIZE and len({card.suit for card in cards}) == 1


def straight_high_card(cards: Sequence[Card]) -> Optional[Rank]:
    """High card of a five-rank run, or None when the ranks are not a straight.

    The wheel (A-2-3-4-5) is the only run where the Ace plays low; its high
    card is Five.
    """
    ranks = {card.rank for card in cards}
    if len(cards) != HAND_SIZE or len(ranks) != HAND_SIZE:
        return None
    if ranks == _WHEEL:
        return Rank.FIVE
    if max(ranks) - min(ranks) == HAND_SIZE - 1:
        return max(ranks)
    return None


# ── Category predicates (evaluated in priority order) ──────────────────────

def _counts(cards):
    return [count for _, count in rank_groups(cards)]


def _is_royal_flush(cards):
    return is_flush(cards) and straight_high_card(cards) == Rank.ACE


def _is_straight_flush(cards):
    return is_flush(cards) and straight_high_card(cards) is not None


def _is_four_of_kind(cards):
    return _counts(cards)[0] == 4


def _is_full_house(cards):
    return _counts(cards) == [3, 2]


def _is_straight(cards):
    return straight_high_card(cards) is not None


def _is_three_of_kind(cards):
    return _counts(cards)[0] == 3


def _is_two_pair(cards):
    return _counts(cards)[:2] == [2, 2]


def _is_one_pair(cards):
    return _counts(cards)[0] == 2


_PRIORITY: Tuple[Tuple[PokerCategory, Callable[[Sequence[Card]], bool]], ...] = (
    (PokerCategory.ROYAL_FLUSH, _is_royal_flush),
    (PokerCategory.STRAIGHT_FLUSH, _is_straight_flush),
    (PokerCategory.FOUR_OF_KIND, _is_four_of_kind),
    (PokerCategory.FULL_HOUSE, _is_full_house),
    (PokerCategory.FLUSH, is_flush),
    (PokerCategory.STRAIGHT, _is_straight),
    (PokerCategory.THREE_OF_KIND, _is_three_of_kind),
    (PokerCategory.TWO_PAIR, _is_two_pair),
    (PokerCategory.ONE_PAIR, _is_one_pair),
)


# ── Tie-break sequences ────────────────────────────────────────────────────

def _descending_ranks(cards):
    return tuple(sorted((card.rank for card in cards), reverse=True))


def _grouped_ranks(cards):
    # Each group expanded to `count` copies of its rank, biggest group first
    return tuple(rank for rank, count in rank_groups(cards) for _ in range(count))


def _straight_high(cards):
    return (straight_high_card(cards),)


def _no_tie_break(cards):
    return ()


_TIE_BREAKERS: Dict[PokerCategory, Callable[[Sequence[Card]], Tuple[Rank, ...]]] = {
    PokerCategory.ROYAL_FLUSH: _no_tie_break,
    PokerCategory.STRAIGHT_FLUSH: _straight_high,
    PokerCategory.FOUR_OF_KIND: _grouped_ranks,
    PokerCategory.FULL_HOUSE: _grouped_ranks,
    PokerCategory.FLUSH: _descending_ranks,
    PokerCategory.STRAIGHT: _straight_high,
    PokerCategory.THREE_OF_KIND: _grouped_ranks,
    PokerCategory.TWO_PAIR: _grouped_ranks,
    PokerCategory.ONE_PAIR: _grouped_ranks,
    PokerCategory.HIGH_CARD: _descending_ranks,
    PokerCategory.NO_RANK: _no_tie_break,
}


@dataclass(frozen=True)
class RankedHand:
    """A hand tagged with its category and tie-break sequence."""
    category: PokerCategory
    cards: Tuple[Card, ...]
    tie_breakers: Tuple[Rank, ...]

    @property
    def strength(self) -> int:
        return int(self.category)

    def __str__(self) -> str:
        return f"{' '.join(str(c) for c in self.cards)} ({self.category.label})"


def classify_hand(cards: Iterable[Card], strict: bool = False) -> RankedHand:
    """
    Classify a hand into its single highest-priority category.

    Args:
        cards: The hand; any iterable of Card (a Deck works)
        strict: Raise InvalidHandSizeError instead of returning NO_RANK
                for hands that are not exactly five cards

    Returns:
        RankedHand with category and tie-break sequence
    """
    cards = tuple(cards)
    if len(cards) != HAND_SIZE:
        if strict:
            raise InvalidHandSizeError(f"expected {HAND_SIZE} cards, got {len(cards)}")
        return RankedHand(PokerCategory.NO_RANK, cards, ())

    category = next((cat for cat, matches in _PRIORITY if matches(cards)),
                    PokerCategory.HIGH_CARD)
    ranked = RankedHand(category, cards, _TIE_BREAKERS[category](cards))
    logger.debug("Classified %s", ranked)
    return ranked


def classify_cards(cards: Iterable[Card]) -> List[PokerCategory]:
    """Categories a hand satisfies - always exactly one for cards."""
    return [classify_hand(cards).category]


def compare_ranked(a: RankedHand, b: RankedHand) -> int:
    """Three-way compare: positive if a beats b, negative if b wins, 0 on a tie."""
    if a.strength != b.strength:
        return 1 if a.strength > b.strength else -1
    for mine, theirs in zip(a.tie_breakers, b.tie_breakers):
        if mine != theirs:
            return 1 if mine > theirs else -1
    return 0


def compare_hands(hand_a: Iterable[Card], hand_b: Iterable[Card]) -> int:
    """Classify two hands and compare them (see compare_ranked)."""
    return compare_ranked(classify_hand(hand_a), classify_hand(hand_b))


ranked_key = cmp_to_key(compare_ranked)


def round_winners(hands: Sequence[Tuple[str, Iterable[Card]]]) -> List[str]:
    """
    Names of every player whose hand ties for best.

    Args:
        hands: (player_name, cards) pairs in seating order

    Returns:
        Winning names in seating order; several names on a tie, empty if no hands
    """
    ranked = [(name, classify_hand(cards)) for name, cards in hands]
    if not ranked:
        return []
    best = max((r for _, r in ranked), key=ranked_key)
    return [name for name, r in ranked if compare_ranked(r, best) == 0]
