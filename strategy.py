"""
Dice re-roll strategies and the bounded turn loop.

Contains:
- KeepStrategy abstract base class
- FrequencyKeepStrategy (keep the best combination, else the most frequent value)
- RandomKeepStrategy baseline
- play_turn() - up to three rolls, then hand the final dice back for scoring
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple
from collections import Counter
import logging

from dice import (
    CUP_SIZE, SMALL_STRAIGHTS, Category,
    classify_dice, roll_cup, reroll,
)
from entropy import EntropyProvider
from symbols import Die

logger = logging.getLogger(__name__)

MAX_ROLLS = 3

# Combinations worth building on; Chance and the upper boxes always qualify
NON_TRIVIAL = (
    Category.YAHTZEE, Category.LARGE_STRAIGHT, Category.SMALL_STRAIGHT,
    Category.FULL_HOUSE, Category.FOUR_OF_KIND, Category.THREE_OF_KIND,
)


# ── Strategy Interface ──────────────────────────────────────────────────────

class KeepStrategy(ABC):
    """Decides which dice survive into the next roll."""

    @abstractmethod
    def choose_keep(self, dice: Sequence[Die], entropy: EntropyProvider) -> Tuple[int, ...]:
        """Given the current roll, return the indices of dice to keep.

        Keeping all five ends the turn early.
        """
        ...


# ── FrequencyKeepStrategy ──────────────────────────────────────────────────

def most_frequent_indices(dice: Sequence[Die]) -> Tuple[int, ...]:
    """Indices of the most frequent value; ties go to the higher face."""
    counts = Counter(die.value for die in dice)
    value = max(counts, key=lambda v: (counts[v], v))
    return tuple(i for i, die in enumerate(dice) if die.value == value)


def combination_indices(category: Category, dice: Sequence[Die]) -> Tuple[int, ...]:
    """Indices of the dice that make up a qualifying combination."""
    values = [die.value for die in dice]

    if category == Category.SMALL_STRAIGHT:
        # Highest run that is present; one die per value
        run = max((s for s in SMALL_STRAIGHTS if s.issubset(values)), key=max)
        hold, seen = [], set()
        for i, v in enumerate(values):
            if v in run and v not in seen:
                hold.append(i)
                seen.add(v)
        return tuple(hold)

    if category in (Category.THREE_OF_KIND, Category.FOUR_OF_KIND):
        return most_frequent_indices(dice)

    # Yahtzee, Large Straight, Full House use every die
    return tuple(range(len(dice)))


class FrequencyKeepStrategy(KeepStrategy):
    """Keep the best non-trivial combination, else the most frequent value.

    The entropy provider draws how many dice (1-5) to keep this time, so
    partial combinations are sometimes broken up again. A complete
    five-die combination is always kept whole.
    """

    def choose_keep(self, dice, entropy):
        dice = tuple(dice)
        best = next((cat for cat in classify_dice(dice) if cat in NON_TRIVIAL), None)
        keep_count = entropy.next_int(1, CUP_SIZE + 1)

        if best is None:
            hold = most_frequent_indices(dice)
        else:
            hold = combination_indices(best, dice)
            if len(hold) == CUP_SIZE:
                logger.debug("Keeping complete %s", best.value)
                return hold
        return hold[:keep_count]


# ── RandomKeepStrategy ─────────────────────────────────────────────────────

class RandomKeepStrategy(KeepStrategy):
    """Baseline: each die is kept on a coin flip."""

    def choose_keep(self, dice, entropy):
        return tuple(i for i in range(len(dice)) if entropy.next_int(0, 2) == 1)


# ── Turn loop ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Turn:
    """Every roll of one turn, in order. The last roll is the one scored."""
    rolls: Tuple[Tuple[Die, ...], ...]

    @property
    def dice(self) -> Tuple[Die, ...]:
        return self.rolls[-1]


def play_turn(entropy: EntropyProvider, strategy: KeepStrategy,
              max_rolls: int = MAX_ROLLS,
              observer: Optional[Callable[[int, Tuple[Die, ...]], object]] = None) -> Turn:
    """
    Roll up to ``max_rolls`` times, keeping dice between rolls.

    Args:
        entropy: Source for every die value
        strategy: Chooses which dice to keep before each re-roll
        max_rolls: Roll limit, first roll included
        observer: Optional callback(roll_number, dice) after every roll

    Returns:
        Turn holding each roll
    """
    cup = tuple(roll_cup(entropy))
    rolls = [cup]
    if observer is not None:
        observer(1, cup)

    while len(rolls) < max_rolls:
        keep = strategy.choose_keep(cup, entropy)
        if len(set(keep)) >= len(cup):
            break
        cup = tuple(reroll(cup, keep, entropy))
        rolls.append(cup)
        if observer is not None:
            observer(len(rolls), cup)

    return Turn(rolls=tuple(rolls))
