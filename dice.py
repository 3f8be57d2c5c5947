"""
Dice scoring engine - categories, classification, and the score card.

Pure functions over immutable values: a roll is a tuple (or Deck) of Die,
a ScoreCard is a frozen record, and every "change" returns a new one.
"""
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from enum import Enum
from collections import Counter
import logging

from deck import Deck
from entropy import EntropyProvider
from symbols import Die, roll_die

logger = logging.getLogger(__name__)

CUP_SIZE = 5
UPPER_BONUS_THRESHOLD = 63
UPPER_BONUS = 35
YAHTZEE_SCORE = 50
YAHTZEE_BONUS = 100


class InvalidCupSizeError(ValueError):
    """Raised by strict classification when a cup is not exactly five dice."""


class Category(Enum):
    """Dice score boxes, plus a sentinel for rolls that match nothing"""
    ONES = "Ones"
    TWOS = "Twos"
    THREES = "Threes"
    FOURS = "Fours"
    FIVES = "Fives"
    SIXES = "Sixes"
    THREE_OF_KIND = "3 of a Kind"
    FOUR_OF_KIND = "4 of a Kind"
    FULL_HOUSE = "Full House"
    SMALL_STRAIGHT = "Small Straight"
    LARGE_STRAIGHT = "Large Straight"
    YAHTZEE = "Yahtzee"
    CHANCE = "Chance"
    NO_COMBINATION = "No Combination"

    @staticmethod
    def from_name(name: str) -> 'Category':
        """Look up a category by its value ("Full House") or member name ("FULL_HOUSE")."""
        for cat in Category:
            if name in (cat.value, cat.name):
                return cat
        raise ValueError(f"unknown category: {name!r}")


def _as_category(category) -> Category:
    if isinstance(category, str):
        return Category.from_name(category)
    return category


# Every fillable box, in score card order
BOXES: Tuple[Category, ...] = tuple(c for c in Category if c is not Category.NO_COMBINATION)

UPPER_BOXES = {
    Category.ONES: 1, Category.TWOS: 2, Category.THREES: 3,
    Category.FOURS: 4, Category.FIVES: 5, Category.SIXES: 6,
}

SMALL_STRAIGHTS = ({1, 2, 3, 4}, {2, 3, 4, 5}, {3, 4, 5, 6})
LARGE_STRAIGHTS = ({1, 2, 3, 4, 5}, {2, 3, 4, 5, 6})

# Tie order between equal scores: lower section first, then Sixes..Ones, Chance last
_CLASSIFY_ORDER = (
    Category.YAHTZEE, Category.LARGE_STRAIGHT, Category.SMALL_STRAIGHT,
    Category.FULL_HOUSE, Category.FOUR_OF_KIND, Category.THREE_OF_KIND,
    Category.SIXES, Category.FIVES, Category.FOURS,
    Category.THREES, Category.TWOS, Category.ONES,
    Category.CHANCE,
)


# ── Predicates ──────────────────────────────────────────────────────────────

def count_values(dice):
    """
    Count occurrences of each die value

    Args:
        dice: Iterable of Die

    Returns:
        Counter object with die values as keys
    """
    return Counter(die.value for die in dice)


def has_n_of_kind(dice, n):
    """True if at least n dice share a value."""
    counts = count_values(dice)
    return bool(counts) and max(counts.values()) >= n


def has_full_house(dice):
    """True if dice form exactly a 3-group and a 2-group."""
    counts = count_values(dice)
    return sorted(counts.values(), reverse=True) == [3, 2]


def has_small_straight(dice):
    """True if the values contain one of the three 4-long runs."""
    values = set(die.value for die in dice)
    return any(straight.issubset(values) for straight in SMALL_STRAIGHTS)


def has_large_straight(dice):
    """True if the values are exactly one of the two 5-long runs."""
    values = set(die.value for die in dice)
    return any(straight == values for straight in LARGE_STRAIGHTS)


def has_yahtzee(dice):
    """True if five dice all show the same value."""
    dice = tuple(dice)
    return len(dice) == CUP_SIZE and has_n_of_kind(dice, CUP_SIZE)


def qualifies(category, dice):
    """Whether the dice satisfy a category's predicate."""
    if category in UPPER_BOXES:
        return count_values(dice)[UPPER_BOXES[category]] > 0
    if category == Category.THREE_OF_KIND:
        return has_n_of_kind(dice, 3)
    if category == Category.FOUR_OF_KIND:
        return has_n_of_kind(dice, 4)
    if category == Category.FULL_HOUSE:
        return has_full_house(dice)
    if category == Category.SMALL_STRAIGHT:
        return has_small_straight(dice)
    if category == Category.LARGE_STRAIGHT:
        return has_large_straight(dice)
    if category == Category.YAHTZEE:
        return has_yahtzee(dice)
    if category == Category.CHANCE:
        return True
    return False


# ── Scoring ─────────────────────────────────────────────────────────────────

def calculate_score(category, dice):
    """
    Calculate the score for a given category and dice

    Args:
        category: Category enum value
        dice: Iterable of Die

    Returns:
        Integer score for the category (0 if doesn't qualify)
    """
    dice = tuple(dice)
    total = sum(die.value for die in dice)
    counts = count_values(dice)

    # Upper section - sum of matching dice
    if category in UPPER_BOXES:
        face = UPPER_BOXES[category]
        return counts[face] * face

    elif category == Category.THREE_OF_KIND:
        return total if has_n_of_kind(dice, 3) else 0

    elif category == Category.FOUR_OF_KIND:
        return total if has_n_of_kind(dice, 4) else 0

    elif category == Category.FULL_HOUSE:
        return 25 if has_full_house(dice) else 0

    elif category == Category.SMALL_STRAIGHT:
        return 30 if has_small_straight(dice) else 0

    elif category == Category.LARGE_STRAIGHT:
        return 40 if has_large_straight(dice) else 0

    elif category == Category.YAHTZEE:
        return YAHTZEE_SCORE if has_yahtzee(dice) else 0

    elif category == Category.CHANCE:
        return total

    return 0


def classify_dice(dice: Iterable[Die], strict: bool = False) -> List[Category]:
    """
    Every category a five-die roll qualifies for, best-scoring first.

    Args:
        dice: The roll; any iterable of Die (a Deck works)
        strict: Raise InvalidCupSizeError instead of returning the sentinel
                for rolls that are not exactly five dice

    Returns:
        Qualifying categories sorted by score descending (ties keep the
        lower-section-first order), or [Category.NO_COMBINATION]
    """
    dice = tuple(dice)
    if len(dice) != CUP_SIZE:
        if strict:
            raise InvalidCupSizeError(f"expected {CUP_SIZE} dice, got {len(dice)}")
        return [Category.NO_COMBINATION]

    matching = [cat for cat in _CLASSIFY_ORDER if qualifies(cat, dice)]
    # sorted() is stable, so equal scores keep _CLASSIFY_ORDER
    return sorted(matching, key=lambda cat: calculate_score(cat, dice), reverse=True)


# ── Score Card ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoreCard:
    """Immutable score card: filled boxes in fill order plus bonus counters."""
    boxes: Tuple[Tuple[Category, int], ...] = ()
    yahtzee_bonus_count: int = 0

    @property
    def scores(self) -> Dict[Category, int]:
        return dict(self.boxes)

    def is_available(self, category):
        """True while no score has been recorded for a box"""
        category = _as_category(category)
        return category in BOXES and category not in self.scores

    def is_filled(self, category):
        return _as_category(category) in self.scores

    def fill(self, category, score):
        """Return a card with score recorded; filled boxes are left untouched.

        category may be a Category or its name ("Sixes" or "SIXES").
        """
        category = _as_category(category)
        if not self.is_available(category):
            return self
        logger.debug("Filling %s with %d", category.value, score)
        return replace(self, boxes=self.boxes + ((category, score),))

    def with_yahtzee_bonus(self):
        """Return a card with one more repeated-Yahtzee bonus"""
        return replace(self, yahtzee_bonus_count=self.yahtzee_bonus_count + 1)

    @property
    def last_fill(self) -> Optional[Tuple[Category, int]]:
        return self.boxes[-1] if self.boxes else None

    def yahtzee_bonuses(self):
        """Total repeated-Yahtzee bonus points (+100 each)."""
        return self.yahtzee_bonus_count * YAHTZEE_BONUS

    def get_upper_section_total(self):
        scores = self.scores
        return sum(scores.get(cat, 0) for cat in UPPER_BOXES)

    def get_upper_section_bonus(self):
        """35 points once the upper section reaches 63"""
        return UPPER_BONUS if self.get_upper_section_total() >= UPPER_BONUS_THRESHOLD else 0

    def get_lower_section_total(self):
        return sum(score for cat, score in self.boxes if cat not in UPPER_BOXES)

    def get_grand_total(self):
        """All recorded scores plus both bonuses"""
        return (self.get_upper_section_total() +
                self.get_upper_section_bonus() +
                self.get_lower_section_total() +
                self.yahtzee_bonuses())

    @property
    def total(self) -> int:
        return self.get_grand_total()

    def is_complete(self):
        return all(cat in self.scores for cat in BOXES)


def score(category: Category, dice: Iterable[Die]) -> int:
    return calculate_score(category, dice)


def fill(card: ScoreCard, category: Category, points: int) -> ScoreCard:
    return card.fill(category, points)


def total(card: ScoreCard) -> int:
    return card.get_grand_total()


# ── Turn scoring ────────────────────────────────────────────────────────────

def choose_box(card: ScoreCard, dice: Sequence[Die]) -> Tuple[Category, int]:
    """
    Pick the box a roll should fill.

    The highest-scoring available qualifying box wins. When every qualifying
    box is taken, the first open box is sacrificed for 0 (Chance still takes
    the sum of the roll).

    Returns:
        (category, score); (NO_COMBINATION, 0) when the card is complete
    """
    for cat in classify_dice(dice):
        if card.is_available(cat):
            return cat, calculate_score(cat, dice)

    fallback = next((cat for cat in BOXES if card.is_available(cat)), None)
    if fallback is None:
        return Category.NO_COMBINATION, 0
    points = sum(die.value for die in dice) if fallback == Category.CHANCE else 0
    return fallback, points


def score_roll(card: ScoreCard, dice: Sequence[Die]) -> Tuple[ScoreCard, Category, int]:
    """
    Fill the best box for a roll and apply the repeated-Yahtzee bonus.

    The bonus is earned when the roll is a Yahtzee and the Yahtzee box
    already held 50 before this roll, whichever box the roll ends up in.

    Returns:
        (new_card, category, score)
    """
    dice = tuple(dice)
    category, points = choose_box(card, dice)
    new_card = card.fill(category, points)
    if has_yahtzee(dice) and card.scores.get(Category.YAHTZEE) == YAHTZEE_SCORE:
        new_card = new_card.with_yahtzee_bonus()
        logger.debug("Repeated Yahtzee bonus, now %d", new_card.yahtzee_bonus_count)
    return new_card, category, points


# ── Cups ────────────────────────────────────────────────────────────────────

def roll_cup(entropy: EntropyProvider, count: int = CUP_SIZE) -> Deck:
    """Roll a fresh cup of ``count`` dice."""
    return Deck(tuple(roll_die(entropy) for _ in range(count)))


def reroll(cup: Iterable[Die], keep: Iterable[int], entropy: EntropyProvider) -> Deck:
    """
    Re-roll every die whose index is not in keep; kept dice stay in place.

    Args:
        cup: Current dice
        keep: Indices of dice to keep
        entropy: Source for the new values

    Returns:
        New cup of the same size
    """
    keep = set(keep)
    return Deck(tuple(die if i in keep else roll_die(entropy)
                      for i, die in enumerate(cup)))
