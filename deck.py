"""
Deck - an ordered, immutable collection of cards or dice, plus the
pipeline combinators used to transform it.

No operation mutates a Deck in place: every transform returns a new Deck,
so a chain like ``deck.shuffle(e).sort(key).keep(pred).draw()`` leaves every
intermediate value intact. The top of a deck is its last element.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterator, Optional, Tuple, TypeVar
import logging

from entropy import EntropyProvider
from symbols import standard_cards

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class EmptyCollectionError(IndexError):
    """Raised when drawing from a deck that has too few items."""


def tap(value: T, observer: Callable[[T], object]) -> T:
    """Call observer with value for inspection and return value unchanged.

    Whatever the observer returns is discarded.
    """
    observer(value)
    return value


def fork(value: T, top: Callable[[T], R], bottom: Callable[[T], R],
         combine: Callable[[R, R], R]) -> R:
    """Apply two independent transforms to the same value and join them.

    Both branches read the same snapshot; combine receives
    (top_result, bottom_result) in that order.
    """
    return combine(top(value), bottom(value))


@dataclass(frozen=True)
class Deck(Generic[T]):
    """Immutable ordered collection. ``items[-1]`` is the top."""
    items: Tuple[T, ...] = ()

    def __post_init__(self):
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @staticmethod
    def of(*items: T) -> Deck[T]:
        return Deck(tuple(items))

    @staticmethod
    def standard() -> Deck:
        """Fresh 52-card deck in build order (suit-major, rank-minor)."""
        return Deck(standard_cards())

    # ── Sequence protocol ───────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __contains__(self, item) -> bool:
        return item in self.items

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Deck(self.items[index])
        return self.items[index]

    def __str__(self) -> str:
        return " ".join(str(item) for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def top(self) -> T:
        if self.is_empty:
            raise EmptyCollectionError("deck is empty")
        return self.items[-1]

    # ── Transforms ──────────────────────────────────────────────────────

    def shuffle(self, entropy: EntropyProvider) -> Deck[T]:
        """Return a uniformly shuffled copy (Fisher-Yates over entropy)."""
        items = list(self.items)
        for i in range(len(items) - 1, 0, -1):
            j = entropy.next_int(0, i + 1)
            items[i], items[j] = items[j], items[i]
        return Deck(tuple(items))

    def sort(self, key: Optional[Callable[[T], object]] = None, reverse: bool = False) -> Deck[T]:
        """Return a stably sorted copy ordered by key."""
        return Deck(tuple(sorted(self.items, key=key, reverse=reverse)))

    def keep(self, predicate: Callable[[T], bool]) -> Deck[T]:
        """Keep items matching predicate, preserving their order."""
        return Deck(tuple(item for item in self.items if predicate(item)))

    def remove(self, predicate: Callable[[T], bool]) -> Deck[T]:
        """Drop items matching predicate; the complement of keep()."""
        return Deck(tuple(item for item in self.items if not predicate(item)))

    def add_to_top(self, item: T) -> Deck[T]:
        return Deck(self.items + (item,))

    def add_to_bottom(self, item: T) -> Deck[T]:
        return Deck((item,) + self.items)

    def add_deck(self, other: Deck[T]) -> Deck[T]:
        """Concatenate: this deck's items first, then other's."""
        return Deck(self.items + tuple(other))

    def remove_duplicates(self) -> Deck[T]:
        """Drop repeated items, keeping each first occurrence in place."""
        return Deck(tuple(dict.fromkeys(self.items)))

    def draw(self) -> Tuple[Deck[T], T]:
        """Remove the top item.

        Returns:
            (remaining_deck, drawn_item)

        Raises:
            EmptyCollectionError: if the deck is empty
        """
        if self.is_empty:
            raise EmptyCollectionError("cannot draw from an empty deck")
        drawn = self.items[-1]
        logger.debug("Drew %s, %d left", drawn, len(self.items) - 1)
        return Deck(self.items[:-1]), drawn

    def draw_many(self, count: int) -> Tuple[Deck[T], Tuple[T, ...]]:
        """Remove the top ``count`` items, returned in deck order."""
        if count < 0:
            raise ValueError("count must be non-negative")
        if count > len(self.items):
            raise EmptyCollectionError(
                f"cannot draw {count} from a deck of {len(self.items)}")
        split = len(self.items) - count
        return Deck(self.items[:split]), self.items[split:]

    # ── Combinators ─────────────────────────────────────────────────────

    def map(self, transform: Callable[[Deck[T]], R]) -> R:
        """Apply transform to the whole deck and return its result."""
        return transform(self)

    def tap(self, observer: Callable[[Deck[T]], object]) -> Deck[T]:
        return tap(self, observer)

    def fork(self, top: Callable[[Deck[T]], R], bottom: Callable[[Deck[T]], R],
             combine: Callable[[R, R], R]) -> R:
        return fork(self, top, bottom, combine)
