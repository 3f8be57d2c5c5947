"""
Simulation drivers for the poker and dice games.

Owns players, rounds and tallies; all classification and scoring is
delegated to poker.py and dice.py. Rounds resolve strictly in order and
each player's turn finishes before the next one starts.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import logging

from deck import Deck, tap
from dice import ScoreCard, score_roll
from entropy import EntropyProvider
from game_log import GameLog
from poker import HAND_SIZE, classify_hand, round_winners
from strategy import MAX_ROLLS, FrequencyKeepStrategy, KeepStrategy, play_turn
from symbols import Card, Die, Rank, Suit

logger = logging.getLogger(__name__)

YAHTZEE_ROUNDS = 13

Observer = Callable[[str, object], object]


def _quiet(label, value):
    logger.debug("%s: %s", label, value)


def leaders(totals: Dict[str, int]) -> List[str]:
    """Every name holding the maximum total, in insertion order."""
    if not totals:
        return []
    best = max(totals.values())
    return [name for name, value in totals.items() if value == best]


# ── Deck pipeline ──────────────────────────────────────────────────────────

PRIME_RANKS = frozenset({Rank.TWO, Rank.THREE, Rank.FIVE, Rank.SEVEN})


def run_deck_pipeline(entropy: EntropyProvider,
                      observer: Observer = _quiet) -> Tuple[Deck, Card]:
    """
    Exercise every deck combinator in one chain.

    Shuffle, sort by suit then rank, keep the prime ranks, drop Hearts,
    fork into "Ace of Spades on top" and "King of Diamonds on the bottom"
    then merge those two without duplicates, and finally draw.

    Args:
        entropy: Source for the shuffle
        observer: Called as observer(stage_label, deck) after every stage

    Returns:
        (remaining_deck, drawn_card)
    """
    deck = (
        Deck.standard()
        .tap(lambda d: observer("Fresh deck", d))
        .shuffle(entropy)
        .tap(lambda d: observer("Shuffled", d))
        .sort(key=lambda c: (c.suit, c.rank))
        .tap(lambda d: observer("Sorted", d))
        .keep(lambda c: c.rank in PRIME_RANKS)
        .tap(lambda d: observer("Kept 2, 3, 5, 7", d))
        .remove(lambda c: c.suit == Suit.HEARTS)
        .tap(lambda d: observer("Removed Hearts", d))
        .fork(lambda d: d.add_to_top(Card(Suit.SPADES, Rank.ACE)),
              lambda d: d.add_to_bottom(Card(Suit.DIAMONDS, Rank.KING)),
              lambda top_added, bottom_added: bottom_added.add_deck(top_added).remove_duplicates())
        .tap(lambda d: observer("Forked and merged", d))
    )
    remaining, drawn = deck.draw()
    tap(remaining, lambda d: observer(f"Drew {drawn}, remaining", d))
    return remaining, drawn


# ── Poker ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PokerPlayer:
    """A seated poker player and the hand they currently hold"""
    name: str
    hand: Tuple[Card, ...] = ()


@dataclass(frozen=True)
class WinTally:
    """Round wins per player name, in first-win order."""
    wins: Tuple[Tuple[str, int], ...] = ()

    def as_dict(self) -> Dict[str, int]:
        return dict(self.wins)

    def add_win(self, name: str) -> WinTally:
        counts = self.as_dict()
        counts[name] = counts.get(name, 0) + 1
        return WinTally(tuple(counts.items()))

    def add_wins(self, names: Sequence[str]) -> WinTally:
        tally = self
        for name in names:
            tally = tally.add_win(name)
        return tally

    def leaders(self) -> List[str]:
        return leaders(self.as_dict())


@dataclass(frozen=True)
class PokerRound:
    number: int
    players: Tuple[PokerPlayer, ...]
    winners: Tuple[str, ...]


@dataclass(frozen=True)
class PokerResult:
    tally: WinTally
    rounds: Tuple[PokerRound, ...]
    deck: Deck

    @property
    def overall_winners(self) -> List[str]:
        return self.tally.leaders()


def deal_round(deck: Deck, players: Sequence[PokerPlayer],
               hand_size: int = HAND_SIZE) -> Tuple[Deck, Tuple[PokerPlayer, ...]]:
    """
    Deal hand_size cards off the top to each player in seat order.

    Returns deck and players unchanged when the deck cannot cover a full deal.
    """
    players = tuple(players)
    if len(deck) < len(players) * hand_size:
        return deck, players

    dealt = []
    for player in players:
        deck, cards = deck.draw_many(hand_size)
        dealt.append(replace(player, hand=cards))
    return deck, tuple(dealt)


def run_poker(deck: Deck, players: Sequence[PokerPlayer],
              tally: WinTally = WinTally(),
              hand_size: int = HAND_SIZE,
              log: Optional[GameLog] = None) -> PokerResult:
    """
    Play rounds until the deck can no longer deal every player a hand.

    Every player tied for the best hand is credited with a win.

    Args:
        deck: Deck to deal from (normally shuffled)
        players: Seated players; their hands are replaced each round
        tally: Starting win tally
        hand_size: Cards per hand
        log: Optional GameLog receiving deal and winner events

    Returns:
        PokerResult with the final tally, each round played, and the leftover deck
    """
    players = tuple(players)
    rounds = []
    if not players:
        return PokerResult(tally, (), deck)

    while len(deck) >= len(players) * hand_size:
        number = len(rounds) + 1
        deck, dealt = deal_round(deck, players, hand_size)
        winners = round_winners([(p.name, p.hand) for p in dealt])

        if log is not None:
            for p in dealt:
                log.log_deal(number, p.name, list(p.hand), classify_hand(p.hand).category.label)
            log.log_winners(number, winners)
        logger.info("Poker round %d won by %s", number, ", ".join(winners))

        tally = tally.add_wins(winners)
        rounds.append(PokerRound(number, dealt, tuple(winners)))
        players = tuple(replace(p, hand=()) for p in dealt)

    return PokerResult(tally, tuple(rounds), deck)


def play_poker(names: Sequence[str], entropy: EntropyProvider,
               hand_size: int = HAND_SIZE,
               log: Optional[GameLog] = None) -> PokerResult:
    """Shuffle a fresh deck and play it out with the named players."""
    deck = Deck.standard().shuffle(entropy)
    return run_poker(deck, [PokerPlayer(name) for name in names],
                     hand_size=hand_size, log=log)


# ── Dice ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DicePlayer:
    """A dice player: last scored roll plus a score card that only grows"""
    name: str
    cup: Tuple[Die, ...] = ()
    score_card: ScoreCard = field(default_factory=ScoreCard)


@dataclass(frozen=True)
class DiceRound:
    number: int
    players: Tuple[DicePlayer, ...]
    leaders: Tuple[str, ...]
    top_score: int


@dataclass(frozen=True)
class DiceResult:
    players: Tuple[DicePlayer, ...]
    rounds: Tuple[DiceRound, ...]

    @property
    def totals(self) -> Dict[str, int]:
        return {p.name: p.score_card.get_grand_total() for p in self.players}

    @property
    def overall_winners(self) -> List[str]:
        return leaders(self.totals)


def take_turn(player: DicePlayer, entropy: EntropyProvider, strategy: KeepStrategy,
              round_number: int = 1, max_rolls: int = MAX_ROLLS,
              log: Optional[GameLog] = None) -> DicePlayer:
    """Roll, then score the final dice in the best open box."""
    def on_roll(roll_number, dice):
        if log is not None:
            log.log_roll(round_number, player.name, roll_number, list(dice))

    turn = play_turn(entropy, strategy, max_rolls=max_rolls, observer=on_roll)
    card, category, points = score_roll(player.score_card, turn.dice)
    if log is not None:
        log.log_score(round_number, player.name, category, points, list(turn.dice))
    logger.debug("%s scored %d in %s", player.name, points, category.value)
    return replace(player, cup=turn.dice, score_card=card)


def play_dice_round(players: Sequence[DicePlayer], entropy: EntropyProvider,
                    strategy: KeepStrategy, round_number: int = 1,
                    max_rolls: int = MAX_ROLLS,
                    log: Optional[GameLog] = None) -> DiceRound:
    """One turn per player in seat order; leaders are everyone on the top total."""
    updated = tuple(take_turn(p, entropy, strategy, round_number, max_rolls, log)
                    for p in players)
    totals = {p.name: p.score_card.get_grand_total() for p in updated}
    top = leaders(totals)
    top_score = max(totals.values()) if totals else 0
    if log is not None:
        log.log_winners(round_number, top, top_score)
    logger.info("Dice round %d led by %s with %d", round_number, ", ".join(top), top_score)
    return DiceRound(round_number, updated, tuple(top), top_score)


def play_dice(names: Sequence[str], entropy: EntropyProvider,
              strategy: Optional[KeepStrategy] = None,
              rounds: int = YAHTZEE_ROUNDS, max_rolls: int = MAX_ROLLS,
              log: Optional[GameLog] = None) -> DiceResult:
    """
    Play a full dice game.

    Args:
        names: Player names in seat order
        entropy: Source for every die
        strategy: Re-roll policy shared by all players (FrequencyKeepStrategy by default)
        rounds: Number of rounds; one box is filled per player per round
        max_rolls: Roll limit per turn
        log: Optional GameLog receiving roll, score and leader events

    Returns:
        DiceResult with final players and each round's standings
    """
    strategy = strategy or FrequencyKeepStrategy()
    players = tuple(DicePlayer(name) for name in names)
    history = []
    for number in range(1, rounds + 1):
        result = play_dice_round(players, entropy, strategy, number, max_rolls, log)
        players = result.players
        history.append(result)
    return DiceResult(players, tuple(history))
