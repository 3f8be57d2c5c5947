"""Game log — records every deal, roll, box fill and round result.

Pure Python, no presentation. The driver appends entries as a simulation
runs; the CLI replays them for display.
"""
from __future__ import annotations

from dataclasses import dataclass

from dice import Category


@dataclass
class LogEntry:
    """A single logged game event."""
    round: int                                  # 1-based
    player: str                                 # "" for round-level events
    event_type: str                             # "deal", "roll", "score", "winner"
    symbols: tuple[str, ...] = ()               # cards or dice, as displayed
    category: Category | str | None = None      # dice box or poker hand label
    score: int | None = None
    roll_number: int = 0                        # 1-3 for rolls
    winners: tuple[str, ...] = ()


class GameLog:
    """Accumulates LogEntry records during a simulation."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def log_deal(self, round_number: int, player: str, cards: list, hand_label: str) -> None:
        """Record a dealt poker hand and its category label."""
        self.entries.append(LogEntry(
            round=round_number,
            player=player,
            event_type="deal",
            symbols=tuple(str(c) for c in cards),
            category=hand_label,
        ))

    def log_roll(self, round_number: int, player: str, roll_number: int, dice: list) -> None:
        """Record a dice roll."""
        self.entries.append(LogEntry(
            round=round_number,
            player=player,
            event_type="roll",
            symbols=tuple(str(d) for d in dice),
            roll_number=roll_number,
        ))

    def log_score(self, round_number: int, player: str, category: Category, score: int, dice: list) -> None:
        """Record a box fill."""
        self.entries.append(LogEntry(
            round=round_number,
            player=player,
            event_type="score",
            symbols=tuple(str(d) for d in dice),
            category=category,
            score=score,
        ))

    def log_winners(self, round_number: int, winners: list[str], score: int | None = None) -> None:
        """Record the winner(s) of a round."""
        self.entries.append(LogEntry(
            round=round_number,
            player="",
            event_type="winner",
            score=score,
            winners=tuple(winners),
        ))

    def get_round_entries(self, round_number: int, player: str | None = None) -> list[LogEntry]:
        """Return entries for a round, optionally for one player only."""
        return [e for e in self.entries
                if e.round == round_number and (player is None or e.player == player)]

    def get_score_entries(self, player: str) -> list[LogEntry]:
        """Return only scoring entries for a player."""
        return [e for e in self.entries
                if e.event_type == "score" and e.player == player]

    def get_winner_entries(self) -> list[LogEntry]:
        return [e for e in self.entries if e.event_type == "winner"]

    def clear(self) -> None:
        """Remove all entries."""
        self.entries = []
