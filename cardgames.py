#!/usr/bin/env python3
"""
Command-line entry point for the card and dice simulations.

Usage:
    python cardgames.py                          # Default: poker
    python cardgames.py --game yahtzee --seed 7  # Dice game, reproducible
    python cardgames.py --game pipeline          # Deck combinator walkthrough
    python cardgames.py --players Ann Ben --verbose
"""
import argparse
import logging

from rich import box
from rich.console import Console
from rich.table import Table

from entropy import SeededEntropy
from game_log import GameLog
from settings import load_settings
from simulation import play_dice, play_poker, run_deck_pipeline
from strategy import FrequencyKeepStrategy, RandomKeepStrategy

STRATEGIES = {
    "frequency": FrequencyKeepStrategy,
    "random": RandomKeepStrategy,
}


def build_parser():
    parser = argparse.ArgumentParser(description="Poker and Yahtzee simulations")
    parser.add_argument("--game", choices=["poker", "yahtzee", "pipeline"], default="poker",
                        help="Simulation to run (default: poker)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the entropy provider (default: from settings, else random)")
    parser.add_argument("--players", nargs="+", default=None,
                        help="Player names in seat order")
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="frequency",
                        help="Dice re-roll strategy")
    parser.add_argument("--settings", default=None,
                        help="Path to a JSON settings file")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log engine decisions to stderr")
    return parser


def render_pipeline(console, entropy):
    def show(label, deck):
        console.print(f"[bold]{label}[/bold] ({len(deck)}): {deck}")

    _, drawn = run_deck_pipeline(entropy, observer=show)
    console.print(f"Drawn card: [bold]{drawn}[/bold]")


def render_poker(console, names, entropy, hand_size):
    log = GameLog()
    result = play_poker(names, entropy, hand_size=hand_size, log=log)

    for poker_round in result.rounds:
        table = Table(title=f"Round {poker_round.number}", box=box.SIMPLE_HEAVY)
        table.add_column("Player", justify="left")
        table.add_column("Hand", justify="left")
        table.add_column("Category", justify="left")
        for entry in log.get_round_entries(poker_round.number):
            if entry.event_type == "deal":
                table.add_row(entry.player, " ".join(entry.symbols), entry.category)
        console.print(table)
        label = "Winner" if len(poker_round.winners) == 1 else "Tie between"
        console.print(f"{label}: {', '.join(poker_round.winners)}\n")

    render_totals(console, "Final Score", result.tally.as_dict(), "Wins",
                  result.overall_winners)
    console.print(f"Cards left in deck: {len(result.deck)}")


def render_dice(console, names, entropy, strategy, rounds, max_rolls):
    log = GameLog()
    result = play_dice(names, entropy, strategy=strategy, rounds=rounds,
                       max_rolls=max_rolls, log=log)

    for dice_round in result.rounds:
        table = Table(title=f"Round {dice_round.number}", box=box.SIMPLE_HEAVY)
        table.add_column("Player", justify="left")
        table.add_column("Rolls", justify="left")
        table.add_column("Box", justify="left")
        table.add_column("Points", justify="right")
        table.add_column("Total", justify="right")
        for player in dice_round.players:
            entries = log.get_round_entries(dice_round.number, player.name)
            rolls = " → ".join(" ".join(e.symbols) for e in entries if e.event_type == "roll")
            scored = next(e for e in entries if e.event_type == "score")
            table.add_row(player.name, rolls, scored.category.value, str(scored.score),
                          str(player.score_card.get_grand_total()))
        console.print(table)
        console.print(f"Round {dice_round.number} leader(s): {', '.join(dice_round.leaders)} "
                      f"with {dice_round.top_score} points\n")

    render_totals(console, "Final Score", result.totals, "Points", result.overall_winners)


def render_totals(console, title, totals, column, winners):
    table = Table(title=title, box=box.DOUBLE_EDGE)
    table.add_column("Player", justify="center")
    table.add_column(column, justify="right")
    for name, value in sorted(totals.items(), key=lambda kv: kv[1], reverse=True):
        table.add_row(name, str(value))
    console.print(table)
    if len(winners) == 1:
        console.print(f"Overall winner: [bold]{winners[0]}[/bold]")
    elif winners:
        console.print(f"Overall tie between: [bold]{', '.join(winners)}[/bold]")


def main(argv=None, console=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    settings = load_settings(args.settings)
    seed = args.seed if args.seed is not None else settings["seed"]
    names = args.players or settings["players"]
    entropy = SeededEntropy(seed)
    console = console or Console()

    if args.game == "pipeline":
        render_pipeline(console, entropy)
    elif args.game == "poker":
        render_poker(console, names, entropy, settings["hand_size"])
    else:
        render_dice(console, names, entropy, STRATEGIES[args.strategy](),
                    settings["yahtzee_rounds"], settings["max_rolls"])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
