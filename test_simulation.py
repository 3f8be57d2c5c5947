"""
Simulation Driver Test Suite

Sections:
    1. Deck pipeline — stage order and final draw
    2. Poker — dealing, round winners, ties, win tally, logging
    3. Dice — turns, rounds, repeated Yahtzee bonus, full game
"""
import pytest

from deck import Deck
from dice import BOXES, Category, ScoreCard
from entropy import ScriptedEntropy, SeededEntropy
from game_log import GameLog
from simulation import (
    DicePlayer, PokerPlayer, WinTally,
    deal_round, leaders, play_dice, play_dice_round, play_poker,
    run_deck_pipeline, run_poker, take_turn,
)
from strategy import FrequencyKeepStrategy, RandomKeepStrategy
from symbols import Card, Rank, Suit

SEATS = ("Alice", "Bob", "Diana")


def seated(*names):
    return [PokerPlayer(name) for name in names]


# ═══════════════════════════════════════════════════════════════════════════════
# 1. DECK PIPELINE
# ═══════════════════════════════════════════════════════════════════════════════

class TestDeckPipeline:

    @pytest.mark.parametrize("seed", [0, 1, 42])
    def test_draws_ace_of_spades_whatever_the_shuffle(self, seed):
        remaining, drawn = run_deck_pipeline(SeededEntropy(seed))
        assert drawn == Card(Suit.SPADES, Rank.ACE)
        assert len(remaining) == 13
        assert remaining[0] == Card(Suit.DIAMONDS, Rank.KING)

    def test_no_hearts_and_only_prime_ranks_left(self):
        remaining, _ = run_deck_pipeline(SeededEntropy(5))
        middle = list(remaining)[1:]
        assert all(c.suit != Suit.HEARTS for c in middle)
        assert {c.rank for c in middle} == {Rank.TWO, Rank.THREE, Rank.FIVE, Rank.SEVEN}

    def test_observer_sees_every_stage(self):
        stages = []
        run_deck_pipeline(SeededEntropy(1), observer=lambda label, deck: stages.append((label, len(deck))))
        assert [label for label, _ in stages[:6]] == [
            "Fresh deck", "Shuffled", "Sorted", "Kept 2, 3, 5, 7", "Removed Hearts", "Forked and merged",
        ]
        assert [size for _, size in stages] == [52, 52, 52, 16, 12, 14, 13]
        assert stages[-1][0].startswith("Drew A♠")


# ═══════════════════════════════════════════════════════════════════════════════
# 2. POKER
#    Unshuffled deck, top is the last card (Ace of Spades):
#      round 1: Alice royal flush, Bob 9-high straight flush, Diana high card
#      round 2: Alice Q-high straight flush beats Bob's 7-high
#      round 3: Diana K-high straight flush beats Alice's 10-high
# ═══════════════════════════════════════════════════════════════════════════════

class TestDealRound:

    def test_deals_top_cards_in_seat_order(self):
        deck, players = deal_round(Deck.standard(), seated(*SEATS))
        assert len(deck) == 37
        assert players[0].hand == tuple(Card(Suit.SPADES, r) for r in
                                        (Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE))
        assert players[1].hand == tuple(Card(Suit.SPADES, r) for r in
                                        (Rank.FIVE, Rank.SIX, Rank.SEVEN, Rank.EIGHT, Rank.NINE))
        assert players[2].hand == (
            Card(Suit.HEARTS, Rank.KING), Card(Suit.HEARTS, Rank.ACE),
            Card(Suit.SPADES, Rank.TWO), Card(Suit.SPADES, Rank.THREE), Card(Suit.SPADES, Rank.FOUR),
        )

    def test_short_deck_deals_nothing(self):
        short = Deck.standard()[:14]
        deck, players = deal_round(short, seated(*SEATS))
        assert deck == short
        assert all(p.hand == () for p in players)


class TestRunPoker:

    def test_unshuffled_deck_plays_three_rounds(self):
        result = run_poker(Deck.standard(), seated(*SEATS))
        assert [r.winners for r in result.rounds] == [("Alice",), ("Alice",), ("Diana",)]
        assert result.tally.as_dict() == {"Alice": 2, "Diana": 1}
        assert len(result.deck) == 7
        assert result.overall_winners == ["Alice"]

    def test_hands_reset_between_rounds(self):
        result = run_poker(Deck.standard(), seated(*SEATS))
        first, second = result.rounds[0], result.rounds[1]
        assert set(first.players[0].hand).isdisjoint(second.players[0].hand)

    def test_tied_hands_credit_every_winner(self):
        ben = [Card(Suit.DIAMONDS, Rank.TWO), Card(Suit.HEARTS, Rank.FOUR),
               Card(Suit.SPADES, Rank.SIX), Card(Suit.CLUBS, Rank.EIGHT),
               Card(Suit.DIAMONDS, Rank.TEN)]
        ann = [Card(Suit.CLUBS, Rank.TWO), Card(Suit.DIAMONDS, Rank.FOUR),
               Card(Suit.HEARTS, Rank.SIX), Card(Suit.SPADES, Rank.EIGHT),
               Card(Suit.CLUBS, Rank.TEN)]
        # Ann draws first, from the top (end) of the deck
        result = run_poker(Deck(tuple(ben + ann)), seated("Ann", "Ben"))
        assert result.rounds[0].winners == ("Ann", "Ben")
        assert result.tally.as_dict() == {"Ann": 1, "Ben": 1}
        assert result.overall_winners == ["Ann", "Ben"]

    def test_no_players_plays_no_rounds(self):
        result = run_poker(Deck.standard(), [])
        assert result.rounds == ()
        assert len(result.deck) == 52

    def test_starting_tally_is_carried(self):
        result = run_poker(Deck.standard(), seated(*SEATS), tally=WinTally((("Bob", 5),)))
        assert result.tally.as_dict()["Bob"] == 5
        assert result.overall_winners == ["Bob"]

    def test_log_records_deals_and_winners(self):
        log = GameLog()
        run_poker(Deck.standard(), seated(*SEATS), log=log)
        deals = [e for e in log.get_round_entries(1) if e.event_type == "deal"]
        assert [(e.player, e.category) for e in deals] == [
            ("Alice", "Royal Flush"), ("Bob", "Straight Flush"), ("Diana", "High Card"),
        ]
        assert [e.winners for e in log.get_winner_entries()] == [("Alice",), ("Alice",), ("Diana",)]

    def test_input_deck_unchanged(self):
        deck = Deck.standard()
        run_poker(deck, seated(*SEATS))
        assert deck == Deck.standard()


class TestPlayPoker:

    def test_seeded_game_is_reproducible(self):
        a = play_poker(SEATS, SeededEntropy(8))
        b = play_poker(SEATS, SeededEntropy(8))
        assert a == b

    def test_fifty_two_cards_three_players(self):
        result = play_poker(SEATS, SeededEntropy(3))
        assert len(result.rounds) == 3
        assert len(result.deck) == 7
        assert sum(result.tally.as_dict().values()) >= 3


class TestWinTally:

    def test_add_win_counts(self):
        tally = WinTally().add_win("A").add_win("B").add_win("A")
        assert tally.as_dict() == {"A": 2, "B": 1}
        assert tally.leaders() == ["A"]

    def test_add_win_returns_new_tally(self):
        tally = WinTally()
        tally.add_win("A")
        assert tally.as_dict() == {}

    def test_add_wins_and_tied_leaders(self):
        assert WinTally().add_wins(["A", "B"]).leaders() == ["A", "B"]

    def test_leaders_of_nothing(self):
        assert leaders({}) == []
        assert WinTally().leaders() == []


# ═══════════════════════════════════════════════════════════════════════════════
# 3. DICE
# ═══════════════════════════════════════════════════════════════════════════════

class TestTakeTurn:

    def test_turn_fills_one_box(self):
        player = take_turn(DicePlayer("Ann"), ScriptedEntropy([3]), FrequencyKeepStrategy())
        assert player.score_card.scores == {Category.YAHTZEE: 50}
        assert len(player.cup) == 5

    def test_second_yahtzee_earns_bonus(self):
        player = take_turn(DicePlayer("Ann"), ScriptedEntropy([3]), FrequencyKeepStrategy())
        player = take_turn(player, ScriptedEntropy([3]), FrequencyKeepStrategy())
        assert player.score_card.scores == {Category.YAHTZEE: 50, Category.FOUR_OF_KIND: 15}
        assert player.score_card.yahtzee_bonus_count == 1
        assert player.score_card.get_grand_total() == 165

    def test_log_records_rolls_then_score(self):
        log = GameLog()
        take_turn(DicePlayer("Ann"), SeededEntropy(2), FrequencyKeepStrategy(), round_number=4, log=log)
        kinds = [e.event_type for e in log.get_round_entries(4, "Ann")]
        assert kinds[-1] == "score"
        assert 1 <= kinds.count("roll") <= 3


class TestPlayDice:

    def test_round_gives_every_player_a_turn(self):
        players = (DicePlayer("Ann"), DicePlayer("Ben"))
        result = play_dice_round(players, SeededEntropy(1), FrequencyKeepStrategy())
        assert [len(p.score_card.boxes) for p in result.players] == [1, 1]
        assert result.top_score == max(p.score_card.get_grand_total() for p in result.players)

    def test_full_game_completes_every_card(self):
        result = play_dice(["Ann", "Ben", "Cy"], SeededEntropy(11))
        assert len(result.rounds) == 13
        assert all(p.score_card.is_complete() for p in result.players)

    def test_one_new_box_per_round(self):
        result = play_dice(["Ann", "Ben"], SeededEntropy(6))
        for dice_round in result.rounds:
            for player in dice_round.players:
                assert len(player.score_card.boxes) == dice_round.number

    def test_totals_match_score_cards(self):
        result = play_dice(["Ann", "Ben"], SeededEntropy(9), strategy=RandomKeepStrategy())
        for player in result.players:
            card = player.score_card
            expected = (sum(card.scores.values()) + card.get_upper_section_bonus()
                        + card.yahtzee_bonuses())
            assert result.totals[player.name] == expected

    def test_overall_winners_hold_top_total(self):
        result = play_dice(["Ann", "Ben"], SeededEntropy(13))
        best = max(result.totals.values())
        assert result.overall_winners == [n for n, t in result.totals.items() if t == best]

    def test_seeded_game_is_reproducible(self):
        a = play_dice(["Ann", "Ben"], SeededEntropy(30))
        b = play_dice(["Ann", "Ben"], SeededEntropy(30))
        assert a == b

    def test_zero_rounds(self):
        result = play_dice(["Ann", "Ben"], SeededEntropy(1), rounds=0)
        assert result.rounds == ()
        assert result.totals == {"Ann": 0, "Ben": 0}
        assert result.overall_winners == ["Ann", "Ben"]

    def test_log_has_one_score_per_player_per_round(self):
        log = GameLog()
        play_dice(["Ann", "Ben"], SeededEntropy(2), rounds=4, log=log)
        assert len(log.get_score_entries("Ann")) == 4
        assert len(log.get_winner_entries()) == 4

    def test_cards_start_empty(self):
        assert DicePlayer("Ann").score_card == ScoreCard()
        assert len(BOXES) == 13
