"""
Round scoring: team card points, outcome and game points.
120 card points per round; the trump maker's team needs 61.
Diamonds contracts pay double; jänn (< 30) and pime ruutu add +2 each;
karvane (all 9 tricks) pays 6. First team to 16 game points wins the match.
"""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional, Sequence

from .bidding import NOBODY
from .deal import NUM_SEATS, partner, team
from .deck import Card, Suit, cards_point_total

GAME_TARGET = 16
POINTS_TO_MAKE = 61
JANN_LIMIT = 30

UNIVERSAL_WIN = 2
SWEEP = 6
BASE_DIAMONDS = 4
BASE_OTHER = 2
DEFEAT_BONUS = 2
JANN_BONUS = 2
BLIND_BONUS = 2

Trick = Sequence[tuple[int, Card]]


class OutcomeKind(str, Enum):
    UNIVERSAL = "universal"          # everyone passed, higher team scores
    UNIVERSAL_TIE = "universal_tie"  # everyone passed, 60-60
    SWEEP = "sweep"                  # karvane: one team took all 9 tricks
    POKK = "pokk"                    # 60-60 with a trump maker, round is replayed
    MADE = "made"
    DEFEATED = "defeated"


class RoundOutcome(NamedTuple):
    kind: OutcomeKind
    team_points: tuple[int, int]
    awards: tuple[int, int]  # game points added per team


def team_points(tricks_won: Sequence[Sequence[Trick]]) -> tuple[int, int]:
    """Card points per team over every trick its two seats won."""
    points = [0, 0]
    for seat in range(NUM_SEATS):
        for trick in tricks_won[seat]:
            points[team(seat)] += cards_point_total(c for _, c in trick)
    return points[0], points[1]


def team_tricks(tricks_won: Sequence[Sequence[Trick]], seat: int) -> int:
    """Tricks taken by ``seat`` and its partner."""
    return len(tricks_won[seat]) + len(tricks_won[partner(seat)])


def _award(scoring_team: int, amount: int) -> tuple[int, int]:
    awards = [0, 0]
    awards[scoring_team] = amount
    return awards[0], awards[1]


def score_round(
    tricks_won: Sequence[Sequence[Trick]],
    trump_maker: int | str | None,
    trump_suit: Optional[Suit],
    blind_bonus: bool = False,
) -> RoundOutcome:
    """Classify a finished round and compute the game points it awards."""
    points = team_points(tricks_won)

    if trump_maker is None or trump_maker == NOBODY:
        if points[0] == points[1]:
            return RoundOutcome(OutcomeKind.UNIVERSAL_TIE, points, (0, 0))
        winner = 0 if points[0] > points[1] else 1
        return RoundOutcome(OutcomeKind.UNIVERSAL, points, _award(winner, UNIVERSAL_WIN))

    makers = team(trump_maker)
    defenders = 1 - makers
    extra = BLIND_BONUS if blind_bonus else 0

    taken = team_tricks(tricks_won, trump_maker)
    if taken == 9:
        return RoundOutcome(OutcomeKind.SWEEP, points, _award(makers, SWEEP + extra))
    if taken == 0:
        return RoundOutcome(OutcomeKind.SWEEP, points, _award(defenders, SWEEP + extra))

    if points[makers] == points[defenders]:
        return RoundOutcome(OutcomeKind.POKK, points, (0, 0))

    base = BASE_DIAMONDS if trump_suit == Suit.DIAMONDS else BASE_OTHER
    if points[makers] >= POINTS_TO_MAKE:
        amount = base + extra
        if points[defenders] < JANN_LIMIT:
            amount += JANN_BONUS
        return RoundOutcome(OutcomeKind.MADE, points, _award(makers, amount))

    amount = base + DEFEAT_BONUS + extra
    if points[makers] < JANN_LIMIT:
        amount += JANN_BONUS
    return RoundOutcome(OutcomeKind.DEFEATED, points, _award(defenders, amount))


def add_awards(game_scores: Sequence[int], outcome: RoundOutcome) -> tuple[int, int]:
    return game_scores[0] + outcome.awards[0], game_scores[1] + outcome.awards[1]


def match_winner(game_scores: Sequence[int], target: int = GAME_TARGET) -> Optional[int]:
    """Team that has reached ``target`` game points (the higher one if both), else None."""
    reached = [t for t in (0, 1) if game_scores[t] >= target]
    if not reached:
        return None
    return max(reached, key=lambda t: game_scores[t])
