"""
Trick-taking: legal moves and trick winner.
Follow the led suit; otherwise trump. When trumping (or following a trump
lead) you must beat the best card on the table if you can.
Pictures are always trumps and never count as following a plain suit.
"""
from __future__ import annotations

from typing import Optional, Sequence

from .deck import Card, Suit, compare_cards

Play = tuple[int, Card]


def is_trump_class(card: Card, trump_suit: Optional[Suit]) -> bool:
    """Pictures plus plain cards of the trump suit."""
    return card.is_picture or card.suit == trump_suit


def lead_suit(trick: Sequence[Play]) -> Optional[Suit]:
    """Printed suit of the first card of the trick (None for an empty trick)."""
    if not trick:
        return None
    return trick[0][1].suit


def strongest_play(trick: Sequence[Play], trump_suit: Optional[Suit]) -> Play:
    """The (seat, card) currently winning a non-empty trick."""
    led = lead_suit(trick)
    best = trick[0]
    for play in trick[1:]:
        if compare_cards(play[1], best[1], trump_suit, led) > 0:
            best = play
    return best


def trick_winner(trick: Sequence[Play], trump_suit: Optional[Suit]) -> int:
    """Seat that wins the trick. A plain card off both trump and lead suit never wins."""
    if not trick:
        raise ValueError("Empty trick has no winner")
    return strongest_play(trick, trump_suit)[0]


def beats_trick(card: Card, trick: Sequence[Play], trump_suit: Optional[Suit]) -> bool:
    """True if ``card`` played now would take the lead in ``trick``."""
    if not trick:
        return True
    best = strongest_play(trick, trump_suit)[1]
    return compare_cards(card, best, trump_suit, lead_suit(trick)) > 0


def _must_beat(
    trumps: list[Card],
    trick: Sequence[Play],
    trump_suit: Optional[Suit],
) -> list[Card]:
    over = [c for c in trumps if beats_trick(c, trick, trump_suit)]
    if over:
        return over
    return trumps


def legal_plays(
    hand: Sequence[Card],
    trick: Sequence[Play],
    trump_suit: Optional[Suit],
) -> list[Card]:
    """
    Return the cards of ``hand`` that can legally be played on ``trick``.
    trick: list of (seat, card) in the order played.
    """
    if not trick:
        return list(hand)

    lead = trick[0][1]
    trumps = [c for c in hand if is_trump_class(c, trump_suit)]

    if is_trump_class(lead, trump_suit):
        if not trumps:
            return list(hand)
        return _must_beat(trumps, trick, trump_suit)

    followers = [c for c in hand if not c.is_picture and c.suit == lead.suit]
    if followers:
        return followers
    if trumps:
        return _must_beat(trumps, trick, trump_suit)
    return list(hand)


def is_legal_play(
    hand: Sequence[Card],
    trick: Sequence[Play],
    trump_suit: Optional[Suit],
    card: Card,
) -> bool:
    return card in hand and card in legal_plays(hand, trick, trump_suit)
