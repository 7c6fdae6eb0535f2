"""
Seats, dealing and deal options.

Seats 0..3 sit in play order; teams are {0, 2} and {1, 3}. The seat after
the dealer chooses how to deal, speaks first and leads the first trick.
"""
from __future__ import annotations

import random
from enum import Enum
from typing import Sequence

from .deck import Card, DECK_SIZE, make_deck_36

NUM_SEATS = 4
HAND_SIZE = 9
NUM_PACKS = 4


class DealOption(str, Enum):
    """How the seat after the dealer wants the cards dealt."""
    NORMAL = "normal"
    BLIND_TRUMP = "blind_trump"  # pime ruutu: diamonds are trumps, no bidding
    DRAFT = "draft"              # valida: pick one of four packs


def team(seat: int) -> int:
    return seat % 2


def partner(seat: int) -> int:
    return (seat + 2) % NUM_SEATS


def next_seat(seat: int) -> int:
    return (seat + 1) % NUM_SEATS


def next_dealer(dealer: int) -> int:
    """Dealer rotates in play direction (0 -> 1 -> 2 -> 3 -> 0)."""
    return next_seat(dealer)


def first_to_act(dealer: int) -> int:
    """The seat after the dealer chooses the deal, bids first and leads first."""
    return next_seat(dealer)


def shuffle_deck(deck: Sequence[Card] | None = None, rng: random.Random | None = None) -> list[Card]:
    """Return a shuffled copy of ``deck`` (a fresh 36-card deck if None)."""
    if deck is None:
        deck = make_deck_36()
    if rng is None:
        rng = random.Random()
    shuffled = list(deck)
    rng.shuffle(shuffled)
    return shuffled


def deal_hands(deck: Sequence[Card]) -> tuple[tuple[Card, ...], ...]:
    """Split a (shuffled) deck into four 9-card hands: cards 0-8 to seat 0, and so on."""
    if len(deck) != DECK_SIZE:
        raise ValueError(f"Expected {DECK_SIZE} cards, got {len(deck)}")
    return tuple(tuple(deck[i * HAND_SIZE:(i + 1) * HAND_SIZE]) for i in range(NUM_SEATS))


def make_packs(deck: Sequence[Card]) -> tuple[tuple[Card, ...], ...]:
    """Draft deal: the shuffled deck is cut into four 9-card packs."""
    return deal_hands(deck)


def pack_face_cards(pack: Sequence[Card]) -> tuple[Card, Card]:
    """The two cards a chooser may see: top and bottom of the pack."""
    return pack[0], pack[-1]


def assign_packs(
    packs: Sequence[Sequence[Card]],
    chosen: int,
    chooser: int,
) -> tuple[tuple[Card, ...], ...]:
    """
    Chooser takes pack ``chosen``; the remaining packs, in pack order, go to
    the following seats in turn order. Returns hands indexed by seat.
    """
    hands: list[tuple[Card, ...]] = [()] * NUM_SEATS
    hands[chooser] = tuple(packs[chosen])
    rest = [tuple(p) for i, p in enumerate(packs) if i != chosen]
    seat = chooser
    for pack in rest:
        seat = next_seat(seat)
        hands[seat] = pack
    return tuple(hands)
