"""
Sasku deck: 36 cards (4 suits × K, Q, J, A, 10, 9, 8, 7, 6).
Pictures (K, Q, J) are always trumps, whatever their printed suit.
Card values: A=11, 10=10, K=4, Q=3, J=2, others 0 (120 per deck).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional


class Suit(IntEnum):
    """Risti, Poti, Ärtu, Ruutu. Value = strength, only used to split equal pictures."""
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3
    CLUBS = 4


class Rank(IntEnum):
    """Value = strength in a trick: K > Q > J > A > 10 > 9 > 8 > 7 > 6."""
    SIX = 1
    SEVEN = 2
    EIGHT = 3
    NINE = 4
    TEN = 5
    ACE = 6
    JACK = 7
    QUEEN = 8
    KING = 9


PICTURES = (Rank.KING, Rank.QUEEN, Rank.JACK)

CARD_POINTS = {
    Rank.KING: 4,
    Rank.QUEEN: 3,
    Rank.JACK: 2,
    Rank.ACE: 11,
    Rank.TEN: 10,
    Rank.NINE: 0,
    Rank.EIGHT: 0,
    Rank.SEVEN: 0,
    Rank.SIX: 0,
}

RANK_LABELS = {
    Rank.KING: "K",
    Rank.QUEEN: "Q",
    Rank.JACK: "J",
    Rank.ACE: "A",
    Rank.TEN: "10",
    Rank.NINE: "9",
    Rank.EIGHT: "8",
    Rank.SEVEN: "7",
    Rank.SIX: "6",
}

SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
}

DECK_SIZE = 36
DECK_POINTS = 120


@dataclass(frozen=True)
class Card:
    """A single Sasku card. Identity is the (suit, rank) pair."""

    suit: Suit
    rank: Rank

    def __post_init__(self) -> None:
        if not isinstance(self.suit, Suit) or not isinstance(self.rank, Rank):
            raise TypeError(f"Card needs Suit and Rank, got {self.suit!r}, {self.rank!r}")

    @property
    def is_picture(self) -> bool:
        return self.rank in PICTURES

    @property
    def points(self) -> int:
        return CARD_POINTS[self.rank]

    @property
    def id(self) -> str:
        """Stable id such as ``clubs_K`` (used for persistence)."""
        return f"{self.suit.name.lower()}_{RANK_LABELS[self.rank]}"

    def __str__(self) -> str:
        return f"{RANK_LABELS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    def __repr__(self) -> str:
        return str(self)


def make_deck_36() -> list[Card]:
    """Build the full deck, suit-major (strongest suit first), rank descending."""
    return [
        Card(suit, rank)
        for suit in sorted(Suit, reverse=True)
        for rank in sorted(Rank, reverse=True)
    ]


CARDS_BY_ID = {c.id: c for c in make_deck_36()}


def card_from_id(card_id: str) -> Card:
    try:
        return CARDS_BY_ID[card_id]
    except KeyError:
        raise ValueError(f"Unknown card id: {card_id!r}") from None


def compare_cards(
    a: Card,
    b: Card,
    trump_suit: Optional[Suit],
    lead_suit: Optional[Suit],
) -> int:
    """
    Compare two cards in a trick context.

    Returns > 0 if ``a`` wins, < 0 if ``b`` wins, 0 if neither outranks the
    other (two plain cards of different suits, neither trump nor lead suit).
    """
    if a.is_picture and b.is_picture:
        if a.rank != b.rank:
            return int(a.rank) - int(b.rank)
        return int(a.suit) - int(b.suit)
    if a.is_picture:
        return 1
    if b.is_picture:
        return -1

    if a.suit != b.suit:
        if a.suit == trump_suit:
            return 1
        if b.suit == trump_suit:
            return -1
        if a.suit == lead_suit:
            return 1
        if b.suit == lead_suit:
            return -1
        return 0

    return int(a.rank) - int(b.rank)


def count_pictures(hand: Iterable[Card]) -> int:
    return sum(1 for c in hand if c.is_picture)


def plain_suit_counts(hand: Iterable[Card]) -> dict[Suit, int]:
    """Number of non-picture cards per suit (suits with none are omitted)."""
    counts: dict[Suit, int] = {}
    for c in hand:
        if not c.is_picture:
            counts[c.suit] = counts.get(c.suit, 0) + 1
    return counts


def bidding_value(hand: Iterable[Card]) -> int:
    """
    Highest bid a hand may declare: pictures + longest plain suit.
    """
    hand = list(hand)
    counts = plain_suit_counts(hand)
    longest = max(counts.values(), default=0)
    return count_pictures(hand) + longest


def sort_for_display(hand: Iterable[Card], trump_suit: Optional[Suit] = None) -> list[Card]:
    """
    Display order only: pictures (rank, then suit), then trump suit, then the rest
    grouped by suit. Never used for legality.
    """

    def key(c: Card) -> tuple[int, int, int]:
        if c.is_picture:
            return (0, -int(c.rank), -int(c.suit))
        group = 1 if trump_suit is not None and c.suit == trump_suit else 2
        return (group, -int(c.suit), -int(c.rank))

    return sorted(hand, key=key)


def cards_point_total(cards: Iterable[Card]) -> int:
    """Total card points in a set of cards (120 for the whole deck)."""
    return sum(c.points for c in cards)
