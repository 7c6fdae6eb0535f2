"""
Bidding for 4 players.

First to speak = seat after the dealer; speaking goes round the table over the
seats that have not passed. A bid is the number of tricks-worth the bidder
promises (5 and up), capped by the hand's bidding value. A seat whose earlier
bid has been overtaken may come back with exactly the current high bid
("omale"); that reopens the bidding for everyone.
"""
from __future__ import annotations

from typing import Optional, Sequence

from .deal import NUM_SEATS, next_seat
from .deck import Card, Suit, bidding_value, count_pictures, plain_suit_counts

MIN_BID = 5

# trump_maker when everyone passed: diamonds are trumps "over the village".
NOBODY = "none"

Bids = Sequence[Optional[int]]


def highest_bid(bids: Bids) -> int:
    """Highest bid placed so far (0 if none), including seats that later passed."""
    return max((b for b in bids if b is not None), default=0)


def check_bid(
    hand: Sequence[Card],
    bids: Bids,
    has_passed: Sequence[bool],
    last_bidder: Optional[int],
    seat: int,
    amount: int,
    reclaim: bool = False,
) -> Optional[str]:
    """
    Return None if ``seat`` may bid ``amount``, otherwise the reason it may not.
    Turn order is checked by the caller.
    """
    if not isinstance(amount, int) or isinstance(amount, bool):
        return "bid must be a whole number"
    if has_passed[seat]:
        return "seat has already passed"
    if amount < MIN_BID:
        return f"bid must be at least {MIN_BID}"
    if amount > bidding_value(hand):
        return "bid exceeds the hand's bidding value"
    high = highest_bid(bids)
    if not reclaim:
        if amount <= high:
            return "bid must exceed the current highest bid"
        return None
    own = bids[seat]
    if own is None:
        return "only a seat that has already bid may reclaim"
    if last_bidder == seat:
        return "seat already holds the highest bid"
    if own >= high:
        return "earlier bid is not below the highest bid"
    if amount != high:
        return "reclaim must match the current highest bid"
    return None


def can_bid(
    hand: Sequence[Card],
    bids: Bids,
    has_passed: Sequence[bool],
    last_bidder: Optional[int],
    seat: int,
    amount: int,
    reclaim: bool = False,
) -> bool:
    return check_bid(hand, bids, has_passed, last_bidder, seat, amount, reclaim) is None


def legal_bids(
    hand: Sequence[Card],
    bids: Bids,
    has_passed: Sequence[bool],
    last_bidder: Optional[int],
    seat: int,
) -> list[tuple[int, bool]]:
    """All (amount, reclaim) bids ``seat`` could make right now."""
    out: list[tuple[int, bool]] = []
    high = highest_bid(bids)
    if can_bid(hand, bids, has_passed, last_bidder, seat, high, reclaim=True):
        out.append((high, True))
    for amount in range(max(MIN_BID, high + 1), bidding_value(hand) + 1):
        if can_bid(hand, bids, has_passed, last_bidder, seat, amount):
            out.append((amount, False))
    return out


def next_bidder(has_passed: Sequence[bool], seat: int) -> int:
    """Next seat after ``seat`` that is still in the bidding (``seat`` itself if alone)."""
    s = seat
    for _ in range(NUM_SEATS):
        s = next_seat(s)
        if not has_passed[s]:
            return s
    return seat


def bidding_result(bids: Bids, has_passed: Sequence[bool]) -> int | str | None:
    """
    Outcome of the bidding so far:
    - NOBODY if all four passed,
    - the seat that won if three passed and the fourth holds a bid,
    - None while bidding continues.
    """
    active = [s for s in range(NUM_SEATS) if not has_passed[s]]
    if not active:
        return NOBODY
    if len(active) == 1 and bids[active[0]] is not None:
        return active[0]
    return None


def can_choose_trump(hand: Sequence[Card], bid: int, suit: Suit) -> bool:
    """
    Diamonds are always allowed. Another suit needs at least
    (bid - pictures) plain cards of that suit in hand.
    """
    if suit == Suit.DIAMONDS:
        return True
    needed = bid - count_pictures(hand)
    return plain_suit_counts(hand).get(suit, 0) >= needed


def legal_trumps(hand: Sequence[Card], bid: int) -> list[Suit]:
    """Suits the trump maker may name, strongest first."""
    return [s for s in sorted(Suit, reverse=True) if can_choose_trump(hand, bid, s)]
