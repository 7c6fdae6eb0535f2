"""
Heuristic decision policies for automated seats.

Each ``decide_*`` function reads a ``RoundState`` and a seat and returns a
choice that the engine will accept; ``next_action`` wraps them into the
action object for whoever is to move. They never mutate state.
"""
from __future__ import annotations

from typing import Optional, Sequence

from .bidding import MIN_BID, can_bid, highest_bid, legal_trumps
from .deal import DealOption, partner, team
from .deck import Card, Rank, Suit, bidding_value, plain_suit_counts
from .game import (
    Action,
    AdvanceMatch,
    AdvanceRound,
    ChooseDeal,
    ChoosePack,
    ChooseTrump,
    Pass,
    Phase,
    PlaceBid,
    PlayCard,
    RoundState,
    legal_cards,
    pack_preview,
)
from .play import beats_trick, strongest_play

# Hand strength weights (bidding).
ACE_WEIGHT = 3.0
TEN_WEIGHT = 2.5
KING_WEIGHT = 2.0
QUEEN_WEIGHT = 1.5

BID_THRESHOLD = 7.0
WEAK_SPREAD_STRENGTH = 8.0
OVERRULE_PARTNER_STRENGTH = 12.0
OVERRULE_PARTNER_MARGIN = 3
RECLAIM_STRENGTH = 10.0
OPENING_STRENGTH = 5.0
OPENING_CAP = 8

# Trump choice: slight preference for the traditional strong suits.
TRUMP_PREFERENCE = {Suit.CLUBS: 0.5, Suit.SPADES: 0.3, Suit.HEARTS: 0.0, Suit.DIAMONDS: 0.0}

# Deal choice: gamble on pime ruutu when this far behind.
BLIND_TRUMP_DEFICIT = 6


def _plain(card: Card, rank: Rank) -> bool:
    return not card.is_picture and card.rank == rank


def hand_strength(hand: Sequence[Card]) -> float:
    """Weighted count of aces, tens, kings and queens."""
    strength = 0.0
    for c in hand:
        if c.rank == Rank.ACE:
            strength += ACE_WEIGHT
        elif c.rank == Rank.TEN:
            strength += TEN_WEIGHT
        elif c.rank == Rank.KING:
            strength += KING_WEIGHT
        elif c.rank == Rank.QUEEN:
            strength += QUEEN_WEIGHT
    return strength


def has_concentrated_suits(hand: Sequence[Card]) -> bool:
    """One plain suit of 4+, or two of 3+."""
    counts = list(plain_suit_counts(hand).values())
    return any(n >= 4 for n in counts) or sum(1 for n in counts if n >= 3) >= 2


def has_four_suits(hand: Sequence[Card]) -> bool:
    return len(plain_suit_counts(hand)) == 4


def _cheapest(cards: Sequence[Card]) -> Card:
    return min(cards, key=lambda c: (c.points, int(c.rank)))


# ---- Deal / pack ----


def decide_deal(state: RoundState, seat: int) -> DealOption:
    own = state.game_scores[team(seat)]
    other = state.game_scores[1 - team(seat)]
    if other - own >= BLIND_TRUMP_DEFICIT:
        return DealOption.BLIND_TRUMP
    return DealOption.NORMAL


def _visible_value(card: Card) -> int:
    if card.is_picture:
        return 3
    if card.rank == Rank.ACE:
        return 2
    if card.rank == Rank.TEN:
        return 1
    return 0


def decide_pack(state: RoundState, seat: int) -> int:
    """Pick the pack whose top and bottom cards look best."""
    preview = pack_preview(state)
    scores = [_visible_value(top) + _visible_value(bottom) for top, bottom in preview]
    return max(range(len(scores)), key=lambda i: scores[i])


# ---- Bidding ----


def decide_bid(state: RoundState, seat: int) -> Optional[int]:
    """
    Bid amount or None to pass. A returned amount equal to the current highest
    bid is a reclaim.
    """
    hand = state.hands[seat]
    max_bid = bidding_value(hand)
    high = highest_bid(state.bids)
    min_bid = max(MIN_BID, high + 1)
    strength = hand_strength(hand)
    partner_leads = state.last_bidder == partner(seat)

    def ok(amount: int, reclaim: bool = False) -> bool:
        return can_bid(hand, state.bids, state.has_passed, state.last_bidder, seat, amount, reclaim)

    if not partner_leads and strength >= RECLAIM_STRENGTH and ok(high, reclaim=True):
        return high

    if min_bid > max_bid:
        return None

    if has_four_suits(hand) and strength < WEAK_SPREAD_STRENGTH:
        return None

    if partner_leads:
        if strength < OVERRULE_PARTNER_STRENGTH or max_bid < high + OVERRULE_PARTNER_MARGIN:
            return None

    threshold = BID_THRESHOLD
    if seat == state.dealer:
        threshold -= 1
    if has_concentrated_suits(hand):
        threshold -= 1

    if strength >= threshold and ok(min_bid):
        return min_bid

    if high == 0 and max_bid >= MIN_BID + 1 and strength >= OPENING_STRENGTH:
        opening = max(MIN_BID, min(max_bid - 2, OPENING_CAP))
        if ok(opening):
            return opening

    return None


# ---- Trump ----


def decide_trump(state: RoundState, seat: int) -> Suit:
    hand = state.hands[seat]
    counts = plain_suit_counts(hand)
    best_suit = Suit.DIAMONDS
    best_score = -1.0
    for suit in legal_trumps(hand, state.bids[seat] or 0):
        score = float(counts.get(suit, 0))
        if any(_plain(c, Rank.ACE) and c.suit == suit for c in hand):
            score += 5
        if any(_plain(c, Rank.TEN) and c.suit == suit for c in hand):
            score += 4
        if Card(suit, Rank.KING) in hand:
            score += 2
        score += TRUMP_PREFERENCE[suit]
        if score > best_score:
            best_score = score
            best_suit = suit
    return best_suit


# ---- Card play ----


def _choose_lead(legal: list[Card], hand: Sequence[Card]) -> Card:
    counts = plain_suit_counts(hand)

    aces = [c for c in legal if _plain(c, Rank.ACE)]
    if aces:
        return max(aces, key=lambda c: counts.get(c.suit, 0))

    suit_strength: dict[Suit, float] = {}
    for suit in sorted(Suit, reverse=True):
        cards = [c for c in legal if not c.is_picture and c.suit == suit]
        if not cards:
            continue
        strength = float(len(cards))
        if any(c.rank == Rank.TEN for c in cards):
            strength += 2
        if any(c.rank == Rank.NINE for c in cards):
            strength += 0.5
        suit_strength[suit] = strength

    if suit_strength:
        suit = max(suit_strength, key=lambda s: suit_strength[s])
        return max((c for c in legal if not c.is_picture and c.suit == suit), key=lambda c: int(c.rank))

    return _cheapest(legal)


def _choose_follow(legal: list[Card], state: RoundState, seat: int) -> Card:
    trick = state.current_trick
    winners = [c for c in legal if beats_trick(c, trick, state.trump_suit)]
    if winners:
        return _cheapest(winners)

    holder = strongest_play(trick, state.trump_suit)[0]
    ours = team(holder) == team(seat)
    last_to_play = len(trick) == 3

    if ours and last_to_play:
        safe = [c for c in legal if c.rank not in (Rank.KING, Rank.QUEEN)] or legal
        return max(safe, key=lambda c: (c.points, -int(c.rank)))
    if ours:
        by_points = sorted(legal, key=lambda c: (c.points, int(c.rank)))
        return by_points[len(by_points) // 2]
    return _cheapest(legal)


def decide_card(state: RoundState, seat: int) -> Optional[Card]:
    """A legal card for ``seat``, or None if it has none (should not happen on its turn)."""
    legal = legal_cards(state, seat)
    if not legal:
        return None
    if len(legal) == 1:
        return legal[0]
    if not state.current_trick:
        return _choose_lead(legal, state.hands[seat])
    return _choose_follow(legal, state, seat)


# ---- Whole-turn policy ----


def next_action(state: RoundState) -> Optional[Action]:
    """
    Action the heuristic player would take for whoever is to move.
    None only when no legal card could be found in play.
    """
    seat = state.current_player
    if state.phase == Phase.DEAL_CHOICE:
        return ChooseDeal(decide_deal(state, seat))
    if state.phase == Phase.PACK_CHOICE:
        return ChoosePack(decide_pack(state, seat))
    if state.phase == Phase.BIDDING:
        if state.awaiting_trump:
            return ChooseTrump(seat, decide_trump(state, seat))
        amount = decide_bid(state, seat)
        if amount is None:
            return Pass(seat)
        return PlaceBid(seat, amount, reclaim=amount == highest_bid(state.bids))
    if state.phase == Phase.PLAYING:
        card = decide_card(state, seat)
        if card is None:
            return None
        return PlayCard(seat, card)
    if state.phase == Phase.ROUND_END:
        return AdvanceRound()
    return AdvanceMatch()
