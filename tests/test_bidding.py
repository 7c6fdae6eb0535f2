"""Tests for bidding rules and the bidding / trump phase of the state machine."""
from dataclasses import replace

from sasku.bidding import (
    NOBODY,
    bidding_result,
    can_bid,
    can_choose_trump,
    highest_bid,
    legal_bids,
    legal_trumps,
    next_bidder,
)
from sasku.deal import deal_hands
from sasku.deck import Card, Suit, card_from_id, make_deck_36
from sasku.game import Phase, bid, choose_trump, new_game, pass_bid

SUITS = {"C": "clubs", "S": "spades", "H": "hearts", "D": "diamonds"}


def _c(code: str) -> Card:
    return card_from_id(f"{SUITS[code[-1]]}_{code[:-1]}")


def _bidding_state(dealer: int = 0):
    # Unshuffled deal: seat 0 all clubs, 1 spades, 2 hearts, 3 diamonds (bidding value 9 each)
    return replace(new_game(dealer=dealer), phase=Phase.BIDDING, hands=deal_hands(make_deck_36()))


def _apply(state, *moves):
    for move in moves:
        kind, seat, *rest = move
        if kind == "bid":
            t = bid(state, seat, *rest)
        else:
            t = pass_bid(state, seat)
        assert t.accepted, (move, t.error)
        state = t.state
    return state


# ---- Pure helpers ----


def test_highest_bid():
    assert highest_bid([None, None, None, None]) == 0
    assert highest_bid([6, None, 8, None]) == 8


def test_can_bid_limits():
    hand = [_c(x) for x in ("KC", "QD", "JS", "AH", "10H", "9H", "6S", "7C", "8D")]  # value 6
    no_bids = [None] * 4
    passed = [False] * 4
    assert can_bid(hand, no_bids, passed, None, 0, 5)
    assert can_bid(hand, no_bids, passed, None, 0, 6)
    assert not can_bid(hand, no_bids, passed, None, 0, 7)
    assert not can_bid(hand, no_bids, passed, None, 0, 4)
    assert not can_bid(hand, [None, 6, None, None], passed, 1, 0, 6)
    assert not can_bid(hand, no_bids, [True, False, False, False], None, 0, 5)


def test_reclaim_rules():
    hand = make_deck_36()[:9]  # value 9
    passed = [False] * 4
    bids = [6, 8, None, None]
    assert can_bid(hand, bids, passed, 1, 0, 8, reclaim=True)
    assert not can_bid(hand, bids, passed, 1, 0, 9, reclaim=True)
    # never bid / already highest
    assert not can_bid(hand, bids, passed, 1, 2, 8, reclaim=True)
    assert not can_bid(hand, bids, passed, 1, 1, 8, reclaim=True)


def test_legal_bids_include_reclaim():
    hand = make_deck_36()[:9]
    options = legal_bids(hand, [6, 8, None, None], [False] * 4, 1, 0)
    assert options == [(8, True), (9, False)]


def test_next_bidder_and_result():
    assert next_bidder([False, True, True, False], 0) == 3
    assert next_bidder([False, True, True, True], 0) == 0
    assert bidding_result([None, 8, None, None], [True, False, True, True]) == 1
    assert bidding_result([None] * 4, [True] * 4) == NOBODY
    assert bidding_result([None] * 4, [True, True, True, False]) is None
    assert bidding_result([6, 8, None, None], [False, False, True, True]) is None


def test_trump_choice_requirement():
    hand = [_c(x) for x in ("KC", "QD", "AH", "10H", "9H", "8H", "6S", "7C", "8D")]
    # 2 pictures; bid 6 needs 4 plain cards of the suit
    assert can_choose_trump(hand, 6, Suit.HEARTS)
    assert not can_choose_trump(hand, 6, Suit.CLUBS)
    assert can_choose_trump(hand, 6, Suit.DIAMONDS)
    assert legal_trumps(hand, 6) == [Suit.HEARTS, Suit.DIAMONDS]
    assert not can_choose_trump(hand, 7, Suit.HEARTS)


# ---- State machine ----


def test_bidding_starts_after_dealer():
    state = _bidding_state(dealer=0)
    assert state.current_player == 1
    t = bid(state, 2, 6)
    assert not t.accepted
    assert t.state is state


def test_bid_rejections_leave_state_unchanged():
    state = _bidding_state()
    for amount in (4, 10, 6.5, "7", True):
        t = bid(state, 1, amount)
        assert not t.accepted
        assert t.state is state
    state = _apply(state, ("bid", 1, 7))
    t = bid(state, 2, 7)
    assert not t.accepted
    assert t.state is state


def test_three_passes_decide_the_trump_maker():
    # A=1 bids 7, B=2 bids 8, C=3 and D=0 pass, A passes
    state = _apply(
        _bidding_state(),
        ("bid", 1, 7),
        ("bid", 2, 8),
        ("pass", 3),
        ("pass", 0),
        ("pass", 1),
    )
    assert state.phase == Phase.BIDDING
    assert state.trump_maker == 2
    assert state.current_player == 2
    assert state.awaiting_trump
    assert state.winning_bid() == 8
    # no more bidding once decided
    assert not bid(state, 2, 9).accepted


def test_reclaim_reopens_bidding():
    # A=1 bids 6, B=2 bids 8, C/D pass, A reclaims 8
    state = _apply(
        _bidding_state(),
        ("bid", 1, 6),
        ("bid", 2, 8),
        ("pass", 3),
        ("pass", 0),
    )
    assert state.current_player == 1
    assert not bid(state, 1, 8).accepted
    state = _apply(state, ("bid", 1, 8, True))
    assert state.has_passed == (False, False, False, False)
    assert state.bids[1] == 8
    assert state.last_bidder == 1
    assert state.current_player == 2
    assert state.trump_maker is None


def test_all_pass_plays_diamonds_without_trump_maker():
    state = _apply(_bidding_state(), ("pass", 1), ("pass", 2), ("pass", 3), ("pass", 0))
    assert state.phase == Phase.PLAYING
    assert state.trump_maker == NOBODY
    assert state.trump_suit == Suit.DIAMONDS
    assert state.lead_player == 1
    assert state.current_player == 1


def test_last_seat_without_bid_still_speaks():
    state = _apply(_bidding_state(), ("pass", 1), ("pass", 2), ("pass", 3))
    assert state.phase == Phase.BIDDING
    assert state.trump_maker is None
    assert state.current_player == 0
    state = _apply(state, ("bid", 0, 5))
    assert state.trump_maker == 0


def test_choose_trump():
    state = _apply(
        _bidding_state(),
        ("bid", 1, 7),
        ("bid", 2, 8),
        ("pass", 3),
        ("pass", 0),
        ("pass", 1),
    )
    # seat 2 holds all hearts: 3 pictures, 6 plain hearts
    assert not choose_trump(state, 1, Suit.HEARTS).accepted
    t = choose_trump(state, 2, Suit.CLUBS)
    assert not t.accepted
    assert t.state is state
    t = choose_trump(state, 2, Suit.HEARTS)
    assert t.accepted
    played = t.state
    assert played.phase == Phase.PLAYING
    assert played.trump_suit == Suit.HEARTS
    assert played.lead_player == 1
    assert played.current_player == 1
    assert choose_trump(state, 2, Suit.DIAMONDS).accepted


def test_trump_by_name():
    state = _apply(
        _bidding_state(),
        ("bid", 1, 7),
        ("bid", 2, 8),
        ("pass", 3),
        ("pass", 0),
        ("pass", 1),
    )
    t = choose_trump(state, 2, "hearts")
    assert t.accepted
    assert t.state.trump_suit == Suit.HEARTS
    for bad in ("stars", "clubs", 3):
        t = choose_trump(state, 2, bad)
        assert not t.accepted
        assert t.state is state
