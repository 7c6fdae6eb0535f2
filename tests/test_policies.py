"""Tests for the heuristic policies used by automated seats."""
import random
from dataclasses import replace

from sasku.bidding import can_bid, legal_trumps
from sasku.deal import DealOption, deal_hands, make_packs, shuffle_deck
from sasku.deck import Card, Suit, bidding_value, card_from_id, make_deck_36
from sasku.game import ChooseDeal, Pass, Phase, PlaceBid, new_game
from sasku.policies import (
    decide_bid,
    decide_card,
    decide_deal,
    decide_pack,
    decide_trump,
    next_action,
)

SUITS = {"C": "clubs", "S": "spades", "H": "hearts", "D": "diamonds"}


def _c(code: str) -> Card:
    return card_from_id(f"{SUITS[code[-1]]}_{code[:-1]}")


def _play_state(seat, hand, trick=(), trump=Suit.CLUBS):
    hands = [(), (), (), ()]
    hands[seat] = tuple(_c(x) for x in hand)
    return replace(
        new_game(),
        phase=Phase.PLAYING,
        hands=tuple(hands),
        trump_suit=trump,
        trump_maker=0,
        current_trick=tuple((s, _c(x)) for s, x in trick),
        current_player=seat,
    )


# ---- Deal / pack ----


def test_decide_deal():
    state = new_game()
    assert decide_deal(state, 1) == DealOption.NORMAL
    behind = replace(state, game_scores=(10, 2))
    assert decide_deal(behind, 1) == DealOption.BLIND_TRUMP
    assert decide_deal(behind, 0) == DealOption.NORMAL


def test_decide_pack_looks_at_face_cards():
    packs = list(make_packs(make_deck_36()))
    packs[2] = tuple(_c(x) for x in ("KH", "JH", "AH", "10H", "9H", "8H", "7H", "6H", "QH"))
    state = replace(new_game(), phase=Phase.PACK_CHOICE, card_packs=tuple(packs))
    assert decide_pack(state, 1) == 2


# ---- Bidding ----


def test_bids_are_always_acceptable():
    for seed in range(40):
        hands = deal_hands(shuffle_deck(rng=random.Random(seed)))
        state = replace(new_game(), phase=Phase.BIDDING, hands=hands)
        for seat in range(4):
            amount = decide_bid(state, seat)
            if amount is None:
                continue
            assert amount <= bidding_value(hands[seat])
            assert can_bid(hands[seat], state.bids, state.has_passed, state.last_bidder, seat, amount)


def test_defers_to_partner():
    hands = deal_hands(make_deck_36())  # seat 2 holds all hearts
    state = replace(
        new_game(),
        phase=Phase.BIDDING,
        hands=hands,
        bids=(6, None, None, None),
        last_bidder=0,
    )
    assert decide_bid(state, 2) is None
    opponent = replace(state, bids=(None, 6, None, None), last_bidder=1)
    assert decide_bid(opponent, 2) == 7


def test_decide_trump_is_legal():
    for seed in range(40):
        hands = deal_hands(shuffle_deck(rng=random.Random(seed)))
        seat = 1
        amount = min(bidding_value(hands[seat]), 9)
        if amount < 5:
            continue
        bids = [None] * 4
        bids[seat] = amount
        state = replace(
            new_game(),
            phase=Phase.BIDDING,
            hands=hands,
            bids=tuple(bids),
            has_passed=(True, False, True, True),
            last_bidder=seat,
            trump_maker=seat,
            current_player=seat,
        )
        assert decide_trump(state, seat) in legal_trumps(hands[seat], amount)


def test_prefers_suit_with_ace():
    hand = [_c(x) for x in ("KC", "QC", "JC", "AS", "10S", "9S", "8S", "7H", "6H")]
    state = replace(
        new_game(),
        phase=Phase.BIDDING,
        hands=(tuple(hand), (), (), ()),
        bids=(7, None, None, None),
        trump_maker=0,
        current_player=0,
    )
    assert decide_trump(state, 0) == Suit.SPADES


# ---- Card play ----


def test_lead_ace_of_longest_suit():
    state = _play_state(1, ["AH", "6S", "AS", "7S", "8D"])
    assert decide_card(state, 1) == _c("AS")


def test_lead_without_aces_uses_strongest_suit():
    state = _play_state(1, ["10H", "6H", "9S", "8D"])
    assert decide_card(state, 1) == _c("10H")


def test_takes_trick_with_cheapest_winner():
    state = _play_state(1, ["10S", "AS", "6H"], trick=[(0, "9S")])
    assert decide_card(state, 1) == _c("10S")


def test_throws_cheapest_when_opponents_hold_trick():
    state = _play_state(1, ["6H", "AH", "10S"], trick=[(0, "KD")])
    assert decide_card(state, 1) == _c("6H")


def test_loads_points_on_partner_when_last():
    state = _play_state(1, ["AH", "10H", "6D"], trick=[(2, "9S"), (3, "KD"), (0, "6S")])
    assert decide_card(state, 1) == _c("AH")


def test_moderate_points_when_partner_holds_trick_early():
    state = _play_state(1, ["AH", "10H", "6D"], trick=[(3, "KD"), (0, "6S")])
    assert decide_card(state, 1) == _c("10H")


def test_no_card_when_not_on_turn():
    state = _play_state(1, ["AH"])
    assert decide_card(state, 2) is None


# ---- next_action ----


def test_next_action_by_phase():
    assert next_action(new_game()) == ChooseDeal(DealOption.NORMAL)

    hands = deal_hands(make_deck_36())
    state = replace(new_game(), phase=Phase.BIDDING, hands=hands)
    action = next_action(state)
    assert isinstance(action, (Pass, PlaceBid))
    assert action.seat == 1
    if isinstance(action, PlaceBid):
        assert not action.reclaim
