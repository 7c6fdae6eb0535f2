"""Sasku rules engine (4 players, 36 cards, partnership trick-taking)."""

__version__ = "0.1.0"

from .deck import Card, Rank, Suit, make_deck_36, compare_cards, bidding_value, sort_for_display
from .deal import DealOption, team, partner, shuffle_deck, deal_hands
from .bidding import MIN_BID, NOBODY, can_bid, legal_bids, legal_trumps
from .play import is_trump_class, legal_plays, trick_winner
from .scoring import GAME_TARGET, OutcomeKind, RoundOutcome, score_round
from .game import (
    Phase,
    RoundState,
    Transition,
    new_game,
    choose_deal,
    choose_pack,
    pack_preview,
    bid,
    pass_bid,
    choose_trump,
    play_card,
    legal_cards,
    advance_round,
    advance_match,
    legal_actions,
    apply_action,
)
from .policies import decide_bid, decide_trump, decide_card, next_action
