"""
Observation / action encoding for agents.

- A fixed global action space covering every decision in a match (deal
  option, pack, pass, bid amount, trump suit, card, advance).
- ``legal_action_mask`` mirrors ``game.legal_actions`` over that space.
- ``encode_observation`` turns a RoundState into a flat float32 vector from
  one seat's point of view (own hand only; other hands stay hidden).
"""
from __future__ import annotations

from typing import Iterable

import numpy as np

from .bidding import MIN_BID, NOBODY, highest_bid
from .deal import HAND_SIZE, NUM_PACKS, NUM_SEATS, DealOption, team
from .deck import DECK_SIZE, Card, Suit, make_deck_36
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
    legal_actions,
)
from .scoring import GAME_TARGET

NUM_CARDS: int = DECK_SIZE
DEAL_OPTIONS: tuple[DealOption, ...] = tuple(DealOption)
TRUMP_ORDER: tuple[Suit, ...] = tuple(sorted(Suit, reverse=True))
BID_AMOUNTS: tuple[int, ...] = tuple(range(MIN_BID, HAND_SIZE + 1))

DEAL_OFFSET: int = 0
PACK_OFFSET: int = DEAL_OFFSET + len(DEAL_OPTIONS)
PASS_ACTION: int = PACK_OFFSET + NUM_PACKS
BID_OFFSET: int = PASS_ACTION + 1
TRUMP_OFFSET: int = BID_OFFSET + len(BID_AMOUNTS)
CARD_OFFSET: int = TRUMP_OFFSET + len(TRUMP_ORDER)
ADVANCE_ACTION: int = CARD_OFFSET + NUM_CARDS
NUM_ACTIONS: int = ADVANCE_ACTION + 1  # 3 + 4 + 1 + 5 + 4 + 36 + 1 = 54

PHASES: tuple[Phase, ...] = tuple(Phase)

_CARD_INDEX = {c: i for i, c in enumerate(make_deck_36())}
_INDEX_CARD = {i: c for c, i in _CARD_INDEX.items()}


def card_index(card: Card) -> int:
    """Stable index 0..35 matching make_deck_36() order (suit-major, strongest first)."""
    return _CARD_INDEX[card]


def encode_card_set(cards: Iterable[Card]) -> np.ndarray:
    """Binary 36-dim vector: 1.0 where the card is present."""
    vec = np.zeros(NUM_CARDS, dtype=np.float32)
    for c in cards:
        vec[card_index(c)] = 1.0
    return vec


def _one_hot(index: int | None, size: int) -> np.ndarray:
    vec = np.zeros(size, dtype=np.float32)
    if index is not None and 0 <= index < size:
        vec[index] = 1.0
    return vec


# ---- Actions ----


def action_index(action: Action) -> int:
    """Position of an engine action in the global action space."""
    if isinstance(action, ChooseDeal):
        return DEAL_OFFSET + DEAL_OPTIONS.index(DealOption(action.option))
    if isinstance(action, ChoosePack):
        return PACK_OFFSET + action.index
    if isinstance(action, Pass):
        return PASS_ACTION
    if isinstance(action, PlaceBid):
        return BID_OFFSET + BID_AMOUNTS.index(action.amount)
    if isinstance(action, ChooseTrump):
        return TRUMP_OFFSET + TRUMP_ORDER.index(action.suit)
    if isinstance(action, PlayCard):
        return CARD_OFFSET + card_index(action.card)
    if isinstance(action, (AdvanceRound, AdvanceMatch)):
        return ADVANCE_ACTION
    raise TypeError(f"Unknown action: {action!r}")


def action_from_index(state: RoundState, index: int) -> Action:
    """
    Engine action for ``index`` on behalf of whoever is to move. The result is
    not checked for legality; the engine does that when it is applied.
    """
    seat = state.current_player
    if not 0 <= index < NUM_ACTIONS:
        raise ValueError(f"Action index out of range: {index}")
    if index < PACK_OFFSET:
        return ChooseDeal(DEAL_OPTIONS[index - DEAL_OFFSET])
    if index < PASS_ACTION:
        return ChoosePack(index - PACK_OFFSET)
    if index == PASS_ACTION:
        return Pass(seat)
    if index < TRUMP_OFFSET:
        amount = BID_AMOUNTS[index - BID_OFFSET]
        return PlaceBid(seat, amount, reclaim=amount == highest_bid(state.bids))
    if index < CARD_OFFSET:
        return ChooseTrump(seat, TRUMP_ORDER[index - TRUMP_OFFSET])
    if index < ADVANCE_ACTION:
        return PlayCard(seat, _INDEX_CARD[index - CARD_OFFSET])
    if state.phase == Phase.GAME_END:
        return AdvanceMatch()
    return AdvanceRound()


def legal_action_mask(state: RoundState) -> np.ndarray:
    """Boolean mask over NUM_ACTIONS; True exactly where the engine would accept."""
    mask = np.zeros(NUM_ACTIONS, dtype=bool)
    for action in legal_actions(state):
        mask[action_index(action)] = True
    return mask


# ---- Observations ----


def encode_observation(state: RoundState, seat: int) -> np.ndarray:
    """
    Flat observation for ``seat``:

    - 4 × 36 card bits: own hand, current trick, all cards already won,
      cards won by own team
    - trump suit one-hot (4), phase one-hot (6)
    - seat, dealer and current player one-hots (4 each)
    - trump maker one-hot (4 seats + "nobody")
    - bids / 9 and pass flags (4 + 4), rotated so index 0 is ``seat``
    - game scores / 16, own team first (2)
    """
    hand_vec = encode_card_set(state.hands[seat])
    trick_vec = encode_card_set(c for _, c in state.current_trick)
    won_all: list[Card] = []
    won_team: list[Card] = []
    for s in range(NUM_SEATS):
        for trick in state.tricks_won[s]:
            cards = [c for _, c in trick]
            won_all.extend(cards)
            if team(s) == team(seat):
                won_team.extend(cards)

    trump = None if state.trump_suit is None else TRUMP_ORDER.index(state.trump_suit)
    if state.trump_maker == NOBODY:
        maker = NUM_SEATS
    else:
        maker = state.trump_maker if isinstance(state.trump_maker, int) else None

    order = [(seat + k) % NUM_SEATS for k in range(NUM_SEATS)]
    bids = np.array(
        [(state.bids[s] or 0) / HAND_SIZE for s in order], dtype=np.float32
    )
    passed = np.array([1.0 if state.has_passed[s] else 0.0 for s in order], dtype=np.float32)
    own = team(seat)
    scores = np.array(
        [state.game_scores[own] / GAME_TARGET, state.game_scores[1 - own] / GAME_TARGET],
        dtype=np.float32,
    )

    return np.concatenate([
        hand_vec,
        trick_vec,
        encode_card_set(won_all),
        encode_card_set(won_team),
        _one_hot(trump, len(TRUMP_ORDER)),
        _one_hot(PHASES.index(state.phase), len(PHASES)),
        _one_hot(seat, NUM_SEATS),
        _one_hot(state.dealer, NUM_SEATS),
        _one_hot(state.current_player, NUM_SEATS),
        _one_hot(maker, NUM_SEATS + 1),
        bids,
        passed,
        scores,
    ])


OBS_DIM: int = 4 * NUM_CARDS + len(TRUMP_ORDER) + len(PHASES) + 3 * NUM_SEATS + (NUM_SEATS + 1) + 2 * NUM_SEATS + 2


__all__ = [
    "NUM_CARDS",
    "NUM_ACTIONS",
    "OBS_DIM",
    "PASS_ACTION",
    "ADVANCE_ACTION",
    "DEAL_OFFSET",
    "PACK_OFFSET",
    "BID_OFFSET",
    "TRUMP_OFFSET",
    "CARD_OFFSET",
    "card_index",
    "encode_card_set",
    "action_index",
    "action_from_index",
    "legal_action_mask",
    "encode_observation",
]
