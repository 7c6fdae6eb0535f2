"""
Round and match state machine: deal choice → (pack choice) → bidding → trump → play → score.

The state is an immutable ``RoundState`` value. Every action is a plain
function ``(state, ...) -> Transition``; an illegal action comes back as a
``Transition`` carrying the untouched prior state and the reason, it never
raises. Automated seats go through exactly the same functions.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Optional, Union

from .bidding import (
    NOBODY,
    bidding_result,
    can_choose_trump,
    check_bid,
    legal_bids,
    legal_trumps,
    next_bidder,
)
from .deal import (
    NUM_SEATS,
    DealOption,
    assign_packs,
    deal_hands,
    first_to_act,
    make_packs,
    next_dealer,
    next_seat,
    pack_face_cards,
    shuffle_deck,
)
from .deck import Card, Suit
from .play import Play, legal_plays, trick_winner
from .scoring import OutcomeKind, RoundOutcome, add_awards, match_winner, score_round

Hand = tuple[Card, ...]
Trick = tuple[Play, ...]


class Phase(str, Enum):
    DEAL_CHOICE = "deal_choice"
    PACK_CHOICE = "pack_choice"
    BIDDING = "bidding"  # includes trump selection once trump_maker is known
    PLAYING = "playing"
    ROUND_END = "round_end"
    GAME_END = "game_end"


class LastTrick(NamedTuple):
    """Most recently completed trick and who won it (display / AI context only)."""
    trick: Trick
    winner: int


_NO_HANDS: tuple[Hand, ...] = ((),) * NUM_SEATS
_NO_TRICKS: tuple[tuple[Trick, ...], ...] = ((),) * NUM_SEATS


@dataclass(frozen=True)
class RoundState:
    """Everything about the current round plus the match-level scores."""

    phase: Phase = Phase.DEAL_CHOICE
    hands: tuple[Hand, ...] = _NO_HANDS
    dealer: int = 0
    current_player: int = 1
    deal_option: Optional[DealOption] = None
    pime_ruutu_bonus: bool = False
    card_packs: tuple[Hand, ...] = ()  # draft deal only, until a pack is chosen
    bids: tuple[Optional[int], ...] = (None,) * NUM_SEATS
    has_passed: tuple[bool, ...] = (False,) * NUM_SEATS
    last_bidder: Optional[int] = None
    trump_suit: Optional[Suit] = None
    trump_maker: int | str | None = None  # seat, NOBODY, or None while undecided
    current_trick: Trick = ()
    lead_player: Optional[int] = None
    tricks_won: tuple[tuple[Trick, ...], ...] = _NO_TRICKS
    round_scores: tuple[int, int] = (0, 0)
    game_scores: tuple[int, int] = (0, 0)
    match_wins: tuple[int, int] = (0, 0)
    last_trick: Optional[LastTrick] = None
    round_outcome: Optional[RoundOutcome] = None

    @property
    def awaiting_trump(self) -> bool:
        """Bidding is over and the trump maker has yet to name trumps."""
        return (
            self.phase == Phase.BIDDING
            and isinstance(self.trump_maker, int)
            and self.trump_suit is None
        )

    def winning_bid(self) -> Optional[int]:
        if isinstance(self.trump_maker, int):
            return self.bids[self.trump_maker]
        return None

    def cards_in_play(self) -> list[Card]:
        """Hands, won tricks, current trick and undrawn packs: the whole deck once dealt."""
        cards: list[Card] = []
        for hand in self.hands:
            cards.extend(hand)
        for tricks in self.tricks_won:
            for trick in tricks:
                cards.extend(c for _, c in trick)
        cards.extend(c for _, c in self.current_trick)
        for pack in self.card_packs:
            cards.extend(pack)
        return cards


@dataclass(frozen=True)
class Transition:
    """Result of an action: the new state, or the unchanged state plus a reason."""

    state: RoundState
    error: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.error is None


def _reject(state: RoundState, reason: str) -> Transition:
    return Transition(state=state, error=reason)


def _accept(state: RoundState) -> Transition:
    return Transition(state=state)


# ---- Actions (what a seat or the table asks the engine to do) ----


@dataclass(frozen=True)
class ChooseDeal:
    option: DealOption


@dataclass(frozen=True)
class ChoosePack:
    index: int


@dataclass(frozen=True)
class PlaceBid:
    seat: int
    amount: int
    reclaim: bool = False


@dataclass(frozen=True)
class Pass:
    seat: int


@dataclass(frozen=True)
class ChooseTrump:
    seat: int
    suit: Suit


@dataclass(frozen=True)
class PlayCard:
    seat: int
    card: Card


@dataclass(frozen=True)
class AdvanceRound:
    pass


@dataclass(frozen=True)
class AdvanceMatch:
    pass


Action = Union[ChooseDeal, ChoosePack, PlaceBid, Pass, ChooseTrump, PlayCard, AdvanceRound, AdvanceMatch]


# ---- Round / match setup ----


def new_game(dealer: int = 0, match_wins: tuple[int, int] = (0, 0)) -> RoundState:
    """Fresh match waiting for the first deal choice."""
    return RoundState(
        dealer=dealer,
        current_player=first_to_act(dealer),
        match_wins=tuple(match_wins),  # type: ignore[arg-type]
    )


def _start_play(state: RoundState, **changes) -> RoundState:
    leader = first_to_act(state.dealer)
    return replace(state, phase=Phase.PLAYING, lead_player=leader, current_player=leader, **changes)


def choose_deal(
    state: RoundState,
    option: DealOption | str,
    rng: random.Random | None = None,
) -> Transition:
    """Deal choice by the seat after the dealer. ``rng`` drives the shuffle."""
    if state.phase != Phase.DEAL_CHOICE:
        return _reject(state, "not choosing a deal")
    try:
        option = DealOption(option)
    except ValueError:
        return _reject(state, f"unknown deal option {option!r}")

    chooser = state.current_player
    deck = shuffle_deck(rng=rng)

    if option == DealOption.DRAFT:
        return _accept(replace(
            state,
            phase=Phase.PACK_CHOICE,
            deal_option=option,
            card_packs=make_packs(deck),
        ))

    hands = deal_hands(deck)
    if option == DealOption.BLIND_TRUMP:
        return _accept(_start_play(
            state,
            hands=hands,
            deal_option=option,
            trump_suit=Suit.DIAMONDS,
            trump_maker=chooser,
            pime_ruutu_bonus=True,
        ))
    return _accept(replace(state, phase=Phase.BIDDING, hands=hands, deal_option=option))


def pack_preview(state: RoundState) -> list[tuple[Card, Card]]:
    """Top and bottom card of each pack: all the chooser may see in a draft deal."""
    return [pack_face_cards(p) for p in state.card_packs]


def choose_pack(state: RoundState, index: int) -> Transition:
    if state.phase != Phase.PACK_CHOICE:
        return _reject(state, "no packs to choose from")
    if not isinstance(index, int) or not 0 <= index < len(state.card_packs):
        return _reject(state, f"no pack {index!r}")
    hands = assign_packs(state.card_packs, index, state.current_player)
    return _accept(replace(
        state,
        phase=Phase.BIDDING,
        hands=hands,
        card_packs=(),
        current_player=first_to_act(state.dealer),
    ))


# ---- Bidding ----


def _check_bidding_turn(state: RoundState, seat: int) -> Optional[str]:
    if state.phase != Phase.BIDDING or state.trump_maker is not None:
        return "not in bidding"
    if seat != state.current_player:
        return f"not seat {seat}'s turn"
    return None


def _after_bidding_move(state: RoundState, seat: int) -> RoundState:
    """Hand the turn on, or close the bidding if it is decided."""
    result = bidding_result(state.bids, state.has_passed)
    if result is None:
        return replace(state, current_player=next_bidder(state.has_passed, seat))
    if result == NOBODY:
        return _start_play(state, trump_maker=NOBODY, trump_suit=Suit.DIAMONDS)
    return replace(state, trump_maker=result, current_player=result)


def bid(state: RoundState, seat: int, amount: int, reclaim: bool = False) -> Transition:
    """Bid ``amount``; with ``reclaim`` match the current high bid (omale)."""
    reason = _check_bidding_turn(state, seat)
    if reason is None:
        reason = check_bid(
            state.hands[seat],
            state.bids,
            state.has_passed,
            state.last_bidder,
            seat,
            amount,
            reclaim,
        )
    if reason is not None:
        return _reject(state, reason)

    bids = list(state.bids)
    bids[seat] = amount
    has_passed = (False,) * NUM_SEATS if reclaim else state.has_passed
    new = replace(state, bids=tuple(bids), has_passed=has_passed, last_bidder=seat)
    return _accept(_after_bidding_move(new, seat))


def pass_bid(state: RoundState, seat: int) -> Transition:
    reason = _check_bidding_turn(state, seat)
    if reason is not None:
        return _reject(state, reason)
    if state.has_passed[seat]:
        return _reject(state, "seat has already passed")
    has_passed = list(state.has_passed)
    has_passed[seat] = True
    new = replace(state, has_passed=tuple(has_passed))
    return _accept(_after_bidding_move(new, seat))


def choose_trump(state: RoundState, seat: int, suit: Suit | str) -> Transition:
    """Name trumps; ``suit`` may also be given by name (``"hearts"``)."""
    if not state.awaiting_trump:
        return _reject(state, "no trump to choose")
    if seat != state.trump_maker:
        return _reject(state, f"seat {seat} is not the trump maker")
    if isinstance(suit, str):
        try:
            suit = Suit[suit.upper()]
        except KeyError:
            return _reject(state, f"unknown suit {suit!r}")
    if not isinstance(suit, Suit):
        return _reject(state, f"unknown suit {suit!r}")
    if not can_choose_trump(state.hands[seat], state.bids[seat] or 0, suit):
        return _reject(state, f"{suit.name.lower()} is not long enough for the bid")
    return _accept(_start_play(state, trump_suit=suit))


# ---- Play ----


def legal_cards(state: RoundState, seat: int) -> list[Card]:
    """Cards ``seat`` may play now (empty when it is not that seat's turn to play)."""
    if state.phase != Phase.PLAYING or seat != state.current_player:
        return []
    return legal_plays(state.hands[seat], state.current_trick, state.trump_suit)


def play_card(state: RoundState, seat: int, card: Card) -> Transition:
    if state.phase != Phase.PLAYING:
        return _reject(state, "not in play")
    if seat != state.current_player:
        return _reject(state, f"not seat {seat}'s turn")
    hand = state.hands[seat]
    if card not in hand:
        return _reject(state, f"{card} is not in seat {seat}'s hand")
    if card not in legal_plays(hand, state.current_trick, state.trump_suit):
        return _reject(state, f"{card} may not be played on this trick")

    hands = list(state.hands)
    hands[seat] = tuple(c for c in hand if c != card)
    trick = state.current_trick + ((seat, card),)

    if len(trick) < NUM_SEATS:
        return _accept(replace(
            state,
            hands=tuple(hands),
            current_trick=trick,
            current_player=next_seat(seat),
        ))

    winner = trick_winner(trick, state.trump_suit)
    tricks_won = list(state.tricks_won)
    tricks_won[winner] = tricks_won[winner] + (trick,)
    new = replace(
        state,
        hands=tuple(hands),
        current_trick=(),
        tricks_won=tuple(tricks_won),
        last_trick=LastTrick(trick=trick, winner=winner),
        lead_player=winner,
        current_player=winner,
    )
    if any(new.hands):
        return _accept(new)
    return _accept(_finish_round(new))


def _finish_round(state: RoundState) -> RoundState:
    outcome = score_round(
        state.tricks_won,
        state.trump_maker,
        state.trump_suit,
        blind_bonus=state.pime_ruutu_bonus,
    )
    return replace(
        state,
        phase=Phase.ROUND_END,
        round_scores=outcome.team_points,
        game_scores=add_awards(state.game_scores, outcome),
        round_outcome=outcome,
    )


# ---- Between rounds / matches ----

# 60-60 rounds score nothing and are dealt again by the same dealer.
_REPLAYED = (OutcomeKind.POKK, OutcomeKind.UNIVERSAL_TIE)


def advance_round(state: RoundState) -> Transition:
    """
    Leave ROUND_END: to GAME_END if a team reached the target, otherwise to the
    next deal choice. After a 60-60 split the same dealer deals again.
    """
    if state.phase != Phase.ROUND_END:
        return _reject(state, "round is not over")
    if match_winner(state.game_scores) is not None:
        return _accept(replace(state, phase=Phase.GAME_END))

    replay = state.round_outcome is not None and state.round_outcome.kind in _REPLAYED
    dealer = state.dealer if replay else next_dealer(state.dealer)
    return _accept(RoundState(
        dealer=dealer,
        current_player=first_to_act(dealer),
        game_scores=state.game_scores,
        match_wins=state.match_wins,
    ))


def advance_match(state: RoundState) -> Transition:
    """Credit the finished match to its winner and start a new one."""
    if state.phase != Phase.GAME_END:
        return _reject(state, "match is not over")
    wins = list(state.match_wins)
    winner = match_winner(state.game_scores)
    if winner is not None:
        wins[winner] += 1
    return _accept(new_game(dealer=next_dealer(state.dealer), match_wins=(wins[0], wins[1])))


# ---- Generic entry points ----


def legal_actions(state: RoundState) -> list[Action]:
    """Every action the engine would accept right now (for UI gating and agents)."""
    seat = state.current_player
    if state.phase == Phase.DEAL_CHOICE:
        return [ChooseDeal(o) for o in DealOption]
    if state.phase == Phase.PACK_CHOICE:
        return [ChoosePack(i) for i in range(len(state.card_packs))]
    if state.phase == Phase.BIDDING:
        if state.awaiting_trump:
            return [ChooseTrump(seat, s) for s in legal_trumps(state.hands[seat], state.bids[seat] or 0)]
        actions: list[Action] = [Pass(seat)]
        for amount, reclaim in legal_bids(
            state.hands[seat], state.bids, state.has_passed, state.last_bidder, seat
        ):
            actions.append(PlaceBid(seat, amount, reclaim))
        return actions
    if state.phase == Phase.PLAYING:
        return [PlayCard(seat, c) for c in legal_cards(state, seat)]
    if state.phase == Phase.ROUND_END:
        return [AdvanceRound()]
    return [AdvanceMatch()]


def apply_action(
    state: RoundState,
    action: Action,
    rng: random.Random | None = None,
) -> Transition:
    """Dispatch an action object to its transition function."""
    if isinstance(action, ChooseDeal):
        return choose_deal(state, action.option, rng=rng)
    if isinstance(action, ChoosePack):
        return choose_pack(state, action.index)
    if isinstance(action, PlaceBid):
        return bid(state, action.seat, action.amount, action.reclaim)
    if isinstance(action, Pass):
        return pass_bid(state, action.seat)
    if isinstance(action, ChooseTrump):
        return choose_trump(state, action.seat, action.suit)
    if isinstance(action, PlayCard):
        return play_card(state, action.seat, action.card)
    if isinstance(action, AdvanceRound):
        return advance_round(state)
    if isinstance(action, AdvanceMatch):
        return advance_match(state)
    raise TypeError(f"Unknown action: {action!r}")
