"""
RoundState serialization for saving and restoring a game in progress.

The whole state is flattened to a JSON-compatible dict: cards as ids
(``clubs_K``), enums as their string values. Payloads written by an older
schema get the newer fields defaulted; anything else that does not add up
(unknown cards, wrong deck size, bad seats) is rejected with ValueError.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from .bidding import NOBODY
from .deal import HAND_SIZE, NUM_PACKS, NUM_SEATS, DealOption
from .deck import DECK_SIZE, Card, Suit, card_from_id
from .game import LastTrick, Phase, RoundState, new_game
from .scoring import OutcomeKind, RoundOutcome

logger = logging.getLogger(__name__)

# 1: first release. 2: adds match_wins, pime_ruutu_bonus, deal_option,
# card_packs and round_outcome.
SCHEMA_VERSION = 2


def _cards_to_ids(cards) -> List[str]:
    return [c.id for c in cards]


def _trick_to_list(trick) -> List[List[Any]]:
    return [[seat, card.id] for seat, card in trick]


def _suit_to_str(suit: Optional[Suit]) -> Optional[str]:
    return suit.name.lower() if suit is not None else None


def _outcome_to_dict(outcome: Optional[RoundOutcome]) -> Optional[Dict[str, Any]]:
    if outcome is None:
        return None
    return {
        "kind": outcome.kind.value,
        "team_points": list(outcome.team_points),
        "awards": list(outcome.awards),
    }


def state_to_dict(state: RoundState) -> Dict[str, Any]:
    """Serialize a RoundState to a JSON-compatible dict."""
    last_trick = None
    if state.last_trick is not None:
        last_trick = {
            "trick": _trick_to_list(state.last_trick.trick),
            "winner": state.last_trick.winner,
        }
    return {
        "schema_version": SCHEMA_VERSION,
        "phase": state.phase.value,
        "hands": [_cards_to_ids(h) for h in state.hands],
        "dealer": state.dealer,
        "current_player": state.current_player,
        "deal_option": state.deal_option.value if state.deal_option is not None else None,
        "pime_ruutu_bonus": state.pime_ruutu_bonus,
        "card_packs": [_cards_to_ids(p) for p in state.card_packs],
        "bids": list(state.bids),
        "has_passed": list(state.has_passed),
        "last_bidder": state.last_bidder,
        "trump_suit": _suit_to_str(state.trump_suit),
        "trump_maker": state.trump_maker,
        "current_trick": _trick_to_list(state.current_trick),
        "lead_player": state.lead_player,
        "tricks_won": [[_trick_to_list(t) for t in tricks] for tricks in state.tricks_won],
        "round_scores": list(state.round_scores),
        "game_scores": list(state.game_scores),
        "match_wins": list(state.match_wins),
        "last_trick": last_trick,
        "round_outcome": _outcome_to_dict(state.round_outcome),
    }


# ---- Loading ----


def _seat(value: Any, field: str, optional: bool = False) -> Optional[int]:
    if value is None and optional:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < NUM_SEATS:
        raise ValueError(f"{field}: invalid seat {value!r}")
    return value


def _per_seat(d: Dict[str, Any], field: str) -> List[Any]:
    values = d[field]
    if not isinstance(values, list) or len(values) != NUM_SEATS:
        raise ValueError(f"{field}: expected a list of {NUM_SEATS}")
    return values


def _pair(values: Any, field: str) -> tuple[int, int]:
    if not isinstance(values, list) or len(values) != 2:
        raise ValueError(f"{field}: expected two team values")
    return int(values[0]), int(values[1])


def _cards(ids: Any) -> tuple[Card, ...]:
    return tuple(card_from_id(i) for i in ids)


def _trick(plays: Any) -> tuple[tuple[int, Card], ...]:
    return tuple((_seat(seat, "trick"), card_from_id(cid)) for seat, cid in plays)


def _suit(value: Optional[str]) -> Optional[Suit]:
    if value is None:
        return None
    try:
        return Suit[value.upper()]
    except KeyError:
        raise ValueError(f"Unknown suit {value!r}") from None


def _trump_maker(value: Any) -> int | str | None:
    if value is None or value == NOBODY:
        return value
    return _seat(value, "trump_maker")


def _outcome(d: Optional[Dict[str, Any]]) -> Optional[RoundOutcome]:
    if d is None:
        return None
    return RoundOutcome(
        kind=OutcomeKind(d["kind"]),
        team_points=_pair(d["team_points"], "round_outcome.team_points"),
        awards=_pair(d["awards"], "round_outcome.awards"),
    )


def _check_deck(state: RoundState) -> None:
    cards = state.cards_in_play()
    if state.phase == Phase.DEAL_CHOICE:
        if cards:
            raise ValueError("Cards present before the deal")
        return
    if len(cards) != DECK_SIZE or len(set(cards)) != DECK_SIZE:
        raise ValueError(f"Expected the {DECK_SIZE}-card deck in play, found {len(cards)} cards")

    if state.phase == Phase.PACK_CHOICE:
        if any(state.hands) or len(state.card_packs) != NUM_PACKS:
            raise ValueError("Pack choice needs four packs and empty hands")
        if any(len(p) != HAND_SIZE for p in state.card_packs):
            raise ValueError(f"Every pack must hold {HAND_SIZE} cards")
        return
    if state.card_packs:
        raise ValueError("Undrawn packs outside pack choice")

    if any(len(t) != NUM_SEATS for tricks in state.tricks_won for t in tricks):
        raise ValueError("Completed tricks must hold one card per seat")
    in_trick = [seat for seat, _ in state.current_trick]
    if len(in_trick) >= NUM_SEATS or len(set(in_trick)) != len(in_trick):
        raise ValueError("Current trick is not a partial trick")
    completed = sum(len(tricks) for tricks in state.tricks_won)
    for seat, hand in enumerate(state.hands):
        expected = HAND_SIZE - completed - (1 if seat in in_trick else 0)
        if len(hand) != expected:
            raise ValueError(f"Seat {seat} holds {len(hand)} cards, expected {expected}")


def state_from_dict(d: Dict[str, Any]) -> RoundState:
    """
    Deserialize a RoundState from a dict produced by state_to_dict (any schema version).

    Raises ValueError if the payload is missing required fields or does not
    describe a consistent deal.
    """
    try:
        version = int(d.get("schema_version", 1))
        if version > SCHEMA_VERSION:
            raise ValueError(f"Unsupported schema version {version}")

        last_trick = None
        if d.get("last_trick") is not None:
            last_trick = LastTrick(
                trick=_trick(d["last_trick"]["trick"]),
                winner=_seat(d["last_trick"]["winner"], "last_trick.winner"),
            )
        deal_option = d.get("deal_option")

        state = RoundState(
            phase=Phase(d["phase"]),
            hands=tuple(_cards(h) for h in _per_seat(d, "hands")),
            dealer=_seat(d["dealer"], "dealer"),
            current_player=_seat(d["current_player"], "current_player"),
            deal_option=DealOption(deal_option) if deal_option is not None else None,
            pime_ruutu_bonus=bool(d.get("pime_ruutu_bonus", False)),
            card_packs=tuple(_cards(p) for p in d.get("card_packs", [])),
            bids=tuple(None if b is None else int(b) for b in _per_seat(d, "bids")),
            has_passed=tuple(bool(p) for p in _per_seat(d, "has_passed")),
            last_bidder=_seat(d.get("last_bidder"), "last_bidder", optional=True),
            trump_suit=_suit(d["trump_suit"]),
            trump_maker=_trump_maker(d["trump_maker"]),
            current_trick=_trick(d["current_trick"]),
            lead_player=_seat(d["lead_player"], "lead_player", optional=True),
            tricks_won=tuple(
                tuple(_trick(t) for t in tricks) for tricks in _per_seat(d, "tricks_won")
            ),
            round_scores=_pair(d["round_scores"], "round_scores"),
            game_scores=_pair(d["game_scores"], "game_scores"),
            match_wins=_pair(d.get("match_wins", [0, 0]), "match_wins"),
            last_trick=last_trick,
            round_outcome=_outcome(d.get("round_outcome")),
        )
    except (KeyError, TypeError, AttributeError, OverflowError, ValueError) as exc:
        raise ValueError(f"Malformed saved state: {exc!r}") from exc

    _check_deck(state)
    return state


def state_to_json(state: RoundState) -> str:
    return json.dumps(state_to_dict(state), ensure_ascii=False)


def state_from_json(s: str) -> RoundState:
    return state_from_dict(json.loads(s))


def load_state(d: Dict[str, Any] | None) -> RoundState:
    """
    Restore a saved state, or start a fresh match if there is nothing usable.
    """
    if d is None:
        return new_game()
    try:
        return state_from_dict(d)
    except ValueError as exc:
        logger.warning("Discarding saved state: %s", exc)
        return new_game()


def load_state_json(s: str | None) -> RoundState:
    if not s:
        return new_game()
    try:
        d = json.loads(s)
    except ValueError as exc:
        logger.warning("Discarding unreadable saved state: %s", exc)
        return new_game()
    if not isinstance(d, dict):
        logger.warning("Discarding saved state: expected an object, got %s", type(d).__name__)
        return new_game()
    return load_state(d)


__all__ = [
    "SCHEMA_VERSION",
    "state_to_dict",
    "state_from_dict",
    "state_to_json",
    "state_from_json",
    "load_state",
    "load_state_json",
]
