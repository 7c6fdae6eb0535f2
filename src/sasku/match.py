"""
Drive rounds and matches with automated seats.

Each seat is a controller ``(state) -> action | None``; by default every seat
uses the heuristic ``next_action``. Controller moves go through
``apply_action`` like any human move. A controller that finds no move, or
whose move the engine rejects, is logged and replaced by the first legal
action so a game never stalls.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from .game import (
    Action,
    Phase,
    RoundState,
    Transition,
    advance_match,
    apply_action,
    legal_actions,
    new_game,
)
from .policies import next_action

logger = logging.getLogger(__name__)

Controller = Callable[[RoundState], Optional[Action]]


@dataclass
class MatchConfig:
    """Settings for a batch of automated matches."""

    matches: int = 1
    seed: int | None = None
    dealer: int = 0
    # Safety cap on actions per match; a match normally needs a few hundred.
    max_actions: int = 20_000


def fallback_action(state: RoundState) -> Action:
    """First legal action (for play: the first card satisfying the legality rule)."""
    actions = legal_actions(state)
    if not actions:
        raise RuntimeError(f"No legal action in phase {state.phase.value} for seat {state.current_player}")
    return actions[0]


def auto_step(
    state: RoundState,
    rng: random.Random | None = None,
    controllers: Mapping[int, Controller] | None = None,
) -> Transition:
    """Let whoever is to move act once."""
    controller: Controller = next_action
    if controllers and state.phase not in (Phase.ROUND_END, Phase.GAME_END):
        controller = controllers.get(state.current_player, next_action)

    action = controller(state)
    if action is None:
        logger.error(
            "No move from controller for seat %d in %s; using fallback",
            state.current_player,
            state.phase.value,
        )
        return apply_action(state, fallback_action(state), rng=rng)

    result = apply_action(state, action, rng=rng)
    if not result.accepted:
        logger.error("Move %r rejected (%s); using fallback", action, result.error)
        result = apply_action(state, fallback_action(state), rng=rng)
    return result


def play_round(
    state: RoundState,
    rng: random.Random | None = None,
    controllers: Mapping[int, Controller] | None = None,
) -> RoundState:
    """Play from the current state until the round is over (ROUND_END)."""
    if state.phase in (Phase.ROUND_END, Phase.GAME_END):
        return state
    while state.phase != Phase.ROUND_END:
        state = auto_step(state, rng=rng, controllers=controllers).state
    return state


def run_match(
    state: RoundState | None = None,
    rng: random.Random | None = None,
    controllers: Mapping[int, Controller] | None = None,
    max_actions: int = 20_000,
) -> RoundState:
    """Play rounds until the match is decided (GAME_END)."""
    if state is None:
        state = new_game()
    if rng is None:
        rng = random.Random()
    steps = 0
    while state.phase != Phase.GAME_END:
        if steps >= max_actions:
            raise RuntimeError(f"Match did not finish within {max_actions} actions")
        state = auto_step(state, rng=rng, controllers=controllers).state
        steps += 1
    logger.info("Match over: game scores %s, dealer %d", state.game_scores, state.dealer)
    return state


def run_matches(
    cfg: MatchConfig,
    controllers: Mapping[int, Controller] | None = None,
) -> RoundState:
    """
    Play ``cfg.matches`` matches back to back. Returns the state right after the
    last match has been credited (a fresh DEAL_CHOICE with updated match wins).
    """
    rng = random.Random(cfg.seed)
    state = new_game(dealer=cfg.dealer)
    for i in range(cfg.matches):
        state = run_match(state, rng=rng, controllers=controllers, max_actions=cfg.max_actions)
        state = advance_match(state).state
        logger.debug("After match %d: match wins %s", i + 1, state.match_wins)
    return state
