"""
Environment wrapper around the Sasku engine for agents.

Design:
- Single-agent view: one learning seat per env instance; the other three
  seats (and table actions such as advancing to the next round) are played
  by the heuristic policies.
- Episode = one match, until a team reaches the game target.
- Reward is given only at the end of the match: learning team's game points
  minus the opponents'.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .deal import team
from .env import NUM_ACTIONS, OBS_DIM, action_from_index, encode_observation, legal_action_mask
from .game import Phase, RoundState, apply_action, new_game
from .match import auto_step


@dataclass
class StepResult:
    """Container returned by SaskuEnv.step/reset."""

    obs: np.ndarray
    reward: float
    done: bool
    info: dict
    legal_actions_mask: np.ndarray


class SaskuEnv:
    """
    Sasku environment (single learning seat, full match episodes).

    Public API (Gym-like, without the dependency):
      - reset() -> StepResult
      - step(action: int) -> StepResult
    """

    def __init__(
        self,
        learning_seat: int = 0,
        seed: Optional[int] = None,
        max_steps: int = 20_000,
    ) -> None:
        assert 0 <= learning_seat < 4
        self.learning_seat = learning_seat
        self.rng = random.Random(seed)
        self.max_steps = max_steps
        self._state: RoundState = new_game()
        self._steps = 0
        self._done = True

    @property
    def state(self) -> RoundState:
        return self._state

    # ---- Public API ----

    def reset(self) -> StepResult:
        """Start a new match and return the first decision for the learning seat."""
        self._state = new_game(dealer=self.rng.randrange(4))
        self._steps = 0
        self._done = False
        return self._advance_to_decision()

    def step(self, action: int) -> StepResult:
        """
        Apply an action index for the learning seat. An illegal index leaves the
        state unchanged and is reported in ``info["error"]``.
        """
        if self._done:
            return self._terminal()
        move = action_from_index(self._state, int(action))
        result = apply_action(self._state, move, rng=self.rng)
        if not result.accepted:
            return StepResult(
                obs=encode_observation(self._state, self.learning_seat),
                reward=0.0,
                done=False,
                info={"phase": self._state.phase.value, "error": result.error},
                legal_actions_mask=legal_action_mask(self._state),
            )
        self._state = result.state
        self._steps += 1
        return self._advance_to_decision()

    # ---- Internal helpers ----

    def _is_learning_turn(self) -> bool:
        return (
            self._state.phase not in (Phase.ROUND_END, Phase.GAME_END)
            and self._state.current_player == self.learning_seat
        )

    def _advance_to_decision(self) -> StepResult:
        """Let the other seats play until the learning seat must act or the match ends."""
        while self._state.phase != Phase.GAME_END and not self._is_learning_turn():
            if self._steps >= self.max_steps:
                raise RuntimeError(f"Episode did not finish within {self.max_steps} steps")
            self._state = auto_step(self._state, rng=self.rng).state
            self._steps += 1

        if self._state.phase == Phase.GAME_END:
            self._done = True
            own = team(self.learning_seat)
            scores = self._state.game_scores
            return StepResult(
                obs=encode_observation(self._state, self.learning_seat),
                reward=float(scores[own] - scores[1 - own]),
                done=True,
                info={"phase": Phase.GAME_END.value, "game_scores": scores},
                legal_actions_mask=np.zeros(NUM_ACTIONS, dtype=bool),
            )

        return StepResult(
            obs=encode_observation(self._state, self.learning_seat),
            reward=0.0,
            done=False,
            info={"phase": self._state.phase.value},
            legal_actions_mask=legal_action_mask(self._state),
        )

    def _terminal(self) -> StepResult:
        return StepResult(
            obs=np.zeros(OBS_DIM, dtype=np.float32),
            reward=0.0,
            done=True,
            info={"phase": "done"},
            legal_actions_mask=np.zeros(NUM_ACTIONS, dtype=bool),
        )
