"""
Simple baseline agents and the generic policy interface.

The small ``Policy`` protocol is the contract used by ``SaskuEnv`` callers:
``act(obs, legal_actions_mask) -> action_index``. The heuristic seats in
``policies`` work on the full RoundState instead and are not Policies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

import numpy as np


class Policy(Protocol):
    """Decision policy working on flat observations."""

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """
        Choose an action index given an observation and a boolean legal-action mask.

        Implementations must only return indices where ``legal_actions_mask[i]`` is
        true; callers are free to validate or fall back to a default if needed.
        """


@dataclass
class RandomAgent:
    """
    Baseline policy that samples uniformly among legal actions.

    Usage:
        agent = RandomAgent(seed=42)
        action = agent.act(obs, legal_actions_mask)
    """

    seed: int | None = None
    _rng: np.random.Generator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = np.random.default_rng(self.seed)

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """Pick a random legal action given an observation and a boolean mask."""
        mask = np.asarray(list(legal_actions_mask), dtype=bool)
        legal = np.flatnonzero(mask)
        if legal.size == 0:
            raise ValueError("No legal actions available for RandomAgent")
        return int(self._rng.choice(legal))


__all__ = ["Policy", "RandomAgent"]
