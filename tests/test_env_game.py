"""Smoke tests for SaskuEnv."""
import numpy as np

from sasku.agents import RandomAgent
from sasku.env import NUM_ACTIONS, OBS_DIM
from sasku.env_game import SaskuEnv
from sasku.game import Phase


def test_random_agent_plays_a_full_match():
    env = SaskuEnv(learning_seat=0, seed=42)
    agent = RandomAgent(seed=42)

    step = env.reset()
    assert not step.done
    assert step.obs.shape == (OBS_DIM,)
    assert step.legal_actions_mask.shape == (NUM_ACTIONS,)
    assert env.state.current_player == 0

    total_reward = 0.0
    steps = 0
    while not step.done and steps < 5_000:
        assert step.legal_actions_mask.any(), "There should always be at least one legal action"
        step = env.step(agent.act(step.obs, step.legal_actions_mask))
        assert "error" not in step.info
        total_reward += step.reward
        steps += 1

    assert step.done
    assert env.state.phase == Phase.GAME_END
    scores = env.state.game_scores
    assert total_reward == float(scores[0] - scores[1])
    assert max(scores) >= 16


def test_illegal_action_is_reported_and_ignored():
    env = SaskuEnv(learning_seat=2, seed=7)
    step = env.reset()
    illegal = int(np.flatnonzero(~step.legal_actions_mask)[0])
    before = env.state

    result = env.step(illegal)
    assert not result.done
    assert "error" in result.info
    assert env.state is before
    assert np.array_equal(result.legal_actions_mask, step.legal_actions_mask)


def test_step_after_done_is_terminal():
    env = SaskuEnv(learning_seat=1, seed=3)
    agent = RandomAgent(seed=3)
    step = env.reset()
    while not step.done:
        step = env.step(agent.act(step.obs, step.legal_actions_mask))
    again = env.step(0)
    assert again.done
    assert again.reward == 0.0
    assert not again.legal_actions_mask.any()
