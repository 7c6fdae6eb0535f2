"""
Command-line interface for running automated Sasku games.

Usage examples (after installing in editable mode):

    python -m sasku.cli simulate --matches 10 --seed 1
    python -m sasku.cli random --seed 42 --seat 0
    python -m sasku.cli simulate --matches 1 --save-state final.json
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .agents import RandomAgent
from .env_game import SaskuEnv
from .match import MatchConfig, run_matches
from .persistence import state_to_json


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "simulate",
        help="Play matches with four heuristic seats.",
    )
    parser.add_argument(
        "--matches",
        type=int,
        default=1,
        help="Number of matches to play back to back.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the shuffles.",
    )
    parser.add_argument(
        "--dealer",
        type=int,
        default=0,
        choices=range(4),
        help="Dealer seat of the first round.",
    )
    parser.add_argument(
        "--save-state",
        type=str,
        default=None,
        help="Write the final state as JSON to this path.",
    )
    parser.set_defaults(func=_cmd_simulate)


def _cmd_simulate(args: argparse.Namespace) -> None:
    cfg = MatchConfig(matches=args.matches, seed=args.seed, dealer=args.dealer)
    state = run_matches(cfg)
    print(
        f"matches={cfg.matches} "
        f"team0_wins={state.match_wins[0]} team1_wins={state.match_wins[1]}",
        flush=True,
    )
    if args.save_state:
        out = Path(args.save_state)
        out.write_text(state_to_json(state), encoding="utf-8")
        print(f"Saved state to {out.resolve()}")


def _add_random_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "random",
        help="Play one match with a random agent in one seat and heuristics elsewhere.",
    )
    parser.add_argument(
        "--seat",
        type=int,
        default=0,
        choices=range(4),
        help="Seat controlled by the random agent.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility.",
    )
    parser.set_defaults(func=_cmd_random)


def _cmd_random(args: argparse.Namespace) -> None:
    env = SaskuEnv(learning_seat=args.seat, seed=args.seed)
    agent = RandomAgent(seed=args.seed)

    step = env.reset()
    total_reward = 0.0
    decisions = 0
    while not step.done:
        action = agent.act(step.obs, step.legal_actions_mask)
        step = env.step(action)
        total_reward += step.reward
        decisions += 1

    print(
        f"seat={args.seat} decisions={decisions} "
        f"game_scores={env.state.game_scores} reward={total_reward}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sasku", description="Sasku automated play CLI.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for engine diagnostics.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_simulate_parser(subparsers)
    _add_random_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
