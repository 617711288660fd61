"""
Main entry point for GridWorld NN Q-Learning.
=============================================

Commands:
    train   - Train a Q-network on the goal grid (default)
    eval    - Greedy evaluation of a saved checkpoint

Usage:
    gridworld-nn                        # Train with config defaults
    gridworld-nn --episodes 200         # Train flags without the subcommand
    gridworld-nn train --mini-batch     # Mini-batch instead of online SGD
    gridworld-nn eval --checkpoint checkpoints/final.npz
    gridworld-nn --help                 # Show help
"""

from __future__ import annotations

import argparse
import os
import sys

import numpy as np

from .config import AGENT_CONFIG, ENV_CONFIG, NETWORK_CONFIG, PATHS, TRAIN_CONFIG
from .environment import ACTION_NAMES, GoalGridEnv
from .nn import FeedforwardNetwork
from .training import StateEncoder, evaluate, load_checkpoint, save_checkpoint, train
from .utils import mean_state_value, plot_training_stats, q_value_snapshot, render_policy_text


def build_network(args, rng: np.random.Generator) -> FeedforwardNetwork:
    sizes = [StateEncoder.feature_dim, *NETWORK_CONFIG["hidden_sizes"], len(ACTION_NAMES)]
    return FeedforwardNetwork(
        sizes,
        hidden_activation=args.hidden_activation,
        output_activation=NETWORK_CONFIG["output_activation"],
        batch_size=args.batch_size,
        rng=rng,
    )


def print_q_values(network: FeedforwardNetwork, encoder: StateEncoder, x: int, y: int) -> None:
    q = network.predict(encoder.encode_position(x, y))
    print(f"\nQ-values for position ({x}, {y}):")
    for a, name in ACTION_NAMES.items():
        print(f"  {name:>6s}: {q[a]:+8.2f}")


def train_command(args):
    """Run training."""
    rng = np.random.default_rng(args.seed)
    env = GoalGridEnv(width=args.width, height=args.height, max_steps=args.max_steps)
    encoder = StateEncoder(env.width, env.height)
    network = build_network(args, rng)

    mode = f"mini-batch ({network.batch_size})" if args.mini_batch else "online"
    print("=" * 60)
    print("GRIDWORLD NN Q-LEARNING")
    print("=" * 60)
    print(f"  Grid:     {env.width}x{env.height}, goal at {env.goal_pos}")
    print(f"  Network:  {list(network.sizes)} "
          f"({network.hidden_activation.value}/{network.output_activation.value})")
    print(f"  Updates:  {mode}, lr={args.learning_rate}, gamma={args.gamma}")
    print(f"  Episodes: {args.episodes}")
    print("-" * 60)

    summary = train(
        network,
        env,
        encoder,
        n_episodes=args.episodes,
        gamma=args.gamma,
        learning_rate=args.learning_rate,
        loss=NETWORK_CONFIG["loss"],
        mini_batch=args.mini_batch,
        eps_start=AGENT_CONFIG["epsilon_start"],
        eps_end=AGENT_CONFIG["epsilon_end"],
        eps_decay=AGENT_CONFIG["epsilon_decay"],
        schedule=AGENT_CONFIG["schedule"],
        log_interval=TRAIN_CONFIG["log_interval"],
        eval_interval=TRAIN_CONFIG["eval_interval"],
        eval_episodes=TRAIN_CONFIG["eval_episodes"],
        save_interval=TRAIN_CONFIG["save_interval"],
        save_dir=args.save_dir,
        rng=rng,
    )

    n = len(summary["successes"])
    print("-" * 60)
    print("Training Complete!")
    print(f"  Success rate: {100.0 * sum(summary['successes']) / max(1, n):.1f}% ({n} episodes)")
    print(f"  Elapsed:      {summary['elapsed']:.1f}s")

    final_path = os.path.join(args.save_dir, "final.npz")
    save_checkpoint(
        final_path,
        network,
        episode=n,
        epsilon=summary["epsilon"],
        extra={"width": env.width, "height": env.height, "max_steps": env.max_steps},
    )
    print(f"  Saved:        {final_path}")

    snapshot = q_value_snapshot(network, encoder, env.width, env.height)
    print(f"  Mean V:       {mean_state_value(snapshot):+.3f}")
    print("\nGreedy policy:")
    print(render_policy_text(snapshot, env.goal_pos))
    print_q_values(network, encoder, *env.start_pos)

    if args.plot:
        plot_training_stats(summary["rewards"], summary["lengths"], save_path=PATHS["plot_file"])


def eval_command(args):
    """Run greedy evaluation of a checkpoint."""
    network, meta = load_checkpoint(args.checkpoint)
    # Command line wins, then the grid the checkpoint was trained on, then config
    saved = meta.get("extra") or {}
    env_kwargs = {}
    for key in ("width", "height", "max_steps"):
        value = getattr(args, key)
        if value is None:
            value = saved.get(key, ENV_CONFIG[key])
        env_kwargs[key] = int(value)
    env = GoalGridEnv(**env_kwargs, render_mode="ansi")
    encoder = StateEncoder(env.width, env.height)

    print(f"Loaded {args.checkpoint} (episode {meta['episode']}, ε={meta['epsilon']:.4f})")
    print(f"Grid {env.width}x{env.height}, max {env.max_steps} steps")
    ev = evaluate(network, env, encoder, n_episodes=args.episodes)
    print(
        f"Success={ev['success_rate']*100:.1f}% │ "
        f"AvgSteps={ev['avg_steps']:.1f} │ "
        f"Range=[{ev['min_steps']}, {ev['max_steps']}] │ "
        f"AvgReward={ev['avg_reward']:.1f}"
    )
    print("\n" + env.render())


def _add_env_args(p: argparse.ArgumentParser, from_checkpoint: bool = False) -> None:
    for flag, key, label in (
        ("--width", "width", "Grid width"),
        ("--height", "height", "Grid height"),
        ("--max-steps", "max_steps", "Max steps per episode"),
    ):
        if from_checkpoint:
            p.add_argument(flag, type=int, default=None,
                           help=f"{label} (default: from checkpoint, else {ENV_CONFIG[key]})")
        else:
            p.add_argument(flag, type=int, default=ENV_CONFIG[key],
                           help=f"{label} (default: {ENV_CONFIG[key]})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="GridWorld Q-learning with a from-scratch neural network",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gridworld-nn train --episodes 500
  gridworld-nn train --mini-batch --batch-size 32 --plot
  gridworld-nn eval --checkpoint checkpoints/final.npz
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    train_parser = subparsers.add_parser("train", help="Train a Q-network")
    _add_env_args(train_parser)
    train_parser.add_argument("--episodes", type=int, default=TRAIN_CONFIG["n_episodes"])
    train_parser.add_argument("--learning-rate", type=float, default=AGENT_CONFIG["learning_rate"])
    train_parser.add_argument("--gamma", type=float, default=AGENT_CONFIG["discount_factor"])
    train_parser.add_argument("--hidden-activation", default=NETWORK_CONFIG["hidden_activation"],
                              choices=["sigm", "tanh", "relu", "none"])
    train_parser.add_argument("--mini-batch", action="store_true", default=AGENT_CONFIG["mini_batch"],
                              help="Average gradients over --batch-size samples per update")
    train_parser.add_argument("--batch-size", type=int, default=NETWORK_CONFIG["batch_size"])
    train_parser.add_argument("--seed", type=int, default=None, help="Seed for weights and exploration")
    train_parser.add_argument("--save-dir", default=PATHS["save_dir"])
    train_parser.add_argument("--plot", action="store_true", help="Save a training-curve plot")
    train_parser.set_defaults(func=train_command)

    eval_parser = subparsers.add_parser("eval", help="Evaluate a checkpoint greedily")
    _add_env_args(eval_parser, from_checkpoint=True)
    eval_parser.add_argument("--checkpoint", required=True)
    eval_parser.add_argument("--episodes", type=int, default=TRAIN_CONFIG["eval_episodes"])
    eval_parser.set_defaults(func=eval_command)

    return parser


COMMANDS = ("train", "eval")


def main(argv=None):
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)

    # Default to training if no command specified, so bare train flags work too
    if not argv or argv[0] not in (*COMMANDS, "-h", "--help"):
        argv = ["train", *argv]

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
