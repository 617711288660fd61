"""Core Q-learning training loop.

One transition at a time: act epsilon-greedily, step the environment, turn
the transition into a Bellman target and take one network step. No replay
buffer, no target network.

Design goals
------------
- Keep the control flow readable.
- Separate concerns:
    * env interaction
    * network update (QUpdateRule)
    * evaluation / checkpoint hooks
"""

from __future__ import annotations

import os
import time
from collections import deque

import numpy as np

from ..environment import GoalGridEnv
from ..nn import FeedforwardNetwork, LossFunction
from .checkpoint import save_checkpoint
from .encoder import StateEncoder
from .eval import evaluate
from .policy import EpsilonGreedyPolicy
from .q_update import QUpdateRule, Transition
from .schedules import exponential_epsilon, linear_epsilon


def epsilon_for(episode: int, schedule: str, start: float, end: float, decay: float) -> float:
    """Epsilon at ``episode`` (0-based).

    ``decay`` is the per-episode factor for the exponential schedule and the
    number of decay episodes for the linear one.
    """
    if schedule == "exponential":
        return exponential_epsilon(episode, start, end, decay)
    if schedule == "linear":
        return linear_epsilon(episode, start, end, int(decay))
    raise ValueError(f"Unknown epsilon schedule: {schedule!r}")


def train(
    network: FeedforwardNetwork,
    env: GoalGridEnv,
    encoder: StateEncoder,
    *,
    n_episodes: int = 1000,
    # Q-learning
    gamma: float = 0.9,
    learning_rate: float = 0.09,
    loss: str | LossFunction = LossFunction.MSE,
    mini_batch: bool = False,
    # Exploration
    eps_start: float = 0.9,
    eps_end: float = 0.05,
    eps_decay: float = 0.995,
    schedule: str = "exponential",
    # Logging
    log_interval: int = 50,
    eval_interval: int = 0,
    eval_episodes: int = 1,
    save_interval: int = 0,
    save_dir: str = "./checkpoints",
    rng: np.random.Generator | int | None = None,
) -> dict:
    """Train ``network`` on ``env`` for ``n_episodes``.

    Only ``terminated`` masks the bootstrap; a truncated episode still
    bootstraps from its last state.

    Returns summary dict:
      rewards, lengths, successes, losses, evals, epsilon, elapsed
    """
    rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
    policy = EpsilonGreedyPolicy(network, int(env.action_space.n), rng=rng)
    rule = QUpdateRule(network, gamma=gamma, learning_rate=learning_rate, loss=loss, mini_batch=mini_batch)

    if save_interval > 0:
        os.makedirs(save_dir, exist_ok=True)

    # Rolling stats for logs.
    recent_rewards = deque(maxlen=100)
    recent_successes = deque(maxlen=100)
    recent_losses = deque(maxlen=500)

    episode_rewards: list[float] = []
    episode_lengths: list[int] = []
    episode_successes: list[bool] = []
    episode_losses: list[float] = []
    evals: list[dict] = []

    start_time = time.time()
    eps = float(eps_start)

    for ep in range(1, int(n_episodes) + 1):
        obs, _ = env.reset()
        s = encoder.encode(obs)

        eps = epsilon_for(ep - 1, schedule, eps_start, eps_end, eps_decay)

        ep_reward = 0.0
        ep_loss = 0.0
        steps = 0
        done = False
        reached_goal = False

        while not done:
            steps += 1

            # --- Action selection (epsilon-greedy) ---------------------------
            action = policy.select(s, eps)

            # --- Env step -----------------------------------------------------
            next_obs, reward, terminated, truncated, _ = env.step(action)
            done = bool(terminated or truncated)
            if terminated:
                reached_goal = True

            # --- Learning update ---------------------------------------------
            s2 = encoder.encode(next_obs)
            step_loss = rule.update(
                Transition(state=s, action=action, reward=float(reward), next_state=s2, done=bool(terminated))
            )
            recent_losses.append(step_loss)
            ep_loss += step_loss

            # Move forward.
            s = s2
            ep_reward += reward

        # --- End of episode bookkeeping --------------------------------------
        recent_rewards.append(ep_reward)
        recent_successes.append(1.0 if reached_goal else 0.0)
        episode_rewards.append(ep_reward)
        episode_lengths.append(steps)
        episode_successes.append(reached_goal)
        episode_losses.append(ep_loss / max(1, steps))

        # --- Logging ----------------------------------------------------------
        if log_interval > 0 and ep % int(log_interval) == 0:
            avg_r = float(np.mean(recent_rewards)) if recent_rewards else 0.0
            avg_succ = float(np.mean(recent_successes) * 100.0) if recent_successes else 0.0
            avg_loss = float(np.mean(recent_losses)) if recent_losses else 0.0
            avg_len = float(np.mean(episode_lengths[-int(log_interval):]))

            print(
                f"  Ep {ep:>5d}/{n_episodes} │ "
                f"R={avg_r:>8.2f} │ "
                f"Succ={avg_succ:>5.1f}% │ "
                f"Steps={avg_len:>6.1f} │ "
                f"ε={eps:.4f} │ "
                f"Loss={avg_loss:.4f}"
            )

        # --- Evaluation -------------------------------------------------------
        if eval_interval > 0 and ep % int(eval_interval) == 0:
            ev = evaluate(network, env, encoder, n_episodes=eval_episodes)
            ev["episode"] = ep
            evals.append(ev)
            print(
                f"\n  ── EVAL @Ep {ep} ──  "
                f"Success={ev['success_rate']*100:.1f}% │ "
                f"AvgSteps={ev['avg_steps']:.1f} │ "
                f"AvgReward={ev['avg_reward']:.1f}\n"
            )

        # --- Periodic checkpoint ---------------------------------------------
        if save_interval > 0 and ep % int(save_interval) == 0:
            path = os.path.join(save_dir, f"checkpoint_ep{ep}.npz")
            save_checkpoint(path, network, episode=ep, epsilon=eps)
            print(f"  Checkpoint saved to {path}")

    elapsed = float(time.time() - start_time)

    return {
        "rewards": episode_rewards,
        "lengths": episode_lengths,
        "successes": episode_successes,
        "losses": episode_losses,
        "evals": evals,
        "epsilon": float(eps),
        "elapsed": elapsed,
    }
