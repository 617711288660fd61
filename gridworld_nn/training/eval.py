"""Evaluation loop.

Greedy rollouts with no exploration and no learning, so the numbers reflect
the current policy only.
"""

from __future__ import annotations

import numpy as np

from ..environment import GoalGridEnv
from ..nn import FeedforwardNetwork
from .encoder import StateEncoder
from .policy import argmax


def evaluate(
    network: FeedforwardNetwork,
    env: GoalGridEnv,
    encoder: StateEncoder,
    *,
    n_episodes: int = 10,
) -> dict:
    """Greedy evaluation.

    Returns a dictionary so callers can log whatever they care about.
    """
    successes = 0
    steps_list: list[int] = []
    rewards: list[float] = []

    for _ in range(int(n_episodes)):
        obs, _ = env.reset()
        done = False
        steps = 0
        total = 0.0

        while not done:
            action = argmax(network.predict(encoder.encode(obs)))
            obs, reward, terminated, truncated, _ = env.step(action)
            done = terminated or truncated
            steps += 1
            total += reward
            if terminated:
                successes += 1

        steps_list.append(steps)
        rewards.append(total)

    return {
        "success_rate": successes / max(1, int(n_episodes)),
        "avg_steps": float(np.mean(steps_list)) if steps_list else 0.0,
        "min_steps": int(min(steps_list)) if steps_list else 0,
        "max_steps": int(max(steps_list)) if steps_list else 0,
        "avg_reward": float(np.mean(rewards)) if rewards else 0.0,
    }
