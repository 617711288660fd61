import numpy as np
import pytest

from gridworld_nn.nn import FeedforwardNetwork
from gridworld_nn.training import (
    EpsilonGreedyPolicy,
    argmax,
    epsilon_for,
    exponential_epsilon,
    linear_epsilon,
)


def test_argmax_ties_go_to_lowest_index():
    assert argmax([1.0, 3.0, 3.0, 0.0]) == 1
    assert argmax([-1.0]) == 0


def test_greedy_policy_picks_best_action():
    net = FeedforwardNetwork([2, 4, 4], rng=0)
    policy = EpsilonGreedyPolicy(net, rng=0)
    state = np.array([0.2, 0.3])
    expected = int(np.argmax(net.predict(state)))
    assert all(policy.select(state, 0.0) == expected for _ in range(20))
    assert policy.greedy(state) == expected


def test_random_policy_covers_all_actions():
    net = FeedforwardNetwork([2, 4, 4], rng=0)
    policy = EpsilonGreedyPolicy(net, 4, rng=0)
    actions = {policy.select(np.array([0.2, 0.3]), 1.0) for _ in range(200)}
    assert actions == {0, 1, 2, 3}


def test_policy_action_count_must_match_network():
    net = FeedforwardNetwork([2, 4, 4], rng=0)
    with pytest.raises(ValueError):
        EpsilonGreedyPolicy(net, 3)


def test_linear_epsilon():
    assert linear_epsilon(0, 1.0, 0.1, 10) == pytest.approx(1.0)
    assert linear_epsilon(5, 1.0, 0.1, 10) == pytest.approx(0.55)
    assert linear_epsilon(10, 1.0, 0.1, 10) == pytest.approx(0.1)
    assert linear_epsilon(50, 1.0, 0.1, 10) == pytest.approx(0.1)


def test_exponential_epsilon_matches_per_episode_decay():
    eps = 0.9
    for ep in range(1, 800):
        eps = max(0.05, eps * 0.995)
        assert exponential_epsilon(ep, 0.9, 0.05, 0.995) == pytest.approx(eps)


def test_epsilon_for_dispatch():
    assert epsilon_for(0, "exponential", 0.9, 0.05, 0.995) == pytest.approx(0.9)
    assert epsilon_for(10, "linear", 1.0, 0.0, 20) == pytest.approx(0.5)
    with pytest.raises(ValueError):
        epsilon_for(0, "cosine", 1.0, 0.0, 1.0)
