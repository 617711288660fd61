import pytest

from gridworld_nn.nn import FeedforwardNetwork


@pytest.fixture
def small_net():
    return FeedforwardNetwork([2, 3, 1], "relu", "none", rng=0)
