import os

import numpy as np

from gridworld_nn.environment import GoalGridEnv
from gridworld_nn.main import main
from gridworld_nn.nn import FeedforwardNetwork
from gridworld_nn.training import StateEncoder, evaluate, load_checkpoint, train


def _setup(seed=0, batch_size=1):
    env = GoalGridEnv(width=4, height=4, max_steps=60)
    encoder = StateEncoder(env.width, env.height)
    net = FeedforwardNetwork([2, 16, 4], "relu", "none", batch_size=batch_size, rng=seed)
    return env, encoder, net


def test_train_returns_summary(capsys):
    env, encoder, net = _setup()
    summary = train(net, env, encoder, n_episodes=20, log_interval=10, eval_interval=10, rng=0)

    assert len(summary["rewards"]) == 20
    assert len(summary["lengths"]) == 20
    assert len(summary["losses"]) == 20
    assert len(summary["evals"]) == 2
    assert all(1 <= n <= env.max_steps for n in summary["lengths"])
    assert all(np.isfinite(summary["losses"]))
    assert "Ep    10/20" in capsys.readouterr().out


def test_train_changes_weights():
    env, encoder, net = _setup(batch_size=8)
    before = net.biases(1)
    train(net, env, encoder, n_episodes=3, mini_batch=True, log_interval=0, rng=1)
    assert not np.array_equal(before, net.biases(1))


def test_train_writes_checkpoints(tmp_path):
    env, encoder, net = _setup()
    train(net, env, encoder, n_episodes=4, log_interval=0, save_interval=2, save_dir=str(tmp_path), rng=0)
    assert sorted(os.listdir(tmp_path)) == ["checkpoint_ep2.npz", "checkpoint_ep4.npz"]


def test_evaluate_is_bounded_by_max_steps():
    env, encoder, net = _setup()
    ev = evaluate(net, env, encoder, n_episodes=2)
    assert 0.0 <= ev["success_rate"] <= 1.0
    assert 1 <= ev["min_steps"] <= ev["max_steps"] <= env.max_steps


def test_cli_train_and_eval(tmp_path, capsys):
    save_dir = str(tmp_path / "ckpt")
    main(["train", "--episodes", "3", "--width", "4", "--height", "4", "--max-steps", "40",
          "--seed", "0", "--save-dir", save_dir])
    out = capsys.readouterr().out
    assert "Training Complete!" in out
    assert "Greedy policy:" in out

    main(["eval", "--checkpoint", os.path.join(save_dir, "final.npz"),
          "--width", "4", "--height", "4", "--max-steps", "40"])
    assert "Success=" in capsys.readouterr().out


def test_cli_defaults_to_train_for_bare_flags(tmp_path, capsys):
    save_dir = str(tmp_path / "ckpt")
    main(["--episodes", "2", "--width", "4", "--height", "4", "--max-steps", "30",
          "--seed", "0", "--save-dir", save_dir])
    assert "Training Complete!" in capsys.readouterr().out
    assert os.path.exists(os.path.join(save_dir, "final.npz"))


def test_cli_eval_uses_grid_saved_in_checkpoint(tmp_path, capsys):
    save_dir = str(tmp_path / "ckpt")
    main(["train", "--episodes", "2", "--width", "4", "--height", "3", "--max-steps", "30",
          "--seed", "0", "--save-dir", save_dir])
    out = capsys.readouterr().out
    assert "Mean V:" in out

    _, meta = load_checkpoint(os.path.join(save_dir, "final.npz"))
    assert meta["extra"] == {"width": 4, "height": 3, "max_steps": 30}

    main(["eval", "--checkpoint", os.path.join(save_dir, "final.npz"), "--episodes", "1"])
    out = capsys.readouterr().out
    assert "Grid 4x3, max 30 steps" in out

    # explicit flags still override the saved grid
    main(["eval", "--checkpoint", os.path.join(save_dir, "final.npz"), "--episodes", "1",
          "--width", "5"])
    assert "Grid 5x3, max 30 steps" in capsys.readouterr().out
