"""
Configuration for GridWorld NN Q-Learning
=========================================
"""

# Environment Configuration
ENV_CONFIG = {
    "width": 15,                   # Grid width (start at (0,0), goal at bottom-right)
    "height": 15,                  # Grid height
    "max_steps": 900,              # Truncate episodes after this many steps
}

# Network Configuration
NETWORK_CONFIG = {
    "hidden_sizes": [100],         # Hidden layer widths (input=2, output=4 are implied)
    "hidden_activation": "relu",   # sigm | tanh | relu | none
    "output_activation": "none",   # Linear Q-value outputs
    "batch_size": 100,             # Samples per averaged update in mini-batch mode
    "loss": "mse",
}

# Q-Learning Hyperparameters
AGENT_CONFIG = {
    "learning_rate": 0.09,         # SGD step size
    "discount_factor": 0.9,        # Gamma: discount factor
    "epsilon_start": 0.9,          # Initial exploration rate
    "epsilon_end": 0.05,           # Minimum exploration rate
    "epsilon_decay": 0.995,        # Multiplicative decay per episode
    "schedule": "exponential",     # exponential | linear
    "mini_batch": False,           # Online SGD (False) or mini-batch updates (True)
}

# Training Configuration
TRAIN_CONFIG = {
    "n_episodes": 1000,            # Total training episodes
    "log_interval": 50,            # Print stats every N episodes
    "eval_interval": 250,          # Evaluate every N episodes
    "eval_episodes": 1,            # Start state is fixed, one greedy rollout is enough
    "save_interval": 500,          # Save checkpoint every N episodes
}

# Paths
PATHS = {
    "save_dir": "./checkpoints",
    "plot_file": "./logs/training.png",
}
