"""
EyeAI Learning Core
Experience replay and value learning for autonomous game agents

This package trains game agents with tabular reinforcement learning: a
prioritized replay buffer backed by a sum tree, a Q-learning agent that
consumes sampled batches, and a reward shaper that turns game events into
scalar rewards.

Main Components:
    - Core: Error taxonomy and training error tracking
    - Learning: Sum tree, replay buffer, Q-learning agent, reward shaping, trainer
    - Utils: Shared utilities for logging, timing and statistics

Quick Start:
    >>> from eye_ai import QLearningAgent, PrioritizedReplayBuffer, ReplayTrainer
    >>> agent = QLearningAgent()
    >>> buffer = PrioritizedReplayBuffer(capacity=1000)
    >>> trainer = ReplayTrainer(agent, buffer)
"""

__version__ = "1.0.0"

# Core must load before config (config raises core errors)
from eye_ai.core import EyeAIError, ConstructionError, InvalidArgumentError, EmptyBufferError, ErrorHandler
from eye_ai.config import config

from eye_ai.learning import (
    Action,
    GameStateKey,
    Experience,
    SumTree,
    PrioritizedReplayBuffer,
    QLearningAgent,
    RewardShaper,
    EpsilonSchedule,
    ReplayTrainer,
)

__all__ = [
    # Core components
    'EyeAIError',
    'ConstructionError',
    'InvalidArgumentError',
    'EmptyBufferError',
    'ErrorHandler',
    # Configuration
    'config',
    # Learning
    'Action',
    'GameStateKey',
    'Experience',
    'SumTree',
    'PrioritizedReplayBuffer',
    'QLearningAgent',
    'RewardShaper',
    'EpsilonSchedule',
    'ReplayTrainer',
]
