"""
Learning components: sum tree, prioritized replay buffer, Q-learning agent, reward shaping and training step
"""
from eye_ai.learning.state import Action, GameStateKey
from eye_ai.learning.experience import Experience, SampledBatch
from eye_ai.learning.sum_tree import SumTree
from eye_ai.learning.replay_buffer import PrioritizedReplayBuffer
from eye_ai.learning.q_agent import QLearningAgent
from eye_ai.learning.reward_shaper import (
    RewardShaper, RewardWeights, CombatOutcome, MovementOutcome, SocialOutcome
)
from eye_ai.learning.exploration import EpsilonSchedule
from eye_ai.learning.trainer import ReplayTrainer, TrainingStepResult

__all__ = [
    'Action',
    'GameStateKey',
    'Experience',
    'SampledBatch',
    'SumTree',
    'PrioritizedReplayBuffer',
    'QLearningAgent',
    'RewardShaper',
    'RewardWeights',
    'CombatOutcome',
    'MovementOutcome',
    'SocialOutcome',
    'EpsilonSchedule',
    'ReplayTrainer',
    'TrainingStepResult',
]
