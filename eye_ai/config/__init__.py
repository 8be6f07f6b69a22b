"""
Configuration module for EyeAI learning core
Centralized configuration for replay, Q-learning and reward shaping
"""
import math
from dataclasses import dataclass

from eye_ai.core.errors import ConstructionError


@dataclass
class Config:
    # Replay Buffer Configuration
    REPLAY_BUFFER_SIZE: int = 10000
    PRIORITY_ALPHA: float = 0.6  # Prioritized replay exponent (0 = uniform)
    PRIORITY_EPSILON: float = 0.01  # Keeps every priority strictly positive
    BETA_START: float = 0.4  # Initial importance-sampling exponent
    BETA_INCREMENT: float = 0.001  # Beta increment per sampled batch
    BETA_MAX: float = 1.0

    # Q-Learning Configuration
    LEARNING_RATE: float = 0.1
    GAMMA: float = 0.9  # Discount factor
    EPSILON: float = 0.1  # Exploration rate
    EPSILON_END: float = 0.01  # Final exploration rate for decay schedules
    EPSILON_DECAY_STEPS: int = 10000

    # Training Configuration
    BATCH_SIZE: int = 32
    MIN_BATCH_SIZE_FOR_TRAINING: int = 1

    # Combat Rewards
    REWARD_DAMAGE_DEALT: float = 10.0  # Per point of damage
    PENALTY_DAMAGE_RECEIVED: float = -15.0  # Per point of damage
    REWARD_KILL: float = 100.0
    PENALTY_DEATH: float = -50.0

    # Movement Rewards
    REWARD_EFFICIENT_MOVEMENT: float = 1.0  # Per second
    PENALTY_STUCK: float = -5.0
    REWARD_EXPLORATION: float = 20.0

    # Social Rewards
    REWARD_HELP_PLAYER: float = 25.0
    PENALTY_HINDER_PLAYER: float = -25.0
    REWARD_TEAMWORK: float = 15.0

    # Error Handling
    MAX_ERRORS: int = 10  # Errors tolerated inside ERROR_WINDOW
    ERROR_WINDOW: float = 60.0  # seconds

    # Logging
    LOG_PATH: str = "logs"
    LOG_TO_FILE: bool = False
    DETAILED_LOGGING: bool = False

    def __post_init__(self):
        """Validate structural parameters"""
        if not isinstance(self.REPLAY_BUFFER_SIZE, int) or self.REPLAY_BUFFER_SIZE <= 0:
            raise ConstructionError(f"REPLAY_BUFFER_SIZE must be a positive integer, got {self.REPLAY_BUFFER_SIZE!r}")
        if not isinstance(self.BATCH_SIZE, int) or self.BATCH_SIZE <= 0:
            raise ConstructionError(f"BATCH_SIZE must be a positive integer, got {self.BATCH_SIZE!r}")
        if not isinstance(self.MIN_BATCH_SIZE_FOR_TRAINING, int) or self.MIN_BATCH_SIZE_FOR_TRAINING <= 0:
            raise ConstructionError(
                f"MIN_BATCH_SIZE_FOR_TRAINING must be a positive integer, got {self.MIN_BATCH_SIZE_FOR_TRAINING!r}"
            )
        if not 0.0 < self.LEARNING_RATE <= 1.0:
            raise ConstructionError(f"LEARNING_RATE must be in (0, 1], got {self.LEARNING_RATE}")
        if not 0.0 <= self.GAMMA <= 1.0:
            raise ConstructionError(f"GAMMA must be in [0, 1], got {self.GAMMA}")
        for name in ('EPSILON', 'EPSILON_END'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConstructionError(f"{name} must be in [0, 1], got {value}")
        if not 0.0 <= self.BETA_START <= self.BETA_MAX <= 1.0:
            raise ConstructionError(
                f"Expected 0 <= BETA_START <= BETA_MAX <= 1, got {self.BETA_START} / {self.BETA_MAX}"
            )
        if self.PRIORITY_ALPHA < 0 or not math.isfinite(self.PRIORITY_ALPHA):
            raise ConstructionError(f"PRIORITY_ALPHA must be finite and >= 0, got {self.PRIORITY_ALPHA}")
        if self.PRIORITY_EPSILON <= 0 or not math.isfinite(self.PRIORITY_EPSILON):
            raise ConstructionError(f"PRIORITY_EPSILON must be finite and > 0, got {self.PRIORITY_EPSILON}")


# Global configuration instance
config = Config()

__all__ = ['Config', 'config']
