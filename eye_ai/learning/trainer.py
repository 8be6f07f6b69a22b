"""
Replay Trainer: one prioritized training step
Samples a batch, applies importance-weighted Q updates and feeds the TD errors
back into the replay buffer as priorities

The trainer runs no loop or thread of its own. An external scheduler decides
when train_step is called.
"""
import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from eye_ai.config import config
from eye_ai.core.error_handler import ErrorHandler
from eye_ai.core.errors import ConstructionError
from eye_ai.learning.q_agent import QLearningAgent
from eye_ai.learning.replay_buffer import PrioritizedReplayBuffer
from eye_ai.utils.math_utils import calculate_stats
from eye_ai.utils.time_utils import Timer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingStepResult:
    batch_size: int
    mean_abs_td_error: float
    max_abs_td_error: float
    beta: float
    duration: float


class ReplayTrainer:
    """
    Connects a QLearningAgent to a PrioritizedReplayBuffer
    """

    def __init__(self, agent: QLearningAgent, replay_buffer: PrioritizedReplayBuffer,
                 batch_size: Optional[int] = None, min_buffer_size: Optional[int] = None,
                 error_handler: Optional[ErrorHandler] = None):
        self.agent = agent
        self.replay_buffer = replay_buffer
        self.batch_size = batch_size if batch_size is not None else config.BATCH_SIZE
        self.min_buffer_size = min_buffer_size if min_buffer_size is not None else config.MIN_BATCH_SIZE_FOR_TRAINING
        self.error_handler = error_handler if error_handler is not None else ErrorHandler()

        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int) or self.batch_size <= 0:
            raise ConstructionError(f"batch_size must be a positive integer, got {self.batch_size!r}")
        if isinstance(self.min_buffer_size, bool) or not isinstance(self.min_buffer_size, int) \
                or self.min_buffer_size <= 0:
            raise ConstructionError(f"min_buffer_size must be a positive integer, got {self.min_buffer_size!r}")

        # Training statistics
        self.step_count = 0
        self.skipped_steps = 0
        self.td_error_history = deque(maxlen=500)
        self.step_time_history = deque(maxlen=500)

        logger.info(f"ReplayTrainer initialized: batch_size={self.batch_size}, min_buffer_size={self.min_buffer_size}")

    def train_step(self) -> Optional[TrainingStepResult]:
        """
        Run one sample -> learn -> re-prioritize pass

        Returns:
            Step result, or None when the buffer holds fewer than min_buffer_size experiences
        """
        buffer_size = len(self.replay_buffer)
        if buffer_size < self.min_buffer_size:
            self.skipped_steps += 1
            logger.debug(f"Skipping training step: {buffer_size}/{self.min_buffer_size} experiences")
            return None

        batch_size = min(self.batch_size, buffer_size)
        try:
            with Timer("train_step", logger) as timer:
                batch = self.replay_buffer.sample_batch(batch_size)
                td_errors = self.agent.train_on_batch(batch)
                self.replay_buffer.update_priorities(batch.leaf_indices, td_errors, batch.write_counts)
        except Exception as e:
            self.error_handler.record_error(e, context="train_step", component="trainer")
            raise

        abs_errors = np.abs(td_errors)
        self.step_count += 1
        self.td_error_history.extend(abs_errors.tolist())
        self.step_time_history.append(timer.elapsed())

        result = TrainingStepResult(
            batch_size=batch_size,
            mean_abs_td_error=float(abs_errors.mean()),
            max_abs_td_error=float(abs_errors.max()),
            beta=self.replay_buffer.beta,
            duration=timer.elapsed(),
        )
        if self.step_count % 100 == 0:
            logger.info(f"Step {self.step_count} | mean |TD|: {result.mean_abs_td_error:.4f} | "
                        f"beta: {result.beta:.3f} | buffer: {buffer_size}")
        return result

    def get_statistics(self) -> Dict:
        """Get training statistics"""
        return {
            'step_count': self.step_count,
            'skipped_steps': self.skipped_steps,
            'td_error_stats': calculate_stats(self.td_error_history),
            'step_time_stats': calculate_stats(self.step_time_history),
            'buffer': self.replay_buffer.get_statistics(),
            'agent': self.agent.get_statistics(),
            'errors': self.error_handler.get_error_stats(),
        }
