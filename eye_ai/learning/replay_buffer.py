"""
Prioritized Experience Replay Buffer
Sum-tree backed storage with stratified sampling and importance-sampling weights

- New experiences enter at the highest priority seen so far
- Batches are drawn one value per equal segment of the total priority
- Importance-sampling exponent beta anneals towards 1.0 on every draw
- Priorities come from TD errors: (|td_error| + epsilon) ** alpha
"""
import threading
import logging
from typing import Dict, Hashable, Optional, Sequence

import numpy as np

from eye_ai.config import config
from eye_ai.core.errors import ConstructionError, EmptyBufferError, InvalidArgumentError
from eye_ai.learning.experience import Experience, SampledBatch
from eye_ai.learning.sum_tree import SumTree
from eye_ai.utils.math_utils import calculate_stats, is_finite_number

logger = logging.getLogger(__name__)

class PrioritizedReplayBuffer:
    """
    Fixed-capacity prioritized replay buffer
    One lock guards the experience array and the priority tree together
    """

    def __init__(self, capacity: Optional[int] = None, alpha: Optional[float] = None,
                 beta_start: Optional[float] = None, beta_increment: Optional[float] = None,
                 beta_max: Optional[float] = None, priority_epsilon: Optional[float] = None,
                 seed: Optional[int] = None):
        """
        Args:
            capacity: Maximum number of stored experiences
            alpha: Prioritization exponent (0 = uniform, 1 = fully greedy)
            beta_start: Initial importance-sampling exponent
            beta_increment: Beta increase per sample_batch call
            beta_max: Upper clamp for beta
            priority_epsilon: Floor added to |td_error| so no priority reaches zero
            seed: Seed for the sampling generator
        """
        self.capacity = capacity if capacity is not None else config.REPLAY_BUFFER_SIZE
        self.alpha = alpha if alpha is not None else config.PRIORITY_ALPHA
        self.beta_start = beta_start if beta_start is not None else config.BETA_START
        self.beta_increment = beta_increment if beta_increment is not None else config.BETA_INCREMENT
        self.beta_max = beta_max if beta_max is not None else config.BETA_MAX
        self.priority_epsilon = priority_epsilon if priority_epsilon is not None else config.PRIORITY_EPSILON
        self._validate_hyperparameters()

        self.tree = SumTree(self.capacity)
        self.experiences = [None] * self.capacity
        # Write generation per slot
        self._slot_writes = np.zeros(self.capacity, dtype=np.int64)
        self._max_priority = 1.0
        self._beta = self.beta_start
        self._sample_calls = 0
        self._total_added = 0
        self._rng = np.random.default_rng(seed)
        self._lock = threading.RLock()

        logger.info(f"PrioritizedReplayBuffer initialized: capacity={self.capacity}, alpha={self.alpha}, "
                    f"beta={self.beta_start}->{self.beta_max} (+{self.beta_increment}/batch)")

    def _validate_hyperparameters(self):
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, (int, np.integer)) or self.capacity <= 0:
            raise ConstructionError(f"Replay capacity must be a positive integer, got {self.capacity!r}")
        if not is_finite_number(self.alpha) or self.alpha < 0:
            raise ConstructionError(f"alpha must be finite and >= 0, got {self.alpha!r}")
        if not is_finite_number(self.priority_epsilon) or self.priority_epsilon <= 0:
            raise ConstructionError(f"priority_epsilon must be finite and > 0, got {self.priority_epsilon!r}")
        if not is_finite_number(self.beta_increment) or self.beta_increment < 0:
            raise ConstructionError(f"beta_increment must be finite and >= 0, got {self.beta_increment!r}")
        if not (is_finite_number(self.beta_start) and is_finite_number(self.beta_max)
                and 0.0 <= self.beta_start <= self.beta_max <= 1.0):
            raise ConstructionError(
                f"Expected 0 <= beta_start <= beta_max <= 1, got {self.beta_start!r} / {self.beta_max!r}"
            )

    @property
    def max_priority(self) -> float:
        """Largest priority ever assigned (seeds new insertions)"""
        return self._max_priority

    @property
    def beta(self) -> float:
        """Importance-sampling exponent used by the most recent batch"""
        return self._beta

    def add(self, experience: Experience) -> int:
        """
        Store an experience at maximum priority so it is sampled at least once

        Args:
            experience: Transition to store

        Returns:
            Leaf index of the stored experience
        """
        if experience is None:
            raise InvalidArgumentError("Cannot add None to the replay buffer")
        with self._lock:
            data_index = self.tree.write_index
            self.experiences[data_index] = experience
            self._slot_writes[data_index] += 1
            leaf_index = self.tree.insert(self._max_priority)
            self._total_added += 1
        return leaf_index

    def push(self, state: Hashable, action: Hashable, reward: float,
             next_state: Hashable, terminal: bool = False) -> int:
        """
        Build an Experience from its parts and add it

        Args:
            state: State the action was taken in
            action: Action taken
            reward: Scalar reward received
            next_state: Resulting state
            terminal: Episode ended with this transition

        Returns:
            Leaf index of the stored experience
        """
        if state is None or next_state is None:
            raise InvalidArgumentError("state and next_state must not be None")
        if not is_finite_number(reward):
            raise InvalidArgumentError(f"reward must be a finite number, got {reward!r}")
        return self.add(Experience(state, action, float(reward), next_state, bool(terminal)))

    def sample_batch(self, batch_size: int) -> SampledBatch:
        """
        Stratified prioritized sampling

        Args:
            batch_size: Number of experiences to draw (with replacement across segments)

        Returns:
            SampledBatch(experiences, leaf_indices, weights, write_counts)
        """
        if isinstance(batch_size, bool) or not isinstance(batch_size, (int, np.integer)) or batch_size <= 0:
            raise InvalidArgumentError(f"batch_size must be a positive integer, got {batch_size!r}")

        with self._lock:
            n_entries = self.tree.size
            if n_entries == 0:
                raise EmptyBufferError("Cannot sample from an empty replay buffer")

            total_priority = self.tree.total()
            if not total_priority > 0.0:
                raise EmptyBufferError(f"Total priority is {total_priority}, nothing is sampleable")

            # Anneal beta before this batch's weights are computed
            self._sample_calls += 1
            self._beta = min(self.beta_max, self.beta_start + self._sample_calls * self.beta_increment)

            segment = total_priority / batch_size
            experiences = []
            leaf_indices = np.empty(batch_size, dtype=np.int64)
            priorities = np.empty(batch_size, dtype=np.float64)
            write_counts = np.empty(batch_size, dtype=np.int64)

            for i in range(batch_size):
                low = segment * i
                value = self._rng.uniform(low, low + segment)
                leaf_index, priority, data_index = self.tree.sample(value)

                experiences.append(self.experiences[data_index])
                leaf_indices[i] = leaf_index
                priorities[i] = priority
                write_counts[i] = self._slot_writes[data_index]

            probabilities = priorities / total_priority
            weights = np.power(n_entries * probabilities, -self._beta)
            weights /= weights.max()

        logger.debug(f"Sampled batch of {batch_size} (beta={self._beta:.3f}, total_priority={total_priority:.4f})")
        return SampledBatch(experiences, leaf_indices, weights, write_counts)

    def update_priorities(self, leaf_indices: Sequence[int], td_errors: Sequence[float],
                          write_counts: Optional[Sequence[int]] = None) -> int:
        """
        Re-prioritize sampled experiences from their TD errors

        Args:
            leaf_indices: Leaf indices returned by sample_batch
            td_errors: TD error for each index
            write_counts: Write counts returned by sample_batch; leaves whose slot
                was overwritten since sampling keep their current priority

        Returns:
            Number of leaves updated
        """
        leaf_indices = np.asarray(leaf_indices).ravel()
        td_errors = np.asarray(td_errors, dtype=np.float64).ravel()
        if len(leaf_indices) != len(td_errors):
            raise InvalidArgumentError(
                f"Got {len(leaf_indices)} leaf indices but {len(td_errors)} TD errors"
            )
        if write_counts is not None:
            write_counts = np.asarray(write_counts).ravel()
            if len(write_counts) != len(leaf_indices):
                raise InvalidArgumentError(
                    f"Got {len(leaf_indices)} leaf indices but {len(write_counts)} write counts"
                )
        if len(leaf_indices) and not np.issubdtype(leaf_indices.dtype, np.integer):
            raise InvalidArgumentError(f"Leaf indices must be integers, got dtype {leaf_indices.dtype}")
        if not np.all(np.isfinite(td_errors)):
            logger.warning(f"Rejected priority update: {int(np.sum(~np.isfinite(td_errors)))} non-finite TD errors")
            raise InvalidArgumentError("TD errors must be finite")

        priorities = np.power(np.abs(td_errors) + self.priority_epsilon, self.alpha)

        with self._lock:
            # Validate every index before touching the tree
            lower, upper = self.capacity - 1, 2 * self.capacity - 1
            for leaf_index in leaf_indices:
                if not lower <= leaf_index < upper:
                    logger.warning(f"Rejected priority update for {len(leaf_indices)} leaves: {leaf_index} out of range")
                    raise InvalidArgumentError(f"Leaf index {leaf_index} outside [{lower}, {upper})")
                # Written slots are exactly [0, size) until the buffer wraps
                if leaf_index - lower >= self.tree.size:
                    logger.warning(f"Rejected priority update for {len(leaf_indices)} leaves: "
                                   f"slot {leaf_index - lower} was never written")
                    raise InvalidArgumentError(f"Leaf index {leaf_index} refers to an empty slot")

            updated = 0
            for i, (leaf_index, priority) in enumerate(zip(leaf_indices, priorities)):
                if write_counts is not None and self._slot_writes[leaf_index - lower] != write_counts[i]:
                    continue  # overwritten since sampling, keeps its insertion priority
                priority = float(priority)
                self.tree.update(int(leaf_index), priority)
                updated += 1
                if priority > self._max_priority:
                    self._max_priority = priority

        if updated < len(leaf_indices):
            logger.debug(f"Skipped {len(leaf_indices) - updated} stale leaves in priority update")
        return updated

    def size(self) -> int:
        """Current number of valid experiences, saturating at capacity"""
        return self.tree.size

    def __len__(self) -> int:
        return self.tree.size

    def get_statistics(self) -> Dict:
        """Get buffer statistics"""
        with self._lock:
            n_entries = self.tree.size
            leaf_priorities = self.tree.leaf_priorities()[:n_entries]
            return {
                'buffer_size': n_entries,
                'capacity': self.capacity,
                'fill_ratio': n_entries / self.capacity,
                'total_added': self._total_added,
                'total_priority': self.tree.total(),
                'max_priority': self._max_priority,
                'beta': self._beta,
                'sample_calls': self._sample_calls,
                'priority_stats': calculate_stats(leaf_priorities),
            }

    def clear(self):
        """Drop all experiences and reset priorities and annealing"""
        with self._lock:
            self.tree = SumTree(self.capacity)
            self.experiences = [None] * self.capacity
            self._slot_writes = np.zeros(self.capacity, dtype=np.int64)
            self._max_priority = 1.0
            self._beta = self.beta_start
            self._sample_calls = 0
        logger.info("Replay buffer cleared")
