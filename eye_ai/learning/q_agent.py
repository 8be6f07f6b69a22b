"""
Tabular Q-Learning Agent
Epsilon-greedy action selection and temporal-difference updates over a
(state, action) -> value table

Update rule:
    Q(s, a) <- Q(s, a) + lr * w * (r + gamma * max_a' Q(s', a') - Q(s, a))
w is the importance-sampling weight (1.0 outside replay training). Terminal
transitions drop the bootstrap term.
"""
import threading
import logging
from collections import deque
from typing import Dict, Hashable, Optional, Sequence

import numpy as np

from eye_ai.config import config
from eye_ai.core.errors import ConstructionError, InvalidArgumentError
from eye_ai.learning.experience import SampledBatch
from eye_ai.learning.state import Action
from eye_ai.utils.math_utils import is_finite_number, moving_average

logger = logging.getLogger(__name__)

class QLearningAgent:
    """
    Q-table agent
    Writers are serialized by one lock scoped to the table. Readers do plain
    dict lookups of immutable floats, so they never see a partial update.
    """

    def __init__(self, learning_rate: Optional[float] = None, discount_factor: Optional[float] = None,
                 exploration_rate: Optional[float] = None, actions: Optional[Sequence[Hashable]] = None,
                 seed: Optional[int] = None):
        """
        Args:
            learning_rate: Step size in (0, 1]
            discount_factor: Discount in [0, 1]
            exploration_rate: Probability of a random action, in [0, 1]
            actions: Closed action set in enumeration order (defaults to Action)
            seed: Seed for the exploration generator
        """
        self.learning_rate = learning_rate if learning_rate is not None else config.LEARNING_RATE
        self.discount_factor = discount_factor if discount_factor is not None else config.GAMMA
        exploration_rate = exploration_rate if exploration_rate is not None else config.EPSILON
        self.actions = tuple(actions) if actions is not None else tuple(Action)

        if not is_finite_number(self.learning_rate) or not 0.0 < self.learning_rate <= 1.0:
            raise ConstructionError(f"learning_rate must be in (0, 1], got {self.learning_rate!r}")
        if not is_finite_number(self.discount_factor) or not 0.0 <= self.discount_factor <= 1.0:
            raise ConstructionError(f"discount_factor must be in [0, 1], got {self.discount_factor!r}")
        if not is_finite_number(exploration_rate) or not 0.0 <= exploration_rate <= 1.0:
            raise ConstructionError(f"exploration_rate must be in [0, 1], got {exploration_rate!r}")
        if not self.actions:
            raise ConstructionError("Action set must not be empty")
        if len(set(self.actions)) != len(self.actions):
            raise ConstructionError("Action set contains duplicates")

        self._action_set = frozenset(self.actions)
        self._exploration_rate = float(exploration_rate)
        self._initial_exploration_rate = float(exploration_rate)
        self.q_table: Dict[Hashable, Dict[Hashable, float]] = {}
        self._lock = threading.Lock()
        self._rng = np.random.default_rng(seed)

        # Statistics
        self.update_count = 0
        self.total_reward = 0.0
        self.reward_history = deque(maxlen=1000)

        logger.info(f"QLearningAgent initialized: lr={self.learning_rate}, gamma={self.discount_factor}, "
                    f"epsilon={self._exploration_rate}, actions={len(self.actions)}")

    # Action selection

    def decide_action(self, state: Hashable) -> Hashable:
        """
        Epsilon-greedy action selection

        Args:
            state: Current state key

        Returns:
            A random action with probability epsilon, otherwise the greedy action
        """
        if state is None:
            raise InvalidArgumentError("decide_action requires a state, got None")

        if self._rng.random() < self._exploration_rate:
            return self.actions[int(self._rng.integers(len(self.actions)))]
        return self.get_best_action(state)

    def get_best_action(self, state: Hashable) -> Hashable:
        """Greedy action; ties go to the first action in enumeration order"""
        if state is None:
            raise InvalidArgumentError("get_best_action requires a state, got None")
        return self.actions[int(np.argmax(self.get_q_values(state)))]

    # Value lookups (never mutate the table)

    def get_q_value(self, state: Hashable, action: Hashable) -> float:
        """Stored estimate, or 0.0 for a key never written"""
        return self.q_table.get(state, {}).get(action, 0.0)

    def get_q_values(self, state: Hashable) -> np.ndarray:
        """Values for every action, in enumeration order"""
        row = self.q_table.get(state, {})
        return np.array([row.get(action, 0.0) for action in self.actions], dtype=np.float64)

    def get_max_q_value(self, state: Hashable) -> float:
        """max_a Q(state, a) over the full action set (unseen actions count as 0.0)"""
        return float(np.max(self.get_q_values(state)))

    # Learning

    def learn(self, state: Hashable, action: Hashable, reward: float,
              next_state: Hashable, terminal: bool = False) -> float:
        """
        Single temporal-difference update

        Args:
            state: State the action was taken in
            action: Action taken
            reward: Reward received
            next_state: Resulting state
            terminal: Transition ended the episode (no bootstrap)

        Returns:
            TD error (target - old estimate)
        """
        self._check_transition(state, action, reward, next_state, terminal)
        with self._lock:
            return self._update(state, action, float(reward), next_state, terminal, 1.0)

    def train_on_batch(self, batch: SampledBatch) -> np.ndarray:
        """
        Apply importance-weighted updates for a sampled replay batch

        Args:
            batch: Batch from PrioritizedReplayBuffer.sample_batch

        Returns:
            TD errors in batch order, ready for update_priorities
        """
        experiences = batch.experiences
        weights = np.asarray(batch.weights, dtype=np.float64).ravel()
        if len(weights) != len(experiences):
            raise InvalidArgumentError(f"Got {len(experiences)} experiences but {len(weights)} weights")
        if not np.all(np.isfinite(weights)) or np.any(weights < 0):
            logger.warning(f"Rejected batch of {len(experiences)}: invalid importance weights")
            raise InvalidArgumentError("Importance weights must be finite and non-negative")
        for exp in experiences:
            if exp is None:
                raise InvalidArgumentError("Batch contains an empty experience slot")
            self._check_transition(exp.state, exp.action, exp.reward, exp.next_state, exp.terminal)

        td_errors = np.empty(len(experiences), dtype=np.float64)
        with self._lock:
            for i, (exp, weight) in enumerate(zip(experiences, weights)):
                td_errors[i] = self._update(exp.state, exp.action, float(exp.reward),
                                            exp.next_state, exp.terminal, float(weight))
        return td_errors

    def _update(self, state, action, reward: float, next_state, terminal: bool, weight: float) -> float:
        current_q = self.get_q_value(state, action)
        max_next_q = 0.0 if terminal else self.get_max_q_value(next_state)

        td_error = reward + self.discount_factor * max_next_q - current_q
        new_q = current_q + self.learning_rate * weight * td_error

        # Replace the row so readers see either the old or the new mapping
        row = dict(self.q_table.get(state, {}))
        row[action] = new_q
        self.q_table[state] = row

        self.update_count += 1
        self.total_reward += reward
        self.reward_history.append(reward)
        return td_error

    def _check_transition(self, state, action, reward, next_state, terminal):
        if state is None:
            raise InvalidArgumentError("learn requires a state, got None")
        if next_state is None and not terminal:
            raise InvalidArgumentError("learn requires a next_state for non-terminal transitions")
        if action not in self._action_set:
            raise InvalidArgumentError(f"Unknown action {action!r}")
        if not is_finite_number(reward):
            raise InvalidArgumentError(f"reward must be a finite number, got {reward!r}")

    # Exploration control

    def get_exploration_rate(self) -> float:
        return self._exploration_rate

    def set_exploration_rate(self, exploration_rate: float):
        """Set epsilon directly (used by external decay schedules)"""
        if not is_finite_number(exploration_rate) or not 0.0 <= exploration_rate <= 1.0:
            raise InvalidArgumentError(f"exploration_rate must be in [0, 1], got {exploration_rate!r}")
        self._exploration_rate = float(exploration_rate)

    # Table export / import for external persistence

    def export_q_table(self) -> Dict[Hashable, Dict[Hashable, float]]:
        """Deep copy of the value table"""
        with self._lock:
            return {state: dict(row) for state, row in self.q_table.items()}

    def import_q_table(self, q_table: Dict[Hashable, Dict[Hashable, float]]):
        """
        Replace the value table with a copy of q_table

        Args:
            q_table: {state: {action: value}}
        """
        imported = {}
        for state, row in q_table.items():
            if state is None:
                raise InvalidArgumentError("Imported table contains a None state")
            checked = {}
            for action, value in row.items():
                if action not in self._action_set:
                    raise InvalidArgumentError(f"Imported table contains unknown action {action!r}")
                if not is_finite_number(value):
                    raise InvalidArgumentError(f"Imported value for {state!r}/{action!r} is not finite: {value!r}")
                checked[action] = float(value)
            imported[state] = checked

        with self._lock:
            self.q_table = imported
        logger.info(f"Imported Q-table with {len(imported)} states")

    def reset(self):
        """Clear the table and statistics, restore the initial exploration rate"""
        with self._lock:
            self.q_table = {}
            self.update_count = 0
            self.total_reward = 0.0
            self.reward_history.clear()
            self._exploration_rate = self._initial_exploration_rate
        logger.info("QLearningAgent reset")

    def get_statistics(self) -> Dict:
        """Get learning statistics"""
        return {
            'update_count': self.update_count,
            'state_count': len(self.q_table),
            'total_reward': self.total_reward,
            'average_reward': moving_average(self.reward_history),
            'learning_rate': self.learning_rate,
            'discount_factor': self.discount_factor,
            'exploration_rate': self._exploration_rate,
        }
