"""
Corridor Environment - self-contained training scenario
A one-dimensional corridor with a hostile mob blocking the way to the exit.
Drives the learning core end to end without a game host.

Rules:
- The agent starts at cell 0; reaching the last cell ends the episode
- MOVE_TO steps forward, FLEE_FROM steps back
- The hostile blocks its cell until killed with ATTACK_ENTITY from the adjacent cell
- Walking into a live hostile costs damage, every other action leaves the agent stuck
"""
import logging
from typing import Dict, NamedTuple, Optional, Tuple

import numpy as np

from eye_ai.core.errors import ConstructionError, InvalidArgumentError
from eye_ai.learning.reward_shaper import CombatOutcome, MovementOutcome, RewardShaper
from eye_ai.learning.state import Action

logger = logging.getLogger(__name__)


class CorridorState(NamedTuple):
    position: int
    hostile_alive: bool


class CorridorEnvironment:
    """
    Standard reset/step interface

    Observation: CorridorState(position, hostile_alive)
    Action: Action enum
    """

    def __init__(self, length: int = 8, max_steps: int = 50,
                 reward_shaper: Optional[RewardShaper] = None, seed: Optional[int] = None):
        if length < 3:
            raise ConstructionError(f"Corridor length must be >= 3, got {length}")
        if max_steps <= 0:
            raise ConstructionError(f"max_steps must be positive, got {max_steps}")
        self.length = length
        self.max_steps = max_steps
        self.hostile_position = length // 2
        self.reward_shaper = reward_shaper if reward_shaper is not None else RewardShaper()
        self._rng = np.random.default_rng(seed)

        # Episode tracking
        self.position = 0
        self.hostile_alive = True
        self.visited = set()
        self.episode_reward = 0.0
        self.episode_length = 0

    @property
    def state(self) -> CorridorState:
        return CorridorState(self.position, self.hostile_alive)

    def reset(self) -> CorridorState:
        """Start a new episode"""
        self.position = 0
        self.hostile_alive = True
        self.visited = {0}
        self.episode_reward = 0.0
        self.episode_length = 0
        return self.state

    def step(self, action: Action) -> Tuple[CorridorState, float, bool, Dict]:
        """
        Apply one action

        Args:
            action: Action to take

        Returns:
            (next_state, reward, done, info)
        """
        if action not in tuple(Action):
            raise InvalidArgumentError(f"Unknown action {action!r}")

        combat = None
        movement = MovementOutcome(is_stuck=True)

        if action == Action.MOVE_TO:
            target = self.position + 1
            if target >= self.length:
                pass  # Already at the exit
            elif self.hostile_alive and target == self.hostile_position:
                # Blocked, and the mob hits back
                combat = CombatOutcome(damage_received=float(self._rng.integers(1, 3)))
            else:
                discovered = target not in self.visited
                self.position = target
                self.visited.add(target)
                movement = MovementOutcome(discovered_new_area=discovered, seconds_of_movement=1.0)
        elif action == Action.FLEE_FROM:
            if self.position > 0:
                self.position -= 1
                movement = MovementOutcome(seconds_of_movement=1.0)
        elif action == Action.ATTACK_ENTITY:
            if self.hostile_alive and self.position == self.hostile_position - 1:
                self.hostile_alive = False
                combat = CombatOutcome(damage_dealt=1.0, made_kill=True)
                movement = None

        reward, breakdown = self.reward_shaper.calculate_reward(combat=combat, movement=movement)

        self.episode_reward += reward
        self.episode_length += 1
        reached_exit = self.position == self.length - 1
        done = reached_exit or self.episode_length >= self.max_steps

        info = {
            'reached_exit': reached_exit,
            'episode_reward': self.episode_reward,
            'episode_length': self.episode_length,
            'reward_breakdown': breakdown,
        }
        return self.state, reward, done, info
